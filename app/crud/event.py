from typing import List, Optional
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import StorageConflict
from app.models.event import Event
from app.schemas.event import EventCreate, EventUpdate
from app.services.normalization import prepare_event
from app.logging_config import get_logger

logger = get_logger("crud.event")

# Fields an editor may set; everything else is derived or system-assigned
EDITABLE_FIELDS = (
    "title", "description", "overview", "image", "venue", "location",
    "date", "time", "mode", "audience", "agenda", "organizer", "tags",
)


async def get_event(db: AsyncSession, event_id: int) -> Optional[Event]:
    """
    Get a specific event by ID.

    Args:
        db: Database session
        event_id: ID of the event to retrieve

    Returns:
        Event or None if not found
    """
    result = await db.execute(select(Event).where(Event.id == event_id))
    return result.scalars().first()


async def get_event_by_slug(db: AsyncSession, slug: str) -> Optional[Event]:
    """
    Get a specific event by slug.

    Args:
        db: Database session
        slug: Slug of the event to retrieve

    Returns:
        Event or None if not found
    """
    result = await db.execute(select(Event).where(Event.slug == slug))
    return result.scalars().first()


async def get_events(db: AsyncSession, skip: int = 0, limit: int = 100) -> List[Event]:
    """
    Get a page of events ordered by date and time.

    Args:
        db: Database session
        skip: Number of records to skip
        limit: Maximum number of records to return

    Returns:
        List of events
    """
    query = (
        select(Event)
        .order_by(Event.date, Event.time, Event.id)
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def _commit_or_conflict(db: AsyncSession, slug: str) -> None:
    """Commit the session, turning a slug uniqueness violation into StorageConflict."""
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Slug conflict for '{slug}': {e.orig}")
        raise StorageConflict(slug) from e


async def create_event(db: AsyncSession, event: EventCreate) -> Event:
    """
    Validate, normalize and store a new event.

    Args:
        db: Database session
        event: Event data

    Returns:
        Created event

    Raises:
        EventValidationError: If any field is invalid
        StorageConflict: If another event already uses the derived slug
    """
    record = prepare_event(event.model_dump(include=set(EDITABLE_FIELDS)))

    db_event = Event(**{field: record[field] for field in EDITABLE_FIELDS + ("slug",)})

    # Add to session
    db.add(db_event)
    await _commit_or_conflict(db, record["slug"])
    await db.refresh(db_event)

    logger.info(f"Created new event: {db_event.id} - {db_event.slug}")
    return db_event


async def update_event(db: AsyncSession, event_id: int, event: EventUpdate) -> Optional[Event]:
    """
    Update an existing event.

    The stored record and the requested changes are merged and passed through
    the normalization pipeline together with the stored record, so only the
    changed title/date/time are re-derived.

    Args:
        db: Database session
        event_id: ID of the event to update
        event: Updated event data; unset fields are left unchanged

    Returns:
        Updated event or None if not found

    Raises:
        EventValidationError: If any field of the merged record is invalid
        StorageConflict: If a changed title collides with another event's slug
    """
    db_event = await get_event(db, event_id)
    if not db_event:
        return None

    previous = db_event.to_dict()
    update_data = event.model_dump(exclude_unset=True, include=set(EDITABLE_FIELDS))
    record = prepare_event({**previous, **update_data}, previous=previous)

    changes = {
        field: record[field]
        for field in EDITABLE_FIELDS + ("slug",)
        if record[field] != previous[field]
    }
    if not changes:
        logger.info(f"No changes for event: {event_id}")
        return db_event

    for field, value in changes.items():
        setattr(db_event, field, value)

    await _commit_or_conflict(db, record["slug"])
    await db.refresh(db_event)

    logger.info(f"Updated event {event_id}: {', '.join(sorted(changes))}")
    return db_event


async def delete_event(db: AsyncSession, event_id: int) -> bool:
    """
    Delete an event.

    Args:
        db: Database session
        event_id: ID of the event to delete

    Returns:
        True if the event was deleted, False otherwise
    """
    query = delete(Event).where(Event.id == event_id)
    result = await db.execute(query)
    await db.commit()

    if result.rowcount > 0:
        logger.info(f"Deleted event: {event_id}")
        return True

    logger.warning(f"Attempted to delete non-existent event: {event_id}")
    return False
