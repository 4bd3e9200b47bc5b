from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.database import get_db
from app.exceptions import EventValidationError, StorageConflict
from app.schemas.event import (
    EventResponse,
    EventCreate,
    EventUpdate,
    ValidationErrorResponse,
    ConflictResponse,
)
from app.crud.event import (
    create_event,
    get_event,
    get_event_by_slug,
    get_events,
    update_event,
    delete_event,
)
from app.logging_config import get_logger

router = APIRouter()
logger = get_logger("api.events")

WRITE_ERROR_RESPONSES = {
    409: {"model": ConflictResponse, "description": "Another event already uses this slug"},
    422: {"model": ValidationErrorResponse, "description": "One or more fields are invalid"},
}


def _write_error(e: Exception) -> HTTPException:
    """Translate a pipeline or store error into an HTTP error."""
    if isinstance(e, EventValidationError):
        return HTTPException(status_code=422, detail=e.to_list())
    return HTTPException(
        status_code=409,
        detail="An event with this title already exists",
        headers={"X-Conflicting-Slug": e.slug},
    )


@router.get("/", response_model=List[EventResponse])
async def read_events(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """
    Retrieve events ordered by date and time.
    """
    try:
        return await get_events(db, skip=skip, limit=limit)
    except Exception as e:
        logger.error(f"Error retrieving events: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/", response_model=EventResponse, status_code=201, responses=WRITE_ERROR_RESPONSES)
async def create_new_event(
    event: EventCreate, db: AsyncSession = Depends(get_db)
):
    """
    Create a new event.
    """
    try:
        return await create_event(db=db, event=event)
    except (EventValidationError, StorageConflict) as e:
        raise _write_error(e)
    except Exception as e:
        logger.error(f"Error creating event: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/slug/{slug}", response_model=EventResponse)
async def read_event_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    """
    Get a specific event by slug.
    """
    try:
        event = await get_event_by_slug(db, slug=slug)
        if event is None:
            raise HTTPException(status_code=404, detail="Event not found")
        return event
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving event {slug}: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{event_id}", response_model=EventResponse)
async def read_event(event_id: int, db: AsyncSession = Depends(get_db)):
    """
    Get a specific event by ID.
    """
    try:
        event = await get_event(db, event_id=event_id)
        if event is None:
            raise HTTPException(status_code=404, detail="Event not found")
        return event
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving event {event_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/{event_id}", response_model=EventResponse, responses=WRITE_ERROR_RESPONSES)
async def update_event_details(
    event_id: int, event: EventUpdate, db: AsyncSession = Depends(get_db)
):
    """
    Update an event.
    """
    try:
        db_event = await update_event(db=db, event_id=event_id, event=event)
        if db_event is None:
            raise HTTPException(status_code=404, detail="Event not found")
        return db_event
    except HTTPException:
        raise
    except (EventValidationError, StorageConflict) as e:
        raise _write_error(e)
    except Exception as e:
        logger.error(f"Error updating event {event_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{event_id}", status_code=204)
async def delete_event_by_id(event_id: int, db: AsyncSession = Depends(get_db)):
    """
    Delete an event.
    """
    try:
        deleted = await delete_event(db=db, event_id=event_id)
        if not deleted:
            raise HTTPException(status_code=404, detail="Event not found")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting event {event_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")
