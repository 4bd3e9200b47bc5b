"""
Event record validation and normalization.

Every event passes through :func:`prepare_event` before it is written. The
pipeline checks field constraints, then derives the canonical slug, ISO date
and 24-hour time for the fields that are new or changed since the previously
stored record.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from dateutil import parser as date_parser

from app.exceptions import EventValidationError, ValidationError
from app.logging_config import get_logger

logger = get_logger("services.normalization")

EVENT_MODES = ("online", "offline", "hybrid")

# Text fields: (field, label, max length or None)
TEXT_FIELD_RULES = (
    ("title", "Title", 100),
    ("description", "Description", 1000),
    ("overview", "Overview", 500),
    ("image", "Image URL", None),
    ("venue", "Venue", None),
    ("location", "Location", None),
    ("organizer", "Organizer", None),
    ("audience", "Audience", None),
)

LIST_FIELD_RULES = (
    ("agenda", "At least one agenda item is required"),
    ("tags", "At least one tag is required"),
)

_SLUG_INVALID_CHARS = re.compile(r"[^a-z0-9\s-]")
_SLUG_WHITESPACE = re.compile(r"\s+")
_SLUG_HYPHENS = re.compile(r"-+")
_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(\s*(AM|PM))?$", re.IGNORECASE | re.ASCII)

# Two fill-in dates that differ in year and month but share day 1; a value that
# parses differently against them is missing its year or month
_DATE_DEFAULTS = (datetime(2000, 1, 1), datetime(2003, 3, 1))


def generate_slug(title: str) -> str:
    """Turn a title into a lowercase, hyphen-separated, URL-safe slug.

    >>> generate_slug("My Awesome Event!!")
    'my-awesome-event'
    """
    slug = title.lower().strip()
    slug = _SLUG_INVALID_CHARS.sub("", slug)
    slug = _SLUG_WHITESPACE.sub("-", slug)
    slug = _SLUG_HYPHENS.sub("-", slug)
    return slug.strip("-")


def normalize_date(value: str) -> str:
    """
    Normalize a date-like string to ISO ``YYYY-MM-DD``.

    Offset-aware values are converted to UTC before the time of day is
    dropped; naive values keep their calendar date. A value missing its year
    or month (a bare time, weekday or day number) is rejected rather than
    completed from today's date; a missing day means the first of the month.

    Raises:
        ValidationError: If the value cannot be parsed as a date
    """
    try:
        text = value.strip()
        parsed = date_parser.parse(text, default=_DATE_DEFAULTS[0])
        if date_parser.parse(text, default=_DATE_DEFAULTS[1]) != parsed:
            raise ValueError(f"incomplete date: {text!r}")
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError, AttributeError):
        raise ValidationError("date", "Invalid date format")

    return parsed.date().isoformat()


def normalize_time(value: str) -> str:
    """
    Normalize ``H:MM``, ``HH:MM`` or ``H:MM AM/PM`` to zero-padded 24-hour ``HH:MM``.

    Raises:
        ValidationError: If the value does not match a known format or the
            hour/minute is out of range
    """
    match = _TIME_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValidationError("time", "Invalid time format. Use HH:MM or HH:MM AM/PM")

    hours = int(match.group(1))
    minutes = match.group(2)
    period = (match.group(4) or "").upper()

    if period == "PM" and hours != 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0

    if not 0 <= hours <= 23 or not 0 <= int(minutes) <= 59:
        raise ValidationError("time", "Invalid time values")

    return f"{hours:02d}:{minutes}"


def text_length(value: str) -> int:
    """Length in UTF-16 code units, the way JavaScript counts string length.

    >>> text_length("abc"), text_length("\U0001F600")
    (3, 2)
    """
    return len(value.encode("utf-16-le")) // 2


def clean_event_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of the payload with text trimmed and list fields tidied.

    Blank list items are dropped and tags are de-duplicated keeping the first
    occurrence. Values of unexpected types are passed through untouched so the
    constraint checker can report them.
    """
    cleaned = dict(payload)
    for field in [rule[0] for rule in TEXT_FIELD_RULES] + ["date", "time", "mode"]:
        if isinstance(cleaned.get(field), str):
            cleaned[field] = cleaned[field].strip()

    for field, _ in LIST_FIELD_RULES:
        items = cleaned.get(field)
        if not isinstance(items, (list, tuple)):
            continue
        items = [item.strip() if isinstance(item, str) else item for item in items]
        items = [item for item in items if item != ""]
        if field == "tags" and all(isinstance(item, str) for item in items):
            items = list(dict.fromkeys(items))
        cleaned[field] = items

    return cleaned


def check_event_fields(payload: Mapping[str, Any]) -> List[ValidationError]:
    """
    Check a candidate event against every field constraint.

    Args:
        payload: Candidate event fields

    Returns:
        One ValidationError per violated field; empty when the payload is valid
    """
    errors: List[ValidationError] = []

    for field, label, max_length in TEXT_FIELD_RULES:
        value = payload.get(field)
        if not isinstance(value, str) or not value.strip():
            errors.append(ValidationError(field, f"{label} is required"))
        elif max_length is not None and text_length(value) > max_length:
            errors.append(
                ValidationError(field, f"{label} cannot exceed {max_length} characters")
            )

    for field, label in (("date", "Date"), ("time", "Time")):
        value = payload.get(field)
        if not isinstance(value, str) or not value.strip():
            errors.append(ValidationError(field, f"{label} is required"))

    mode = payload.get("mode")
    if mode in (None, ""):
        errors.append(ValidationError("mode", "Mode is required"))
    elif mode not in EVENT_MODES:
        errors.append(ValidationError("mode", "Mode must be online, offline or hybrid"))

    for field, message in LIST_FIELD_RULES:
        items = payload.get(field)
        if not isinstance(items, (list, tuple)) or len(items) == 0:
            errors.append(ValidationError(field, message))
        elif not all(isinstance(item, str) for item in items):
            errors.append(ValidationError(field, f"Every {field} item must be text"))

    return errors


def changed_fields(
    candidate: Mapping[str, Any], previous: Optional[Mapping[str, Any]]
) -> set:
    """Names of candidate fields that differ from the previous record.

    Every candidate field counts as changed when there is no previous record.
    """
    if previous is None:
        return set(candidate)
    return {
        field for field, value in candidate.items()
        if field not in previous or previous[field] != value
    }


def prepare_event(
    candidate: Mapping[str, Any], previous: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """
    Validate and normalize an event before it is stored.

    Args:
        candidate: Full candidate event fields (for updates, the previous
            record merged with the requested changes)
        previous: The currently stored record, or None for a new event

    Returns:
        The canonical record as a new dict

    Raises:
        EventValidationError: With every field error found
    """
    event = clean_event_fields(candidate)

    errors = check_event_fields(event)
    if errors:
        logger.info(f"Rejected event with invalid fields: {', '.join(e.field for e in errors)}")
        raise EventValidationError(errors)

    changed = changed_fields(event, previous)
    is_new = previous is None

    if is_new or "title" in changed:
        event["slug"] = generate_slug(event["title"])
        if not event["slug"]:
            errors.append(
                ValidationError("title", "Title must contain at least one letter or digit")
            )
    elif previous is not None:
        event["slug"] = previous.get("slug")

    for field, normalizer in (("date", normalize_date), ("time", normalize_time)):
        if field not in changed:
            continue
        try:
            event[field] = normalizer(event[field])
        except ValidationError as e:
            errors.append(e)

    if errors:
        logger.info(f"Rejected event with invalid fields: {', '.join(e.field for e in errors)}")
        raise EventValidationError(errors)

    return event
