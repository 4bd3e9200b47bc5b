"""Domain exceptions for event validation and storage."""

from typing import Dict, Iterable, List


class EventError(Exception):
    """Base exception for all event errors."""
    pass


class ValidationError(EventError):
    """Raised when a single event field is missing, malformed or out of range."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


class EventValidationError(EventError):
    """Raised when a candidate event fails one or more field checks.

    Carries every field-level error, not just the first one found.
    """

    def __init__(self, errors: Iterable[ValidationError]):
        self.errors: List[ValidationError] = list(errors)
        super().__init__("; ".join(str(error) for error in self.errors))

    @property
    def fields(self) -> List[str]:
        return [error.field for error in self.errors]

    def to_list(self) -> List[Dict[str, str]]:
        return [error.to_dict() for error in self.errors]


class StorageConflict(EventError):
    """Raised when an event's slug is already used by another stored event."""

    def __init__(self, slug: str):
        super().__init__(f"An event with slug '{slug}' already exists")
        self.slug = slug
