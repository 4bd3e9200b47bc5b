"""
Event schema definitions for the DevEvent API.

Request schemas describe the shape of incoming payloads only. Field
constraints (required, length, mode, non-empty lists) are enforced by the
normalization pipeline so that every violated field is reported together.
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime
from enum import Enum

# =====================================================================
# Enums and Constants
# =====================================================================

class EventModeEnum(str, Enum):
    """Delivery format of an event."""
    ONLINE = "online"
    OFFLINE = "offline"
    HYBRID = "hybrid"

# =====================================================================
# Core Event schemas
# =====================================================================

class EventBase(BaseModel):
    """Base Event Schema - fields an editor submits."""
    title: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    image: Optional[str] = Field(None, description="URL of the event image")
    venue: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = Field(None, description="Any parsable date; stored as YYYY-MM-DD")
    time: Optional[str] = Field(None, description="HH:MM or HH:MM AM/PM; stored as 24-hour HH:MM")
    mode: Optional[str] = Field(None, description="online, offline or hybrid")
    audience: Optional[str] = None
    agenda: Optional[List[str]] = None
    organizer: Optional[str] = None
    tags: Optional[List[str]] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "PyCon Lisbon Sprint Day",
                "description": "A day of open source sprints on Python libraries.",
                "overview": "Hack on real projects with their maintainers.",
                "image": "https://example.com/images/sprint.png",
                "venue": "Lisbon Congress Centre",
                "location": "Lisbon, Portugal",
                "date": "2025-11-14",
                "time": "9:30 AM",
                "mode": "offline",
                "audience": "Python developers",
                "agenda": ["Welcome", "Sprint", "Demos"],
                "organizer": "Python Portugal",
                "tags": ["python", "open-source"]
            }
        }
    )

class EventCreate(EventBase):
    """
    Schema for creating an event.

    Inherits all fields from EventBase; missing fields are reported by the
    constraint checker rather than by request parsing.
    """
    pass

class EventUpdate(EventBase):
    """
    Schema for updating an event.

    Only the fields present in the request are changed.
    """
    pass

class EventResponse(BaseModel):
    """
    Schema for event response.

    A stored, normalized event.
    """
    id: int
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: EventModeEnum
    audience: str
    agenda: List[str]
    organizer: str
    tags: List[str]
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True
    )

# =====================================================================
# Error responses
# =====================================================================

class FieldErrorDetail(BaseModel):
    """One rejected field."""
    field: str
    message: str

class ValidationErrorResponse(BaseModel):
    """Body of a 422 response from the event endpoints."""
    detail: List[FieldErrorDetail]

class ConflictResponse(BaseModel):
    """Body of a 409 response from the event endpoints."""
    detail: str
