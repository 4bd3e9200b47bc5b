"""
Schema definitions for the DevEvent API.
"""

from .event import (
    EventBase, EventCreate, EventUpdate, EventResponse,
    EventModeEnum,
    FieldErrorDetail, ValidationErrorResponse, ConflictResponse,
)

__all__ = [
    'EventBase', 'EventCreate', 'EventUpdate', 'EventResponse',
    'EventModeEnum',
    'FieldErrorDetail', 'ValidationErrorResponse', 'ConflictResponse',
]
