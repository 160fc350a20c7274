"""
Pydantic schemas package
"""

from .common import *
from .guest import *
from .table import *
from .devmode import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "PaginationParams",
    "GuestCreate",
    "GuestUpdate",
    "GuestResponse",
    "GuestPage",
    "TableAssignmentRequest",
    "ReminderRequest",
    "RsvpStats",
    "TableResponse",
    "RelationshipResponse",
    "TableCreate",
    "TableUpdate",
    "RelationshipCreate",
    "DevStateResponse",
    "DevModeUpdate",
    "GenerateRequest",
    "GenerationState",
    "GenerationResult",
]
