"""
Guest-related Pydantic schemas
"""

from typing import List, Literal, Optional
from pydantic import BaseModel

RsvpStatus = Literal["confirmed", "pending", "declined"]
GuestFilter = Literal["attending", "declined", "pending", "assigned", "unassigned", "dietary"]

class GuestCreate(BaseModel):
    """Schema for creating a guest"""
    name: str
    email: str = ""
    phone: Optional[str] = None
    rsvp_status: RsvpStatus = "pending"
    dietary_restrictions: Optional[str] = None
    table_assignment: Optional[str] = None

class GuestUpdate(BaseModel):
    """Schema for updating a guest"""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    rsvp_status: Optional[RsvpStatus] = None
    dietary_restrictions: Optional[str] = None
    table_assignment: Optional[str] = None

class GuestResponse(BaseModel):
    """Guest response schema"""
    id: str
    name: str
    email: str = ""
    phone: Optional[str] = None
    rsvp_status: RsvpStatus = "pending"
    dietary_restrictions: Optional[str] = None
    table_assignment: Optional[str] = None
    user_id: Optional[str] = None
    
    class Config:
        from_attributes = True

class GuestPage(BaseModel):
    """One page of a filtered guest list"""
    items: List[GuestResponse]
    page: int
    per_page: int
    total_pages: int
    total_items: int
    search: str = ""
    filter: Optional[GuestFilter] = None

class TableAssignmentRequest(BaseModel):
    """Assign a guest to a table by name; None unassigns"""
    table_name: Optional[str] = None

class ReminderRequest(BaseModel):
    """RSVP reminder request"""
    guest_ids: List[str]

class RsvpStats(BaseModel):
    attending: int = 0
    declined: int = 0
    pending: int = 0
    total: int = 0
