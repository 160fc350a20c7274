"""
Table and relationship Pydantic schemas
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

TableShape = Literal["round", "rectangle", "oval"]
RelationshipType = Literal["preference", "conflict"]

class TableResponse(BaseModel):
    """Table with the ids of guests assigned to it"""
    id: str
    name: str
    shape: TableShape
    capacity: int
    position_x: int = 0
    position_y: int = 0
    guests: List[str] = []
    user_id: Optional[str] = None
    
    class Config:
        from_attributes = True

class RelationshipResponse(BaseModel):
    id: str
    guest_id: str
    related_guest_id: str
    relationship_type: RelationshipType
    user_id: Optional[str] = None
    
    class Config:
        from_attributes = True

class TableCreate(BaseModel):
    """Schema for creating a table"""
    name: str
    shape: TableShape = "round"
    capacity: int = Field(8, ge=1)
    position_x: int = 0
    position_y: int = 0

class TableUpdate(BaseModel):
    """Schema for updating a table"""
    name: Optional[str] = None
    shape: Optional[TableShape] = None
    capacity: Optional[int] = Field(None, ge=1)
    position_x: Optional[int] = None
    position_y: Optional[int] = None

class RelationshipCreate(BaseModel):
    """Manual relationship between two guests"""
    guest_id: str
    related_guest_id: str
    relationship_type: RelationshipType
