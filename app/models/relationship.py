"""
Guest relationship model
"""

import uuid
from sqlalchemy import Column, String

from app.core.db import Base

class GuestRelationship(Base):
    __tablename__ = "guest_relationships"
    
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    guest_id = Column(String(36), nullable=False)
    related_guest_id = Column(String(36), nullable=False)
    relationship_type = Column(String(20), nullable=False)  # preference, conflict
    
    # Pair uniqueness is only enforced by the generator, not here
    __table_args__ = ()
