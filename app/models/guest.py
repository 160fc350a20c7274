"""
Guest model
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime

from app.core.db import Base

def _utcnow():
    return datetime.now(timezone.utc)

class Guest(Base):
    __tablename__ = "guests"
    
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), default="")
    phone = Column(String(32), nullable=True)
    rsvp_status = Column(String(20), nullable=False, default="pending")  # confirmed, pending, declined
    dietary_restrictions = Column(String(255), nullable=True)
    table_assignment = Column(String(100), nullable=True)  # table name, not id
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)
