"""
E-mail log model for simulated reminders
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime

from app.core.db import Base

class EmailLog(Base):
    __tablename__ = "email_logs"
    
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    guest_id = Column(String(36), nullable=False)
    email = Column(String(255), nullable=True)
    email_type = Column(String(50), nullable=False, default="rsvp_reminder")
    status = Column(String(20), nullable=False, default="sent")
    sent_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
