"""
Table model
"""

import uuid
from sqlalchemy import Column, Integer, String

from app.core.db import Base

class Table(Base):
    __tablename__ = "tables"
    
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    shape = Column(String(20), nullable=False, default="round")  # round, rectangle, oval
    capacity = Column(Integer, nullable=False, default=8)
    position_x = Column(Integer, default=0)
    position_y = Column(Integer, default=0)
