"""
Common Pydantic schemas
"""

from typing import Any, Optional
from pydantic import BaseModel, Field

from app.core.config import settings

class StandardResponse(BaseModel):
    """Standard API response"""
    success: bool
    message: str
    data: Optional[Any] = None

class ErrorResponse(BaseModel):
    """Error response schema"""
    success: bool = False
    message: str
    error_code: Optional[str] = None
    details: Optional[Any] = None

class PaginationParams(BaseModel):
    """Pagination parameters (1-based page index)"""
    page: int = Field(1, ge=1)
    per_page: int = Field(settings.GUESTS_PER_PAGE, ge=1, le=100)
