"""
Developer-mode and test data generation schemas
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from app.core.config import settings

DevFlag = Literal["mock_data", "slow_network", "show_all_features", "show_debug_info"]
GenerationKind = Literal["guests", "tables", "relationships", "all"]

class DevStateResponse(BaseModel):
    """Current developer-mode toggles and derived predicates"""
    enabled: bool
    mock_data: bool
    slow_network: bool
    show_all_features: bool
    show_debug_info: bool
    should_use_mock_data: bool
    should_show_all_features: bool
    should_show_debug_info: bool

class DevModeUpdate(BaseModel):
    enabled: bool

class GenerateRequest(BaseModel):
    """Counts and options for the test data generator"""
    guest_count: int = Field(settings.DEFAULT_GUEST_COUNT, ge=1, le=settings.MAX_GUEST_COUNT)
    table_count: int = Field(settings.DEFAULT_TABLE_COUNT, ge=1, le=settings.MAX_TABLE_COUNT)
    relationship_count: int = Field(
        settings.DEFAULT_RELATIONSHIP_COUNT, ge=1, le=settings.MAX_RELATIONSHIP_COUNT
    )
    batch_size: int = Field(settings.DEFAULT_BATCH_SIZE, ge=1)
    clear_existing: bool = False

class GenerationState(BaseModel):
    """Ephemeral state of one generation operation"""
    loading: bool = False
    success: bool = False
    error: Optional[str] = None
    message: Optional[str] = None

    def start(self) -> None:
        self.loading, self.success, self.error, self.message = True, False, None, None

    def succeed(self, message: Optional[str] = None) -> None:
        self.loading, self.success, self.error, self.message = False, True, None, message

    def fail(self, error: str) -> None:
        self.loading, self.success, self.error = False, False, error

    def reset(self) -> None:
        self.loading, self.success, self.error, self.message = False, False, None, None

class GenerationResult(BaseModel):
    kind: GenerationKind
    requested: int
    generated: int
    message: str
    progress: List[str] = []
