"""
Developer-mode API routes: toggles, test data generation, debug state
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request

from app.api.deps import (
    get_current_user_id,
    get_dev_state,
    get_record_store,
    require_all_features,
    require_debug_info,
)
from app.api.ws import websocket_manager
from app.core.exceptions import StoreError
from app.schemas.devmode import (
    DevFlag,
    DevModeUpdate,
    DevStateResponse,
    GenerateRequest,
    GenerationKind,
)
from app.services.data_generator_service import DataGeneratorService
from app.services.dev_state import DevStateStore
from app.services.record_store import RecordStore
from app.utils.responses import error_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/state")
async def get_state(dev_state: DevStateStore = Depends(get_dev_state)):
    """Current toggles and derived predicates"""
    return success_response(message="Dev state retrieved", data=DevStateResponse(**dev_state.snapshot()))

@router.post("/state/enabled")
async def set_enabled(update: DevModeUpdate, dev_state: DevStateStore = Depends(get_dev_state)):
    """Turn dev mode on or off; the value is persisted"""
    dev_state.set_enabled(update.enabled)
    return success_response(
        message=f"Dev mode {'enabled' if dev_state.enabled else 'disabled'}",
        data=DevStateResponse(**dev_state.snapshot())
    )

@router.post("/state/toggle/{flag}")
async def toggle_flag(flag: DevFlag, dev_state: DevStateStore = Depends(get_dev_state)):
    value = dev_state.toggle(flag)
    return success_response(message=f"{flag} set to {value}", data=DevStateResponse(**dev_state.snapshot()))

@router.post("/generate/{kind}")
async def generate(
    kind: GenerationKind,
    options: Optional[GenerateRequest] = None,
    store: RecordStore = Depends(get_record_store),
    dev_state: DevStateStore = Depends(require_all_features),
    user_id: str = Depends(get_current_user_id)
):
    """Generate random guests, tables, relationships or all three"""
    service = DataGeneratorService(
        store,
        dev_state,
        options=options or GenerateRequest(),
        on_progress=websocket_manager.progress_callback(user_id),
    )
    operation = {
        "guests": service.generate_guests,
        "tables": service.generate_tables,
        "relationships": service.generate_relationships,
        "all": service.generate_all,
    }[kind]

    try:
        result = await operation(user_id)
    except StoreError as e:
        return error_response(
            message=e.message,
            error_code=e.code,
            details={"committed": e.committed, "state": service.state.model_dump()},
            status_code=e.status_code
        )

    return success_response(
        message=result.message,
        data={"result": result.model_dump(), "state": service.state.model_dump()}
    )

@router.get("/debug")
async def debug_info(
    request: Request,
    store: RecordStore = Depends(get_record_store),
    dev_state: DevStateStore = Depends(require_debug_info),
    user_id: str = Depends(get_current_user_id)
):
    """Dev state, record counts and connection stats for the current user"""
    counts = store.rpc("count_records", {"user_id": user_id})
    if counts.error:
        logger.warning(f"Could not count records for debug view: {counts.error}")

    return success_response(
        message="Debug info retrieved",
        data={
            "user_id": user_id,
            "store": store.name,
            "dev_state": DevStateResponse(**dev_state.snapshot()),
            "record_counts": counts.data or {},
            "request_counts": dict(getattr(request.app.state, "request_counts", {})),
            "progress_connections": websocket_manager.get_all_connection_counts(),
        }
    )
