"""
Shared FastAPI dependencies
"""

from fastapi import Depends, Request
from fastapi.requests import HTTPConnection
from fastapi.security import HTTPAuthorizationCredentials

from app.core.config import settings
from app.core.db import SessionLocal
from app.core.exceptions import DevModeDisabledError
from app.services.dev_state import DevStateStore
from app.services.record_store import FirestoreRecordStore, MemoryRecordStore, SqlRecordStore
from app.utils.security import security, resolve_user_id


def get_dev_state(connection: HTTPConnection) -> DevStateStore:
    """The dev state built at startup and kept on the application"""
    return connection.app.state.dev_state


def get_mock_store(request: Request) -> MemoryRecordStore:
    if not hasattr(request.app.state, "mock_store"):
        request.app.state.mock_store = MemoryRecordStore()
    return request.app.state.mock_store


def get_record_store(request: Request, dev_state: DevStateStore = Depends(get_dev_state)):
    """Mock data in dev mode, otherwise Firestore or SQL depending on settings"""
    if dev_state.should_use_mock_data:
        yield get_mock_store(request)
        return
    if settings.USE_FIREBASE:
        yield FirestoreRecordStore()
        return
    db = SessionLocal()
    try:
        yield SqlRecordStore(db)
    finally:
        db.close()


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    dev_state: DevStateStore = Depends(get_dev_state)
) -> str:
    return resolve_user_id(credentials, dev_state)


def require_all_features(dev_state: DevStateStore = Depends(get_dev_state)) -> DevStateStore:
    if not dev_state.should_show_all_features:
        raise DevModeDisabledError("Enable dev mode and 'show all features' to use the data generator")
    return dev_state


def require_debug_info(dev_state: DevStateStore = Depends(get_dev_state)) -> DevStateStore:
    if not dev_state.should_show_debug_info:
        raise DevModeDisabledError("Enable dev mode and 'show debug info' to inspect debug state")
    return dev_state
