"""
Wedding Planner Dev Toolkit - FastAPI Backend
Main application entry point
"""

import logging
from collections import Counter
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from app.core.config import settings
from app.core.db import engine, Base
from app.core.exceptions import AppError
from app.api import routes_dev, routes_guests, routes_tables, ws
from app.services.dev_state import DevStateStore
from app.services.record_store import MemoryRecordStore
from app.utils.responses import app_error_response

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    app.state.dev_state = DevStateStore.from_file(settings.DEV_MODE_STATE_FILE)
    app.state.mock_store = MemoryRecordStore()
    app.state.request_counts = Counter()
    logger.info(f"Dev mode {'enabled' if app.state.dev_state.enabled else 'disabled'} at startup")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Wedding Planner Dev Toolkit",
    description="Guest management, table planning and developer test data tools",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def count_requests(request: Request, call_next):
    """Per-path request counter shown in the debug view"""
    counts = getattr(request.app.state, "request_counts", None)
    if counts is not None:
        counts[request.url.path] += 1
    return await call_next(request)

@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError):
    logger.warning(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    return app_error_response(exc)

@app.exception_handler(ValueError)
async def handle_value_error(request: Request, exc: ValueError):
    logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
    return app_error_response(AppError(str(exc), code="invalid_request"))

# Include routers
app.include_router(routes_dev.router, prefix="/dev", tags=["dev"])
app.include_router(routes_guests.router, prefix="/guests", tags=["guests"])
app.include_router(routes_tables.router, tags=["tables"])
app.include_router(ws.router, prefix="/ws", tags=["websocket"])

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {"name": app.title, "version": app.version}

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
