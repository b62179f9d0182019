"""
FastAPI application entry point.
Includes CORS, request timing, error handlers, all routers, and the
startup/shutdown hooks that own the RabbitMQ connection.
"""

import time
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from parkbridge.config import settings
from parkbridge.exceptions import (
    BrokerUnavailableError, CommandRejected, RejectionReason,
)
from parkbridge.routers import commands, health, live
from parkbridge.routers import status as status_router
from parkbridge.services.parking_bridge import ParkingBridge
from parkbridge.utils.logger import get_logger

logger = get_logger(__name__)

REJECTION_STATUS = {
    RejectionReason.FACILITY_FULL: status.HTTP_409_CONFLICT,
    RejectionReason.ALREADY_PRESENT: status.HTTP_409_CONFLICT,
    RejectionReason.NOT_PRESENT: status.HTTP_404_NOT_FOUND,
}


def _validation_message(exc: RequestValidationError) -> str:
    """Turn pydantic's error list into the single message the dashboards show."""
    for err in exc.errors():
        kind = err.get("type")
        if kind == "missing":
            return "Field 'placa' is required."
        if kind == "string_type":
            return "Field 'placa' must be a string."
        if kind == "value_error":
            return str(err.get("ctx", {}).get("error", err.get("msg")))
        if kind == "json_invalid":
            return "Request body must be valid JSON."
    return "Invalid request body."


def create_app(bridge: Optional[ParkingBridge] = None) -> FastAPI:
    app = FastAPI(
        title="ParkBridge API",
        description="Parking occupancy bridge: RabbitMQ events to live WebSocket dashboards.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.bridge = bridge or ParkingBridge(settings)

    # ── CORS (producer/consumer dashboards run on another origin) ───────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Request Timing Middleware ────────────────────────────────────────
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = round((time.time() - start) * 1000, 2)
        logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
        return response

    # ── Error Handlers ───────────────────────────────────────────────────
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _validation_message(exc)},
        )

    @app.exception_handler(CommandRejected)
    async def rejected_command_handler(request: Request, exc: CommandRejected):
        logger.info(f"Rejected {request.url.path} | Plate={exc.plate} | {exc.reason.value}")
        return JSONResponse(
            status_code=REJECTION_STATUS[exc.reason],
            content={"error": exc.reason.value},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    # ── Routers ──────────────────────────────────────────────────────────
    app.include_router(commands.router, tags=["🚗 Entry/Exit"])
    app.include_router(status_router.router, tags=["🅿️  Occupancy"])
    app.include_router(live.router, tags=["📡 Live Feed"])
    app.include_router(health.router, tags=["💚 Health"])

    # ── Startup / Shutdown ───────────────────────────────────────────────
    @app.on_event("startup")
    async def startup():
        logger.info("🚀 ParkBridge starting up...")
        try:
            await app.state.bridge.start()
        except BrokerUnavailableError as e:
            # Without the queue the bridge is useless; let uvicorn exit non-zero
            logger.critical(f"❌ {e}")
            raise
        logger.info(f"🌐 Listening on http://{settings.HOST}:{settings.PORT}")
        logger.info("📖 API docs at /docs")

    @app.on_event("shutdown")
    async def shutdown():
        logger.info("🛑 ParkBridge shutting down...")
        await app.state.bridge.stop()

    return app


app = create_app()
