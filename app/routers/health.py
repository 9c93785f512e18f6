"""Health and status endpoints."""

from __future__ import annotations

import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.schemas.common import ApiResponse, iso_now

router = APIRouter(prefix="/health", tags=["Health"])


def uptime_seconds(request: Request) -> float:
    return round(time.monotonic() - request.app.state.started_at, 3)


@router.get("/status", summary="Detailed system status")
async def status(request: Request) -> JSONResponse:
    database = request.app.state.database
    connected = await database.ping()
    payload = {
        "server": "operational",
        "database": "connected" if connected else "disconnected",
        "uptime": uptime_seconds(request),
        "timestamp": iso_now(),
        "version": request.app.state.settings.app_version,
    }
    return ApiResponse.ok(payload, "System status retrieved").to_response()


@router.get("/ping", summary="Liveness probe")
async def ping() -> JSONResponse:
    return ApiResponse.ok({"timestamp": iso_now()}, "pong").to_response()
