"""Continuous scan control endpoints."""

from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from voice_assistant.scan_loop import ScanState
from webapp.services.assistant import assistant_service

router = APIRouter()


class ScanSettings(BaseModel):
    """Partial update of scan settings."""

    interval: Literal[3, 5, 8, 10] | None = None
    method: Literal["api", "simple"] | None = None
    announce: bool | None = None


@router.get("/status")
async def status():
    """Current scan state, settings and last result."""
    return assistant_service.scan_loop.snapshot()


@router.post("/camera")
async def start_camera():
    """Open the camera without scanning yet."""
    await assistant_service.scan_loop.start_camera()
    return assistant_service.scan_loop.snapshot()


@router.post("/start")
async def start():
    """Start continuous scanning, opening the camera if needed."""
    scan_loop = assistant_service.scan_loop
    if scan_loop.state == ScanState.IDLE:
        await scan_loop.start_camera()
    scan_loop.start()
    return scan_loop.snapshot()


@router.post("/pause")
async def pause():
    assistant_service.scan_loop.pause()
    return assistant_service.scan_loop.snapshot()


@router.post("/resume")
async def resume():
    assistant_service.scan_loop.resume()
    return assistant_service.scan_loop.snapshot()


@router.post("/stop")
async def stop():
    """Stop scanning and release the camera."""
    await assistant_service.scan_loop.stop()
    return assistant_service.scan_loop.snapshot()


@router.post("/detect")
async def detect():
    """Run one detection now and announce the result."""
    result = await assistant_service.scan_loop.detect_once()
    return {"result": result.to_dict() if result else None}


@router.put("/settings")
async def update_settings(settings: ScanSettings):
    scan_loop = assistant_service.scan_loop
    if settings.interval is not None:
        scan_loop.set_interval(settings.interval)
    if settings.method is not None:
        scan_loop.set_method(settings.method)
    if settings.announce is not None:
        scan_loop.announce = settings.announce
    return scan_loop.snapshot()
