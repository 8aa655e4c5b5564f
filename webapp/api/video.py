"""Live camera preview endpoint."""

import asyncio
from typing import AsyncGenerator

from fastapi import APIRouter
from fastapi.responses import JSONResponse, StreamingResponse

from voice_assistant.camera import encode_jpeg
from webapp.services.camera import camera_service

router = APIRouter()


async def generate_frames() -> AsyncGenerator[bytes, None]:
    """Generate MJPEG frames until the camera is released.

    Yields frames at approximately 15 FPS.
    """
    while camera_service.is_opened:
        frame = camera_service.get_current_frame()

        if frame is None:
            await asyncio.sleep(0.01)
            continue

        jpeg = encode_jpeg(frame, quality=70)
        if jpeg is not None:
            yield b"--frame\r\nContent-Type: image/jpeg\r\n\r\n" + jpeg + b"\r\n"

        await asyncio.sleep(0.066)


@router.get("/video_feed")
async def video_feed():
    """Stream MJPEG video while the scan camera is active."""
    if not camera_service.is_opened:
        return JSONResponse(status_code=503, content={"error": "Camera is not active"})

    return StreamingResponse(
        generate_frames(),
        media_type="multipart/x-mixed-replace; boundary=frame",
    )
