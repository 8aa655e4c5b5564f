"""Voice Vision Assistant - FastAPI Web Application.

A voice-first assistant for visually impaired users featuring:
- Chat with spoken-length answers
- Image description with object extraction
- Continuous camera scanning with spoken announcements
- Turn-by-turn navigation and reverse geocoding
"""

import argparse
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from voice_assistant.config import Config, Credentials
from voice_assistant.errors import AssistantError
from voice_assistant.logging_config import setup_logging
from webapp.api import navigation, routes, scan, video
from webapp.services.assistant import assistant_service
from webapp.services.camera import camera_service

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "VOICE_ASSISTANT_CONFIG"
DEFAULT_CONFIG_PATH = "configs/config.yaml"
CAMERA_SOURCE_ENV = "VOICE_ASSISTANT_CAMERA"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    config = Config.from_yaml(os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH))
    setup_logging(config.logging.level)

    logger.info("=" * 50)
    logger.info("Voice Vision Assistant")
    logger.info("=" * 50)

    source = os.environ.get(CAMERA_SOURCE_ENV)
    if source:
        config.camera.device = int(source) if source.isdigit() else source

    camera_service.configure(config.camera)
    assistant_service.initialize(config, Credentials(), frame_source=camera_service)

    yield

    logger.info("Shutting down...")
    await assistant_service.shutdown()


app = FastAPI(
    title="Voice Vision Assistant",
    description="Voice-driven assistant for visually impaired users",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(AssistantError)
async def assistant_error_handler(request: Request, exc: AssistantError):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


app.include_router(routes.router, tags=["Assistant"])
app.include_router(navigation.router, tags=["Navigation"])
app.include_router(scan.router, prefix="/scan", tags=["Scan"])
app.include_router(video.router, tags=["Video"])


def run_server(
    config_path: str = DEFAULT_CONFIG_PATH,
    source: str | None = None,
    host: str = "0.0.0.0",
    port: int = 8080,
):
    """Run the assistant server."""
    import uvicorn

    os.environ[CONFIG_PATH_ENV] = config_path
    if source is not None:
        os.environ[CAMERA_SOURCE_ENV] = source

    uvicorn.run(
        "webapp.main:app",
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Voice Vision Assistant")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to config file")
    parser.add_argument("--source", default=None, help="Camera source (device index or URL)")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8080, help="Port to run on")
    args = parser.parse_args()

    run_server(config_path=args.config, source=args.source, host=args.host, port=args.port)
