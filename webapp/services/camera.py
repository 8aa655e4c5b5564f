"""Camera service for video capture and frame management."""

import logging
import threading

import numpy as np
from numpy.typing import NDArray

from voice_assistant.camera import Camera, encode_jpeg
from voice_assistant.config import CameraConfig

logger = logging.getLogger(__name__)


class CameraService:
    """Shared camera stream for the scan loop and the video feed.

    Runs capture in a background thread so frame grabs never block the
    event loop. Opened on demand by the scan loop and released on stop.
    """

    def __init__(self, config: CameraConfig | None = None) -> None:
        self._config = config or CameraConfig()
        self._camera: Camera | None = None
        self._current_frame: NDArray[np.uint8] | None = None
        self._frame_lock = threading.Lock()
        self._running = False
        self._capture_thread: threading.Thread | None = None

    def configure(self, config: CameraConfig) -> None:
        """Set camera options before the stream is opened."""
        self._config = config

    def open(self) -> bool:
        if self.is_opened:
            return True

        logger.info("Opening camera: %s", self._config.device)
        camera = Camera(self._config)
        if not camera.open():
            logger.error("Failed to open camera: %s", self._config.device)
            return False

        self._camera = camera
        self._running = True
        self._capture_thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._capture_thread.start()
        logger.info("Camera ready")
        return True

    def close(self) -> None:
        self._running = False

        if self._capture_thread:
            self._capture_thread.join(timeout=1.0)
            self._capture_thread = None

        if self._camera:
            self._camera.close()
            self._camera = None
            logger.info("Camera released")

        with self._frame_lock:
            self._current_frame = None

    def _capture_loop(self) -> None:
        while self._running and self._camera and self._camera.is_opened:
            frame = self._camera.read()
            if frame is not None:
                with self._frame_lock:
                    self._current_frame = frame

            # Small delay to prevent CPU hogging
            threading.Event().wait(0.01)

    def get_current_frame(self) -> NDArray[np.uint8] | None:
        with self._frame_lock:
            if self._current_frame is not None:
                return self._current_frame.copy()
        return None

    def capture(self) -> bytes | None:
        """Latest frame as JPEG, or None before the first frame arrives."""
        frame = self.get_current_frame()
        if frame is None:
            return None
        return encode_jpeg(frame, self._config.jpeg_quality)

    @property
    def is_opened(self) -> bool:
        return self._camera is not None and self._camera.is_opened and self._running


# Global singleton instance
camera_service = CameraService()
