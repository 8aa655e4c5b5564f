from typing import Protocol

import cv2
import numpy as np
from numpy.typing import NDArray

from voice_assistant.config import CameraConfig


class FrameSource(Protocol):
    """Anything the scan loop can capture JPEG frames from."""

    def open(self) -> bool: ...

    def capture(self) -> bytes | None: ...

    def close(self) -> None: ...

    @property
    def is_opened(self) -> bool: ...


class Camera:
    def __init__(self, config: CameraConfig) -> None:
        self.config = config
        self.cap: cv2.VideoCapture | None = None

    def open(self) -> bool:
        if self.is_opened:
            return True

        self.cap = cv2.VideoCapture(self.config.device)
        if not self.cap.isOpened():
            self.cap.release()
            self.cap = None
            return False

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)
        return True

    def read(self) -> NDArray[np.uint8] | None:
        if self.cap is None or not self.cap.isOpened():
            return None

        ret, frame = self.cap.read()
        if not ret or frame is None:
            return None

        if self.config.flip_horizontal:
            frame = cv2.flip(frame, 1)

        return frame

    def capture(self) -> bytes | None:
        """Read one frame and encode it as JPEG."""
        frame = self.read()
        if frame is None:
            return None
        return encode_jpeg(frame, self.config.jpeg_quality)

    def close(self) -> None:
        if self.cap is not None:
            self.cap.release()
            self.cap = None

    def __enter__(self) -> "Camera":
        self.open()
        return self

    def __exit__(self, *args) -> None:
        self.close()

    @property
    def is_opened(self) -> bool:
        return self.cap is not None and self.cap.isOpened()


def encode_jpeg(frame: NDArray[np.uint8], quality: int = 80) -> bytes | None:
    ok, buffer = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not ok:
        return None
    return buffer.tobytes()


if __name__ == "__main__":
    from pathlib import Path

    with Camera(CameraConfig()) as camera:
        if not camera.is_opened:
            print("Failed to open camera")
            exit(1)

        jpeg = camera.capture()
        if jpeg is None:
            print("No frame captured")
            exit(1)

        output = Path("data/captures/capture.jpg")
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(jpeg)
        print(f"Saved: {output} ({len(jpeg)} bytes)")
