"""Continuous camera scanning with de-duplicated spoken announcements.

State machine:

    idle --start_camera--> camera_active --start--> scanning <--pause/resume--> paused
    any state --stop--> idle

While scanning, a timer fires every ``interval`` seconds. Each tick runs one
cycle (capture -> detect -> announce) unless the previous cycle is still in
flight, in which case the tick is skipped.
"""

import asyncio
import contextlib
import logging
from enum import Enum
from typing import Callable

from voice_assistant.camera import FrameSource
from voice_assistant.config import ScanConfig
from voice_assistant.detector import Detector
from voice_assistant.errors import (
    CameraUnavailableError,
    InvalidSettingError,
    InvalidTransitionError,
    VisionAPIError,
)
from voice_assistant.extractor import DetectionResult
from voice_assistant.response import ResponseBuilder

logger = logging.getLogger(__name__)

SCAN_INTERVALS = (3, 5, 8, 10)
FALLBACK_METHOD = "simple"


class ScanState(str, Enum):
    IDLE = "idle"
    CAMERA_ACTIVE = "camera_active"
    SCANNING = "scanning"
    PAUSED = "paused"


class ScanLoop:
    """Owns the camera stream, the scan timer and the announcement state."""

    def __init__(
        self,
        source: FrameSource,
        detectors: dict[str, Detector],
        speak: Callable[[str], None],
        config: ScanConfig | None = None,
    ) -> None:
        self.config = config or ScanConfig()
        self.source = source
        self.detectors = detectors
        self._speak = speak
        self.response_builder = ResponseBuilder(self.config)

        self.state = ScanState.IDLE
        self.method: str = self.config.method
        self.interval: int = self.config.interval
        self.announce: bool = self.config.announce

        self.current_result: DetectionResult | None = None
        self.last_announcement = ""

        self._timer: asyncio.Task | None = None
        self._cycle: asyncio.Task | None = None
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    # -- transitions -------------------------------------------------------

    async def start_camera(self) -> None:
        """Open the frame source: idle -> camera_active."""
        self._require(ScanState.IDLE, action="start the camera")

        opened = await asyncio.to_thread(self.source.open)
        if not opened:
            self._say("Camera access needed for object detection.")
            raise CameraUnavailableError("Camera could not be opened")

        self.state = ScanState.CAMERA_ACTIVE
        self._say("Camera ready.")

    def start(self) -> None:
        """Begin continuous scanning: camera_active -> scanning."""
        self._require(ScanState.CAMERA_ACTIVE, action="start scanning")
        self.state = ScanState.SCANNING
        self._schedule(self.config.initial_delay)
        self._say("Continuous scanning started.")

    def pause(self) -> None:
        self._require(ScanState.SCANNING, action="pause")
        self._cancel_timer()
        self.state = ScanState.PAUSED
        self._say("Scanning paused.")

    def resume(self) -> None:
        self._require(ScanState.PAUSED, action="resume")
        self.state = ScanState.SCANNING
        self._schedule(self.config.initial_delay)
        self._say("Scanning resumed.")

    async def stop(self) -> None:
        """Release everything and return to idle. Safe to call in any state."""
        was_active = self.state != ScanState.IDLE

        tasks = [task for task in (self._timer, self._cycle) if task is not None]
        self._timer = None
        self._cycle = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

        self.state = ScanState.IDLE
        self.current_result = None
        self.last_announcement = ""
        self._busy = False

        try:
            await asyncio.to_thread(self.source.close)
        except Exception:
            logger.exception("Failed to release frame source")

        if was_active:
            self._say("Object detection stopped.")

    # -- settings ----------------------------------------------------------

    def set_interval(self, seconds: int) -> None:
        if seconds not in SCAN_INTERVALS:
            raise InvalidSettingError(f"Scan interval must be one of {SCAN_INTERVALS}, got {seconds}")
        self.interval = seconds
        if self.state == ScanState.SCANNING:
            self._cancel_timer()
            self._schedule(seconds)

    def set_method(self, method: str) -> None:
        if method not in self.detectors:
            raise InvalidSettingError(f"Unknown detection method: {method}")
        self.method = method

    # -- cycles ------------------------------------------------------------

    async def run_cycle(self) -> DetectionResult | None:
        """Run one capture -> detect -> announce pass.

        Returns None when the cycle was skipped or failed. Failures are
        logged and never spoken; a vision API failure switches later cycles
        to the heuristic detector. A cycle that finishes after a pause keeps
        its result but stays silent.
        """
        if self._busy or self.state == ScanState.IDLE:
            return None

        result = await self._detect()
        if result is None or self.state == ScanState.IDLE:
            return None

        self.current_result = result
        if self.announce and self.state != ScanState.PAUSED:
            announcement = self.response_builder.build_scan_announcement(result, self.last_announcement)
            if announcement is not None:
                self._speak(announcement.text)
                self.last_announcement = announcement.key
        return result

    async def detect_once(self) -> DetectionResult | None:
        """Single-shot detection that always announces its outcome.

        The outcome is spoken even with announcements turned off. A stop
        while the detection is in flight discards its result.
        """
        if self.state == ScanState.IDLE:
            raise InvalidTransitionError("Camera is not active")
        if self._busy:
            raise InvalidTransitionError("A detection is already in progress")

        method = self.method
        result = await self._detect()
        if self.state == ScanState.IDLE:
            return None
        if result is None and self.method != method:
            # Remote call failed and downgraded the method; answer with the fallback
            result = await self._detect()
            if self.state == ScanState.IDLE:
                return None

        if result is None:
            self._speak("Failed to analyze the current view.")
            return None

        self.current_result = result
        self._speak(self.response_builder.build_manual_announcement(result))
        return result

    async def _detect(self) -> DetectionResult | None:
        detector = self.detectors[self.method]
        self._busy = True
        try:
            image = await asyncio.to_thread(self.source.capture)
            if image is None:
                logger.debug("No frame available, skipping detection")
                return None
            return await asyncio.to_thread(detector.detect, image, "image/jpeg")
        except VisionAPIError as e:
            logger.warning("Vision API failed, switching to heuristic detection: %s", e)
            if FALLBACK_METHOD in self.detectors:
                self.method = FALLBACK_METHOD
            return None
        except Exception:
            logger.exception("Detection error")
            return None
        finally:
            self._busy = False

    # -- timer -------------------------------------------------------------

    def _schedule(self, first_delay: float) -> None:
        self._timer = asyncio.create_task(self._tick_forever(first_delay))

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _tick_forever(self, first_delay: float) -> None:
        delay = first_delay
        while True:
            await asyncio.sleep(delay)
            delay = self.interval
            if self._busy:
                logger.debug("Previous scan cycle still running, skipping tick")
                continue
            self._cycle = asyncio.create_task(self.run_cycle())

    # -- helpers -----------------------------------------------------------

    def _require(self, expected: ScanState, action: str) -> None:
        if self.state != expected:
            raise InvalidTransitionError(f"Cannot {action} while {self.state.value}")

    def _say(self, text: str) -> None:
        if self.announce:
            self._speak(text)

    def snapshot(self) -> dict:
        return {
            "state": self.state.value,
            "method": self.method,
            "interval": self.interval,
            "announce": self.announce,
            "busy": self._busy,
            "lastAnnouncement": self.last_announcement,
            "result": self.current_result.to_dict() if self.current_result else None,
        }
