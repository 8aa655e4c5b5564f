"""Shared fixtures and fakes for the assistant tests."""

import threading
from collections import deque

import pytest

from voice_assistant.config import ScanConfig
from voice_assistant.detector import Detector
from voice_assistant.extractor import Detection, DetectionResult
from voice_assistant.scan_loop import ScanLoop

PROVIDER_ENV_VARS = (
    "OPENROUTER_OPENAI_API_KEY",
    "OPENROUTER_DEEPSEEK_API_KEY",
    "MAPBOX_API_KEY",
    "HERE_MAP_API_KEY",
)


class FakeFrameSource:
    def __init__(self, opens: bool = True, frame: bytes | None = b"jpeg-bytes") -> None:
        self.opens = opens
        self.frame = frame
        self.opened = False
        self.close_calls = 0

    def open(self) -> bool:
        self.opened = self.opens
        return self.opens

    def capture(self) -> bytes | None:
        return self.frame if self.opened else None

    def close(self) -> None:
        self.opened = False
        self.close_calls += 1

    @property
    def is_opened(self) -> bool:
        return self.opened


class FakeDetector(Detector):
    """Returns queued results (or raises queued exceptions) in order.

    The last queued item repeats once the queue is down to one entry.
    """

    def __init__(self, *outcomes, name: str = "api", method: str = "AI API") -> None:
        self.name = name
        self.method = method
        self.outcomes = deque(outcomes)
        self.calls = 0
        self.gate: threading.Event | None = None

    def detect(self, image: bytes, mime_type: str = "image/jpeg") -> DetectionResult:
        self.calls += 1
        if self.gate is not None:
            self.gate.wait(timeout=5)
        outcome = self.outcomes.popleft() if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_result(description: str, *objects: tuple, method: str = "AI API") -> DetectionResult:
    return DetectionResult(
        description=description,
        objects=tuple(Detection(name=name, confidence=conf, count=count) for name, conf, count in objects),
        method=method,
    )


@pytest.fixture
def spoken() -> list[str]:
    return []


@pytest.fixture
def frame_source() -> FakeFrameSource:
    return FakeFrameSource()


@pytest.fixture
def make_scan_loop(frame_source, spoken):
    def factory(api: Detector, simple: Detector | None = None, **config) -> ScanLoop:
        detectors = {"api": api, "simple": simple or FakeDetector(make_result("Dim scene."), name="simple")}
        return ScanLoop(
            source=frame_source,
            detectors=detectors,
            speak=spoken.append,
            config=ScanConfig(**config),
        )

    return factory


@pytest.fixture
def no_provider_keys(monkeypatch, tmp_path):
    """Run with no provider credentials and no stray .env file."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
