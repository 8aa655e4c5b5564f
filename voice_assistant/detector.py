from abc import ABC, abstractmethod
from dataclasses import dataclass

import cv2
import numpy as np
from numpy.typing import NDArray

from voice_assistant.errors import VisionAPIError
from voice_assistant.extractor import Detection, DetectionResult, extract_detections
from voice_assistant.vision import VisionClient


class Detector(ABC):
    """Produces a DetectionResult from one encoded image."""

    name: str = ""
    method: str = ""

    @abstractmethod
    def detect(self, image: bytes, mime_type: str = "image/jpeg") -> DetectionResult:
        ...


class RemoteVisionDetector(Detector):
    """Remote vision description followed by keyword extraction."""

    name = "api"
    method = "AI API"

    def __init__(self, client: VisionClient) -> None:
        self.client = client

    def detect(self, image: bytes, mime_type: str = "image/jpeg") -> DetectionResult:
        """Describe the image remotely and extract detections.

        Raises:
            VisionAPIError: the vision model was unavailable. The mock
                description is not turned into detections.
        """
        vision = self.client.describe(image, mime_type, filename="capture.jpg")
        if not vision.success:
            raise VisionAPIError("API error: vision model unavailable")

        return DetectionResult(
            description=vision.description,
            objects=tuple(extract_detections(vision.description)),
            method=self.method,
            api_used=vision.api_used,
        )


@dataclass
class ColorAnalysis:
    red_percent: float
    green_percent: float
    blue_percent: float
    brightness: float


class HeuristicColorDetector(Detector):
    """Heuristic fallback that guesses scene content from pixel colors.

    Works offline. The names it reports ("vegetation", "dark areas") are
    coarse scene hints, not recognized objects.
    """

    name = "simple"
    method = "Simple Analysis"

    # (name, confidence, predicate)
    RULES = (
        ("vegetation", 0.7, lambda c: c.green_percent > 15),
        ("sky or water", 0.6, lambda c: c.blue_percent > 10),
        ("red objects", 0.5, lambda c: c.red_percent > 8),
        ("bright surfaces", 0.8, lambda c: c.brightness > 70),
        ("dark areas", 0.8, lambda c: c.brightness < 30),
    )

    def detect(self, image: bytes, mime_type: str = "image/jpeg") -> DetectionResult:
        frame = cv2.imdecode(np.frombuffer(image, dtype=np.uint8), cv2.IMREAD_COLOR) if image else None
        if frame is None:
            return DetectionResult(description="Unable to analyze image", method=self.method)

        analysis = self.analyze_colors(frame)
        objects = self.infer_objects(analysis)
        return DetectionResult(
            description=self.describe(objects, analysis),
            objects=tuple(objects),
            method=self.method,
        )

    @staticmethod
    def analyze_colors(frame: NDArray[np.uint8]) -> ColorAnalysis:
        """Percentages of red/green/blue dominant pixels and bright pixels.

        Args:
            frame: BGR image as decoded by OpenCV.
        """
        pixels = frame.reshape(-1, 3).astype(np.int16)
        b, g, r = pixels[:, 0], pixels[:, 1], pixels[:, 2]
        total = max(len(pixels), 1)

        red = np.count_nonzero((r > g) & (r > b) & (r > 100))
        green = np.count_nonzero((g > r) & (g > b) & (g > 100))
        blue = np.count_nonzero((b > r) & (b > g) & (b > 100))
        bright = np.count_nonzero((r + g + b) / 3 > 128)

        return ColorAnalysis(
            red_percent=red / total * 100,
            green_percent=green / total * 100,
            blue_percent=blue / total * 100,
            brightness=bright / total * 100,
        )

    def infer_objects(self, analysis: ColorAnalysis) -> list[Detection]:
        objects = [Detection(name=name, confidence=confidence) for name, confidence, rule in self.RULES if rule(analysis)]
        return sorted(objects, key=lambda d: d.confidence, reverse=True)

    @staticmethod
    def describe(objects: list[Detection], analysis: ColorAnalysis) -> str:
        if not objects:
            return "Scene appears mostly uniform with mixed colors."
        names = ", ".join(obj.name for obj in objects)
        brightness = "bright" if analysis.brightness > 50 else "dim"
        return f"I can see {names} in a {brightness} environment."


if __name__ == "__main__":
    detector = HeuristicColorDetector()

    test_image = np.zeros((480, 640, 3), dtype=np.uint8)
    test_image[:240] = (230, 160, 60)  # sky blue in BGR
    test_image[240:] = (40, 170, 40)  # grass green
    _, buffer = cv2.imencode(".jpg", test_image)

    result = detector.detect(buffer.tobytes())
    print(result.description)
    for obj in result.objects:
        print(f"  - {obj.name}: {obj.confidence:.2f}")
