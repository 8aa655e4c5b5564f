"""Spoken announcements for detection results."""

from dataclasses import dataclass

from voice_assistant.config import ScanConfig
from voice_assistant.extractor import Detection, DetectionResult

NOTHING_DETECTED = "nothing detected"


@dataclass
class Announcement:
    """What to say for a result, and the key used to suppress repeats."""

    text: str
    key: str


class ResponseBuilder:
    """Build spoken text for continuous and manual detection."""

    NO_OBJECTS_SCAN = "No clear objects detected in the current view."
    NO_OBJECTS_MANUAL = "No objects detected in this image."

    def __init__(self, config: ScanConfig | None = None) -> None:
        self.config = config or ScanConfig()

    @staticmethod
    def format_objects(objects: list[Detection] | tuple[Detection, ...]) -> str:
        """Render detections as "2 dogs, cat"."""
        return ", ".join(f"{obj.count} {obj.name}s" if obj.count > 1 else obj.name for obj in objects)

    def build_scan_announcement(self, result: DetectionResult, last_announcement: str) -> Announcement | None:
        """Announcement for a continuous scan cycle.

        Args:
            result: The cycle's detection result.
            last_announcement: Key of the previous announcement.

        Returns:
            None when nothing should be spoken (repeat, or only low
            confidence objects).
        """
        if not result.objects:
            if last_announcement == NOTHING_DETECTED:
                return None
            return Announcement(text=self.NO_OBJECTS_SCAN, key=NOTHING_DETECTED)

        confident = [obj for obj in result.objects if obj.confidence > self.config.min_confidence]
        object_list = self.format_objects(confident[: self.config.max_announced])

        if not object_list or object_list == last_announcement:
            return None

        return Announcement(text=self._spoken_text(result.description, "Objects detected", object_list), key=object_list)

    def build_manual_announcement(self, result: DetectionResult) -> str:
        """Announcement for a single-shot detection. Always returns text."""
        if not result.objects:
            return self.NO_OBJECTS_MANUAL

        object_list = self.format_objects(result.objects[: self.config.max_manual_announced])
        return self._spoken_text(result.description, "Objects found", object_list)

    def _spoken_text(self, description: str, prefix: str, object_list: str) -> str:
        # Short descriptions read better than a bare object list
        if len(description) > self.config.max_spoken_description:
            return f"{prefix}: {object_list}"
        return description
