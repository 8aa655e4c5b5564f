from conftest import make_result

from voice_assistant.config import ScanConfig
from voice_assistant.response import NOTHING_DETECTED, ResponseBuilder


def test_format_objects_pluralizes_counts() -> None:
    result = make_result("", ("dog", 0.9, 2), ("cat", 0.8, 1))

    assert ResponseBuilder.format_objects(result.objects) == "2 dogs, cat"


def test_scan_announcement_uses_short_description() -> None:
    result = make_result("A dog on the grass.", ("dog", 0.8, 1))

    announcement = ResponseBuilder().build_scan_announcement(result, "")

    assert announcement.text == "A dog on the grass."
    assert announcement.key == "dog"


def test_scan_announcement_uses_object_list_for_long_description() -> None:
    result = make_result("x" * 201, ("dog", 0.8, 2), ("cat", 0.9, 1))

    announcement = ResponseBuilder().build_scan_announcement(result, "")

    assert announcement.text == "Objects detected: 2 dogs, cat"


def test_scan_announcement_suppresses_repeat() -> None:
    result = make_result("A dog.", ("dog", 0.8, 1))

    assert ResponseBuilder().build_scan_announcement(result, "dog") is None


def test_scan_announcement_skips_low_confidence_only() -> None:
    result = make_result("Maybe a chair.", ("chair", 0.6, 1))

    assert ResponseBuilder().build_scan_announcement(result, "") is None


def test_empty_result_announced_once() -> None:
    builder = ResponseBuilder()
    empty = make_result("Nothing much.")

    first = builder.build_scan_announcement(empty, "dog")
    assert first.text == "No clear objects detected in the current view."
    assert first.key == NOTHING_DETECTED
    assert builder.build_scan_announcement(empty, NOTHING_DETECTED) is None


def test_scan_announcement_caps_listed_objects() -> None:
    objects = [(f"thing{i}", 0.9, 1) for i in range(7)]
    result = make_result("y" * 300, *objects)

    announcement = ResponseBuilder(ScanConfig(max_announced=5)).build_scan_announcement(result, "")

    assert announcement.key == "thing0, thing1, thing2, thing3, thing4"


def test_manual_announcement() -> None:
    builder = ResponseBuilder()

    assert builder.build_manual_announcement(make_result("Empty.")) == "No objects detected in this image."
    assert builder.build_manual_announcement(make_result("A cup.", ("cup", 0.6, 1))) == "A cup."
    long_result = make_result("z" * 250, ("cup", 0.6, 3))
    assert builder.build_manual_announcement(long_result) == "Objects found: 3 cups"
