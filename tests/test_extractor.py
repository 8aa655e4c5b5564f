from voice_assistant.extractor import MAX_DETECTIONS, Detection, DetectionResult, extract_detections
from voice_assistant.vocabulary import OBJECT_VOCABULARY, match_terms


def _by_name(detections: list[Detection]) -> dict[str, Detection]:
    return {d.name: d for d in detections}


def test_counts_two_dogs_and_a_cat() -> None:
    detections = _by_name(extract_detections("In the yard there are two dogs and a cat playing."))

    assert detections["dog"].count == 2
    assert detections["cat"].count == 1


def test_no_vocabulary_terms_gives_empty_list() -> None:
    assert extract_detections("An abstract swirl of colors.") == []
    assert extract_detections("") == []


def test_hedge_sets_confidence_to_point_six() -> None:
    detections = _by_name(extract_detections("There appears to be a chair in the corner."))

    assert detections["chair"].confidence == 0.6


def test_hedge_overrides_certainty() -> None:
    detections = _by_name(extract_detections("This is clearly a kitchen. It looks like a kettle on the stove."))

    assert detections["kettle"].confidence == 0.6
    assert detections["stove"].confidence == 0.6


def test_certainty_marker_raises_confidence() -> None:
    detections = _by_name(extract_detections("The photo definitely shows a bicycle."))

    assert detections["bicycle"].confidence == 0.95


def test_plural_raises_confidence_and_several_counts_three() -> None:
    detections = _by_name(extract_detections("A table with several cups on it."))

    assert detections["cup"].confidence == 0.9
    assert detections["cup"].count == 3
    assert detections["table"].confidence == 0.8
    assert detections["table"].count == 1


def test_count_from_digits_and_adjectives() -> None:
    detections = _by_name(extract_detections("I see 3 cars, three small chairs and many birds."))

    assert detections["car"].count == 3
    assert detections["chair"].count == 3
    assert detections["bird"].count == 5


def test_out_of_range_number_keeps_default_count() -> None:
    detections = _by_name(extract_detections("A parking lot with 25 cars."))

    assert detections["car"].count == 1


def test_results_are_capped_and_sorted() -> None:
    description = "A room with " + ", ".join(OBJECT_VOCABULARY[15:35]) + ". There are several chairs."
    detections = extract_detections(description)

    assert len(detections) == MAX_DETECTIONS
    confidences = [d.confidence for d in detections]
    assert confidences == sorted(confidences, reverse=True)
    assert detections[0].name == "chair"
    assert detections[0].confidence == 0.9


def test_plural_check_matches_inside_longer_words() -> None:
    detections = _by_name(extract_detections("A woman with long hair sits between two chairs."))

    assert detections["chair"].confidence == 0.9
    assert detections["chair"].count == 2
    assert detections["hair"].confidence == 0.9
    assert detections["hair"].count == 1


def test_names_unique_and_values_in_range() -> None:
    detections = extract_detections("A dog, another dog, dogs everywhere and 4 cats near a door.")

    names = [d.name for d in detections]
    assert len(names) == len(set(names))
    assert all(0.0 <= d.confidence <= 1.0 for d in detections)
    assert all(d.count >= 1 for d in detections)


def test_extraction_is_idempotent() -> None:
    description = "It looks like two people are sitting on a bench next to a tree."

    assert extract_detections(description) == extract_detections(description)


def test_overlapping_terms_match_independently() -> None:
    names = {d.name for d in extract_detections("A cell phone lies on the desk.")}

    assert {"cell phone", "phone", "desk"} <= names


def test_word_boundaries_prevent_partial_matches() -> None:
    assert match_terms("a catalog and a hotdog") == []


def test_detection_result_serializes() -> None:
    result = DetectionResult(
        description="A cat.",
        objects=(Detection(name="cat", confidence=0.8),),
        method="AI API",
        api_used="openai/gpt-4o",
    )

    assert result.to_dict() == {
        "description": "A cat.",
        "objects": [{"name": "cat", "confidence": 0.8, "count": 1}],
        "method": "AI API",
        "apiUsed": "openai/gpt-4o",
    }
