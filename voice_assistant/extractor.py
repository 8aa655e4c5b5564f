"""Turn a natural-language scene description into structured detections.

The rules here are keyword heuristics, not a learned model: confidence comes
from hedging/certainty wording and counts from quantity words next to the
noun.
"""

import logging
import re
from dataclasses import dataclass, field

from voice_assistant.vocabulary import (
    CERTAINTY_MARKERS,
    HEDGING_MARKERS,
    OBJECT_VOCABULARY,
    contains_any,
    match_terms,
)

logger = logging.getLogger(__name__)

MAX_DETECTIONS = 15

BASE_CONFIDENCE = 0.8
PLURAL_CONFIDENCE = 0.9
CERTAIN_CONFIDENCE = 0.95
HEDGED_CONFIDENCE = 0.6

NUMBER_WORDS = {
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "several": 3,
    "many": 5,
}

_QUANTITY = r"\b(" + "|".join(NUMBER_WORDS) + r"|\d{1,2})\s+(?:[a-z]+\s+)?"


@dataclass(frozen=True)
class Detection:
    name: str
    confidence: float
    count: int = 1

    def to_dict(self) -> dict:
        return {"name": self.name, "confidence": self.confidence, "count": self.count}


@dataclass(frozen=True)
class DetectionResult:
    """Output of one analysis cycle. Never mutated after construction."""

    description: str
    objects: tuple[Detection, ...] = field(default_factory=tuple)
    method: str = "AI API"
    api_used: str | None = None

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "objects": [obj.to_dict() for obj in self.objects],
            "method": self.method,
            "apiUsed": self.api_used,
        }


def score_confidence(text: str, term: str) -> float:
    """Confidence for a matched term.

    Rules are applied in order and the last one that applies wins, so a
    hedge ("looks like") overrides a certainty marker ("clearly").
    """
    confidence = BASE_CONFIDENCE
    if f"{term}s" in text or f"multiple {term}" in text or f"several {term}" in text:
        confidence = PLURAL_CONFIDENCE
    if contains_any(text, CERTAINTY_MARKERS):
        confidence = CERTAIN_CONFIDENCE
    if contains_any(text, HEDGING_MARKERS):
        confidence = HEDGED_CONFIDENCE
    return confidence


def estimate_count(text: str, term: str) -> int:
    """Count from the first quantity phrase next to the term, default 1."""
    pattern = re.compile(_QUANTITY + rf"{re.escape(term)}s?\b")
    for match in pattern.finditer(text):
        quantity = match.group(1)
        if quantity in NUMBER_WORDS:
            return NUMBER_WORDS[quantity]
        value = int(quantity)
        if 1 <= value <= 19:
            return value
    return 1


def extract_detections(
    description: str,
    vocabulary: tuple[str, ...] = OBJECT_VOCABULARY,
    limit: int = MAX_DETECTIONS,
) -> list[Detection]:
    """Extract detections from a description.

    Returns an empty list for empty text, text without vocabulary terms, or
    if anything goes wrong while parsing.
    """
    if not description:
        return []

    try:
        text = description.lower()
        seen: set[str] = set()
        detections: list[Detection] = []

        for term in match_terms(text, vocabulary):
            if term in seen:
                continue
            seen.add(term)
            detections.append(
                Detection(
                    name=term,
                    confidence=score_confidence(text, term),
                    count=estimate_count(text, term),
                )
            )

        detections.sort(key=lambda d: d.confidence, reverse=True)
        return detections[:limit]

    except Exception:
        logger.exception("Failed to extract detections from description")
        return []


if __name__ == "__main__":
    samples = [
        "I can see two dogs and a cat sitting on a sofa.",
        "There appears to be a chair next to a table with several cups.",
        "The image clearly shows a bus, 3 cars and a traffic light.",
        "An abstract pattern of shapes.",
    ]
    for sample in samples:
        print(sample)
        for det in extract_detections(sample):
            print(f"  - {det.name}: {det.confidence:.2f} x{det.count}")
