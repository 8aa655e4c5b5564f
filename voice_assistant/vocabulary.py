"""Fixed object vocabulary matched against free-text scene descriptions."""

import re
from functools import lru_cache

# Household, street, body, animal and everyday nouns a vision model is likely
# to mention. Singular forms only; plurals are matched by a trailing "s".
OBJECT_VOCABULARY: tuple[str, ...] = (
    # people and body
    "person", "man", "woman", "child", "baby", "boy", "girl", "face", "hand",
    "arm", "leg", "foot", "head", "hair", "eye",
    # furniture and rooms
    "chair", "table", "desk", "sofa", "couch", "bed", "pillow", "blanket",
    "shelf", "cabinet", "drawer", "door", "window", "wall", "floor", "ceiling",
    "stairs", "curtain", "rug", "carpet", "mirror", "lamp", "light", "clock",
    "picture", "painting", "frame", "plant", "flower", "vase",
    # kitchen
    "cup", "mug", "glass", "bottle", "plate", "bowl", "fork", "knife",
    "spoon", "pan", "pot", "kettle", "refrigerator", "fridge", "oven",
    "microwave", "stove", "sink", "toaster", "food", "fruit", "apple",
    "banana", "orange", "bread", "sandwich", "pizza", "cake",
    # electronics
    "phone", "cell phone", "laptop", "computer", "monitor", "screen",
    "keyboard", "mouse", "television", "tv", "remote", "camera", "speaker",
    "headphones", "charger", "cable", "tablet",
    # personal items
    "bag", "backpack", "purse", "wallet", "key", "umbrella", "hat", "cap",
    "shirt", "jacket", "coat", "shoe", "boot", "sock", "glasses", "watch",
    "book", "notebook", "paper", "pen", "pencil", "box", "toy", "ball",
    "towel", "toothbrush", "scissors",
    # street and outdoors
    "car", "truck", "bus", "bicycle", "bike", "motorcycle", "train", "boat",
    "road", "street", "sidewalk", "crosswalk", "curb", "sign", "stop sign",
    "traffic light", "pole", "fence", "gate", "bench", "building", "house",
    "tree", "grass", "sky", "cloud", "sun", "water", "fire hydrant",
    "trash can", "parking meter", "step",
    # animals
    "dog", "cat", "bird", "horse", "cow", "sheep", "fish", "duck",
)

CERTAINTY_MARKERS: tuple[str, ...] = ("clearly", "obviously", "definitely")
HEDGING_MARKERS: tuple[str, ...] = ("appears to be", "looks like", "seems to")


@lru_cache(maxsize=None)
def term_pattern(term: str) -> re.Pattern[str]:
    """Word-boundary pattern for a term with an optional plural "s"."""
    return re.compile(rf"\b{re.escape(term)}s?\b")


def match_terms(text: str, vocabulary: tuple[str, ...] = OBJECT_VOCABULARY) -> list[str]:
    """Return vocabulary terms found in lower-cased text, in vocabulary order.

    Terms that overlap (e.g. "phone" and "cell phone") are matched
    independently.
    """
    return [term for term in vocabulary if term_pattern(term).search(text)]


def contains_any(text: str, markers: tuple[str, ...]) -> bool:
    return any(marker in text for marker in markers)
