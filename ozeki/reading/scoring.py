"""
Ozeki Reading — Scoring and Classification Engine

Scores each learner assessment across six reading domains:
    1. Letter Names     — naming letters of the alphabet
    2. Letter Sounds    — producing the sound of each letter
    3. Real Words       — decoding familiar real words
    4. Made Up Words    — decoding nonsense words (pure phonics)
    5. Story Reading    — connected-text reading
    6. Comprehension    — answering questions about the story

Each domain is scored on a continuous 0-10 scale. The composite average of
the six domains maps to a reading level:
    Fluent        (8.0-10.0)
    Transitional  (6.0-7.9)
    Developing    (4.0-5.9)
    Emerging      (2.0-3.9)
    Non-Reader    (0.0-1.9)

Lower bounds are inclusive and upper bounds exclusive, except the top band
which is closed at 10. The thresholds together with the one-decimal percent
rounding in round_percent() form the published ruleset identified by
RULE_VERSION; any change to either is a new version.

The functions here are pure and are reused by:
    - ozeki.reading.cohort    (distribution and domain averages)
    - ozeki.reading.movement  (baseline to endline transitions)
    - ozeki reading classify  (per-learner CLI output)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)

RULE_VERSION = "reading-levels/v1"

SCORE_MIN = 0.0
SCORE_MAX = 10.0


# ── Reading levels ───────────────────────────────────────────────────

class ReadingLevel(Enum):
    """Five ordered reading bands, lowest (0) to highest (4)."""

    NON_READER = (0, "Non-Reader")
    EMERGING = (1, "Emerging")
    DEVELOPING = (2, "Developing")
    TRANSITIONAL = (3, "Transitional")
    FLUENT = (4, "Fluent")

    def __init__(self, ordinal: int, label: str):
        self.ordinal = ordinal
        self.label = label

    def __lt__(self, other):
        if not isinstance(other, ReadingLevel):
            return NotImplemented
        return self.ordinal < other.ordinal

    def __le__(self, other):
        if not isinstance(other, ReadingLevel):
            return NotImplemented
        return self.ordinal <= other.ordinal

    def __gt__(self, other):
        if not isinstance(other, ReadingLevel):
            return NotImplemented
        return self.ordinal > other.ordinal

    def __ge__(self, other):
        if not isinstance(other, ReadingLevel):
            return NotImplemented
        return self.ordinal >= other.ordinal

    def __str__(self) -> str:
        return self.label

    @classmethod
    def ordered(cls) -> list[ReadingLevel]:
        """All levels sorted by ordinal, lowest first."""
        return sorted(cls, key=lambda level: level.ordinal)

    @classmethod
    def from_label(cls, label: str) -> ReadingLevel:
        wanted = label.strip().lower()
        for level in cls:
            if level.label.lower() == wanted:
                return level
        raise ValueError(f"Unknown reading level: {label!r}")


# Checked top-down; the first lower bound the average reaches wins.
LEVEL_THRESHOLDS = [
    (8.0, ReadingLevel.FLUENT),
    (6.0, ReadingLevel.TRANSITIONAL),
    (4.0, ReadingLevel.DEVELOPING),
    (2.0, ReadingLevel.EMERGING),
    (0.0, ReadingLevel.NON_READER),
]


def level_ordinal(level: ReadingLevel) -> int:
    """Position of a level in the taxonomy (0 = Non-Reader, 4 = Fluent)."""
    return level.ordinal


def compare_levels(before: ReadingLevel, after: ReadingLevel) -> int:
    """Return 1 if `after` is higher than `before`, -1 if lower, 0 if equal."""
    delta = level_ordinal(after) - level_ordinal(before)
    if delta > 0:
        return 1
    if delta < 0:
        return -1
    return 0


# ── Score normalization ──────────────────────────────────────────────

def _coerce(value: Any) -> Optional[float]:
    """Convert a raw score to float, or None when it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def clamp_score(value: Any, field_name: str = "score") -> float:
    """
    Clamp a domain score to [0, 10].

    Out-of-range values are pulled to the nearest bound and non-numeric
    input is treated as 0. Nothing is ever rejected; a warning is logged
    instead so data-entry mistakes remain visible to operators.
    """
    number = _coerce(value)
    if number is None:
        logger.warning(f"Non-numeric {field_name} {value!r} coerced to 0")
        return SCORE_MIN

    clamped = max(SCORE_MIN, min(SCORE_MAX, number))
    if clamped != number:
        logger.warning(f"{field_name} {number:g} outside 0-10, clamped to {clamped:g}")
    return clamped


def round_percent(count: int, total: int) -> float:
    """
    Share of `total` as a percentage rounded to one decimal place.

    Halves round up (12.25 -> 12.3). Returns 0.0 for an empty total.
    """
    if total <= 0:
        return 0.0
    return math.floor(count / total * 1000 + 0.5) / 10


# ── Data classes ─────────────────────────────────────────────────────

DOMAIN_KEYS = (
    "letter_names",
    "letter_sounds",
    "real_words",
    "made_up_words",
    "story_reading",
    "comprehension",
)

DOMAIN_LABELS = {
    "letter_names": "Letter Names",
    "letter_sounds": "Letter Sounds",
    "real_words": "Real Words",
    "made_up_words": "Made Up Words",
    "story_reading": "Story Reading",
    "comprehension": "Comprehension",
}


@dataclass(frozen=True)
class ReadingDomainScores:
    """Six domain scores for one learner at one assessment cycle."""
    letter_names: float = 0.0
    letter_sounds: float = 0.0
    real_words: float = 0.0
    made_up_words: float = 0.0
    story_reading: float = 0.0
    comprehension: float = 0.0

    def __post_init__(self):
        # Every construction path clamps, including direct calls.
        for key in DOMAIN_KEYS:
            object.__setattr__(self, key, clamp_score(getattr(self, key), key))

    @classmethod
    def from_values(cls, **values: Any) -> ReadingDomainScores:
        """Build a score set from keyword values. Missing fields are 0."""
        unknown = set(values) - set(DOMAIN_KEYS)
        if unknown:
            raise TypeError(f"Unknown reading domains: {', '.join(sorted(unknown))}")
        return cls(**values)

    @classmethod
    def zero(cls) -> ReadingDomainScores:
        return cls()

    def values(self) -> list[float]:
        return [getattr(self, f.name) for f in fields(self)]

    def as_dict(self) -> dict[str, float]:
        return {key: getattr(self, key) for key in DOMAIN_KEYS}

    @property
    def composite(self) -> float:
        return composite_average(self)

    @property
    def level(self) -> ReadingLevel:
        return classify_scores(self)


@dataclass(frozen=True)
class LearnerResult:
    """Composite and reading level for a single assessed learner."""
    scores: ReadingDomainScores
    composite: float
    level: ReadingLevel
    rule_version: str = RULE_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "scores": self.scores.as_dict(),
            "composite": self.composite,
            "level": self.level.label,
            "ordinal": self.level.ordinal,
            "rule_version": self.rule_version,
        }


# ── Scoring functions ────────────────────────────────────────────────

def composite_average(scores: ReadingDomainScores) -> float:
    """Arithmetic mean of the six domains. Not rounded."""
    return sum(scores.values()) / len(DOMAIN_KEYS)


def classify_average(average: Any) -> ReadingLevel:
    """
    Map a 0-10 composite average to a reading level.

    Also used for cohort means, so the same boundaries apply to a class
    average as to an individual learner.
    """
    avg = clamp_score(average, "average")
    for threshold, level in LEVEL_THRESHOLDS:
        if avg >= threshold:
            return level
    return ReadingLevel.NON_READER


def classify_scores(scores: ReadingDomainScores) -> ReadingLevel:
    """Reading level from a full score set."""
    return classify_average(composite_average(scores))


def assess_learner(scores: ReadingDomainScores) -> LearnerResult:
    """Score a single learner's domain scores."""
    avg = composite_average(scores)
    return LearnerResult(scores=scores, composite=avg, level=classify_average(avg))
