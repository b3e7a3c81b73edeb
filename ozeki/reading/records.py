"""
Ozeki Reading — Assessment Record Adapter

Maps assessment rows captured by the staff portal onto the six canonical
reading domains. Portal rows use the legacy field names below (camelCase
from the API, snake_case when read straight from the database):

    letterIdentificationScore   → letter_names
    soundIdentificationScore    → letter_sounds
    decodableWordsScore         → real_words
    madeUpWordsScore            → made_up_words
    storyReadingScore           → story_reading
    readingComprehensionScore   → comprehension

A row where all six fields are absent carries no assessment data and
yields None, which is different from a learner assessed at zero.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from ozeki.reading.scoring import DOMAIN_KEYS, ReadingDomainScores

logger = logging.getLogger(__name__)


RECORD_FIELD_MAP = {
    "letterIdentificationScore": "letter_names",
    "soundIdentificationScore": "letter_sounds",
    "decodableWordsScore": "real_words",
    "madeUpWordsScore": "made_up_words",
    "storyReadingScore": "story_reading",
    "readingComprehensionScore": "comprehension",
}

RECORD_FIELD_ALIASES = {
    "letter_identification_score": "letterIdentificationScore",
    "sound_identification_score": "soundIdentificationScore",
    "decodable_words_score": "decodableWordsScore",
    "made_up_words_score": "madeUpWordsScore",
    "story_reading_score": "storyReadingScore",
    "reading_comprehension_score": "readingComprehensionScore",
}

_SOURCE_KEYS = {
    domain: [legacy] + [alias for alias, target in RECORD_FIELD_ALIASES.items()
                        if target == legacy]
    for legacy, domain in RECORD_FIELD_MAP.items()
}


def _lookup(record: Mapping[str, Any], domain: str) -> Optional[Any]:
    """First non-None value among the source keys for a domain."""
    for key in _SOURCE_KEYS[domain]:
        value = record.get(key)
        if value is not None:
            return value
    return None


def extract_domain_scores(record: Mapping[str, Any]) -> Optional[ReadingDomainScores]:
    """
    Extract clamped domain scores from an assessment record.

    Args:
        record: Mapping with any of the legacy score fields.

    Returns:
        ReadingDomainScores, or None if none of the six fields is present.
    """
    raw = {domain: _lookup(record, domain) for domain in DOMAIN_KEYS}
    if all(value is None for value in raw.values()):
        return None

    return ReadingDomainScores(**{
        domain: 0.0 if value is None else value for domain, value in raw.items()
    })


def extract_cohort(
    records: Iterable[Mapping[str, Any]],
) -> tuple[list[ReadingDomainScores], int]:
    """
    Extract scores for every record that carries assessment data.

    Returns:
        (cohort, skipped) where skipped counts records with no data.
    """
    cohort = []
    skipped = 0
    for record in records:
        scores = extract_domain_scores(record)
        if scores is None:
            skipped += 1
            continue
        cohort.append(scores)
    if skipped:
        logger.debug(f"Skipped {skipped} record(s) with no assessment data")
    return cohort, skipped


def record_cycle(record: Mapping[str, Any], cycle_field: str = "assessmentType") -> str:
    """Normalized assessment cycle name of a record ('' when missing)."""
    value = record.get(cycle_field)
    if value is None:
        return ""
    return str(value).strip().lower()


def filter_cycle(
    records: Iterable[Mapping[str, Any]],
    cycle: str,
    cycle_field: str = "assessmentType",
) -> list[Mapping[str, Any]]:
    """Records belonging to one assessment cycle (case-insensitive)."""
    wanted = cycle.strip().lower()
    return [r for r in records if record_cycle(r, cycle_field) == wanted]


def index_by_learner(
    records: Iterable[Mapping[str, Any]],
    id_field: str = "childId",
    cycle: Optional[str] = None,
    cycle_field: str = "assessmentType",
) -> dict[str, ReadingDomainScores]:
    """
    Build a learner id → scores map for movement analysis.

    Records without an identifier or without assessment data are skipped.
    If a learner appears more than once, the last record wins. Insertion
    order follows the first appearance of each learner.
    """
    if cycle is not None:
        records = filter_cycle(records, cycle, cycle_field)

    indexed: dict[str, ReadingDomainScores] = {}
    for record in records:
        learner_id = record.get(id_field)
        if learner_id is None or str(learner_id).strip() == "":
            logger.debug(f"Skipping record without {id_field}")
            continue
        scores = extract_domain_scores(record)
        if scores is None:
            continue
        key = str(learner_id).strip()
        if key in indexed:
            logger.debug(f"Learner {key} assessed more than once; keeping latest record")
        indexed[key] = scores
    return indexed
