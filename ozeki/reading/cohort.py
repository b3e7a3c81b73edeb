"""
Ozeki Reading — Cohort Aggregation

Aggregates learner score sets for a class, school or district:

    - reading_level_distribution:  count and share of learners per level
    - average_domain_scores:       per-domain means across the cohort
    - cohort_mean_level:           level of the cohort's mean composite

Empty cohorts produce defined zero results rather than errors, so report
code never needs to guard against a division by zero.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ozeki.reading.scoring import (
    DOMAIN_KEYS,
    RULE_VERSION,
    ReadingDomainScores,
    ReadingLevel,
    classify_average,
    classify_scores,
    composite_average,
    round_percent,
)

logger = logging.getLogger(__name__)


# ── Data classes ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class CohortDistribution:
    """Reading-level counts and percentages for one cohort."""
    counts: dict[ReadingLevel, int]
    percents: dict[ReadingLevel, float]
    n: int
    rule_version: str = RULE_VERSION

    @property
    def is_empty(self) -> bool:
        return self.n == 0

    def to_dict(self) -> dict[str, Any]:
        """JSON shape keyed by level label, lowest level first."""
        levels = ReadingLevel.ordered()
        return {
            "n": self.n,
            "counts": {level.label: self.counts[level] for level in levels},
            "percents": {level.label: self.percents[level] for level in levels},
            "rule_version": self.rule_version,
        }


# ── Aggregation functions ────────────────────────────────────────────

def reading_level_distribution(cohort: Sequence[ReadingDomainScores]) -> CohortDistribution:
    """
    Classify every learner and tally the cohort by reading level.

    All five levels are always present. Percentages use round_percent(),
    so they are rounded independently and may sum to 100 +/- 0.1 per level.
    """
    counts = {level: 0 for level in ReadingLevel.ordered()}
    for scores in cohort:
        counts[classify_scores(scores)] += 1

    n = len(cohort)
    if n == 0:
        logger.debug("Empty cohort; distribution is all zero")
    percents = {level: round_percent(count, n) for level, count in counts.items()}
    return CohortDistribution(counts=counts, percents=percents, n=n)


def average_domain_scores(cohort: Sequence[ReadingDomainScores]) -> ReadingDomainScores:
    """
    Per-domain arithmetic mean across the cohort.

    Each domain is averaged independently. An empty cohort returns all-zero
    scores.
    """
    if not cohort:
        return ReadingDomainScores.zero()

    n = len(cohort)
    totals = {key: 0.0 for key in DOMAIN_KEYS}
    for scores in cohort:
        for key in DOMAIN_KEYS:
            totals[key] += getattr(scores, key)
    return ReadingDomainScores(**{key: total / n for key, total in totals.items()})


def cohort_mean_level(cohort: Sequence[ReadingDomainScores]) -> ReadingLevel:
    """Reading level of the cohort's mean composite (Non-Reader when empty)."""
    if not cohort:
        return ReadingLevel.NON_READER
    mean = sum(composite_average(s) for s in cohort) / len(cohort)
    return classify_average(mean)
