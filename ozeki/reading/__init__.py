"""
Ozeki Reading — Assessment Scoring for Literacy Programmes

Turns per-domain reading assessment scores into reading levels, summarizes
levels across cohorts, and measures baseline to endline movement for
learners assessed in both cycles.
"""

from ozeki.reading.scoring import (
    RULE_VERSION,
    ReadingDomainScores,
    ReadingLevel,
    assess_learner,
    clamp_score,
    classify_average,
    classify_scores,
    composite_average,
    round_percent,
)
from ozeki.reading.records import extract_domain_scores, index_by_learner
from ozeki.reading.cohort import (
    CohortDistribution,
    average_domain_scores,
    reading_level_distribution,
)
from ozeki.reading.movement import MovementSummary, reading_level_movement
from ozeki.reading.report import build_reading_levels_block

__all__ = [
    "RULE_VERSION",
    "ReadingDomainScores",
    "ReadingLevel",
    "assess_learner",
    "clamp_score",
    "classify_average",
    "classify_scores",
    "composite_average",
    "round_percent",
    "extract_domain_scores",
    "index_by_learner",
    "CohortDistribution",
    "average_domain_scores",
    "reading_level_distribution",
    "MovementSummary",
    "reading_level_movement",
    "build_reading_levels_block",
]
