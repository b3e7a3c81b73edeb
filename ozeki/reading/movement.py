"""
Ozeki Reading — Baseline to Endline Movement

Measures how learners' reading levels change between two assessment
cycles. Only matched learners (present in both the baseline and the endline
maps) count; anyone assessed in just one cycle says nothing about growth.

Key outputs:
    - moved up / stayed same / moved down counts and percentages
    - the most frequent (from level → to level) transitions
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from ozeki.reading.scoring import (
    RULE_VERSION,
    ReadingDomainScores,
    ReadingLevel,
    classify_scores,
    compare_levels,
    round_percent,
)

logger = logging.getLogger(__name__)

TOP_TRANSITIONS = 5


# ── Data classes ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class TransitionCount:
    """How many matched learners moved from one level to another."""
    from_level: ReadingLevel
    to_level: ReadingLevel
    count: int
    percent: float

    @property
    def direction(self) -> int:
        return compare_levels(self.from_level, self.to_level)

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_level.label,
            "to": self.to_level.label,
            "count": self.count,
            "percent": self.percent,
        }


@dataclass(frozen=True)
class MovementSummary:
    """Level movement for learners matched across two cycles."""
    n_matched: int
    moved_up: int
    stayed_same: int
    moved_down: int
    moved_up_percent: float
    stayed_same_percent: float
    moved_down_percent: float
    top_transitions: list[TransitionCount] = field(default_factory=list)
    rule_version: str = RULE_VERSION

    @property
    def summary(self) -> str:
        """One-line summary, e.g. '12/20 learners moved up at least one level'."""
        noun = "learner" if self.n_matched == 1 else "learners"
        return (f"{self.moved_up}/{self.n_matched} {noun} "
                f"moved up at least one level")

    def to_dict(self) -> dict[str, Any]:
        return {
            "n_matched": self.n_matched,
            "moved_up": self.moved_up,
            "stayed_same": self.stayed_same,
            "moved_down": self.moved_down,
            "moved_up_1plus_percent": self.moved_up_percent,
            "stayed_same_percent": self.stayed_same_percent,
            "moved_down_percent": self.moved_down_percent,
            "top_transitions": [t.to_dict() for t in self.top_transitions],
            "rule_version": self.rule_version,
        }


# ── Core functions ───────────────────────────────────────────────────

def matched_learners(
    baseline: Mapping[Hashable, Any],
    endline: Mapping[Hashable, Any],
) -> list[Hashable]:
    """Identifiers present in both maps, in baseline order."""
    return [learner_id for learner_id in baseline if learner_id in endline]


def reading_level_movement(
    baseline: Mapping[Hashable, ReadingDomainScores],
    endline: Mapping[Hashable, ReadingDomainScores],
    limit: int = TOP_TRANSITIONS,
) -> Optional[MovementSummary]:
    """
    Compare each matched learner's baseline and endline reading level.

    Args:
        baseline:  learner id → scores at the first cycle
        endline:   learner id → scores at the second cycle
        limit:     number of transition pairs to keep (default 5)

    Returns:
        MovementSummary, or None when no learner appears in both maps.

    Transition pairs are ranked by descending count. Ties keep the order in
    which the pair was first seen while walking the baseline map.
    """
    matched = matched_learners(baseline, endline)
    if not matched:
        logger.debug("No learners matched between baseline and endline")
        return None

    unmatched = len(baseline) + len(endline) - 2 * len(matched)
    if unmatched:
        logger.debug(f"{unmatched} learner(s) assessed in only one cycle excluded")

    up = same = down = 0
    pair_counts: dict[tuple[ReadingLevel, ReadingLevel], int] = {}

    for learner_id in matched:
        before = classify_scores(baseline[learner_id])
        after = classify_scores(endline[learner_id])

        direction = compare_levels(before, after)
        if direction > 0:
            up += 1
        elif direction < 0:
            down += 1
        else:
            same += 1

        pair = (before, after)
        pair_counts[pair] = pair_counts.get(pair, 0) + 1

    n = len(matched)
    # sorted() is stable and dicts keep first-insertion order.
    ranked = sorted(pair_counts.items(), key=lambda item: -item[1])
    top = [
        TransitionCount(
            from_level=from_level,
            to_level=to_level,
            count=count,
            percent=round_percent(count, n),
        )
        for (from_level, to_level), count in ranked[:max(0, limit)]
    ]

    return MovementSummary(
        n_matched=n,
        moved_up=up,
        stayed_same=same,
        moved_down=down,
        moved_up_percent=round_percent(up, n),
        stayed_same_percent=round_percent(same, n),
        moved_down_percent=round_percent(down, n),
        top_transitions=top,
    )
