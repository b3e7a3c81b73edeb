"""
Ozeki Reading — Reading Levels Block

Assembles the "reading levels profile and movement" block consumed by
impact reports and dashboards: the ruleset version, the level table, one
distribution per assessment cycle, and baseline to endline movement.

Also holds the plain-text formatters used by the `ozeki reading` commands.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from ozeki.reading.cohort import CohortDistribution, reading_level_distribution
from ozeki.reading.movement import (
    TOP_TRANSITIONS,
    MovementSummary,
    reading_level_movement,
)
from ozeki.reading.scoring import (
    RULE_VERSION,
    LearnerResult,
    ReadingDomainScores,
    ReadingLevel,
)

logger = logging.getLogger(__name__)


# ── Data classes ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class CycleDistribution:
    """Distribution for a single assessment cycle (baseline, endline, ...)."""
    cycle: str
    distribution: CohortDistribution

    def to_dict(self) -> dict[str, Any]:
        data = self.distribution.to_dict()
        return {
            "cycle": self.cycle,
            "n": data["n"],
            "counts": data["counts"],
            "percents": data["percents"],
        }


@dataclass(frozen=True)
class ReadingLevelsBlock:
    """Reading-level profile across cycles plus movement between two of them."""
    distribution: list[CycleDistribution] = field(default_factory=list)
    movement: Optional[MovementSummary] = None
    definition_version: str = RULE_VERSION

    @property
    def levels(self) -> list[dict[str, Any]]:
        return [{"level": lvl.ordinal, "label": lvl.label}
                for lvl in ReadingLevel.ordered()]

    def cycle(self, name: str) -> Optional[CycleDistribution]:
        for entry in self.distribution:
            if entry.cycle == name:
                return entry
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "definition_version": self.definition_version,
            "levels": self.levels,
            "distribution": [d.to_dict() for d in self.distribution],
            "movement": self.movement.to_dict() if self.movement else None,
        }


# ── Builders ─────────────────────────────────────────────────────────

def build_reading_levels_block(
    cycles: Mapping[str, Sequence[ReadingDomainScores]],
    baseline: Optional[Mapping[Hashable, ReadingDomainScores]] = None,
    endline: Optional[Mapping[Hashable, ReadingDomainScores]] = None,
    limit: int = TOP_TRANSITIONS,
) -> ReadingLevelsBlock:
    """
    Build the reading levels block.

    Args:
        cycles:    cycle name → cohort, in the order they should be reported
        baseline:  learner id → baseline scores (for movement)
        endline:   learner id → endline scores (for movement)
        limit:     number of top transitions to keep

    Movement is None unless both id maps are given and share a learner.
    """
    distribution = [
        CycleDistribution(cycle=name, distribution=reading_level_distribution(cohort))
        for name, cohort in cycles.items()
    ]

    movement = None
    if baseline is not None and endline is not None:
        movement = reading_level_movement(baseline, endline, limit=limit)

    logger.debug(f"Reading levels block: {len(distribution)} cycle(s), "
                 f"movement={'yes' if movement else 'no'}")
    return ReadingLevelsBlock(distribution=distribution, movement=movement)


# ── Terminal formatters ──────────────────────────────────────────────

def bar(percent: float, width: int = 20) -> str:
    """Render a percentage as a text bar."""
    filled = round(min(100.0, max(0.0, percent)) / 100 * width)
    return "█" * filled + "░" * (width - filled)


def format_learners(results: Sequence[tuple[str, LearnerResult]]) -> str:
    """Per-learner composite and level table."""
    lines = []
    lines.append("")
    lines.append(f"  {'Learner':<16s} {'Composite':>9s}  Level")
    lines.append(f"  {'─' * 42}")
    for learner_id, result in results:
        lines.append(
            f"  {learner_id:<16s} {result.composite:>9.2f}  {result.level.label}"
        )
    lines.append("")
    return "\n".join(lines)


def format_distribution(dist: CohortDistribution, title: str = "Reading Levels") -> str:
    lines = []
    lines.append("")
    lines.append(f"  {title} (n={dist.n})")
    lines.append(f"  {'─' * 56}")
    for level in ReadingLevel.ordered():
        pct = dist.percents[level]
        lines.append(
            f"    {level.label:<14s} {bar(pct)} {pct:>5.1f}%  ({dist.counts[level]})"
        )
    lines.append("")
    return "\n".join(lines)


def format_movement(movement: MovementSummary) -> str:
    lines = []
    lines.append("")
    lines.append(f"  Baseline → Endline Movement (n={movement.n_matched} matched)")
    lines.append(f"  {'─' * 56}")
    lines.append(f"    Moved up:     {movement.moved_up:>4d}  ({movement.moved_up_percent:.1f}%)")
    lines.append(f"    Stayed same:  {movement.stayed_same:>4d}  ({movement.stayed_same_percent:.1f}%)")
    lines.append(f"    Moved down:   {movement.moved_down:>4d}  ({movement.moved_down_percent:.1f}%)")
    lines.append("")
    if movement.top_transitions:
        lines.append("  Top Transitions")
        lines.append(f"  {'─' * 56}")
        for t in movement.top_transitions:
            symbol = "↑" if t.direction > 0 else "↓" if t.direction < 0 else "→"
            lines.append(
                f"    {symbol} {t.from_level.label:<13s} → {t.to_level.label:<13s}"
                f" {t.count:>4d}  ({t.percent:.1f}%)"
            )
        lines.append("")
    lines.append(f"  {movement.summary}")
    lines.append("")
    return "\n".join(lines)


def format_block(block: ReadingLevelsBlock) -> str:
    """Format a reading levels block for terminal output."""
    parts = [f"\n  Reading Level Classification Version: {block.definition_version}"]
    for entry in block.distribution:
        parts.append(format_distribution(
            entry.distribution, title=f"{entry.cycle.capitalize()} distribution"))
    if block.movement:
        parts.append(format_movement(block.movement))
    return "\n".join(parts)


def format_json(data: Any) -> str:
    return json.dumps(data, indent=2)
