# tests/test_scoring.py
import logging

import pytest

from ozeki.reading.scoring import (
    RULE_VERSION,
    ReadingDomainScores,
    ReadingLevel,
    assess_learner,
    clamp_score,
    classify_average,
    classify_scores,
    compare_levels,
    composite_average,
    level_ordinal,
    round_percent,
)


# ── clamp_score ──────────────────────────────────────────────────────

def test_clamp_keeps_in_range_values():
    for value in [0, 0.5, 2, 5.25, 9.999, 10]:
        assert clamp_score(value) == value


def test_clamp_pulls_out_of_range_to_bounds():
    assert clamp_score(-3) == 0.0
    assert clamp_score(100) == 10.0
    assert clamp_score(float("inf")) == 10.0
    assert clamp_score(float("-inf")) == 0.0


def test_clamp_is_idempotent():
    for value in [-50, -0.1, 0, 3.3, 10, 10.01, 1e9, "abc", None]:
        once = clamp_score(value)
        assert clamp_score(once) == once


def test_clamp_coerces_corrupt_input_to_zero():
    assert clamp_score(None) == 0.0
    assert clamp_score("n/a") == 0.0
    assert clamp_score(float("nan")) == 0.0
    assert clamp_score([7]) == 0.0
    assert clamp_score(True) == 0.0


def test_clamp_parses_numeric_strings():
    """Form posts arrive as text."""
    assert clamp_score("7.5") == 7.5
    assert clamp_score(" 12 ") == 10.0


def test_clamp_logs_a_warning_when_it_changes_a_value(caplog):
    with caplog.at_level(logging.WARNING, logger="ozeki.reading.scoring"):
        clamp_score(100, "story_reading")
        clamp_score("oops", "comprehension")
        clamp_score(4)
    messages = [r.getMessage() for r in caplog.records]
    assert len(messages) == 2
    assert "story_reading" in messages[0]
    assert "comprehension" in messages[1]


# ── composite_average ────────────────────────────────────────────────

def test_composite_is_plain_mean():
    scores = ReadingDomainScores(1, 2, 3, 4, 5, 6)
    assert composite_average(scores) == pytest.approx(3.5)
    assert scores.composite == pytest.approx(3.5)


def test_composite_is_not_rounded():
    scores = ReadingDomainScores(1, 0, 0, 0, 0, 0)
    assert composite_average(scores) == pytest.approx(1 / 6)


def test_composite_stays_within_bounds():
    extremes = [
        ReadingDomainScores.from_values(),
        ReadingDomainScores.from_values(**{k: 10 for k in ReadingDomainScores().as_dict()}),
        ReadingDomainScores.from_values(letter_names=50, comprehension=-5),
    ]
    for scores in extremes:
        assert 0 <= composite_average(scores) <= 10


def test_from_values_clamps_and_defaults_missing_fields():
    scores = ReadingDomainScores.from_values(letter_names=12, letter_sounds=-1, real_words=4)
    assert scores.letter_names == 10.0
    assert scores.letter_sounds == 0.0
    assert scores.real_words == 4.0
    assert scores.comprehension == 0.0


def test_from_values_rejects_unknown_domain():
    with pytest.raises(TypeError):
        ReadingDomainScores.from_values(spelling=3)


def test_constructor_clamps_and_coerces_directly():
    high = ReadingDomainScores(letter_names=100)
    assert high.letter_names == 10.0
    assert 0 <= composite_average(high) <= 10

    corrupt = ReadingDomainScores(letter_names=None, comprehension="n/a", real_words=-3)
    assert corrupt.values() == [0.0] * 6
    assert composite_average(corrupt) == 0.0


def test_constructor_keeps_equality_with_from_values():
    assert ReadingDomainScores(story_reading=12) == ReadingDomainScores.from_values(story_reading=10)


# ── classification ───────────────────────────────────────────────────

@pytest.mark.parametrize("average,expected", [
    (0.0, ReadingLevel.NON_READER),
    (1.999, ReadingLevel.NON_READER),
    (2.0, ReadingLevel.EMERGING),
    (3.9, ReadingLevel.EMERGING),
    (4.0, ReadingLevel.DEVELOPING),
    (6.0, ReadingLevel.TRANSITIONAL),
    (7.999, ReadingLevel.TRANSITIONAL),
    (8.0, ReadingLevel.FLUENT),
    (10.0, ReadingLevel.FLUENT),
])
def test_classify_boundaries(average, expected):
    assert classify_average(average) == expected


def test_classify_clamps_defensively():
    assert classify_average(-1) == ReadingLevel.NON_READER
    assert classify_average(42) == ReadingLevel.FLUENT
    assert classify_average("garbage") == ReadingLevel.NON_READER


def test_classify_is_monotonic():
    averages = [i / 100 for i in range(0, 1001)]
    ordinals = [level_ordinal(classify_average(a)) for a in averages]
    assert ordinals == sorted(ordinals)


def test_classify_scores_matches_classify_average(make_scores):
    for value in [0, 1.5, 2, 4.5, 6, 7.99, 8, 10]:
        scores = make_scores(value)
        assert classify_scores(scores) == classify_average(composite_average(scores))


def test_classify_scores_uses_composite_not_single_domain():
    scores = ReadingDomainScores(10, 10, 0, 0, 0, 0)  # composite 3.33
    assert classify_scores(scores) == ReadingLevel.EMERGING


# ── ReadingLevel ordering ────────────────────────────────────────────

def test_levels_have_explicit_ordinals():
    assert [level_ordinal(lvl) for lvl in ReadingLevel.ordered()] == [0, 1, 2, 3, 4]
    assert [lvl.label for lvl in ReadingLevel.ordered()] == [
        "Non-Reader", "Emerging", "Developing", "Transitional", "Fluent",
    ]


def test_level_comparisons_follow_ordinal():
    assert ReadingLevel.NON_READER < ReadingLevel.EMERGING < ReadingLevel.FLUENT
    assert ReadingLevel.FLUENT >= ReadingLevel.TRANSITIONAL
    assert max(ReadingLevel) == ReadingLevel.FLUENT


def test_compare_levels():
    assert compare_levels(ReadingLevel.EMERGING, ReadingLevel.FLUENT) == 1
    assert compare_levels(ReadingLevel.FLUENT, ReadingLevel.EMERGING) == -1
    assert compare_levels(ReadingLevel.DEVELOPING, ReadingLevel.DEVELOPING) == 0


def test_level_from_label():
    assert ReadingLevel.from_label("non-reader") == ReadingLevel.NON_READER
    assert ReadingLevel.from_label("Fluent") == ReadingLevel.FLUENT
    with pytest.raises(ValueError):
        ReadingLevel.from_label("Advanced")


# ── round_percent ────────────────────────────────────────────────────

def test_round_percent_one_decimal():
    assert round_percent(1, 3) == 33.3
    assert round_percent(2, 3) == 66.7
    assert round_percent(2, 10) == 20.0


def test_round_percent_rounds_halves_up():
    assert round_percent(1, 16) == 6.3  # 6.25
    assert round_percent(1, 8) == 12.5


def test_round_percent_zero_total():
    assert round_percent(0, 0) == 0.0


# ── assess_learner ───────────────────────────────────────────────────

def test_assess_learner(make_scores):
    result = assess_learner(make_scores(6.5))
    assert result.composite == pytest.approx(6.5)
    assert result.level == ReadingLevel.TRANSITIONAL
    assert result.rule_version == RULE_VERSION
    data = result.to_dict()
    assert data["level"] == "Transitional"
    assert data["ordinal"] == 3
    assert set(data["scores"]) == {
        "letter_names", "letter_sounds", "real_words",
        "made_up_words", "story_reading", "comprehension",
    }
