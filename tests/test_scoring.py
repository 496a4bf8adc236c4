"""Tests for the influence score calculation."""

import math

import pytest

from gitranks.utils.scoring import InfluenceScoreCalculator

BASE = dict(stars=100, forks=25, pr_count=7, issue_count=3, public_repos=15, followers=63)


def test_all_zero_scores_zero():
    assert InfluenceScoreCalculator.calculate(0, 0, 0, 0, 0, 0) == 0.0


def test_known_value():
    # sqrt(100)*5 + sqrt(25)*4 + log2(8)*3 + log2(4)*2 + log2(16)*1.5 + log2(64)*2
    expected = 50 + 20 + 9 + 4 + 6 + 12
    assert InfluenceScoreCalculator.calculate(**BASE) == pytest.approx(expected)


@pytest.mark.parametrize("field", sorted(BASE))
def test_monotonic_in_each_input(field):
    previous = None
    for value in (0, 1, 2, 10, 1000, 10**6):
        score = InfluenceScoreCalculator.calculate(**{**BASE, field: value})
        if previous is not None:
            assert score >= previous
        previous = score


def test_negative_inputs_clamped():
    assert InfluenceScoreCalculator.calculate(-5, -1, -3, -2, -9, -4) == 0.0


def test_popularity_outweighs_activity_at_scale():
    stars_only = InfluenceScoreCalculator.calculate(10_000, 0, 0, 0, 0, 0)
    activity_only = InfluenceScoreCalculator.calculate(0, 0, 10_000, 10_000, 10_000, 10_000)
    assert stars_only == pytest.approx(math.sqrt(10_000) * 5)
    assert stars_only > activity_only
