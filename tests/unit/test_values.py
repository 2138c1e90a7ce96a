"""
Unit tests for value markers and ratio helpers.

A zero denominator must never leak out as 0, NaN or infinity.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from insight_engine.metrics.values import (
    NO_REVIEW_DATA,
    UNDEFINED,
    capped_share,
    is_undefined,
    mean,
    money_mean,
    percentage,
    ratio,
    round_half_up,
    round_money,
    weighted_score,
)


class TestMarkers:
    def test_markers_are_distinct(self):
        assert UNDEFINED != NO_REVIEW_DATA
        assert str(UNDEFINED) == "undefined"
        assert str(NO_REVIEW_DATA) == "no_review_data"

    @pytest.mark.parametrize("value", [UNDEFINED, NO_REVIEW_DATA])
    def test_is_undefined_for_markers(self, value):
        assert is_undefined(value)

    @pytest.mark.parametrize("value", [0, 0.0, Decimal("0"), None, "undefined"])
    def test_is_undefined_rejects_plain_values(self, value):
        assert not is_undefined(value)


class TestRounding:
    def test_half_up_not_bankers(self):
        assert round_half_up(2.675, 2) == 2.68
        assert round_half_up(0.125, 2) == 0.13
        assert round_half_up(4.125, 2) == 4.13

    def test_negative_halves_round_away_from_zero(self):
        assert round_half_up(-1.005, 2) == -1.01

    def test_round_money_quantizes_to_cents(self):
        assert round_money(Decimal("93374.995")) == Decimal("93375.00")
        assert round_money(10) == Decimal("10.00")


class TestRatios:
    def test_zero_denominator_is_undefined(self):
        assert ratio(5, 0) is UNDEFINED
        assert percentage(5, 0) is UNDEFINED
        assert percentage(0, Decimal("0")) is UNDEFINED

    def test_percentage(self):
        assert percentage(9000, 90000) == 10.0
        assert percentage(1, 3) == 33.33
        assert percentage(2, 3) == 66.67

    def test_ratio(self):
        assert ratio(1, 8) == 0.13
        assert ratio(Decimal("3"), Decimal("4"), places=1) == 0.8

    def test_mean_of_nothing_is_undefined(self):
        assert mean([]) is UNDEFINED
        assert money_mean([]) is UNDEFINED

    def test_mean(self):
        assert mean([4.5, 4.0, 4.5, 3.5]) == 4.13
        assert money_mean([Decimal("99000"), Decimal("75000")]) == Decimal("87000.00")


class TestCappedShare:
    def test_scales_onto_hundred(self):
        assert capped_share(4.5, 5) == 90.0
        assert capped_share(10, 50) == 20.0

    def test_clamps_both_ends(self):
        assert capped_share(12, 10) == 100.0
        assert capped_share(-5, 10) == 0.0

    def test_rejects_non_positive_cap(self):
        with pytest.raises(ValueError):
            capped_share(1, 0)


class TestWeightedScore:
    WEIGHTS = {"a": 0.5, "b": 0.3, "c": 0.2}

    def test_all_defined(self):
        assert weighted_score({"a": 100, "b": 50, "c": 0}, self.WEIGHTS) == 65.0

    def test_renormalize_drops_undefined_components(self):
        score = weighted_score({"a": 100, "b": UNDEFINED, "c": 50}, self.WEIGHTS)
        # (0.5 * 100 + 0.2 * 50) / 0.7
        assert score == 85.71

    def test_undefined_policy_propagates(self):
        score = weighted_score(
            {"a": 100, "b": NO_REVIEW_DATA, "c": 50}, self.WEIGHTS, policy="undefined"
        )
        assert score is UNDEFINED

    def test_nothing_defined_is_undefined(self):
        assert weighted_score({"a": UNDEFINED}, self.WEIGHTS) is UNDEFINED
