"""Value markers and ratio helpers shared by every metric family.

A zero denominator never produces 0, NaN or infinity: it produces the
``UNDEFINED`` marker. Missing review data is a separate ``NO_REVIEW_DATA``
sentinel so callers can tell "no reviews" apart from "undefined ratio".
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Mapping, Union


class UndefinedRatio(str, Enum):
    """Marker for a ratio whose denominator is zero."""

    UNDEFINED = "undefined"

    def __str__(self) -> str:
        return self.value


class NoReviewData(str, Enum):
    """Sentinel for rating metrics of an employee without reviews."""

    NO_REVIEW_DATA = "no_review_data"

    def __str__(self) -> str:
        return self.value


UNDEFINED = UndefinedRatio.UNDEFINED
NO_REVIEW_DATA = NoReviewData.NO_REVIEW_DATA

RatioValue = Union[float, UndefinedRatio]
RatingValue = Union[float, NoReviewData]
MoneyValue = Union[Decimal, UndefinedRatio]

Number = Union[int, float, Decimal]

CENT = Decimal("0.01")


def is_undefined(value: object) -> bool:
    """True for the ``UNDEFINED`` and ``NO_REVIEW_DATA`` markers."""
    return isinstance(value, (UndefinedRatio, NoReviewData))


def round_half_up(value: Number, places: int = 2) -> float:
    """Round like SQL ``ROUND``: halves go away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_money(value: Number) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def ratio(numerator: Number, denominator: Number, places: int = 2) -> RatioValue:
    if denominator == 0:
        return UNDEFINED
    return round_half_up(Decimal(str(numerator)) / Decimal(str(denominator)), places)


def percentage(numerator: Number, denominator: Number, places: int = 2) -> RatioValue:
    """``numerator / denominator * 100`` or ``UNDEFINED``."""
    if denominator == 0:
        return UNDEFINED
    value = Decimal(str(numerator)) * 100 / Decimal(str(denominator))
    return round_half_up(value, places)


def mean(values: Iterable[Number], places: int = 2) -> RatioValue:
    items = [Decimal(str(v)) for v in values]
    if not items:
        return UNDEFINED
    return round_half_up(sum(items) / len(items), places)


def money_mean(values: Iterable[Decimal]) -> MoneyValue:
    items = list(values)
    if not items:
        return UNDEFINED
    return round_money(sum(items, Decimal("0")) / len(items))


def capped_share(value: Number, cap: Number) -> float:
    """Scale ``value`` against ``cap`` onto 0-100, clamped at both ends."""
    if cap <= 0:
        raise ValueError(f"cap must be positive, got {cap}")
    share = Decimal(str(value)) / Decimal(str(cap))
    share = max(Decimal("0"), min(Decimal("1"), share))
    return float(share * 100)


def weighted_score(
    components: Mapping[str, Union[float, UndefinedRatio, NoReviewData]],
    weights: Mapping[str, float],
    policy: str = "renormalize",
    places: int = 2,
) -> RatioValue:
    """Weighted sum of 0-100 sub-scores.

    ``policy="renormalize"`` drops undefined components and rescales the
    remaining weights; ``policy="undefined"`` returns ``UNDEFINED`` as soon as
    one component is undefined.
    """
    defined = {name: value for name, value in components.items() if not is_undefined(value)}
    if policy == "undefined" and len(defined) != len(components):
        return UNDEFINED

    total_weight = sum(Decimal(str(weights[name])) for name in defined)
    if total_weight == 0:
        return UNDEFINED

    weighted = sum(
        Decimal(str(weights[name])) * Decimal(str(value)) for name, value in defined.items()
    )
    return round_half_up(weighted / total_weight, places)
