"""
Sliding-scale markup brackets keyed on wholesale dollar cost.

Higher-cost items get proportionally smaller markup. A table is an ordered
tuple of brackets covering [0, inf) with no gaps or overlaps; each bracket's
lower bound is inclusive and its upper bound exclusive, so a cost sitting
exactly on a boundary resolves to the higher bracket.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from app.services.pricing_errors import (
    ConfigurationError,
    InvalidInputError,
    UnresolvableMarkupError,
)


@dataclass(frozen=True)
class MarkupBracket:
    min_cost: float
    max_cost: float      # exclusive; math.inf for the last bracket
    multiplier: float

    def contains(self, cost: float) -> bool:
        return self.min_cost <= cost < self.max_cost


# ---------------------------------------------------------------------------
# Canonical retail table (USD wholesale → multiplier)
# ---------------------------------------------------------------------------
DEFAULT_MARKUP_BRACKETS: Tuple[MarkupBracket, ...] = (
    MarkupBracket(0.00, 2.00, 4.0),
    MarkupBracket(2.00, 4.00, 3.5),
    MarkupBracket(4.00, 6.00, 3.2),
    MarkupBracket(6.00, 10.00, 3.0),
    MarkupBracket(10.00, 15.00, 2.8),
    MarkupBracket(15.00, 25.00, 2.6),
    MarkupBracket(25.00, 40.00, 2.4),
    MarkupBracket(40.00, math.inf, 2.2),
)


def validate_bracket_table(brackets: Sequence[MarkupBracket]) -> Tuple[MarkupBracket, ...]:
    """
    Check a bracket table is contiguous from 0 to infinity and return it as
    an immutable tuple.

    Raises ConfigurationError on an empty table, a gap, an overlap, a
    bracket with max <= min, or a non-positive multiplier.
    """
    table = tuple(brackets)
    if not table:
        raise ConfigurationError("Markup bracket table is empty")
    if table[0].min_cost != 0.0:
        raise ConfigurationError(
            f"Markup bracket table must start at 0.00, starts at {table[0].min_cost}"
        )
    if not math.isinf(table[-1].max_cost):
        raise ConfigurationError(
            f"Markup bracket table must be open-ended, ends at {table[-1].max_cost}"
        )

    previous_max = 0.0
    for bracket in table:
        if bracket.min_cost != previous_max:
            raise ConfigurationError(
                f"Markup bracket gap/overlap at {previous_max}: next bracket starts at {bracket.min_cost}"
            )
        if bracket.max_cost <= bracket.min_cost:
            raise ConfigurationError(
                f"Markup bracket {bracket.min_cost}-{bracket.max_cost} is empty"
            )
        if bracket.multiplier <= 0:
            raise ConfigurationError(
                f"Markup bracket {bracket.min_cost}-{bracket.max_cost} has non-positive multiplier"
            )
        previous_max = bracket.max_cost
    return table


def resolve_markup(
    wholesale_cost: float,
    brackets: Sequence[MarkupBracket] = DEFAULT_MARKUP_BRACKETS,
) -> float:
    """Return the multiplier of the bracket containing ``wholesale_cost``."""
    cost = float(wholesale_cost)
    if not math.isfinite(cost) or cost < 0:
        raise InvalidInputError(f"Wholesale cost must be a finite amount >= 0, got {wholesale_cost}")

    for bracket in brackets:
        if bracket.contains(cost):
            return bracket.multiplier

    raise UnresolvableMarkupError(
        f"No markup bracket covers wholesale cost {cost:.2f}"
    )


def brackets_as_dicts(brackets: Sequence[MarkupBracket] = DEFAULT_MARKUP_BRACKETS) -> list:
    """JSON-friendly view; the open upper bound is reported as None."""
    return [
        {
            "min_cost": b.min_cost,
            "max_cost": None if math.isinf(b.max_cost) else b.max_cost,
            "multiplier": b.multiplier,
        }
        for b in brackets
    ]
