"""
test_markup_brackets.py — Unit tests for the dollar-bracket markup resolver.

Tests cover:
  - Every bracket of the canonical table, including exact lower boundaries
  - Monotonic non-increasing multiplier as wholesale cost rises
  - Invalid costs (negative, NaN)
  - Table validation: gaps, overlaps, bad start/end, zero multiplier
  - Unresolvable lookups on an unvalidated table with a gap
"""

import math
import pytest

from app.services.markup_brackets import (
    DEFAULT_MARKUP_BRACKETS,
    MarkupBracket,
    brackets_as_dicts,
    resolve_markup,
    validate_bracket_table,
)
from app.services.pricing_engine import PricingEngine, calculate_markup
from app.services.pricing_errors import (
    ConfigurationError,
    InvalidInputError,
    UnresolvableMarkupError,
)


CANONICAL_MULTIPLIERS = {4.0, 3.5, 3.2, 3.0, 2.8, 2.6, 2.4, 2.2}


class TestCanonicalTable:

    @pytest.mark.parametrize("cost,expected", [
        (0.00, 4.0),
        (1.99, 4.0),
        (2.00, 3.5),
        (3.99, 3.5),
        (4.00, 3.2),
        (5.99, 3.2),
        (6.00, 3.0),
        (9.99, 3.0),
        (10.00, 2.8),
        (14.99, 2.8),
        (15.00, 2.6),
        (24.99, 2.6),
        (25.00, 2.4),
        (39.99, 2.4),
        (40.00, 2.2),
        (1_000_000.00, 2.2),
    ])
    def test_bracket_lookup(self, cost, expected):
        assert calculate_markup(cost) == expected

    def test_ten_dollars_is_in_the_2_8_bracket(self):
        """A cost exactly on a boundary belongs to the higher bracket."""
        assert calculate_markup(10.00) == 2.8
        assert calculate_markup(9.999) == 3.0

    def test_between_cents_is_covered(self):
        """1.995 would fall between 1.99 and 2.00 in a closed-interval table."""
        assert calculate_markup(1.995) == 4.0

    def test_monotonic_non_increasing(self):
        costs = [i * 0.25 for i in range(0, 400)]
        multipliers = [calculate_markup(c) for c in costs]
        for prev, nxt in zip(multipliers, multipliers[1:]):
            assert nxt <= prev
        assert set(multipliers) <= CANONICAL_MULTIPLIERS

    def test_default_table_is_valid(self):
        table = validate_bracket_table(DEFAULT_MARKUP_BRACKETS)
        assert isinstance(table, tuple)
        assert len(table) == 8

    def test_brackets_as_dicts_open_upper_bound(self):
        rows = brackets_as_dicts()
        assert rows[0] == {"min_cost": 0.0, "max_cost": 2.0, "multiplier": 4.0}
        assert rows[-1]["max_cost"] is None
        assert rows[-1]["multiplier"] == 2.2


class TestInvalidCosts:

    def test_negative_cost_rejected(self):
        with pytest.raises(InvalidInputError):
            calculate_markup(-0.01)

    def test_nan_cost_rejected(self):
        with pytest.raises(InvalidInputError):
            resolve_markup(float("nan"))

    def test_infinite_cost_rejected(self):
        with pytest.raises(InvalidInputError):
            calculate_markup(math.inf)


class TestTableValidation:

    def test_gap_rejected(self):
        table = (MarkupBracket(0.0, 2.0, 4.0), MarkupBracket(3.0, math.inf, 3.0))
        with pytest.raises(ConfigurationError):
            validate_bracket_table(table)

    def test_overlap_rejected(self):
        table = (MarkupBracket(0.0, 5.0, 4.0), MarkupBracket(4.0, math.inf, 3.0))
        with pytest.raises(ConfigurationError):
            validate_bracket_table(table)

    def test_must_start_at_zero(self):
        with pytest.raises(ConfigurationError):
            validate_bracket_table((MarkupBracket(1.0, math.inf, 3.0),))

    def test_must_be_open_ended(self):
        with pytest.raises(ConfigurationError):
            validate_bracket_table((MarkupBracket(0.0, 100.0, 3.0),))

    def test_empty_table_rejected(self):
        with pytest.raises(ConfigurationError):
            validate_bracket_table(())

    def test_non_positive_multiplier_rejected(self):
        with pytest.raises(ConfigurationError):
            validate_bracket_table((MarkupBracket(0.0, math.inf, 0.0),))

    def test_engine_refuses_gappy_table(self):
        table = (MarkupBracket(0.0, 2.0, 4.0), MarkupBracket(3.0, math.inf, 3.0))
        with pytest.raises(ConfigurationError):
            PricingEngine(pricing_config={"markup_brackets": table})

    def test_unvalidated_gap_is_unresolvable(self):
        table = (MarkupBracket(0.0, 2.0, 4.0), MarkupBracket(3.0, math.inf, 3.0))
        with pytest.raises(UnresolvableMarkupError):
            resolve_markup(2.5, table)

    def test_custom_table_used_by_engine(self):
        table = (MarkupBracket(0.0, 50.0, 2.0), MarkupBracket(50.0, math.inf, 1.5))
        engine = PricingEngine(pricing_config={"markup_brackets": table})
        assert engine.calculate_markup(10.0) == 2.0
        assert engine.calculate_markup(50.0) == 1.5
        # Default module-level table is untouched
        assert calculate_markup(10.0) == 2.8
