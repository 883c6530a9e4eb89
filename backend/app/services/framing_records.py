"""
Framing job records consumed and produced by the pricing engine.

Every input record validates itself on construction and raises a typed
PricingError, so nothing reaches the engine with a negative size or price.
All records are frozen; a quote never mutates its inputs.
"""

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List

from app.services.pricing_config import PRICING_METHODS, SQUARE_INCHES_PER_SQUARE_FOOT
from app.services.pricing_errors import (
    ConfigurationError,
    InvalidDimensionError,
    InvalidPriceError,
)

CHARGE_TYPES = ("fixed", "percentage")


def require_positive_dimension(value: float, label: str) -> float:
    v = float(value)
    if not math.isfinite(v) or v <= 0:
        raise InvalidDimensionError(f"{label} must be > 0 inches, got {value}")
    return v


def require_non_negative_dimension(value: float, label: str) -> float:
    v = float(value)
    if not math.isfinite(v) or v < 0:
        raise InvalidDimensionError(f"{label} must be >= 0 inches, got {value}")
    return v


def require_non_negative_price(value: float, label: str) -> float:
    v = float(value)
    if not math.isfinite(v) or v < 0:
        raise InvalidPriceError(f"{label} must be >= 0, got {value}")
    return v


class PriceUnit(str, Enum):
    """Unit a catalog area price is quoted in."""
    PER_SQUARE_INCH = "per_square_inch"
    PER_SQUARE_FOOT = "per_square_foot"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Dimension:
    width: float
    height: float

    def __post_init__(self) -> None:
        require_positive_dimension(self.width, "width")
        require_positive_dimension(self.height, "height")

    @property
    def united_inches(self) -> float:
        return self.width + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def grown_by(self, border_inches: float) -> "Dimension":
        """Outer size after adding ``border_inches`` on every side."""
        return Dimension(self.width + 2 * border_inches, self.height + 2 * border_inches)


@dataclass(frozen=True)
class MatLayer:
    """One mat border. ``offset_inches`` is the reveal below the next layer out."""
    width_inches: float
    wholesale_price_per_square_inch: float
    offset_inches: float = 0.0
    name: str = ""

    def __post_init__(self) -> None:
        require_non_negative_dimension(self.width_inches, "mat width")
        require_non_negative_dimension(self.offset_inches, "mat offset")
        require_non_negative_price(self.wholesale_price_per_square_inch, "mat price per sq in")

    @property
    def effective_width(self) -> float:
        return self.width_inches + self.offset_inches


@dataclass(frozen=True)
class FrameLayer:
    wholesale_price_per_foot: float
    pricing_method: str
    moulding_width_inches: float = 0.0
    name: str = ""

    def __post_init__(self) -> None:
        require_non_negative_price(self.wholesale_price_per_foot, "frame price per foot")
        require_non_negative_dimension(self.moulding_width_inches, "moulding width")
        if not self.pricing_method:
            raise ConfigurationError("Frame pricing method is required ('chop' or 'join')")
        if self.pricing_method not in PRICING_METHODS:
            raise ConfigurationError(
                f"Unknown frame pricing method '{self.pricing_method}', expected one of {PRICING_METHODS}"
            )


@dataclass(frozen=True)
class GlassSpec:
    unit_price: float
    unit: PriceUnit
    name: str = ""

    def __post_init__(self) -> None:
        require_non_negative_price(self.unit_price, "glass unit price")
        try:
            unit = PriceUnit(self.unit)
        except ValueError:
            raise ConfigurationError(f"Unknown glass price unit '{self.unit}'")
        # Accept the plain string value as well as the enum member
        object.__setattr__(self, "unit", unit)

    @property
    def price_per_square_inch(self) -> float:
        if self.unit is PriceUnit.PER_SQUARE_FOOT:
            # $64.80/sq ft must compare equal to $0.45/sq in at the premium threshold
            return round(self.unit_price / SQUARE_INCHES_PER_SQUARE_FOOT, 10)
        return self.unit_price


@dataclass(frozen=True)
class SpecialService:
    price: float
    name: str = ""

    def __post_init__(self) -> None:
        require_non_negative_price(self.price, f"service '{self.name}' price")


@dataclass(frozen=True)
class MiscCharge:
    type: str
    amount: float
    name: str = ""

    def __post_init__(self) -> None:
        if self.type not in CHARGE_TYPES:
            raise ConfigurationError(f"Unknown misc charge type '{self.type}'")
        require_non_negative_price(self.amount, f"misc charge '{self.name}' amount")


@dataclass(frozen=True)
class Discount:
    type: str
    amount: float

    def __post_init__(self) -> None:
        if self.type not in CHARGE_TYPES:
            raise ConfigurationError(f"Unknown discount type '{self.type}'")
        require_non_negative_price(self.amount, "discount amount")


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ComponentQuote:
    """Audit line: how one component's retail price was reached."""
    component: str               # frame | mat | glass | backing | labor | service | misc
    name: str
    measure: float               # united inches, sq in, or 0 for flat charges
    measure_unit: str
    wholesale_cost: float
    multiplier: float
    retail_price: float


@dataclass(frozen=True)
class PriceBreakdown:
    frame_total: float
    mat_total: float
    glass_total: float
    backing_total: float
    labor_total: float
    services_total: float
    misc_total: float
    discount_total: float
    subtotal: float
    tax_rate: float
    tax: float
    total: float
    wholesale_total: float = 0.0
    line_items: List[ComponentQuote] = field(default_factory=list)

    @property
    def component_sum(self) -> float:
        return (
            self.frame_total + self.mat_total + self.glass_total + self.backing_total
            + self.labor_total + self.services_total + self.misc_total
        )

    def to_dict(self, include_line_items: bool = True) -> Dict[str, Any]:
        data = asdict(self)
        if not include_line_items:
            data.pop("line_items")
            data.pop("wholesale_total")
        return data
