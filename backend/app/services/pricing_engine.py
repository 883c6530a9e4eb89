"""
PricingEngine — retail pricing for custom picture framing.

Covers:
  - Dollar-bracket markup on wholesale cost (shared by frame and mat)
  - Frame moulding by united inches, chop vs. join, nested frames
  - Mat border area, multi-layer / reveal composition
  - Glass by glazed area with premium (conservation / museum) escalation
  - Backing board with area discount and minimum charge
  - Flat labor by finished-size tier
  - Order rollup: special services, misc charges, discount, tax

All monetary values are USD, all lengths inches. The engine is pure: an
instance holds only configuration fixed at construction, and every call is
independent of every other call.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from app.services import pricing_config as cfg_defaults
from app.services.framing_records import (
    ComponentQuote,
    Dimension,
    Discount,
    FrameLayer,
    GlassSpec,
    MatLayer,
    MiscCharge,
    PriceBreakdown,
    PriceUnit,
    SpecialService,
    require_non_negative_dimension,
    require_non_negative_price,
    require_positive_dimension,
)
from app.services.markup_brackets import (
    DEFAULT_MARKUP_BRACKETS,
    resolve_markup,
    validate_bracket_table,
)
from app.services.perf_monitor import timed
from app.services.pricing_errors import ConfigurationError, InvalidInputError

logger = logging.getLogger("framing-api.pricing")

_MATERIAL_COMPONENTS = ("frame", "mat", "glass", "backing")


def _round_currency(value: float) -> float:
    return round(value, 2)


def _require_finite(quote: ComponentQuote) -> ComponentQuote:
    """Sizes or prices large enough to overflow float arithmetic are rejected."""
    if not all(math.isfinite(v) for v in (quote.measure, quote.wholesale_cost, quote.retail_price)):
        raise InvalidInputError(
            f"{quote.component} price is not a finite amount for the given size and unit price"
        )
    return quote


def _positive_setting(cfg: Dict[str, Any], key: str, default: float) -> float:
    value = float(cfg.get(key, default))
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"Pricing setting '{key}' must be > 0, got {value}")
    return value


def _tier_table(rows: Sequence[Tuple[float, float]]) -> Tuple[Tuple[float, float], ...]:
    """Threshold tables are always walked largest threshold first."""
    return tuple(sorted(((float(t), float(v)) for t, v in rows), reverse=True))


class PricingEngine:
    """
    Retail pricing engine for frame, mat, glass, backing and labor.

    ``pricing_config`` keys (all optional, defaults in pricing_config.py):
        markup_brackets, join_premium, glass_markup,
        glass_premium_threshold_per_sqin, glass_premium_multiplier,
        backing_markup, backing_minimum_charge, backing_area_factors,
        backing_price_per_sqin, labor_base_rate, labor_rate_tiers
    """

    def __init__(self, pricing_config: Optional[Dict[str, Any]] = None) -> None:
        cfg = pricing_config or {}

        self.markup_brackets = validate_bracket_table(
            cfg.get("markup_brackets", DEFAULT_MARKUP_BRACKETS)
        )

        # Frame
        self.join_premium: float = _positive_setting(cfg, "join_premium", cfg_defaults.FRAME_JOIN_PREMIUM)

        # Glass
        self.glass_markup: float = _positive_setting(cfg, "glass_markup", cfg_defaults.GLASS_MARKUP)
        self.glass_premium_threshold: float = _positive_setting(
            cfg, "glass_premium_threshold_per_sqin", cfg_defaults.GLASS_PREMIUM_THRESHOLD_PER_SQIN
        )
        self.glass_premium_multiplier: float = _positive_setting(
            cfg, "glass_premium_multiplier", cfg_defaults.GLASS_PREMIUM_MULTIPLIER
        )

        # Backing
        self.backing_markup: float = _positive_setting(cfg, "backing_markup", cfg_defaults.BACKING_MARKUP)
        self.backing_minimum_charge: float = require_non_negative_price(
            cfg.get("backing_minimum_charge", cfg_defaults.BACKING_MINIMUM_CHARGE),
            "backing minimum charge",
        )
        self.backing_area_factors = _tier_table(
            cfg.get("backing_area_factors", cfg_defaults.BACKING_AREA_FACTORS)
        )
        self.backing_price_per_sqin: float = require_non_negative_price(
            cfg.get("backing_price_per_sqin", cfg_defaults.DEFAULT_BACKING_PRICE_PER_SQIN),
            "backing price per sq in",
        )

        # Labor
        self.labor_base_rate: float = require_non_negative_price(
            cfg.get("labor_base_rate", cfg_defaults.LABOR_BASE_RATE), "labor base rate"
        )
        self.labor_rate_tiers = _tier_table(
            cfg.get("labor_rate_tiers", cfg_defaults.LABOR_RATE_TIERS)
        )

    # ------------------------------------------------------------------
    # Markup
    # ------------------------------------------------------------------

    def calculate_markup(self, wholesale_cost: float) -> float:
        """Sliding-scale multiplier for a wholesale dollar cost."""
        return resolve_markup(wholesale_cost, self.markup_brackets)

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def quote_frame(self, frame: FrameLayer, width: float, height: float) -> ComponentQuote:
        """
        Price one frame layer wrapping a ``width`` x ``height`` opening.

            united_inches = 2 * (width + height)
            wholesale     = united_inches / 12 * price_per_foot   (* join premium)
            retail        = wholesale * bracket multiplier
        """
        w = require_positive_dimension(width, "frame width")
        h = require_positive_dimension(height, "frame height")

        united_inches = 2.0 * (w + h)
        # Multiply before dividing so whole-foot lengths stay exact at bracket edges
        wholesale = united_inches * frame.wholesale_price_per_foot / 12.0
        if frame.pricing_method == "join":
            wholesale *= self.join_premium

        multiplier = self.calculate_markup(wholesale)
        return _require_finite(ComponentQuote(
            component="frame",
            name=frame.name,
            measure=united_inches,
            measure_unit="united_inches",
            wholesale_cost=wholesale,
            multiplier=multiplier,
            retail_price=wholesale * multiplier,
        ))

    def calculate_frame_price(self, frame: FrameLayer, width: float, height: float) -> float:
        return self.quote_frame(frame, width, height).retail_price

    # ------------------------------------------------------------------
    # Mat
    # ------------------------------------------------------------------

    def quote_mat(self, mat: MatLayer, width: float, height: float) -> ComponentQuote:
        """
        Price one mat layer around a ``width`` x ``height`` window. Only the
        border is costed; the window cut-out is excluded.
        """
        w = require_positive_dimension(width, "mat opening width")
        h = require_positive_dimension(height, "mat opening height")

        border = mat.effective_width
        outer_w = w + 2 * border
        outer_h = h + 2 * border
        mat_area = outer_w * outer_h - w * h

        wholesale = mat_area * mat.wholesale_price_per_square_inch
        multiplier = self.calculate_markup(wholesale)
        return _require_finite(ComponentQuote(
            component="mat",
            name=mat.name,
            measure=mat_area,
            measure_unit="square_inches",
            wholesale_cost=wholesale,
            multiplier=multiplier,
            retail_price=wholesale * multiplier,
        ))

    def calculate_mat_price(self, mat: MatLayer, width: float, height: float) -> float:
        return self.quote_mat(mat, width, height).retail_price

    # ------------------------------------------------------------------
    # Glass
    # ------------------------------------------------------------------

    def quote_glass(
        self,
        glass: GlassSpec,
        width: float,
        height: float,
        total_mat_width: float = 0.0,
    ) -> ComponentQuote:
        """Glazing over the artwork plus the full mat stack."""
        w = require_positive_dimension(width, "artwork width")
        h = require_positive_dimension(height, "artwork height")
        m = require_non_negative_dimension(total_mat_width, "total mat width")

        glass_area = (w + 2 * m) * (h + 2 * m)
        if glass.unit is PriceUnit.PER_SQUARE_FOOT:
            wholesale = glass_area / cfg_defaults.SQUARE_INCHES_PER_SQUARE_FOOT * glass.unit_price
        else:
            wholesale = glass_area * glass.unit_price

        multiplier = self.glass_markup
        if glass.price_per_square_inch >= self.glass_premium_threshold:
            multiplier *= self.glass_premium_multiplier

        return _require_finite(ComponentQuote(
            component="glass",
            name=glass.name,
            measure=glass_area,
            measure_unit="square_inches",
            wholesale_cost=wholesale,
            multiplier=multiplier,
            retail_price=wholesale * multiplier,
        ))

    def calculate_glass_price(
        self,
        glass: GlassSpec,
        width: float,
        height: float,
        total_mat_width: float = 0.0,
    ) -> float:
        return self.quote_glass(glass, width, height, total_mat_width).retail_price

    # ------------------------------------------------------------------
    # Backing
    # ------------------------------------------------------------------

    def _backing_area_factor(self, area: float) -> float:
        for threshold, factor in self.backing_area_factors:
            if area > threshold:
                return factor
        return 1.0

    def quote_backing(
        self,
        width: float,
        height: float,
        total_mat_width: float = 0.0,
        price_per_sq_inch: Optional[float] = None,
    ) -> ComponentQuote:
        """Backing board; large boards get a wholesale factor, never below the minimum charge."""
        w = require_positive_dimension(width, "artwork width")
        h = require_positive_dimension(height, "artwork height")
        m = require_non_negative_dimension(total_mat_width, "total mat width")
        unit_price = (
            self.backing_price_per_sqin
            if price_per_sq_inch is None
            else require_non_negative_price(price_per_sq_inch, "backing price per sq in")
        )

        backing_area = (w + 2 * m) * (h + 2 * m)
        wholesale = backing_area * unit_price
        multiplier = self._backing_area_factor(backing_area) * self.backing_markup
        retail = max(wholesale * multiplier, self.backing_minimum_charge)

        return _require_finite(ComponentQuote(
            component="backing",
            name="Backing board",
            measure=backing_area,
            measure_unit="square_inches",
            wholesale_cost=wholesale,
            multiplier=multiplier,
            retail_price=retail,
        ))

    def calculate_backing_price(
        self,
        width: float,
        height: float,
        total_mat_width: float = 0.0,
        price_per_sq_inch: Optional[float] = None,
    ) -> float:
        return self.quote_backing(width, height, total_mat_width, price_per_sq_inch).retail_price

    # ------------------------------------------------------------------
    # Labor
    # ------------------------------------------------------------------

    def quote_labor(self, width: float, height: float) -> ComponentQuote:
        """Flat labor rate chosen by the finished piece's united inches."""
        united_inches = Dimension(width, height).united_inches

        rate = self.labor_base_rate
        for threshold, tier_rate in self.labor_rate_tiers:
            if united_inches > threshold:
                rate = tier_rate
                break

        return ComponentQuote(
            component="labor",
            name="Labor",
            measure=united_inches,
            measure_unit="united_inches",
            wholesale_cost=0.0,
            multiplier=1.0,
            retail_price=rate,
        )

    def calculate_labor_price(self, width: float, height: float) -> float:
        return self.quote_labor(width, height).retail_price

    # ------------------------------------------------------------------
    # Order rollup
    # ------------------------------------------------------------------

    @timed
    def calculate_order_total(
        self,
        frames: Sequence[FrameLayer],
        mats: Sequence[MatLayer],
        glass: Optional[GlassSpec],
        services: Sequence[SpecialService],
        misc_charges: Sequence[MiscCharge],
        dimensions: Union[Dimension, Tuple[float, float]],
        tax_rate: Optional[float],
        discount: Optional[Discount] = None,
        *,
        backing_price_per_square_inch: Optional[float] = None,
    ) -> PriceBreakdown:
        """
        Full quote for one framing job.

        Mats are listed innermost first, frames innermost first. Glass and
        backing cover the artwork plus the whole mat stack; labor is tiered on
        the matted (pre-frame) size; frames wrap the matted size and each
        other. Percentage misc charges apply to frame + mat + glass +
        services. The discount comes off the subtotal before tax.
        """
        if tax_rate is None:
            raise ConfigurationError("tax_rate is required to total an order")
        rate = float(tax_rate)
        if math.isnan(rate) or not 0.0 <= rate <= 1.0:
            raise ConfigurationError(f"tax_rate must be a fraction between 0 and 1, got {tax_rate}")

        artwork = dimensions if isinstance(dimensions, Dimension) else Dimension(*dimensions)

        line_items: List[ComponentQuote] = []

        # Mats, innermost → outermost
        size = artwork
        mat_quotes = []
        for mat in mats:
            mat_quotes.append(self.quote_mat(mat, size.width, size.height))
            size = size.grown_by(mat.effective_width)
        matted = size
        total_mat_width = sum(mat.effective_width for mat in mats)

        glass_quote = (
            self.quote_glass(glass, artwork.width, artwork.height, total_mat_width)
            if glass is not None
            else None
        )
        backing_quote = self.quote_backing(
            artwork.width, artwork.height, total_mat_width, backing_price_per_square_inch
        )
        labor_quote = self.quote_labor(matted.width, matted.height)

        # Frames, innermost → outermost
        frame_quotes = []
        for frame in frames:
            frame_quotes.append(self.quote_frame(frame, size.width, size.height))
            size = size.grown_by(frame.moulding_width_inches)

        service_quotes = [
            ComponentQuote("service", s.name, 0.0, "flat", 0.0, 1.0, s.price)
            for s in services
        ]

        frame_total = _round_currency(sum(q.retail_price for q in frame_quotes))
        mat_total = _round_currency(sum(q.retail_price for q in mat_quotes))
        glass_total = _round_currency(glass_quote.retail_price) if glass_quote else 0.0
        backing_total = _round_currency(backing_quote.retail_price)
        labor_total = _round_currency(labor_quote.retail_price)
        services_total = _round_currency(sum(q.retail_price for q in service_quotes))

        percentage_base = frame_total + mat_total + glass_total + services_total
        misc_quotes = []
        for charge in misc_charges:
            if charge.type == "percentage":
                amount = percentage_base * charge.amount / 100.0
                misc_quotes.append(
                    ComponentQuote("misc", charge.name, charge.amount, "percent", 0.0, 1.0, amount)
                )
            else:
                misc_quotes.append(
                    ComponentQuote("misc", charge.name, 0.0, "flat", 0.0, 1.0, charge.amount)
                )
        misc_total = _round_currency(sum(q.retail_price for q in misc_quotes))

        gross_subtotal = (
            frame_total + mat_total + glass_total + backing_total
            + labor_total + services_total + misc_total
        )

        discount_total = 0.0
        if discount is not None:
            if discount.type == "percentage":
                discount_total = gross_subtotal * discount.amount / 100.0
            else:
                discount_total = discount.amount
            discount_total = _round_currency(min(discount_total, gross_subtotal))

        subtotal = _round_currency(max(gross_subtotal - discount_total, 0.0))
        tax = _round_currency(subtotal * rate)
        total = _round_currency(subtotal + tax)
        if not math.isfinite(total):
            raise InvalidInputError(f"Order total overflows: subtotal={subtotal} tax={tax}")

        line_items.extend(frame_quotes)
        line_items.extend(mat_quotes)
        if glass_quote is not None:
            line_items.append(glass_quote)
        line_items.append(backing_quote)
        line_items.append(labor_quote)
        line_items.extend(service_quotes)
        line_items.extend(misc_quotes)

        wholesale_total = _round_currency(
            sum(q.wholesale_cost for q in line_items if q.component in _MATERIAL_COMPONENTS)
        )

        logger.debug(
            f"Quote {artwork.width}x{artwork.height}: {len(frames)} frame(s), {len(mats)} mat(s), "
            f"subtotal={subtotal:.2f} tax={tax:.2f} total={total:.2f}"
        )

        return PriceBreakdown(
            frame_total=frame_total,
            mat_total=mat_total,
            glass_total=glass_total,
            backing_total=backing_total,
            labor_total=labor_total,
            services_total=services_total,
            misc_total=misc_total,
            discount_total=discount_total,
            subtotal=subtotal,
            tax_rate=rate,
            tax=tax,
            total=total,
            wholesale_total=wholesale_total,
            line_items=line_items,
        )


# ---------------------------------------------------------------------------
# Module-level API backed by a default-configured engine
# ---------------------------------------------------------------------------

_DEFAULT_ENGINE = PricingEngine()


def default_engine() -> PricingEngine:
    return _DEFAULT_ENGINE


def calculate_markup(wholesale_cost: float) -> float:
    return _DEFAULT_ENGINE.calculate_markup(wholesale_cost)


def calculate_frame_price(frame: FrameLayer, width: float, height: float) -> float:
    return _DEFAULT_ENGINE.calculate_frame_price(frame, width, height)


def calculate_mat_price(mat: MatLayer, width: float, height: float) -> float:
    return _DEFAULT_ENGINE.calculate_mat_price(mat, width, height)


def calculate_glass_price(glass: GlassSpec, width: float, height: float, total_mat_width: float = 0.0) -> float:
    return _DEFAULT_ENGINE.calculate_glass_price(glass, width, height, total_mat_width)


def calculate_backing_price(
    width: float,
    height: float,
    total_mat_width: float = 0.0,
    price_per_sq_inch: Optional[float] = None,
) -> float:
    return _DEFAULT_ENGINE.calculate_backing_price(width, height, total_mat_width, price_per_sq_inch)


def calculate_labor_price(width: float, height: float) -> float:
    return _DEFAULT_ENGINE.calculate_labor_price(width, height)


def calculate_order_total(
    frames: Sequence[FrameLayer],
    mats: Sequence[MatLayer],
    glass: Optional[GlassSpec],
    services: Sequence[SpecialService],
    misc_charges: Sequence[MiscCharge],
    dimensions: Union[Dimension, Tuple[float, float]],
    tax_rate: Optional[float],
    discount: Optional[Discount] = None,
    *,
    backing_price_per_square_inch: Optional[float] = None,
) -> PriceBreakdown:
    return _DEFAULT_ENGINE.calculate_order_total(
        frames, mats, glass, services, misc_charges, dimensions, tax_rate, discount,
        backing_price_per_square_inch=backing_price_per_square_inch,
    )
