"""
Wholesale material requirements and profitability for a framing job.

The purchase side of a quote: how many feet of moulding and how much mat
board to order from the vendor, and what margin the retail quote leaves
after wholesale cost, shop overhead and labor.
"""

import math
import logging
from typing import Any, Dict, Sequence, Tuple, Union

from app.services.framing_records import Dimension, FrameLayer, MatLayer, PriceBreakdown
from app.services.pricing_config import OVERHEAD_PCT
from app.services.pricing_errors import ConfigurationError

logger = logging.getLogger("framing-api.wholesale")


def calculate_wholesale_order(
    frames: Sequence[FrameLayer],
    mats: Sequence[MatLayer],
    dimensions: Union[Dimension, Tuple[float, float]],
) -> Dict[str, Any]:
    """
    Vendor order lines for the job.

    Moulding is bought by the whole foot, so feet needed are rounded up from
    the perimeter. Mat board is bought as the full outer rectangle, window
    included. Sizes accumulate outward exactly as in the retail quote.

    Returns a dict with keys:
        frame_orders          : list of {name, pricing_method, perimeter_inches,
                                 feet_needed, wholesale_cost}
        mat_orders            : list of {name, outer_width, outer_height,
                                 square_inches_needed, wholesale_cost}
        total_wholesale_cost  : float
    """
    artwork = dimensions if isinstance(dimensions, Dimension) else Dimension(*dimensions)

    mat_orders = []
    size = artwork
    for mat in mats:
        outer = size.grown_by(mat.effective_width)
        square_inches = outer.area
        mat_orders.append({
            "name": mat.name,
            "outer_width": outer.width,
            "outer_height": outer.height,
            "square_inches_needed": square_inches,
            "wholesale_cost": round(square_inches * mat.wholesale_price_per_square_inch, 2),
        })
        size = outer

    frame_orders = []
    for frame in frames:
        perimeter = 2.0 * (size.width + size.height)
        feet_needed = math.ceil(perimeter / 12.0)
        frame_orders.append({
            "name": frame.name,
            "pricing_method": frame.pricing_method,
            "perimeter_inches": perimeter,
            "feet_needed": feet_needed,
            "wholesale_cost": round(feet_needed * frame.wholesale_price_per_foot, 2),
        })
        size = size.grown_by(frame.moulding_width_inches)

    total = sum(o["wholesale_cost"] for o in frame_orders) + sum(o["wholesale_cost"] for o in mat_orders)
    return {
        "frame_orders": frame_orders,
        "mat_orders": mat_orders,
        "total_wholesale_cost": round(total, 2),
    }


def calculate_profit_margin(retail_price: float, wholesale_cost: float) -> float:
    """Gross margin as a percentage of retail. 0 when either side is zero."""
    if wholesale_cost == 0 or retail_price <= 0:
        return 0.0
    return (retail_price - wholesale_cost) / retail_price * 100.0


def calculate_profitability(breakdown: PriceBreakdown, overhead_pct: float = OVERHEAD_PCT) -> Dict[str, float]:
    """
    Margin view of a finished quote (admin "wholesale prices" display).

        overhead      = wholesale_total * overhead_pct
        gross_profit  = subtotal - (wholesale_total + overhead + labor)
        margin        = gross_profit / subtotal
        markup        = subtotal / wholesale_total
    """
    if not math.isfinite(overhead_pct) or overhead_pct < 0:
        raise ConfigurationError(f"overhead_pct must be >= 0, got {overhead_pct}")

    wholesale = breakdown.wholesale_total
    overhead = wholesale * overhead_pct
    total_cost = wholesale + overhead + breakdown.labor_total
    gross_profit = breakdown.subtotal - total_cost

    margin = gross_profit / breakdown.subtotal if breakdown.subtotal > 0 else 0.0
    markup = breakdown.subtotal / wholesale if wholesale > 0 else 0.0

    if breakdown.subtotal > 0 and gross_profit < 0:
        logger.warning(
            f"Quote below cost: subtotal={breakdown.subtotal:.2f} total_cost={total_cost:.2f}"
        )

    return {
        "total_wholesale_cost": round(wholesale, 2),
        "overhead_cost": round(overhead, 2),
        "gross_profit": round(gross_profit, 2),
        "gross_profit_margin": round(margin, 4),
        "markup_multiplier": round(markup, 4),
    }
