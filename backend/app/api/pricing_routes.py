"""
Pricing API routes

POST /api/pricing/quote            — full retail quote for a framing job
GET  /api/pricing/markup-brackets  — active wholesale → multiplier table
POST /api/pricing/wholesale-order  — moulding feet / mat board to order
"""
import time
import logging

from fastapi import APIRouter, HTTPException

from app.models.pricing_schema import QuoteRequest, QuoteResponse, WholesaleOrderRequest
from app.services import pricing_config
from app.services.markup_brackets import brackets_as_dicts
from app.services.perf_monitor import tracker
from app.services.pricing_engine import default_engine
from app.services.pricing_errors import PricingError
from app.services.wholesale_order import calculate_profitability, calculate_wholesale_order

router = APIRouter(prefix="/api/pricing", tags=["Pricing"])
logger = logging.getLogger("framing-api.pricing-routes")


@router.post("/quote", response_model=QuoteResponse, response_model_exclude_none=True)
async def quote(req: QuoteRequest):
    """Price frames, mats, glass, backing, labor and extras; tax at the requested or default rate."""
    engine = default_engine()
    tax_rate = req.tax_rate if req.tax_rate is not None else pricing_config.DEFAULT_TAX_RATE
    start = time.perf_counter()
    try:
        breakdown = engine.calculate_order_total(
            frames=[f.to_record() for f in req.frames],
            mats=[m.to_record() for m in req.mats],
            glass=req.glass.to_record() if req.glass else None,
            services=[s.to_record() for s in req.services],
            misc_charges=[c.to_record() for c in req.misc_charges],
            dimensions=req.dimensions.to_record(),
            tax_rate=tax_rate,
            discount=req.discount.to_record() if req.discount else None,
            backing_price_per_square_inch=req.backing_price_per_square_inch,
        )
    except PricingError as e:
        tracker.record_error("quote")
        logger.warning(f"Quote rejected: {e}", extra={"operation": "quote"})
        raise HTTPException(status_code=422, detail=str(e))

    duration_ms = (time.perf_counter() - start) * 1000
    tracker.record_success("quote", duration_ms)
    logger.info(
        "quote priced",
        extra={
            "operation": "quote",
            "quote_total": breakdown.total,
            "frame_count": len(req.frames),
            "mat_count": len(req.mats),
            "duration_ms": round(duration_ms, 3),
        },
    )

    payload = breakdown.to_dict(include_line_items=req.include_wholesale)
    if req.include_wholesale:
        payload["profitability"] = calculate_profitability(breakdown)
    return payload


@router.get("/markup-brackets")
async def markup_brackets():
    return {"brackets": brackets_as_dicts(default_engine().markup_brackets)}


@router.post("/wholesale-order")
async def wholesale_order(req: WholesaleOrderRequest):
    """Material purchase list for a job (admin)."""
    start = time.perf_counter()
    try:
        order = calculate_wholesale_order(
            frames=[f.to_record() for f in req.frames],
            mats=[m.to_record() for m in req.mats],
            dimensions=req.dimensions.to_record(),
        )
    except PricingError as e:
        tracker.record_error("wholesale_order")
        logger.warning(f"Wholesale order rejected: {e}", extra={"operation": "wholesale_order"})
        raise HTTPException(status_code=422, detail=str(e))

    tracker.record_success("wholesale_order", (time.perf_counter() - start) * 1000)
    return order
