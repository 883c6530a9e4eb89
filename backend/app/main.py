"""
Framing Pricing API v1.0
FastAPI service exposing the custom-framing pricing engine to the POS front
end, the invoice renderer and order creation.
"""
import os
import time
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.pricing_routes import router as pricing_router
from app.services import pricing_config
from app.services.logging_config import setup_logging
from app.services.middleware import RequestTimingMiddleware, SecurityHeadersMiddleware
from app.services.perf_monitor import tracker as perf_tracker

# .env in dev; no-op when the file is missing
load_dotenv()

_log_level = os.getenv("LOG_LEVEL", "INFO")
_json_logs = os.getenv("LOG_FORMAT", "json").lower() != "text"
setup_logging(level=_log_level, json_output=_json_logs)
logger = logging.getLogger("framing-api")

_PROCESS_START = time.monotonic()

app = FastAPI(
    title="Framing Pricing API",
    version=pricing_config.SERVICE_VERSION,
    description="Retail pricing for custom picture framing: frame, mat, glass, backing, labor",
)

_cors_default = "http://localhost:3000,http://localhost:5173"
cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", _cors_default).split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
)
app.add_middleware(SecurityHeadersMiddleware)
# Request timing + X-Request-ID must be outermost so it wraps all other middleware
app.add_middleware(RequestTimingMiddleware)

app.include_router(pricing_router)

logger.info(
    f"Pricing API started (default tax rate {pricing_config.DEFAULT_TAX_RATE:.4f}, "
    f"backing ${pricing_config.DEFAULT_BACKING_PRICE_PER_SQIN:.4f}/sq in)"
)


@app.get("/health")
async def health_check():
    return {
        "status": "active",
        "version": pricing_config.SERVICE_VERSION,
        "default_tax_rate": pricing_config.DEFAULT_TAX_RATE,
    }


@app.get("/metrics")
async def metrics():
    """Quote throughput, per-operation timings and error counts from the in-process tracker."""
    snapshot = perf_tracker.get_metrics()
    return {
        "uptime_seconds": round(time.monotonic() - _PROCESS_START, 1),
        **snapshot,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=True)
