"""
Pricing configuration — single source of truth for framing markup constants,
material thresholds and service defaults.

Import from here in the engine and the API layer rather than hardcoding values.
Environment overrides are read once at import time.
"""
from __future__ import annotations

import os

# ── Frame moulding ─────────────────────────────────────────────────────────────

# Joined (mitered, seamless corner) mouldings cost 30% more than chop.
FRAME_JOIN_PREMIUM: float = 1.30

PRICING_METHODS: tuple[str, ...] = ("chop", "join")


# ── Glass ──────────────────────────────────────────────────────────────────────

GLASS_MARKUP: float = 3.0

# Conservation / museum glazing: unit price at or above this ($/sq in) gets
# an extra 1.5x on top of the standard glass markup.
GLASS_PREMIUM_THRESHOLD_PER_SQIN: float = 0.45
GLASS_PREMIUM_MULTIPLIER: float = 1.5

SQUARE_INCHES_PER_SQUARE_FOOT: float = 144.0


# ── Backing board ──────────────────────────────────────────────────────────────

BACKING_MARKUP: float = 3.0
BACKING_MINIMUM_CHARGE: float = 10.00

# {area threshold sq in: wholesale factor}, checked largest first
BACKING_AREA_FACTORS: tuple[tuple[float, float], ...] = (
    (1500.0, 0.80),   # >1500 sq in → 20% off wholesale
    (1000.0, 0.85),   # >1000 sq in → 15% off
    (500.0, 0.90),    # >500 sq in  → 10% off
)


# ── Labor ──────────────────────────────────────────────────────────────────────

LABOR_BASE_RATE: float = 50.00

# {united inches threshold: flat rate}, checked largest first
LABOR_RATE_TIERS: tuple[tuple[float, float], ...] = (
    (100.0, 100.00),
    (80.0, 85.00),
    (60.0, 70.00),
    (40.0, 60.00),
)


# ── Profitability ──────────────────────────────────────────────────────────────

# Shop overhead (rent, utilities, admin) allocated against wholesale cost
OVERHEAD_PCT: float = 0.30


# ── Service settings (environment) ─────────────────────────────────────────────

# Storefront sales tax. The engine itself always takes tax_rate explicitly;
# this is only the value the API falls back to when a request omits it.
DEFAULT_TAX_RATE: float = float(os.getenv("PRICING_DEFAULT_TAX_RATE", "0.0825"))

DEFAULT_BACKING_PRICE_PER_SQIN: float = float(
    os.getenv("PRICING_BACKING_PRICE_PER_SQIN", "0.01")
)

SERVICE_VERSION: str = "1.0.0"
