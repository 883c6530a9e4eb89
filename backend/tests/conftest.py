"""
conftest.py — Shared pytest fixtures for the framing pricing test suite.

No database or external service fixtures are defined here. Engine tests are
pure unit tests; API tests drive the FastAPI app in-process through
``TestClient``.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``app.*`` imports resolve correctly regardless of where pytest is invoked.
"""

import sys
import os
import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any app imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# PricingEngine fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def pricing_engine():
    """
    PricingEngine with the shop defaults, backing pinned to $0.01/sq in so
    the PRICING_BACKING_PRICE_PER_SQIN env var can't shift golden values.

    Defaults:
      join premium 1.3, glass 3.0x (4.5x at >= $0.45/sq in),
      backing 3.0x with $10 minimum, labor $50 → $100 by united inches.
    """
    from app.services.pricing_engine import PricingEngine
    return PricingEngine(pricing_config={"backing_price_per_sqin": 0.01})


# ---------------------------------------------------------------------------
# Reference job: 16x20 artwork, 2" mat, $1.50/ft chop frame, glass and
# backing at $0.03 / $0.01 per sq in, 8.25% tax.
# ---------------------------------------------------------------------------

@pytest.fixture
def artwork_16x20():
    from app.services.framing_records import Dimension
    return Dimension(16.0, 20.0)


@pytest.fixture
def chop_frame():
    from app.services.framing_records import FrameLayer
    return FrameLayer(wholesale_price_per_foot=1.50, pricing_method="chop", name="Larson 210BK")


@pytest.fixture
def two_inch_mat():
    from app.services.framing_records import MatLayer
    return MatLayer(width_inches=2.0, wholesale_price_per_square_inch=0.02, name="Crescent White")


@pytest.fixture
def regular_glass():
    from app.services.framing_records import GlassSpec, PriceUnit
    return GlassSpec(unit_price=0.03, unit=PriceUnit.PER_SQUARE_INCH, name="Regular Glass")


@pytest.fixture
def reference_order(artwork_16x20, chop_frame, two_inch_mat, regular_glass):
    """Keyword arguments for calculate_order_total on the reference job."""
    return {
        "frames": [chop_frame],
        "mats": [two_inch_mat],
        "glass": regular_glass,
        "services": [],
        "misc_charges": [],
        "dimensions": artwork_16x20,
        "tax_rate": 0.0825,
    }


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def api_client(monkeypatch):
    """TestClient over the FastAPI app with a clean tracker and 8.25% default tax."""
    from fastapi.testclient import TestClient
    from app.main import app
    from app.services import pricing_config
    from app.services.perf_monitor import tracker

    monkeypatch.setattr(pricing_config, "DEFAULT_TAX_RATE", 0.0825)
    tracker.reset()
    with TestClient(app) as client:
        yield client
    tracker.reset()


@pytest.fixture
def reference_quote_payload():
    return {
        "dimensions": {"width": 16, "height": 20},
        "frames": [{"wholesale_price_per_foot": 1.50, "pricing_method": "chop", "name": "Larson 210BK"}],
        "mats": [{"width_inches": 2, "wholesale_price_per_square_inch": 0.02}],
        "glass": {"unit_price": 0.03, "unit": "per_square_inch"},
        "backing_price_per_square_inch": 0.01,
        "tax_rate": 0.0825,
    }
