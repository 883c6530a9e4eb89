"""
Request / response models for the pricing API.

These validate shape and ranges at the HTTP boundary and convert into the
engine's frozen framing records. Catalog prices arrive as numbers from the
POS front end; glass carries an explicit unit so per-sq-in and per-sq-ft
catalog rows can't be mixed up.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from app.services.framing_records import (
    Dimension,
    Discount,
    FrameLayer,
    GlassSpec,
    MatLayer,
    MiscCharge,
    PriceUnit,
    SpecialService,
)


class DimensionIn(BaseModel):
    width: float = Field(..., gt=0, description="Artwork width, inches")
    height: float = Field(..., gt=0, description="Artwork height, inches")

    def to_record(self) -> Dimension:
        return Dimension(self.width, self.height)


class FrameLayerIn(BaseModel):
    wholesale_price_per_foot: float = Field(..., ge=0)
    pricing_method: Literal["chop", "join"]
    moulding_width_inches: float = Field(0.0, ge=0)
    name: str = ""

    def to_record(self) -> FrameLayer:
        return FrameLayer(
            wholesale_price_per_foot=self.wholesale_price_per_foot,
            pricing_method=self.pricing_method,
            moulding_width_inches=self.moulding_width_inches,
            name=self.name,
        )


class MatLayerIn(BaseModel):
    width_inches: float = Field(..., ge=0)
    wholesale_price_per_square_inch: float = Field(..., ge=0)
    offset_inches: float = Field(0.0, ge=0)
    name: str = ""

    def to_record(self) -> MatLayer:
        return MatLayer(
            width_inches=self.width_inches,
            wholesale_price_per_square_inch=self.wholesale_price_per_square_inch,
            offset_inches=self.offset_inches,
            name=self.name,
        )


class GlassSpecIn(BaseModel):
    unit_price: float = Field(..., ge=0)
    unit: PriceUnit
    name: str = ""

    def to_record(self) -> GlassSpec:
        return GlassSpec(unit_price=self.unit_price, unit=self.unit, name=self.name)


class SpecialServiceIn(BaseModel):
    price: float = Field(..., ge=0)
    name: str = ""

    def to_record(self) -> SpecialService:
        return SpecialService(price=self.price, name=self.name)


class MiscChargeIn(BaseModel):
    type: Literal["fixed", "percentage"]
    amount: float = Field(..., ge=0)
    name: str = ""

    def to_record(self) -> MiscCharge:
        return MiscCharge(type=self.type, amount=self.amount, name=self.name)


class DiscountIn(BaseModel):
    type: Literal["fixed", "percentage"]
    amount: float = Field(..., ge=0)

    def to_record(self) -> Discount:
        return Discount(type=self.type, amount=self.amount)


class QuoteRequest(BaseModel):
    dimensions: DimensionIn
    frames: List[FrameLayerIn] = []
    mats: List[MatLayerIn] = []           # innermost first
    glass: Optional[GlassSpecIn] = None
    services: List[SpecialServiceIn] = []
    misc_charges: List[MiscChargeIn] = []
    discount: Optional[DiscountIn] = None
    tax_rate: Optional[float] = Field(None, ge=0, le=1)   # falls back to PRICING_DEFAULT_TAX_RATE
    backing_price_per_square_inch: Optional[float] = Field(None, ge=0)
    include_wholesale: bool = False       # admin view: line items + profitability

    model_config = {"json_schema_extra": {
        "example": {
            "dimensions": {"width": 16, "height": 20},
            "frames": [{"wholesale_price_per_foot": 1.50, "pricing_method": "chop"}],
            "mats": [{"width_inches": 2, "wholesale_price_per_square_inch": 0.02}],
            "glass": {"unit_price": 0.03, "unit": "per_square_inch"},
            "tax_rate": 0.0825,
        }
    }}


class WholesaleOrderRequest(BaseModel):
    dimensions: DimensionIn
    frames: List[FrameLayerIn] = []
    mats: List[MatLayerIn] = []


class ComponentQuoteOut(BaseModel):
    component: str
    name: str
    measure: float
    measure_unit: str
    wholesale_cost: float
    multiplier: float
    retail_price: float


class QuoteResponse(BaseModel):
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
    wholesale_total: Optional[float] = None
    line_items: Optional[List[ComponentQuoteOut]] = None
    profitability: Optional[dict] = None
