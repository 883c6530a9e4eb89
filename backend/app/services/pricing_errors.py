"""Typed errors raised by the framing pricing engine."""


class PricingError(ValueError):
    """Base class for every pricing failure. Never partially computed."""


class InvalidInputError(PricingError):
    """A calculation input is outside its valid range."""


class InvalidDimensionError(InvalidInputError):
    """Width/height <= 0, or a negative mat/moulding width."""


class InvalidPriceError(InvalidInputError):
    """Negative wholesale unit price or charge amount."""


class UnresolvableMarkupError(PricingError):
    """Wholesale cost fell outside every markup bracket (table gap)."""


class ConfigurationError(PricingError):
    """Missing or invalid tax rate, pricing method or engine setting."""
