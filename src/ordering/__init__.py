"""B2B ordering engine: discounts, carts, order conversion and visibility."""

__version__ = "0.1.0"
