"""Pricing services."""

from evershine.services.bulk_pricing import BulkPricingPipeline, PricedProduct
from evershine.services.checkout import CheckoutService
from evershine.services.pricing import PriceCalculator, RateBreakdown, RateInputs
from evershine.services.rate_cache import RateCache
from evershine.services.rate_resolver import RateResolver, ResolvedRates
from evershine.services.snapshot import PriceSnapshotStore

__all__ = [
    "BulkPricingPipeline",
    "CheckoutService",
    "PriceCalculator",
    "PricedProduct",
    "PriceSnapshotStore",
    "RateBreakdown",
    "RateCache",
    "RateInputs",
    "RateResolver",
    "ResolvedRates",
]
