# totali/models/domain/pricing.py
from datetime import datetime, timezone

from pydantic import Field

from .common import CamelModel


class PricingEstimateIn(CamelModel):
    """Pricing estimate submitted for caching."""
    estimated_price: float = Field(..., ge=0)
    confidence: float = Field(..., ge=0, le=1)
    source: str = Field(..., min_length=1, max_length=100)


class PricingEstimate(PricingEstimateIn):
    """Cached pricing lookup result for an item name."""
    item_name: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
