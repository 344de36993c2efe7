# totali/models/domain/analytics.py
from typing import List, Optional

from .common import CamelModel


class ItemStats(CamelModel):
    """Derived per-item values."""
    days_used: int
    daily_cost: float
    usage_efficiency: Optional[float] = None


class ItemStatistics(CamelModel):
    """Detail statistics for a single item, including usage-record frequency."""
    item_id: str
    item_name: str
    days_used: int
    daily_cost: float
    total_value: float
    current_value: float
    usage_frequency: float
    usage_efficiency: Optional[float] = None


class ItemsOverview(CamelModel):
    total_items: int = 0
    total_value: float = 0.0
    average_daily_cost: float = 0.0
    active_items: int = 0
    retired_items: int = 0
    sold_items: int = 0


class EfficiencyItem(CamelModel):
    id: str
    name: str
    category_icon: str
    category_name: str
    usage_efficiency: float
    daily_cost: float
    days_used: int
    purchase_price: float


class EfficiencyAnalytics(CamelModel):
    top_efficient: List[EfficiencyItem]
    least_efficient: List[EfficiencyItem]
    overall_usage_rate: float


class CategoryEfficiency(CamelModel):
    category_id: str
    category_name: str
    category_icon: str
    item_count: int
    average_efficiency: float
    total_value: float
    average_daily_cost: float


class CategoryEfficiencyComparison(CamelModel):
    categories: List[CategoryEfficiency]


class TrendDataPoint(CamelModel):
    date: str
    new_items: int
    total_items: int
    new_items_value: float
    total_value: float


class TrendAnalytics(CamelModel):
    data_points: List[TrendDataPoint]
    days: int
