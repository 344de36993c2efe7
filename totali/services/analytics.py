"""Item analytics aggregation.

Pure functions that turn a snapshot of a user's non-deleted items into the
report shapes served by the items endpoints:

- per-item statistics (days used, daily cost, usage efficiency)
- item detail statistics (adds current value and usage frequency)
- overview totals and status counts
- top / least efficient rankings with an overall usage rate
- per-category efficiency rollups
- day-bucketed growth trends

Nothing here touches the database or keeps state between calls. Every
function takes the evaluation day as ``today`` (defaulting to the current
local date) so results are reproducible for a given snapshot.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from totali.models.database.item import ItemStatus
from totali.models.domain.analytics import (
    CategoryEfficiency,
    CategoryEfficiencyComparison,
    EfficiencyAnalytics,
    EfficiencyItem,
    ItemStatistics,
    ItemStats,
    ItemsOverview,
    TrendAnalytics,
    TrendDataPoint,
)
from totali.models.domain.item import ItemSnapshot

# Efficiency assumed for items without an expected lifetime.
DEFAULT_USAGE_EFFICIENCY = 0.5
# Depreciation horizon used when no expected lifetime is recorded.
DEFAULT_DEPRECIATION_DAYS = 365

UNCATEGORIZED_ID = "uncategorized"
UNCATEGORIZED_NAME = "Uncategorized"
DEFAULT_CATEGORY_ICON = "📦"

DEFAULT_RANKING_LIMIT = 5
DEFAULT_TREND_DAYS = 30


def round2(value: float) -> float:
    return round(float(value), 2)


def _today(today: Optional[date]) -> date:
    return today if today is not None else date.today()


def days_used(purchase_date: date, today: Optional[date] = None) -> int:
    """Whole calendar days owned, never negative."""
    return max(0, (_today(today) - purchase_date).days)


def daily_cost(purchase_price: float, days: int) -> float:
    """Purchase price spread over the days owned; the full price on day zero."""
    return purchase_price / days if days > 0 else purchase_price


def measured_efficiency(days: int, expected_lifetime: Optional[int]) -> Optional[float]:
    """Share of the expected lifetime already used, clamped to [0, 1].

    Returns None when no positive lifetime is recorded.
    """
    if not expected_lifetime or expected_lifetime <= 0:
        return None
    return min(max(days / expected_lifetime, 0.0), 1.0)


def policy_efficiency(days: int, expected_lifetime: Optional[int]) -> float:
    """Measured efficiency, falling back to DEFAULT_USAGE_EFFICIENCY."""
    efficiency = measured_efficiency(days, expected_lifetime)
    return DEFAULT_USAGE_EFFICIENCY if efficiency is None else efficiency


def current_value(
    purchase_price: float,
    days: int,
    expected_lifetime: Optional[int],
    sale_price: Optional[float],
) -> float:
    """Sale price once sold, otherwise a straight-line depreciation estimate."""
    if sale_price is not None:
        return sale_price
    horizon = expected_lifetime or DEFAULT_DEPRECIATION_DAYS
    return purchase_price * (1 - days / horizon)


def item_stats(item: ItemSnapshot, today: Optional[date] = None) -> ItemStats:
    days = days_used(item.purchase_date, today)
    efficiency = measured_efficiency(days, item.expected_lifetime)
    return ItemStats(
        days_used=days,
        daily_cost=round2(daily_cost(item.purchase_price, days)),
        usage_efficiency=round2(efficiency) if efficiency is not None else None,
    )


def item_statistics(
    item: ItemSnapshot,
    usage_record_count: int,
    today: Optional[date] = None,
) -> ItemStatistics:
    """Detail statistics for one item.

    Usage frequency is the number of recorded usage days per day owned, as a
    percentage. An item bought today counts as owned for one day.
    """
    stats = item_stats(item, today)
    frequency = 0.0
    if usage_record_count > 0:
        frequency = usage_record_count / max(stats.days_used, 1) * 100

    return ItemStatistics(
        item_id=item.id,
        item_name=item.name,
        days_used=stats.days_used,
        daily_cost=stats.daily_cost,
        total_value=round2(item.purchase_price),
        current_value=round2(current_value(
            item.purchase_price,
            stats.days_used,
            item.expected_lifetime,
            item.sale_price if item.status == ItemStatus.SOLD else None,
        )),
        usage_frequency=round2(frequency),
        usage_efficiency=stats.usage_efficiency,
    )


def overview(items: Sequence[ItemSnapshot], today: Optional[date] = None) -> ItemsOverview:
    """Totals across the whole collection; all zeros when it is empty."""
    if not items:
        return ItemsOverview()

    total_value = sum(item.purchase_price for item in items)
    total_daily_cost = sum(
        daily_cost(item.purchase_price, days_used(item.purchase_date, today))
        for item in items
    )
    status_counts = {status: 0 for status in ItemStatus}
    for item in items:
        status_counts[item.status] += 1

    return ItemsOverview(
        total_items=len(items),
        total_value=round2(total_value),
        average_daily_cost=round2(total_daily_cost / len(items)),
        active_items=status_counts[ItemStatus.ACTIVE],
        retired_items=status_counts[ItemStatus.RETIRED],
        sold_items=status_counts[ItemStatus.SOLD],
    )


def _category_label(item: ItemSnapshot):
    if item.category is None:
        return UNCATEGORIZED_ID, UNCATEGORIZED_NAME, DEFAULT_CATEGORY_ICON
    return (
        item.category.id,
        item.category.name,
        item.category.icon or DEFAULT_CATEGORY_ICON,
    )


def _efficiency_entry(item: ItemSnapshot, today: date) -> EfficiencyItem:
    days = days_used(item.purchase_date, today)
    _, category_name, category_icon = _category_label(item)
    return EfficiencyItem(
        id=item.id,
        name=item.name,
        category_icon=category_icon,
        category_name=category_name,
        usage_efficiency=round2(policy_efficiency(days, item.expected_lifetime)),
        daily_cost=round2(daily_cost(item.purchase_price, days)),
        days_used=days,
        purchase_price=round2(item.purchase_price),
    )


def efficiency_ranking(
    items: Iterable[ItemSnapshot],
    limit: int = DEFAULT_RANKING_LIMIT,
    days: int = 0,
    today: Optional[date] = None,
) -> EfficiencyAnalytics:
    """Rank items by usage efficiency.

    Args:
        items: Non-deleted items of one user.
        limit: Size of each of the two result lists.
        days: When positive, only items purchased on or after ``today - days``
            are considered. Zero means all time.
        today: Evaluation day.

    Items bought today (zero days used) are left out. The two lists are the
    head and the reversed tail of the same descending order, so they overlap
    when fewer than ``2 * limit`` items are eligible.
    """
    today = _today(today)
    if days > 0:
        window_start = today - timedelta(days=days)
        items = [item for item in items if item.purchase_date >= window_start]

    eligible = [
        entry for entry in (_efficiency_entry(item, today) for item in items)
        if entry.days_used > 0
    ]
    if not eligible:
        return EfficiencyAnalytics(top_efficient=[], least_efficient=[], overall_usage_rate=0.0)

    ranked = sorted(eligible, key=lambda entry: entry.usage_efficiency, reverse=True)
    mean_efficiency = sum(entry.usage_efficiency for entry in eligible) / len(eligible)

    return EfficiencyAnalytics(
        top_efficient=ranked[:limit],
        least_efficient=list(reversed(ranked[-limit:])) if limit > 0 else [],
        overall_usage_rate=round2(mean_efficiency * 100),
    )


def category_comparison(
    items: Iterable[ItemSnapshot],
    today: Optional[date] = None,
) -> CategoryEfficiencyComparison:
    """Per-category item count, value, efficiency and daily cost.

    Groups keep the order in which their first item appears, so categories
    with equal average efficiency stay in that order after sorting.
    """
    today = _today(today)
    groups: Dict[str, dict] = {}

    for item in items:
        category_id, category_name, category_icon = _category_label(item)
        group = groups.setdefault(category_id, {
            'category_name': category_name,
            'category_icon': category_icon,
            'count': 0,
            'value': 0.0,
            'efficiency': 0.0,
            'daily_cost': 0.0,
        })
        days = days_used(item.purchase_date, today)
        group['count'] += 1
        group['value'] += item.purchase_price
        group['efficiency'] += policy_efficiency(days, item.expected_lifetime)
        group['daily_cost'] += daily_cost(item.purchase_price, days)

    categories = [
        CategoryEfficiency(
            category_id=category_id,
            category_name=group['category_name'],
            category_icon=group['category_icon'],
            item_count=group['count'],
            average_efficiency=round2(group['efficiency'] / group['count']),
            total_value=round2(group['value']),
            average_daily_cost=round2(group['daily_cost'] / group['count']),
        )
        for category_id, group in groups.items()
    ]
    categories.sort(key=lambda category: category.average_efficiency, reverse=True)

    return CategoryEfficiencyComparison(categories=categories)


def trend(
    items: Iterable[ItemSnapshot],
    days: int = DEFAULT_TREND_DAYS,
    today: Optional[date] = None,
) -> TrendAnalytics:
    """Daily new and cumulative item counts/values for the last ``days`` days.

    The window ends today (inclusive). Cumulative totals include every item
    purchased on or before a bucket's date, including purchases made before
    the window starts.
    """
    today = _today(today)
    bucket_dates = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    buckets = {
        bucket_date: {'new_items': 0, 'new_value': 0.0, 'total_items': 0, 'total_value': 0.0}
        for bucket_date in bucket_dates
    }

    for item in items:
        bucket = buckets.get(item.purchase_date)
        if bucket is not None:
            bucket['new_items'] += 1
            bucket['new_value'] += item.purchase_price

        for bucket_date in bucket_dates:
            if bucket_date >= item.purchase_date:
                buckets[bucket_date]['total_items'] += 1
                buckets[bucket_date]['total_value'] += item.purchase_price

    return TrendAnalytics(
        data_points=[
            TrendDataPoint(
                date=bucket_date.isoformat(),
                new_items=buckets[bucket_date]['new_items'],
                total_items=buckets[bucket_date]['total_items'],
                new_items_value=round2(buckets[bucket_date]['new_value']),
                total_value=round2(buckets[bucket_date]['total_value']),
            )
            for bucket_date in bucket_dates
        ],
        days=days,
    )
