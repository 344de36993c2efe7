"""Tests for the item analytics aggregator."""

from datetime import date, timedelta

import pytest

from totali.models.database.item import ItemStatus
from totali.models.domain.item import CategorySnapshot, ItemSnapshot
from totali.services import analytics

TODAY = date(2024, 6, 30)

ELECTRONICS = CategorySnapshot(id="cat-electronics", name="Electronics", icon="laptop")
BOOKS = CategorySnapshot(id="cat-books", name="Books", icon=None)


def make_item(
    item_id="item",
    price=100.0,
    age=10,
    lifetime=None,
    status=ItemStatus.ACTIVE,
    category=None,
    sale_price=None,
):
    return ItemSnapshot(
        id=item_id,
        name=item_id.title(),
        purchase_price=price,
        purchase_date=TODAY - timedelta(days=age),
        expected_lifetime=lifetime,
        status=status,
        sale_price=sale_price,
        category_id=category.id if category else None,
        category=category,
    )


class TestItemStats:
    def test_bought_today_costs_full_price_per_day(self):
        stats = analytics.item_stats(make_item(price=123.45, age=0), TODAY)

        assert stats.days_used == 0
        assert stats.daily_cost == 123.45

    def test_future_purchase_date_counts_as_zero_days(self):
        stats = analytics.item_stats(make_item(price=50, age=-3), TODAY)

        assert stats.days_used == 0
        assert stats.daily_cost == 50

    def test_item_without_lifetime(self):
        stats = analytics.item_stats(make_item(price=1000, age=10), TODAY)

        assert stats.days_used == 10
        assert stats.daily_cost == 100.00
        assert stats.usage_efficiency is None

    def test_item_with_lifetime(self):
        stats = analytics.item_stats(make_item(price=3650, age=365, lifetime=730), TODAY)

        assert stats.days_used == 365
        assert stats.daily_cost == 10.00
        assert stats.usage_efficiency == 0.5

    def test_efficiency_is_clamped_past_lifetime(self):
        stats = analytics.item_stats(make_item(age=200, lifetime=100), TODAY)

        assert stats.usage_efficiency == 1.0

    def test_daily_cost_is_rounded(self):
        stats = analytics.item_stats(make_item(price=100, age=3), TODAY)

        assert stats.daily_cost == 33.33


class TestItemStatistics:
    def test_usage_frequency_and_current_value(self):
        item = make_item(price=1000, age=50, lifetime=200)

        statistics = analytics.item_statistics(item, usage_record_count=10, today=TODAY)

        assert statistics.item_id == "item"
        assert statistics.total_value == 1000
        assert statistics.usage_frequency == 20.0
        assert statistics.current_value == 750.0
        assert statistics.usage_efficiency == 0.25

    def test_no_records_means_zero_frequency(self):
        statistics = analytics.item_statistics(make_item(age=0), usage_record_count=0, today=TODAY)

        assert statistics.usage_frequency == 0.0

    def test_records_on_purchase_day_count_against_one_day(self):
        statistics = analytics.item_statistics(make_item(age=0), usage_record_count=1, today=TODAY)

        assert statistics.usage_frequency == 100.0

    def test_default_depreciation_horizon(self):
        statistics = analytics.item_statistics(make_item(price=365, age=73), 0, TODAY)

        assert statistics.current_value == 292.0

    def test_sale_price_is_current_value(self):
        item = make_item(price=500, age=30, status=ItemStatus.SOLD, sale_price=320)

        assert analytics.item_statistics(item, 0, TODAY).current_value == 320

    def test_sale_price_ignored_unless_sold(self):
        item = make_item(price=365, age=73, status=ItemStatus.RETIRED, sale_price=50)

        assert analytics.item_statistics(item, 0, TODAY).current_value == 292.0


class TestOverview:
    def test_empty_collection(self):
        overview = analytics.overview([], TODAY)

        assert overview.total_items == 0
        assert overview.total_value == 0
        assert overview.average_daily_cost == 0
        assert overview.active_items == 0
        assert overview.retired_items == 0
        assert overview.sold_items == 0

    def test_items_bought_today_average_their_prices(self):
        items = [make_item("a", price=100, age=0), make_item("b", price=200, age=0)]

        overview = analytics.overview(items, TODAY)

        assert overview.total_items == 2
        assert overview.total_value == 300
        assert overview.average_daily_cost == 150.00

    def test_status_counts(self):
        items = [
            make_item("a", status=ItemStatus.ACTIVE),
            make_item("b", status=ItemStatus.ACTIVE),
            make_item("c", status=ItemStatus.RETIRED),
            make_item("d", status=ItemStatus.SOLD),
        ]

        overview = analytics.overview(items, TODAY)

        assert (overview.active_items, overview.retired_items, overview.sold_items) == (2, 1, 1)

    def test_average_of_own_daily_costs(self):
        items = [make_item("a", price=1000, age=10), make_item("b", price=300, age=100)]

        assert analytics.overview(items, TODAY).average_daily_cost == 51.5


class TestEfficiencyRanking:
    def test_missing_lifetime_uses_default(self):
        ranking = analytics.efficiency_ranking([make_item(price=1000, age=10)], today=TODAY)

        entry = ranking.top_efficient[0]
        assert entry.usage_efficiency == analytics.DEFAULT_USAGE_EFFICIENCY == 0.5
        assert entry.daily_cost == 100.00
        assert entry.days_used == 10
        assert ranking.overall_usage_rate == 50.0

    def test_excludes_items_bought_today(self):
        items = [
            make_item("fresh", age=0, lifetime=1),
            make_item("old", age=10, lifetime=100),
        ]

        ranking = analytics.efficiency_ranking(items, today=TODAY)

        assert [entry.id for entry in ranking.top_efficient] == ["old"]
        assert [entry.id for entry in ranking.least_efficient] == ["old"]

    def test_nothing_eligible(self):
        ranking = analytics.efficiency_ranking([make_item(age=0)], today=TODAY)

        assert ranking.top_efficient == []
        assert ranking.least_efficient == []
        assert ranking.overall_usage_rate == 0.0

    def test_top_and_least_lists(self):
        items = [
            make_item("a", age=10, lifetime=100),   # 0.1
            make_item("b", age=90, lifetime=100),   # 0.9
            make_item("c", age=50, lifetime=100),   # 0.5
            make_item("d", age=300, lifetime=100),  # 1.0
        ]

        ranking = analytics.efficiency_ranking(items, limit=2, today=TODAY)

        assert [entry.id for entry in ranking.top_efficient] == ["d", "b"]
        assert [entry.id for entry in ranking.least_efficient] == ["a", "c"]
        assert ranking.overall_usage_rate == 62.5

    def test_ties_keep_input_order(self):
        items = [make_item("first", age=5), make_item("second", age=8), make_item("third", age=2)]

        ranking = analytics.efficiency_ranking(items, limit=3, today=TODAY)

        assert [entry.id for entry in ranking.top_efficient] == ["first", "second", "third"]
        assert [entry.id for entry in ranking.least_efficient] == ["third", "second", "first"]

    def test_days_window(self):
        items = [make_item("recent", age=5), make_item("old", age=40)]

        ranking = analytics.efficiency_ranking(items, days=30, today=TODAY)

        assert [entry.id for entry in ranking.top_efficient] == ["recent"]

    def test_window_boundary_is_inclusive(self):
        ranking = analytics.efficiency_ranking([make_item("edge", age=30)], days=30, today=TODAY)

        assert [entry.id for entry in ranking.top_efficient] == ["edge"]

    def test_category_labels(self):
        items = [
            make_item("a", age=10, category=ELECTRONICS),
            make_item("b", age=10, category=BOOKS),
            make_item("c", age=10),
        ]

        entries = {entry.id: entry for entry in analytics.efficiency_ranking(items, today=TODAY).top_efficient}

        assert (entries["a"].category_name, entries["a"].category_icon) == ("Electronics", "laptop")
        assert entries["b"].category_icon == analytics.DEFAULT_CATEGORY_ICON
        assert entries["c"].category_name == analytics.UNCATEGORIZED_NAME


class TestCategoryComparison:
    def test_groups_cover_every_item(self):
        items = [
            make_item("a", category=ELECTRONICS),
            make_item("b", category=ELECTRONICS),
            make_item("c", category=BOOKS),
            make_item("d"),
            make_item("e"),
        ]

        categories = analytics.category_comparison(items, TODAY).categories

        assert sum(category.item_count for category in categories) == len(items)
        uncategorized = [c for c in categories if c.category_id == analytics.UNCATEGORIZED_ID]
        assert len(uncategorized) == 1
        assert uncategorized[0].item_count == 2
        assert uncategorized[0].category_icon == analytics.DEFAULT_CATEGORY_ICON

    def test_sorted_by_average_efficiency(self):
        items = [
            make_item("a", age=10, lifetime=100, category=ELECTRONICS),
            make_item("b", age=90, lifetime=100, category=BOOKS),
            make_item("c", age=10),
        ]

        categories = analytics.category_comparison(items, TODAY).categories

        assert [c.category_id for c in categories] == ["cat-books", "uncategorized", "cat-electronics"]
        assert [c.average_efficiency for c in categories] == [0.9, 0.5, 0.1]

    def test_totals_and_daily_cost(self):
        items = [
            make_item("a", price=1000, age=10, category=ELECTRONICS),
            make_item("b", price=500, age=0, category=ELECTRONICS),
        ]

        (group,) = analytics.category_comparison(items, TODAY).categories

        assert group.total_value == 1500
        assert group.average_daily_cost == 300.0
        assert group.average_efficiency == 0.5

    def test_empty(self):
        assert analytics.category_comparison([], TODAY).categories == []


class TestTrend:
    def test_bucket_layout(self):
        result = analytics.trend([], days=7, today=TODAY)

        assert result.days == 7
        assert len(result.data_points) == 7
        assert result.data_points[0].date == "2024-06-24"
        assert result.data_points[-1].date == TODAY.isoformat()
        assert all(point.total_items == 0 for point in result.data_points)

    @pytest.mark.parametrize("k", [0, 3, 29])
    def test_single_item(self, k):
        result = analytics.trend([make_item(price=42.5, age=k)], days=30, today=TODAY)
        purchase_date = (TODAY - timedelta(days=k)).isoformat()

        for point in result.data_points:
            if point.date == purchase_date:
                assert point.new_items == 1
                assert point.new_items_value == 42.5
            else:
                assert point.new_items == 0
            if point.date >= purchase_date:
                assert point.total_items == 1
                assert point.total_value == 42.5
            else:
                assert point.total_items == 0

    def test_purchases_before_window_count_in_totals(self):
        result = analytics.trend([make_item(price=10, age=100), make_item(price=5, age=1)], days=3, today=TODAY)

        assert [point.total_items for point in result.data_points] == [1, 2, 2]
        assert [point.total_value for point in result.data_points] == [10, 15, 15]
        assert sum(point.new_items for point in result.data_points) == 1
