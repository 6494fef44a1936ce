"""
Tests for the sales statistics building blocks.

Validates:
- Grouping keeps first-seen key order
- Trend classification, including the short and zero-valued edge cases
- Single-pass accumulation of seller, customer and product totals
"""

import pytest
from sales_stats import (
    SequenceTrend,
    accumulate_metrics,
    analyze_sequence,
    calculate_average,
    get_top_n,
    group_by,
    index_products,
    line_revenue,
    round_money,
    simple_profit,
)


class TestGroupBy:
    """Test suite for group_by."""

    def test_buckets_in_first_seen_order(self):
        groups = group_by(['b1', 'a1', 'b2', 'c1', 'a2'], lambda s: s[0])
        assert list(groups) == ['b', 'a', 'c']
        assert groups['b'] == ['b1', 'b2']
        assert groups['a'] == ['a1', 'a2']

    def test_empty_input(self):
        assert group_by([], lambda x: x) == {}

    def test_equal_keys_keep_item_order(self):
        records = [{'id': i, 'seller_id': 's'} for i in range(5)]
        groups = group_by(records, lambda r: r['seller_id'])
        assert [r['id'] for r in groups['s']] == [0, 1, 2, 3, 4]


class TestAnalyzeSequence:
    """Test suite for trend analysis."""

    def test_steady_growth(self):
        trend = analyze_sequence([100, 102, 104, 106], 0.05)
        assert trend == SequenceTrend(is_stable=True, is_increasing=True, is_decreasing=False)

    def test_single_value(self):
        for tolerance in (0.0, 0.05, 10):
            assert analyze_sequence([10], tolerance).as_dict() == {
                'is_stable': True, 'is_increasing': False, 'is_decreasing': False,
            }

    def test_empty_sequence(self):
        assert analyze_sequence([]) == SequenceTrend()

    def test_jump_exceeds_tolerance(self):
        trend = analyze_sequence([100, 200], 0.05)
        assert trend.is_stable is False
        assert trend.is_increasing is True
        assert trend.is_decreasing is False

    def test_direction_from_endpoints_only(self):
        trend = analyze_sequence([100, 50, 120], 1.0)
        assert trend.is_increasing is True
        assert trend.is_stable is False

    def test_decreasing(self):
        trend = analyze_sequence([100, 99, 98], 0.05)
        assert trend.is_stable is True
        assert trend.is_decreasing is True
        assert trend.is_increasing is False

    def test_flat_sequence_has_no_direction(self):
        trend = analyze_sequence([5, 5, 5])
        assert trend.is_stable is True
        assert trend.is_increasing is False
        assert trend.is_decreasing is False

    def test_change_equal_to_tolerance_is_stable(self):
        assert analyze_sequence([100, 150], 0.5).is_stable is True

    def test_step_away_from_zero_is_unstable(self):
        trend = analyze_sequence([0, 1, 1.01], 0.05)
        assert trend.is_stable is False
        assert trend.is_increasing is True

    def test_zero_to_zero_is_stable(self):
        assert analyze_sequence([0, 0]).is_stable is True

    def test_negative_values_use_absolute_denominator(self):
        assert analyze_sequence([-100, -98], 0.05).is_stable is True


class TestHelpers:
    """Test suite for small helpers."""

    def test_average(self):
        assert calculate_average([1, 2, 3]) == 2
        assert calculate_average([]) == 0.0

    def test_top_n_keeps_tie_order(self):
        rows = [{'sku': 'a', 'quantity': 1}, {'sku': 'b', 'quantity': 3},
                {'sku': 'c', 'quantity': 3}, {'sku': 'd', 'quantity': 2}]
        top = get_top_n(rows, 'quantity', 3)
        assert [r['sku'] for r in top] == ['b', 'c', 'd']
        assert rows[0]['sku'] == 'a'

    def test_index_keeps_first_duplicate(self):
        products = [{'sku': 'x', 'purchase_price': 1}, {'sku': 'x', 'purchase_price': 2}]
        assert index_products(products)['x']['purchase_price'] == 1

    def test_line_revenue_applies_discount(self):
        assert line_revenue({'sale_price': 50, 'quantity': 10, 'discount': 10}) == pytest.approx(450)

    def test_round_money_rounds_half_up(self):
        assert round_money(0.125) == 0.13
        assert round_money(10.625) == 10.63
        assert round_money(2.675) == 2.67  # binary value is just below the half
        assert round_money(-0.125) == -0.13
        assert round_money(None) == 0.0

    def test_simple_profit(self):
        item = {'sale_price': 50, 'quantity': 10, 'discount': 10}
        assert simple_profit(item, {'purchase_price': 20}) == pytest.approx(250)


class TestAccumulateMetrics:
    """Test suite for the metrics accumulator."""

    def test_seller_totals(self, dataset):
        stats = accumulate_metrics(dataset['purchase_records'], simple_profit, dataset['products'])
        assert list(stats.sellers) == ['seller_1', 'seller_2']
        seller_1 = stats.sellers['seller_1']
        assert seller_1.revenue == pytest.approx(336)
        assert seller_1.profit == pytest.approx(306)
        assert len(seller_1.items) == 3
        assert seller_1.customers == {'customer_1', 'customer_2'}

    def test_unknown_sku_is_skipped(self, dataset):
        stats = accumulate_metrics(dataset['purchase_records'], simple_profit, dataset['products'])
        seller_2 = stats.sellers['seller_2']
        assert len(seller_2.items) == 2
        assert seller_2.revenue == pytest.approx(510)
        assert 'SKU_404' not in stats.products

    def test_customer_totals(self, dataset):
        stats = accumulate_metrics(dataset['purchase_records'], simple_profit, dataset['products'])
        assert stats.customers['customer_1'].revenue == pytest.approx(282)
        assert stats.customers['customer_2'].revenue == pytest.approx(564)
        assert stats.customers['customer_2'].profit == pytest.approx(354)
        assert stats.customers['customer_1'].sellers == {'seller_1', 'seller_2'}

    def test_product_totals(self, dataset):
        stats = accumulate_metrics(dataset['purchase_records'], simple_profit, dataset['products'])
        assert stats.products['SKU_001'].quantity == 3
        assert stats.products['SKU_001'].revenue == pytest.approx(336)
        assert stats.products['SKU_002'].quantity == 10

    def test_seller_revenue_matches_item_revenue(self, dataset):
        stats = accumulate_metrics(dataset['purchase_records'], simple_profit, dataset['products'])
        skus = {p['sku'] for p in dataset['products']}
        expected = sum(
            line_revenue(item)
            for record in dataset['purchase_records']
            for item in record['items']
            if item['sku'] in skus
        )
        assert sum(s.revenue for s in stats.sellers.values()) == pytest.approx(expected)

    def test_injected_profit_function(self, dataset):
        stats = accumulate_metrics(dataset['purchase_records'], lambda item, product: 1, dataset['products'])
        assert stats.sellers['seller_1'].profit == 3
        assert stats.sellers['seller_2'].profit == 2

    def test_seller_without_records_has_no_bucket(self, dataset):
        stats = accumulate_metrics(dataset['purchase_records'], simple_profit, dataset['products'])
        assert 'seller_3' not in stats.sellers

    def test_repeated_calls_are_identical(self, dataset):
        first = accumulate_metrics(dataset['purchase_records'], simple_profit, dataset['products'])
        second = accumulate_metrics(dataset['purchase_records'], simple_profit, dataset['products'])
        assert first == second
        assert first.sellers['seller_1'] is not second.sellers['seller_1']
