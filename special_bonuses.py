"""special_bonuses.py

Bonuses awarded for special conditions rather than rank (configurable):
- Best Customer Seller:     the seller that earned most from the highest-revenue customer.
- Best Customer Retention:  the seller whose best customer spent the most (flat amount).
- Largest Single Sale:      the seller behind the receipt with the largest total.
- Highest Average Profit:   the seller with the best profit per item sold.
- Stable Growth:            the seller whose monthly average profit grows steadily.

The module exposes:
    * calculate_special_bonuses(data, options, bonus_functions) -> [BonusResult, ...]
    * SPECIAL_BONUS_RULES                                       -> the five rules above, in order
    * bonuses_frame(results)                                    -> DataFrame for export
    * recommended_config()                                      -> default config dict (for tuning)

Each rule takes the shared BonusContext and returns exactly one BonusResult.
When nothing qualifies the result has seller_id=None and a zero bonus.
"""

import copy
from dataclasses import asdict, dataclass
from typing import Any, Dict, Hashable, List, Mapping, Optional, Protocol, Sequence

import pandas as pd

from dataset import require_strategies
from sales_stats import (
    ProfitFunction,
    SalesMetrics,
    accumulate_metrics,
    analyze_sequence,
    calculate_average,
    group_by,
    index_products,
    round_money,
)

DEFAULT_CONFIG = {
    "best_customer_rate": 0.05,        # share of the best customer's revenue
    "retention_bonus": 1000.0,         # flat amount
    "largest_sale_rate": 0.10,         # share of the largest receipt
    "average_profit_rate": 0.10,       # share of profit per item
    "stable_growth_rate": 0.15,        # share of the average monthly profit
    "trend_tolerance": 0.05,           # max month-over-month relative change
}


def recommended_config():
    return copy.deepcopy(DEFAULT_CONFIG)


@dataclass(frozen=True)
class BonusResult:
    category: str
    seller_id: Optional[Hashable]
    bonus: float

    def as_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class BonusContext:
    stats: SalesMetrics
    records_by_seller: Dict[Hashable, List[Mapping[str, Any]]]
    records_by_customer: Dict[Hashable, List[Mapping[str, Any]]]
    records_by_product: Dict[Hashable, List[Mapping[str, Any]]]
    sellers: Sequence[Mapping[str, Any]]
    customers: Sequence[Mapping[str, Any]]
    products: Sequence[Mapping[str, Any]]
    calculate_profit: ProfitFunction


class BonusRule(Protocol):
    def __call__(self, context: BonusContext) -> BonusResult: ...


def calculate_special_bonuses(data, options, bonus_functions: Sequence[BonusRule]) -> List[BonusResult]:
    """Build the shared context once and apply every rule to it, in order.

    `options` must provide `calculate_profit`; `accumulate_metrics` defaults to
    the single-pass accumulator from sales_stats.
    """
    if isinstance(options, Mapping) and options.get('accumulate_metrics') is None:
        options = {**options, 'accumulate_metrics': accumulate_metrics}
    calculate_profit, accumulate = require_strategies(options, ('calculate_profit', 'accumulate_metrics'))

    records = data['purchase_records']
    context = BonusContext(
        stats=accumulate(records, calculate_profit, data['products']),
        records_by_seller=group_by(records, lambda r: r['seller_id']),
        records_by_customer=group_by(records, lambda r: r['customer_id']),
        records_by_product=group_by(
            (item for record in records for item in record.get('items') or []),
            lambda item: item['sku'],
        ),
        sellers=data['sellers'],
        customers=data['customers'],
        products=data['products'],
        calculate_profit=calculate_profit,
    )
    return [rule(context) for rule in bonus_functions]


def bonus_best_customer(context: BonusContext, config=None) -> BonusResult:
    cfg = DEFAULT_CONFIG if config is None else config
    category = "Best Customer Seller"
    stats = context.stats

    best_customer = None
    for customer in stats.customers.values():
        if best_customer is None or customer.revenue > best_customer.revenue:
            best_customer = customer
    if best_customer is None:
        return BonusResult(category, None, 0.0)

    # Sellers in first-seen order; the first of equal revenues wins.
    best_seller_id, best_revenue = None, None
    for seller_id, seller in stats.sellers.items():
        if seller_id not in best_customer.sellers:
            continue
        if best_revenue is None or seller.revenue > best_revenue:
            best_seller_id, best_revenue = seller_id, seller.revenue

    return BonusResult(category, best_seller_id, round_money(best_customer.revenue * cfg['best_customer_rate']))


def bonus_customer_retention(context: BonusContext, config=None) -> BonusResult:
    cfg = DEFAULT_CONFIG if config is None else config
    category = "Best Customer Retention"
    stats = context.stats

    best_seller_id, best_revenue = None, None
    for seller_id, seller in stats.sellers.items():
        revenues = [stats.customers[c].revenue for c in seller.customers if c in stats.customers]
        if not revenues:
            continue
        top_customer_revenue = max(revenues)
        if best_revenue is None or top_customer_revenue > best_revenue:
            best_seller_id, best_revenue = seller_id, top_customer_revenue

    if best_seller_id is None:
        return BonusResult(category, None, 0.0)
    return BonusResult(category, best_seller_id, round_money(cfg['retention_bonus']))


def bonus_largest_single_sale(context: BonusContext, config=None) -> BonusResult:
    cfg = DEFAULT_CONFIG if config is None else config
    category = "Largest Single Sale"

    largest = None
    for records in context.records_by_seller.values():
        for record in records:
            amount = record.get('total_amount', 0) or 0
            if largest is None or amount > (largest.get('total_amount', 0) or 0):
                largest = record
    if largest is None:
        return BonusResult(category, None, 0.0)

    amount = largest.get('total_amount', 0) or 0
    return BonusResult(category, largest['seller_id'], round_money(amount * cfg['largest_sale_rate']))


def bonus_highest_average_profit(context: BonusContext, config=None) -> BonusResult:
    cfg = DEFAULT_CONFIG if config is None else config
    category = "Highest Average Profit"

    best_seller_id, best_average = None, None
    for seller_id, seller in context.stats.sellers.items():
        average = seller.profit / max(1, len(seller.items))
        if best_average is None or average > best_average:
            best_seller_id, best_average = seller_id, average

    if best_seller_id is None:
        return BonusResult(category, None, 0.0)
    return BonusResult(category, best_seller_id, round_money(best_average * cfg['average_profit_rate']))


def monthly_average_profits(records, calculate_profit, products) -> List[float]:
    """Average item profit per calendar month (YYYY-MM), oldest month first.

    Items whose sku is not in the catalog are left out of the averages.
    """
    catalog = index_products(products)
    by_month = group_by(records, lambda r: (r.get('date') or '')[:7])
    averages = []
    for month in sorted(by_month):
        profits = [
            calculate_profit(item, catalog[item.get('sku')])
            for record in by_month[month]
            for item in record.get('items') or []
            if item.get('sku') in catalog
        ]
        averages.append(calculate_average(profits))
    return averages


def bonus_stable_growth(context: BonusContext, config=None) -> BonusResult:
    cfg = DEFAULT_CONFIG if config is None else config
    category = "Stable Growth"

    best_seller_id, best_average = None, None
    for seller_id, records in context.records_by_seller.items():
        averages = monthly_average_profits(records, context.calculate_profit, context.products)
        trend = analyze_sequence(averages, cfg['trend_tolerance'])
        if not (trend.is_stable and trend.is_increasing):
            continue
        average = calculate_average(averages)
        if best_average is None or average > best_average:
            best_seller_id, best_average = seller_id, average

    if best_seller_id is None:
        return BonusResult(category, None, 0.0)
    return BonusResult(category, best_seller_id, round_money(best_average * cfg['stable_growth_rate']))


SPECIAL_BONUS_RULES = (
    bonus_best_customer,
    bonus_customer_retention,
    bonus_largest_single_sale,
    bonus_highest_average_profit,
    bonus_stable_growth,
)


def bonuses_frame(results):
    """Bonus awards as a DataFrame with Category / Seller_ID / Bonus columns."""
    frame = pd.DataFrame([r.as_dict() for r in results], columns=['category', 'seller_id', 'bonus'])
    return frame.rename(columns={'category': 'Category', 'seller_id': 'Seller_ID', 'bonus': 'Bonus'})
