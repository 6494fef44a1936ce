"""sales_stats.py

Building blocks for seller statistics:
- group_by(items, key_fn)                        -> dict of lists, keys in first-seen order
- analyze_sequence(sequence, tolerance)          -> SequenceTrend (stable / increasing / decreasing)
- accumulate_metrics(records, profit_fn, products) -> SalesMetrics (per seller, customer, product)
- simple_profit(item, product)                   -> reference profit strategy
- calculate_average(values), get_top_n(rows, key, n), line_revenue(item), round_money(value)

Everything here is a pure function of its arguments; aggregates are built
fresh on every call.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping, Protocol, Sequence, Set


class ProfitFunction(Protocol):
    def __call__(self, item: Mapping[str, Any], product: Mapping[str, Any]) -> float: ...


@dataclass
class SellerAggregate:
    revenue: float = 0.0
    profit: float = 0.0
    items: List[Mapping[str, Any]] = field(default_factory=list)
    customers: Set[Hashable] = field(default_factory=set)


@dataclass
class CustomerAggregate:
    revenue: float = 0.0
    profit: float = 0.0
    sellers: Set[Hashable] = field(default_factory=set)


@dataclass
class ProductAggregate:
    quantity: float = 0
    revenue: float = 0.0


@dataclass
class SalesMetrics:
    sellers: Dict[Hashable, SellerAggregate] = field(default_factory=dict)
    customers: Dict[Hashable, CustomerAggregate] = field(default_factory=dict)
    products: Dict[Hashable, ProductAggregate] = field(default_factory=dict)


@dataclass(frozen=True)
class SequenceTrend:
    is_stable: bool = True
    is_increasing: bool = False
    is_decreasing: bool = False

    def as_dict(self):
        return {
            'is_stable': self.is_stable,
            'is_increasing': self.is_increasing,
            'is_decreasing': self.is_decreasing,
        }


def group_by(items: Iterable[Any], key_fn: Callable[[Any], Hashable]) -> Dict[Hashable, List[Any]]:
    """Partition items into buckets keyed by key_fn(item).

    Buckets appear in the order their key is first seen, and items keep
    their relative order inside a bucket.
    """
    groups: Dict[Hashable, List[Any]] = {}
    for item in items:
        groups.setdefault(key_fn(item), []).append(item)
    return groups


def analyze_sequence(sequence: Sequence[float], tolerance: float = 0.05) -> SequenceTrend:
    """Classify a numeric sequence.

    - Sequences shorter than 2 are reported as stable with no direction.
    - Direction is taken from the endpoints only.
    - Stable means every step changes by at most `tolerance` relative to the
      previous value. A step away from 0 counts as unstable; 0 -> 0 does not.
    """
    if len(sequence) < 2:
        return SequenceTrend()

    is_stable = True
    for previous, current in zip(sequence, sequence[1:]):
        if previous == 0:
            if current != 0:
                is_stable = False
                break
            continue
        if abs(current - previous) / abs(previous) > tolerance:
            is_stable = False
            break

    total_change = sequence[-1] - sequence[0]
    return SequenceTrend(
        is_stable=is_stable,
        is_increasing=total_change > 0,
        is_decreasing=total_change < 0,
    )


def calculate_average(values: Iterable[float]) -> float:
    """Arithmetic mean; 0.0 for an empty input."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def round_money(value) -> float:
    """Round to cents, exact halves away from zero (1.25 * 0.1 -> 0.13)."""
    return float(Decimal(value or 0).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def get_top_n(rows: Iterable[Mapping[str, Any]], key: str, n: int) -> List[Mapping[str, Any]]:
    """Return the n rows with the largest `key`, ties kept in input order."""
    return sorted(rows, key=lambda row: row[key], reverse=True)[:n]


def index_products(products: Iterable[Mapping[str, Any]]) -> Dict[Hashable, Mapping[str, Any]]:
    """sku -> product lookup keeping the first entry for a duplicated sku."""
    index: Dict[Hashable, Mapping[str, Any]] = {}
    for product in products:
        index.setdefault(product.get('sku'), product)
    return index


def line_revenue(item: Mapping[str, Any]) -> float:
    """Discounted revenue of one purchase line."""
    sale_price = item.get('sale_price', 0) or 0
    quantity = item.get('quantity', 0) or 0
    discount = item.get('discount', 0) or 0
    return sale_price * quantity * (1 - discount / 100)


def simple_profit(item: Mapping[str, Any], product: Mapping[str, Any]) -> float:
    """Discounted revenue of the line minus its purchase cost."""
    return line_revenue(item) - (product.get('purchase_price', 0) or 0) * (item.get('quantity', 0) or 0)


def accumulate_metrics(records: Iterable[Mapping[str, Any]],
                       profit_fn: ProfitFunction,
                       products: Sequence[Mapping[str, Any]]) -> SalesMetrics:
    """Single pass over purchase records building seller, customer and product totals.

    Items whose sku is not in `products` are skipped. Seller and customer
    buckets are created on the first record that mentions them.
    """
    catalog = index_products(products)
    metrics = SalesMetrics()

    for record in records:
        seller_id = record.get('seller_id')
        customer_id = record.get('customer_id')
        seller = metrics.sellers.setdefault(seller_id, SellerAggregate())
        customer = metrics.customers.setdefault(customer_id, CustomerAggregate())

        for item in record.get('items') or []:
            product = catalog.get(item.get('sku'))
            if product is None:
                continue
            revenue = line_revenue(item)
            profit = profit_fn(item, product)

            seller.revenue += revenue
            seller.profit += profit
            seller.items.append(item)
            seller.customers.add(customer_id)

            customer.revenue += revenue
            customer.profit += profit
            customer.sellers.add(seller_id)

            totals = metrics.products.setdefault(item['sku'], ProductAggregate())
            totals.quantity += item.get('quantity', 0) or 0
            totals.revenue += revenue

    return metrics


