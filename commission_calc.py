"""commission_calc.py

Rank-based seller bonuses (configurable):
- Per-line components:
    * Revenue of each purchase line comes from an injected strategy (default: discounted sale price).
    * Profit is that revenue minus the product's purchase price times quantity.
- Per-seller components:
    * Revenue is the sum of receipt totals, sales count the number of receipts.
    * Sellers are ranked by profit, highest first; equal profits keep catalog order.
    * Bonus comes from an injected strategy given (seller, rank, total sellers).
    * Top products: the 10 skus with the largest quantity sold.
- The module exposes:
    * analyze_sales_data(data, options)              -> list of seller reports (dicts)
    * calculate_simple_revenue(item, product)        -> default revenue strategy
    * calculate_bonus_by_profit(seller, rank, total) -> default bonus strategy (15% / 10% / 5% of profit)
    * compute_leaderboard(reports)                   -> seller reports as a DataFrame
    * recommended_config()                           -> default config dict (for tuning)
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Protocol

import pandas as pd

from dataset import require_strategies, validate_dataset
from sales_stats import get_top_n, index_products, line_revenue, round_money

# Default configuration (tune these values to match a real compensation plan)
DEFAULT_CONFIG = {
    "rank_bonus_rates": {
        "first": 0.15,       # rank 0
        "podium": 0.10,      # ranks 1 and 2
        "rest": 0.05,        # everyone else
    },
    "top_products_limit": 10,
}

# Rank passed for a seller that was not ranked at all.
NOT_RANKED = -1


def recommended_config():
    return copy.deepcopy(DEFAULT_CONFIG)


@dataclass
class SellerStats:
    seller_id: Any
    first_name: str = ''
    last_name: str = ''
    start_date: Any = None
    position: Any = None
    revenue: float = 0.0
    profit: float = 0.0
    sales_count: int = 0
    products_sold: Dict[Any, float] = field(default_factory=dict)
    bonus: float = 0.0
    top_products: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def name(self):
        return f"{self.first_name} {self.last_name}"


class RevenueFunction(Protocol):
    def __call__(self, item: Mapping[str, Any], product: Mapping[str, Any]) -> float: ...


class BonusFunction(Protocol):
    def __call__(self, seller: SellerStats, rank: int, total: int) -> float: ...


def calculate_simple_revenue(item, _product=None):
    """Revenue of one purchase line after its percentage discount."""
    return line_revenue(item)


def calculate_bonus_by_profit(seller, rank, total, config=None):
    """Bonus as a share of profit depending on rank (0-based)."""
    cfg = DEFAULT_CONFIG if config is None else config
    rates = cfg['rank_bonus_rates']
    if rank == NOT_RANKED:
        return 0.0
    if rank == 0:
        return seller.profit * rates['first']
    if rank in (1, 2):
        return seller.profit * rates['podium']
    return seller.profit * rates['rest']


def _seller_stats(seller):
    return SellerStats(
        seller_id=seller.get('id'),
        first_name=seller.get('first_name', ''),
        last_name=seller.get('last_name', ''),
        start_date=seller.get('start_date'),
        position=seller.get('position'),
    )


def analyze_sales_data(data, options, config=None):
    """Rank sellers by profit and assign each a bonus.

    `options` must map `calculate_revenue` and `calculate_bonus` to callables.
    Raises InvalidDataset / InvalidOptions before any record is processed.
    Returns one dict per cataloged seller, best profit first.
    """
    cfg = DEFAULT_CONFIG if config is None else config
    validate_dataset(data)
    calculate_revenue, calculate_bonus = require_strategies(options, ('calculate_revenue', 'calculate_bonus'))

    seller_stats = [_seller_stats(s) for s in data['sellers']]
    seller_index = {}
    for stats in seller_stats:
        seller_index.setdefault(stats.seller_id, stats)
    product_index = index_products(data['products'])

    for record in data['purchase_records']:
        seller = seller_index.get(record.get('seller_id'))
        if seller is None:
            continue
        seller.sales_count += 1
        seller.revenue += record.get('total_amount', 0) or 0

        for item in record.get('items') or []:
            product = product_index.get(item.get('sku'))
            if product is None:
                continue
            quantity = item.get('quantity', 0) or 0
            cost = (product.get('purchase_price', 0) or 0) * quantity
            seller.profit += calculate_revenue(item, product) - cost
            seller.products_sold[item['sku']] = seller.products_sold.get(item['sku'], 0) + quantity

    # sorted() is stable with reverse=True, so equal profits keep catalog order
    ranked = sorted(seller_stats, key=lambda s: s.profit, reverse=True)
    total = len(ranked)
    for rank, seller in enumerate(ranked):
        seller.bonus = calculate_bonus(seller, rank, total)
        sold = [{'sku': sku, 'quantity': qty} for sku, qty in seller.products_sold.items()]
        seller.top_products = get_top_n(sold, 'quantity', cfg['top_products_limit'])

    return [{
        'seller_id': s.seller_id,
        'name': s.name,
        'revenue': round_money(s.revenue),
        'profit': round_money(s.profit),
        'sales_count': s.sales_count,
        'top_products': s.top_products,
        'bonus': round_money(s.bonus),
    } for s in ranked]


def compute_leaderboard(reports):
    """Seller reports as a DataFrame in rank order.
    Returns DataFrame with columns:
    ['Rank','Seller_ID','Name','Revenue','Profit','Sales_Count','Top_Products','Bonus']
    """
    rows = [{
        'Rank': rank,
        'Seller_ID': r['seller_id'],
        'Name': r['name'],
        'Revenue': r['revenue'],
        'Profit': r['profit'],
        'Sales_Count': r['sales_count'],
        'Top_Products': ', '.join(f"{p['sku']}:{p['quantity']}" for p in r['top_products']),
        'Bonus': r['bonus'],
    } for rank, r in enumerate(reports)]
    return pd.DataFrame(rows, columns=['Rank', 'Seller_ID', 'Name', 'Revenue', 'Profit',
                                       'Sales_Count', 'Top_Products', 'Bonus'])


if __name__ == '__main__':
    # quick demo when run directly
    import json
    sample = {
        'customers': [{'id': 'c1'}],
        'products': [{'sku': 'SKU_001', 'purchase_price': 80.0}],
        'sellers': [{'id': 'seller_1', 'first_name': 'Aisha', 'last_name': 'Bello'}],
        'purchase_records': [{
            'seller_id': 'seller_1', 'customer_id': 'c1', 'date': '2025-10-05', 'total_amount': 190.0,
            'items': [{'sku': 'SKU_001', 'sale_price': 100.0, 'quantity': 2, 'discount': 5}],
        }],
    }
    print('Config:', json.dumps(DEFAULT_CONFIG, indent=2))
    reports = analyze_sales_data(sample, {
        'calculate_revenue': calculate_simple_revenue,
        'calculate_bonus': calculate_bonus_by_profit,
    })
    print(compute_leaderboard(reports).head())
