"""dataset.py

Dataset checks and tabular views shared by the commission and bonus modules.

The dataset is the JSON-shaped mapping
    {"customers": [...], "products": [...], "sellers": [...], "purchase_records": [...]}
supplied by the caller. This module exposes:
    * validate_dataset(data)                  -> raises InvalidDataset
    * require_strategies(options, names)      -> raises InvalidOptions, returns the callables
    * load_dataset(path)                      -> dataset read from a JSON file
    * records_frame(data)                     -> one DataFrame row per purchased item
    * monthly_seller_summary(data)            -> revenue / units / sales per seller per month
"""

import json
from collections.abc import Mapping
from pathlib import Path

import pandas as pd

from sales_stats import line_revenue

CATALOGS = ('customers', 'products', 'sellers', 'purchase_records')

RECORD_COLUMNS = [
    'record_id', 'seller_id', 'customer_id', 'date', 'month',
    'sku', 'quantity', 'sale_price', 'discount', 'line_revenue',
]


class SalesDataError(Exception):
    """Base class for input errors raised before any aggregation runs."""


class InvalidDataset(SalesDataError, ValueError):
    pass


class InvalidOptions(SalesDataError, TypeError):
    pass


def validate_dataset(data):
    """Fail fast unless every catalog is present, list-like and non-empty."""
    if not isinstance(data, Mapping):
        raise InvalidDataset('Dataset must be a mapping of catalogs')
    for name in CATALOGS:
        catalog = data.get(name)
        if not isinstance(catalog, (list, tuple)):
            raise InvalidDataset(f'Dataset catalog {name!r} is missing or not a list')
        if len(catalog) == 0:
            raise InvalidDataset(f'Dataset catalog {name!r} is empty')
    return data


def require_strategies(options, names):
    """Return the strategies `names` from `options`, checking each is callable."""
    if not isinstance(options, Mapping):
        raise InvalidOptions('Options must be a mapping of strategy functions')
    missing = [name for name in names if options.get(name) is None]
    if missing:
        raise InvalidOptions(f"Missing required strategies: {', '.join(missing)}")
    not_callable = [name for name in names if not callable(options[name])]
    if not_callable:
        raise InvalidOptions(f"Strategies must be callable: {', '.join(not_callable)}")
    return tuple(options[name] for name in names)


def load_dataset(path):
    """Read a dataset from a JSON file and validate its catalogs."""
    with Path(path).open(encoding='utf-8') as fh:
        data = json.load(fh)
    return validate_dataset(data)


def records_frame(data):
    """Flatten purchase records to one row per item."""
    rows = []
    for record in data['purchase_records']:
        date = record.get('date') or ''
        for item in record.get('items') or []:
            rows.append({
                'record_id': record.get('receipt_id', record.get('id')),
                'seller_id': record.get('seller_id'),
                'customer_id': record.get('customer_id'),
                'date': date,
                'month': date[:7],
                'sku': item.get('sku'),
                'quantity': item.get('quantity', 0) or 0,
                'sale_price': item.get('sale_price', 0) or 0,
                'discount': item.get('discount', 0) or 0,
                'line_revenue': line_revenue(item),
            })
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


def monthly_seller_summary(data):
    """Per seller and month: discounted revenue, units sold and number of sales.

    Sales are counted from purchase records, units and revenue from their items.
    Rows are ordered by seller then month.
    """
    items = records_frame(data)
    agg = items.groupby(['seller_id', 'month']).agg(
        Revenue=('line_revenue', 'sum'),
        Units=('quantity', 'sum'),
    ).reset_index()

    sales = pd.DataFrame(
        [{'seller_id': r.get('seller_id'), 'month': (r.get('date') or '')[:7]} for r in data['purchase_records']],
        columns=['seller_id', 'month'],
    )
    counts = sales.groupby(['seller_id', 'month']).size().rename('Sales').reset_index()

    summary = counts.merge(agg, on=['seller_id', 'month'], how='left')
    summary[['Revenue', 'Units']] = summary[['Revenue', 'Units']].fillna(0)
    summary['Revenue'] = summary['Revenue'].round(2)
    summary = summary.rename(columns={'seller_id': 'Seller_ID', 'month': 'Month'})
    return summary.sort_values(['Seller_ID', 'Month']).reset_index(drop=True)[
        ['Seller_ID', 'Month', 'Sales', 'Units', 'Revenue']
    ]
