import pytest


@pytest.fixture
def dataset():
    """Three sellers, two customers, five receipts over three months.

    seller_1 sells one unit a month with profit 100, 102, 104 (steady growth).
    seller_2 has the largest receipt and one item with an unknown sku.
    seller_3 has no sales at all.
    """
    return {
        'customers': [{'id': 'customer_1'}, {'id': 'customer_2'}],
        'products': [
            {'sku': 'SKU_001', 'purchase_price': 10},
            {'sku': 'SKU_002', 'purchase_price': 20},
            {'sku': 'SKU_003', 'purchase_price': 5},
        ],
        'sellers': [
            {'id': 'seller_1', 'first_name': 'Alexey', 'last_name': 'Petrov',
             'start_date': '2023-01-15', 'position': 'Senior Seller'},
            {'id': 'seller_2', 'first_name': 'Ivan', 'last_name': 'Smirnov',
             'start_date': '2023-03-01', 'position': 'Seller'},
            {'id': 'seller_3', 'first_name': 'Maria', 'last_name': 'Ivanova',
             'start_date': '2024-02-01', 'position': 'Junior Seller'},
        ],
        'purchase_records': [
            {'receipt_id': 'r1', 'seller_id': 'seller_1', 'customer_id': 'customer_1',
             'date': '2024-01-10', 'total_amount': 110,
             'items': [{'sku': 'SKU_001', 'sale_price': 110, 'quantity': 1, 'discount': 0}]},
            {'receipt_id': 'r2', 'seller_id': 'seller_1', 'customer_id': 'customer_1',
             'date': '2024-02-10', 'total_amount': 112,
             'items': [{'sku': 'SKU_001', 'sale_price': 112, 'quantity': 1, 'discount': 0}]},
            {'receipt_id': 'r3', 'seller_id': 'seller_1', 'customer_id': 'customer_2',
             'date': '2024-03-10', 'total_amount': 114,
             'items': [{'sku': 'SKU_001', 'sale_price': 114, 'quantity': 1, 'discount': 0}]},
            {'receipt_id': 'r4', 'seller_id': 'seller_2', 'customer_id': 'customer_2',
             'date': '2024-01-15', 'total_amount': 500,
             'items': [{'sku': 'SKU_002', 'sale_price': 50, 'quantity': 10, 'discount': 10}]},
            {'receipt_id': 'r5', 'seller_id': 'seller_2', 'customer_id': 'customer_1',
             'date': '2024-03-01', 'total_amount': 60,
             'items': [
                 {'sku': 'SKU_003', 'sale_price': 10, 'quantity': 6, 'discount': 0},
                 {'sku': 'SKU_404', 'sale_price': 5, 'quantity': 1, 'discount': 0},
             ]},
        ],
    }
