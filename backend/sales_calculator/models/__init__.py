from .customers import Customer
from .inventory import Product
from .cart import Cart, CartLine
from .transactions import Transaction, TransactionItem, TRANSACTION_TYPES, PAYMENT_METHODS

__all__ = [
    'Customer',
    'Product',
    'Cart', 'CartLine',
    'Transaction', 'TransactionItem', 'TRANSACTION_TYPES', 'PAYMENT_METHODS',
]
