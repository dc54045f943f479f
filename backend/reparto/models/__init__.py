from .auth import User
from .customers import Client
from .inventory import Product, InventoryLine
from .sales import Transaction
from .expenses import Expense

__all__ = [
    'User',
    'Client',
    'Product', 'InventoryLine',
    'Transaction',
    'Expense',
]
