# models/__init__.py

from .bucket import Bucket
from .balance import Balance
from .expense import Expense
from .transaction import Transaction
from .wishlist import WishlistItem
from .settings import UserSettings

__all__ = ["Bucket", "Balance", "Expense", "Transaction", "WishlistItem", "UserSettings"]
