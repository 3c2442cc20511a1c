# Import all models so their tables are registered on SQLModel.metadata
from .user import User, UserSummary
from .category import Category, CategoryRead
from .product import Product, ProductBase, ProductRead

__all__ = [
    "User", "UserSummary",
    "Category", "CategoryRead",
    "Product", "ProductBase", "ProductRead",
]
