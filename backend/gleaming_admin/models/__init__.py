"""
Database tables, one per document collection
"""
from .product import Product, Bestseller
from .customer import Customer
from .order import Order, OrderItem

__all__ = [
    "Product",
    "Bestseller",
    "Customer",
    "Order",
    "OrderItem",
]
