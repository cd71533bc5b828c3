"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from gleaming_admin.repositories.product_repository import ProductRepository
from gleaming_admin.repositories.order_repository import OrderRepository
from gleaming_admin.repositories.customer_repository import CustomerRepository

__all__ = [
    'ProductRepository',
    'OrderRepository',
    'CustomerRepository',
]
