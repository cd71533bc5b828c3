"""
Domain Layer - Business Entities

Pydantic models for the records the admin panel manages. Documents keep the
storefront's camelCase field names; models expose snake_case attributes.
"""
from gleaming_admin.domain.product import Product, ProductInput
from gleaming_admin.domain.order import Order, OrderItem, Address, CustomerSummary
from gleaming_admin.domain.customer import Customer, CustomerInput

__all__ = [
    'Product',
    'ProductInput',
    'Order',
    'OrderItem',
    'Address',
    'CustomerSummary',
    'Customer',
    'CustomerInput',
]
