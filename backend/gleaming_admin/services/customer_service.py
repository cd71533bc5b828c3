"""
Customer Service - customer records and their order history
"""
import logging
from typing import List, Optional

from gleaming_admin.core.exceptions import CustomerNotFoundError
from gleaming_admin.domain.customer import Customer, CustomerInput
from gleaming_admin.domain.order import Order
from gleaming_admin.repositories.customer_repository import CustomerRepository
from gleaming_admin.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class CustomerService:

    def __init__(
        self,
        customers: Optional[CustomerRepository] = None,
        orders: Optional[OrderRepository] = None,
    ):
        self.customers = customers or CustomerRepository()
        self.orders = orders or OrderRepository()

    def list_customers(self, search: Optional[str] = None) -> List[Customer]:
        """All customers; ``search`` matches name or email, case-insensitively"""
        customers = self.customers.find_all()
        term = (search or "").strip().lower()
        if not term:
            return customers
        return [
            customer for customer in customers
            if term in customer.full_name.lower() or term in (customer.email or "").lower()
        ]

    def get_customer(self, customer_id: str) -> Customer:
        customer = self.customers.find_by_id(customer_id)
        if customer is None:
            raise CustomerNotFoundError(customer_id)
        return customer

    def create_customer(self, payload: CustomerInput) -> Customer:
        """Create a customer record (no sign-in account is created)"""
        customer_id = self.customers.create(payload.to_document())
        logger.info(f"Created customer {customer_id}")
        return self.get_customer(customer_id)

    def update_customer(self, customer_id: str, payload: CustomerInput) -> Customer:
        if not self.customers.update(customer_id, payload.to_document()):
            raise CustomerNotFoundError(customer_id)
        logger.info(f"Updated customer {customer_id}")
        return self.get_customer(customer_id)

    def delete_customer(self, customer_id: str):
        if not self.customers.delete(customer_id):
            raise CustomerNotFoundError(customer_id)
        logger.info(f"Deleted customer {customer_id}")

    def customer_order_history(self, customer_id: str) -> List[Order]:
        """A customer's orders, newest first"""
        customer = self.get_customer(customer_id)
        return self.orders.find_by_user(customer_id, {customer_id: customer})
