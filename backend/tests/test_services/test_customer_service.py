"""
Unit tests for CustomerService
"""
from unittest.mock import MagicMock

import pytest

from gleaming_admin.core.exceptions import CustomerNotFoundError
from gleaming_admin.domain.customer import Customer, CustomerInput
from gleaming_admin.services.customer_service import CustomerService


@pytest.fixture
def customers():
    repository = MagicMock()
    repository.find_all.return_value = [
        Customer(id="c1", first_name="Asha", last_name="Rao", email="asha@example.com"),
        Customer(id="c2", first_name="Ravi", last_name="Kumar", email="rk@shop.in"),
    ]
    return repository


@pytest.fixture
def payload():
    return CustomerInput(firstName="Meera", lastName="Iyer", email="meera@example.com", city="Chennai")


class TestListCustomers:

    def test_no_search(self, customers):
        assert len(CustomerService(customers, MagicMock()).list_customers()) == 2

    @pytest.mark.parametrize("term,expected", [
        ("asha rao", ["c1"]),
        ("KUMAR", ["c2"]),
        ("shop.in", ["c2"]),
        ("nobody", []),
    ])
    def test_search(self, customers, term, expected):
        found = CustomerService(customers, MagicMock()).list_customers(term)
        assert [c.id for c in found] == expected


class TestWrites:

    def test_create(self, payload):
        repository = MagicMock()
        repository.create.return_value = "new1"
        repository.find_by_id.return_value = Customer(id="new1", first_name="Meera")

        customer = CustomerService(repository, MagicMock()).create_customer(payload)

        document = repository.create.call_args[0][0]
        assert document["email"] == "meera@example.com"
        assert document["address"]["city"] == "Chennai"
        assert customer.id == "new1"

    def test_update_missing(self, payload):
        repository = MagicMock()
        repository.update.return_value = False
        with pytest.raises(CustomerNotFoundError):
            CustomerService(repository, MagicMock()).update_customer("c9", payload)

    def test_delete_missing(self):
        repository = MagicMock()
        repository.delete.return_value = False
        with pytest.raises(CustomerNotFoundError):
            CustomerService(repository, MagicMock()).delete_customer("c9")


class TestOrderHistory:

    def test_history_uses_customer_name(self):
        customer = Customer(id="c1", first_name="Asha")
        customers = MagicMock()
        customers.find_by_id.return_value = customer
        orders = MagicMock()
        orders.find_by_user.return_value = []

        CustomerService(customers, orders).customer_order_history("c1")

        orders.find_by_user.assert_called_once_with("c1", {"c1": customer})

    def test_history_of_missing_customer(self):
        customers = MagicMock()
        customers.find_by_id.return_value = None
        with pytest.raises(CustomerNotFoundError):
            CustomerService(customers, MagicMock()).customer_order_history("c9")
