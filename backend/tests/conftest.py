"""
Pytest fixtures and configuration for Gleaming Admin backend tests

Database access is mocked throughout: repositories get MagicMock connections
and cursors, API tests run against the app with the admin check overridden.
"""
from contextlib import contextmanager
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from gleaming_admin.core.auth import TokenUser, require_admin
from gleaming_admin.main import app


@pytest.fixture
def mock_db():
    """
    Provides a (connection, cursor) pair of MagicMocks

    Usage:
        mock_get_conn.return_value = mock_db[0]
    """
    conn = MagicMock()
    cursor = MagicMock()
    conn.cursor.return_value = cursor
    return conn, cursor


@pytest.fixture
def fake_transaction():
    """
    Provides a stand-in for db_transaction() and the cursor it yields

    Usage:
        transaction, cursor = fake_transaction
        with patch('...db_transaction', transaction):
            ...
    """
    cursor = MagicMock()
    cursor.rowcount = 1

    @contextmanager
    def _transaction():
        yield cursor

    return _transaction, cursor


@pytest.fixture
def admin_user():
    return TokenUser(id="admin-uid", email="admin@example.com")


@pytest.fixture
def client(admin_user):
    """TestClient with the admin check satisfied"""
    app.dependency_overrides[require_admin] = lambda: admin_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    """TestClient with the real auth dependencies"""
    app.dependency_overrides.clear()
    return TestClient(app)


@pytest.fixture
def now():
    return datetime(2025, 3, 12, 9, 30, tzinfo=timezone.utc)  # a Wednesday


@pytest.fixture
def sample_product_document():
    return {
        "name": "Temple Jhumka Earrings",
        "description": "Antique finish 22k jhumkas",
        "price": 0,
        "category": "Earrings",
        "imageUrls": ["https://cdn.example.com/jhumka-1.jpg"],
        "availability": "READY TO SHIP",
        "type": "gold",
        "material": "Gold",
        "sizes": [],
        "stockQuantity": 4,
        "isBestseller": True,
        "priceOnRequest": True,
    }


@pytest.fixture
def sample_order_document():
    return {
        "orderId": "ord98xk2",
        "userId": "cust-1",
        "orderDate": {"seconds": 1741420800, "nanoseconds": 0},  # 2025-03-08 08:00 UTC
        "totalAmount": "₹12,450.00",
        "orderStatus": "Pending",
        "shippingAddress": {
            "street": "14 MG Road",
            "city": "Bengaluru",
            "state": "KA",
            "zip": "560001",
            "country": "India",
        },
        "paymentMethod": "UPI",
    }
