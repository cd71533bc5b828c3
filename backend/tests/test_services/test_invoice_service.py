"""
Unit tests for PDF invoice generation
"""
from datetime import datetime, timezone

import pytest

from gleaming_admin.core.exceptions import EmptyInvoiceError
from gleaming_admin.domain.order import Address, CustomerSummary, Order, OrderItem
from gleaming_admin.services.invoice_service import (
    format_invoice_date,
    generate_invoice_pdf,
    invoice_filename,
    money,
)


@pytest.fixture
def order():
    return Order(
        id="doc98765",
        user_id="cust-1",
        order_id="ord98xk2",
        customer=CustomerSummary(name="Asha <Rao> & Co", email="asha@example.com"),
        order_date=datetime(2025, 3, 5, 6, 0, tzinfo=timezone.utc),
        total_amount=12450,
        shipping_address=Address(street="14 MG Road", city="Bengaluru", state="KA", zip="560001"),
    )


@pytest.fixture
def items():
    return [
        OrderItem(id="i1", name="Temple Jhumka", quantity=1, price=8450),
        OrderItem(id="i2", name="Silver Anklet", quantity=2, price=2000),
    ]


class TestFormatting:

    def test_money(self):
        assert money(1234.5) == "Rs. 1234.50"
        assert money(0) == "Rs. 0.00"

    def test_invoice_date(self):
        assert format_invoice_date(datetime(2025, 3, 5, 6, 0, tzinfo=timezone.utc)) == "March 5, 2025"

    def test_invoice_date_in_store_timezone(self):
        assert format_invoice_date(datetime(2025, 3, 5, 20, 0, tzinfo=timezone.utc)) == "March 6, 2025"

    def test_missing_date(self):
        assert format_invoice_date(None) == "N/A"

    def test_filename(self, order):
        assert invoice_filename(order) == "invoice-ORD98X.pdf"


class TestGenerateInvoicePdf:

    def test_renders_pdf(self, order, items):
        pdf = generate_invoice_pdf(order, items)

        assert pdf.startswith(b"%PDF-")
        assert pdf.rstrip().endswith(b"%%EOF")

    def test_without_addresses_or_date(self, items):
        pdf = generate_invoice_pdf(Order(id="bare1"), items)
        assert pdf.startswith(b"%PDF-")

    def test_long_orders_span_pages(self, order):
        many = [OrderItem(id=f"i{n}", name=f"Bead {n}", quantity=1, price=10) for n in range(120)]

        assert len(generate_invoice_pdf(order, many)) > len(generate_invoice_pdf(order, many[:2]))

    def test_empty_order(self, order):
        with pytest.raises(EmptyInvoiceError) as exc_info:
            generate_invoice_pdf(order, [])
        assert "does not have any items" in str(exc_info.value)
