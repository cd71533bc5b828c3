"""
Unit tests for delivery window estimates
"""
from datetime import datetime, timedelta, timezone

from gleaming_admin.services.delivery import calculate_delivery_range


class TestCalculateDeliveryRange:

    def test_ready_to_ship_window(self, now):
        estimate = calculate_delivery_range("READY TO SHIP", now, now=now)

        assert estimate.min_date == now + timedelta(days=8)
        assert estimate.max_date == now + timedelta(days=10)
        assert estimate.estimated_range == "20 Mar - 22 Mar"
        assert estimate.is_overdue is False

    def test_made_to_order_window(self, now):
        estimate = calculate_delivery_range("MADE TO ORDER", now, now=now)

        assert estimate.min_date == now + timedelta(days=25)
        assert estimate.max_date == now + timedelta(days=28)
        assert estimate.estimated_range == "06 Apr - 09 Apr"

    def test_unknown_availability_uses_made_to_order_window(self, now):
        estimate = calculate_delivery_range("", now, now=now)
        assert estimate.max_date == now + timedelta(days=28)

    def test_overdue(self, now):
        ordered = now - timedelta(days=11)
        assert calculate_delivery_range("READY TO SHIP", ordered, now=now).is_overdue is True

    def test_not_overdue_on_last_day(self, now):
        ordered = now - timedelta(days=10)
        assert calculate_delivery_range("READY TO SHIP", ordered, now=now).is_overdue is False

    def test_without_order_date_starts_now(self, now):
        estimate = calculate_delivery_range("READY TO SHIP", None, now=now)
        assert estimate.min_date == now + timedelta(days=8)

    def test_range_is_formatted_in_store_timezone(self):
        # 20:00 UTC is already the next day in India
        late = datetime(2025, 3, 12, 20, 0, tzinfo=timezone.utc)
        estimate = calculate_delivery_range("READY TO SHIP", late, now=late)
        assert estimate.estimated_range == "21 Mar - 23 Mar"
