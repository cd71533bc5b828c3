"""
Delivery window estimates for order lines
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from gleaming_admin.core.config import settings
from gleaming_admin.domain.order import DeliveryEstimate

# (min days, max days) after the order date
READY_TO_SHIP_WINDOW = (8, 10)
MADE_TO_ORDER_WINDOW = (25, 28)


def store_timezone() -> ZoneInfo:
    return ZoneInfo(settings.STORE_TIMEZONE)


def calculate_delivery_range(
    availability: str,
    order_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> DeliveryEstimate:
    """
    Estimate when an order line arrives.

    READY TO SHIP lines arrive 8-10 days after the order, anything else
    25-28 days. Without an order date the window starts now. The range is
    formatted in the store's timezone ("05 Mar - 07 Mar").
    """
    now = now or datetime.now(timezone.utc)
    base = order_date or now
    min_days, max_days = READY_TO_SHIP_WINDOW if availability == "READY TO SHIP" else MADE_TO_ORDER_WINDOW

    min_date = base + timedelta(days=min_days)
    max_date = base + timedelta(days=max_days)

    tz = store_timezone()
    estimated_range = (
        f"{min_date.astimezone(tz).strftime('%d %b')} - {max_date.astimezone(tz).strftime('%d %b')}"
    )

    return DeliveryEstimate(
        estimated_range=estimated_range,
        is_overdue=now > max_date,
        min_date=min_date,
        max_date=max_date,
    )
