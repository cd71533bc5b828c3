"""
Dashboard Service - headline stats, recent orders, low stock and the
last week's revenue / order charts

Day boundaries (presets, chart buckets) are taken in the store's timezone.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from gleaming_admin.core.config import settings
from gleaming_admin.domain.order import Order
from gleaming_admin.repositories.customer_repository import CustomerRepository
from gleaming_admin.repositories.order_repository import OrderRepository
from gleaming_admin.repositories.product_repository import ProductRepository
from gleaming_admin.services.delivery import store_timezone

DATE_FILTERS = ("all_time", "today", "week", "month", "year", "custom")

RECENT_ORDERS_LIMIT = 5
LOW_STOCK_LIMIT = 5
CHART_DAYS = 7


def _start_of_day(day: date, tz) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def _end_of_day(day: date, tz) -> datetime:
    return datetime.combine(day, time.max, tzinfo=tz)


def resolve_date_range(
    preset: str = "all_time",
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    now: Optional[datetime] = None,
) -> Optional[Tuple[datetime, datetime]]:
    """
    Turn a filter preset into an inclusive (start, end) range, or None for
    all time.

    Weeks run Sunday to Saturday. A custom range without ``date_to`` covers
    the single day ``date_from``; the end day is included up to its last
    microsecond.

    Raises:
        ValueError: unknown preset, or custom without ``date_from``
    """
    if preset not in DATE_FILTERS:
        raise ValueError(f"Unknown date filter: {preset}")
    if preset == "all_time":
        return None

    tz = store_timezone()
    today = (now or datetime.now(timezone.utc)).astimezone(tz).date()

    if preset == "today":
        first, last = today, today
    elif preset == "week":
        # weekday(): Monday=0 ... Sunday=6
        first = today - timedelta(days=(today.weekday() + 1) % 7)
        last = first + timedelta(days=6)
    elif preset == "month":
        first = today.replace(day=1)
        last = first + relativedelta(months=1) - timedelta(days=1)
    elif preset == "year":
        first = date(today.year, 1, 1)
        last = date(today.year, 12, 31)
    else:
        if date_from is None:
            raise ValueError("A custom date range needs a start date")
        first, last = date_from, date_to or date_from
        if last < first:
            raise ValueError("The end date is before the start date")

    return _start_of_day(first, tz), _end_of_day(last, tz)


def filter_orders(orders: List[Order], date_range: Optional[Tuple[datetime, datetime]]) -> List[Order]:
    """Orders placed inside the range; undated orders only count for all time"""
    if date_range is None:
        return list(orders)
    start, end = date_range
    return [o for o in orders if o.order_date is not None and start <= o.order_date <= end]


def order_stats(orders: List[Order]) -> Dict:
    return {
        "total_orders": len(orders),
        "total_revenue": sum(o.total_amount for o in orders),
        "completed_orders": sum(1 for o in orders if o.order_status == "Delivered"),
        "pending_orders": sum(1 for o in orders if o.order_status == "Pending"),
    }


def weekly_series(orders: List[Order], now: Optional[datetime] = None) -> Tuple[List[Dict], List[Dict]]:
    """
    Revenue and order counts for the last seven days including today,
    oldest first, labelled with the short weekday name.
    """
    tz = store_timezone()
    today = (now or datetime.now(timezone.utc)).astimezone(tz).date()
    days = [today - timedelta(days=offset) for offset in range(CHART_DAYS - 1, -1, -1)]

    revenue = {day: 0.0 for day in days}
    counts = {day: 0 for day in days}

    for order in orders:
        if order.order_date is None:
            continue
        day = order.order_date.astimezone(tz).date()
        if day in revenue:
            revenue[day] += order.total_amount
            counts[day] += 1

    weekly_revenue = [{"name": day.strftime("%a"), "date": day.isoformat(), "total": revenue[day]} for day in days]
    weekly_orders = [{"name": day.strftime("%a"), "date": day.isoformat(), "total": counts[day]} for day in days]
    return weekly_revenue, weekly_orders


class DashboardService:

    def __init__(
        self,
        products: Optional[ProductRepository] = None,
        orders: Optional[OrderRepository] = None,
        customers: Optional[CustomerRepository] = None,
    ):
        self.products = products or ProductRepository()
        self.orders = orders or OrderRepository()
        self.customers = customers or CustomerRepository()

    def get_dashboard(
        self,
        preset: str = "all_time",
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> Dict:
        """
        Everything the dashboard page shows.

        Stats follow the date filter; recent orders, low stock and the weekly
        charts always cover all orders.
        """
        date_range = resolve_date_range(preset, date_from, date_to, now)

        customer_map = self.customers.find_map()
        all_orders = self.orders.find_all(customer_map)
        filtered = filter_orders(all_orders, date_range)

        if date_range is None:
            total_customers = self.customers.count()
        else:
            total_customers = len({o.user_id for o in filtered})

        stats = {
            "total_products": self.products.count(),
            "total_customers": total_customers,
            **order_stats(filtered),
        }

        weekly_revenue, weekly_orders = weekly_series(all_orders, now)

        return {
            "currency": settings.CURRENCY_SYMBOL,
            "filter": {
                "preset": preset,
                "from": date_range[0].isoformat() if date_range else None,
                "to": date_range[1].isoformat() if date_range else None,
            },
            "stats": stats,
            "recent_orders": [o.to_dict() for o in all_orders[:RECENT_ORDERS_LIMIT]],
            "low_stock": [
                p.to_dict()
                for p in self.products.find_low_stock(settings.LOW_STOCK_THRESHOLD, LOW_STOCK_LIMIT)
            ],
            "weekly_revenue": weekly_revenue,
            "weekly_orders": weekly_orders,
        }
