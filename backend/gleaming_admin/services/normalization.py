"""
Normalization of storefront documents

The storefront has written orders and order items with several naming
conventions over time (orderDate / order_date, totalAmount / total_amount /
totalPrice, price / unitPrice / amount, quantity / qty / pieces ...), numbers
stored as formatted strings and addresses stored either as objects or plain
text. Everything read from the database passes through here before reaching
the domain models.
"""
import logging
import re
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from dateutil.parser import isoparse

from gleaming_admin.core.config import settings
from gleaming_admin.domain.customer import Customer
from gleaming_admin.domain.order import Address, CustomerSummary, Order, OrderItem
from gleaming_admin.domain.product import Product
from gleaming_admin.services.delivery import calculate_delivery_range

logger = logging.getLogger(__name__)

_NUMBER_PREFIX = re.compile(r"\d*\.?\d+")

ADDRESS_KEYS = {
    "street": ("street", "addressLine1", "line1", "address"),
    "city": ("city", "town"),
    "state": ("state", "province", "region"),
    "zip": ("zip", "postalCode", "pincode", "zipCode"),
    "country": ("country",),
}


def parse_number(value: Any) -> float:
    """
    Coerce a stored number to float.

    Strings lose every character that is not a digit or a dot
    ("₹1,250.00" -> 1250.0); anything unparseable is 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, str):
        clean = re.sub(r"[^\d.]", "", value)
        match = _NUMBER_PREFIX.match(clean)
        return float(match.group(0)) if match else 0
    return 0


def first_present(doc: Mapping, *keys: str, default=None):
    """First truthy value among alternative keys"""
    for key in keys:
        value = doc.get(key)
        if value:
            return value
    return default


def first_defined(doc: Mapping, *keys: str, default=None):
    """First non-null value among alternative keys (0 and "" count)"""
    for key in keys:
        value = doc.get(key)
        if value is not None:
            return value
    return default


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Normalize a stored timestamp to an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC), dates, ISO strings,
    epoch seconds or milliseconds, and exported timestamp maps
    ({"seconds": ...} or {"_seconds": ...}).
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, Mapping):
        seconds = first_defined(value, "seconds", "_seconds")
        if seconds is None:
            return None
        nanos = first_defined(value, "nanoseconds", "_nanoseconds", default=0)
        return datetime.fromtimestamp(float(seconds) + float(nanos) / 1e9, tz=timezone.utc)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        seconds = value / 1000 if value > 1e11 else value
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    if isinstance(value, str):
        try:
            parsed = isoparse(value)
        except (ValueError, OverflowError):
            logger.debug(f"Unparseable timestamp: {value!r}")
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


def _address_value(address: Mapping, keys: Iterable[str]) -> Optional[str]:
    lowered = {str(k).lower(): v for k, v in address.items()}
    for key in keys:
        candidates = (
            address.get(key),
            address.get(key[:1].upper() + key[1:]),
            lowered.get(key.lower()),
        )
        for value in candidates:
            if value and isinstance(value, (str, int, float)) and not isinstance(value, bool):
                return str(value)
    return None


def normalize_address(value: Any) -> Optional[Address]:
    """Normalize an address stored as an object, a string, or nothing"""
    if not value:
        return None
    if isinstance(value, str):
        return Address(text=value)
    if not isinstance(value, Mapping):
        return None

    fields = {name: _address_value(value, keys) for name, keys in ADDRESS_KEYS.items()}
    if not (fields["street"] or fields["city"] or fields["zip"]):
        parts = [
            str(v) for v in value.values()
            if isinstance(v, (str, int, float)) and not isinstance(v, bool) and str(v)
        ]
        return Address(text=", ".join(parts)) if parts else None
    return Address(**fields)


def normalize_customer(doc: Mapping, doc_id: str) -> Customer:
    return Customer(
        id=doc_id,
        first_name=first_present(doc, "firstName", "first_name", default=""),
        last_name=first_present(doc, "lastName", "last_name", default=""),
        email=first_present(doc, "email", default=""),
        phone=first_present(doc, "phone", "phoneNumber", "phone_number"),
        address=normalize_address(doc.get("address")),
        is_admin=first_defined(doc, "isAdmin", "is_admin") is True,
    )


def normalize_product(doc: Mapping, doc_id: str) -> Product:
    stock = first_defined(doc, "stockQuantity", "stock_quantity")
    image_urls = first_present(doc, "imageUrls", "image_urls", default=[])
    if isinstance(image_urls, str):
        image_urls = [image_urls]
    sizes = doc.get("sizes") or []
    if isinstance(sizes, str):
        sizes = [s.strip() for s in sizes.split(",") if s.strip()]
    return Product(
        id=doc_id,
        name=doc.get("name") or "",
        description=doc.get("description") or "",
        price=parse_number(first_defined(doc, "price", "unitPrice", "amount", default=0)),
        category=doc.get("category") or "",
        image_urls=[str(url) for url in image_urls],
        availability=doc.get("availability") or "READY TO SHIP",
        type=doc.get("type"),
        material=doc.get("material"),
        sizes=[str(s) for s in sizes],
        stock_quantity=int(parse_number(stock)) if stock is not None else None,
        is_bestseller=first_defined(doc, "isBestseller", "is_bestseller") is True,
        price_on_request=first_defined(doc, "priceOnRequest", "price_on_request") is True,
        slug=doc.get("slug"),
    )


def normalize_order(
    doc: Mapping,
    doc_id: str,
    user_id: Optional[str] = None,
    customers: Optional[Mapping[str, Customer]] = None,
) -> Order:
    """
    Build an Order from a stored document.

    ``user_id`` is the parent key the order is stored under; the document's
    own userId is only a fallback. Customer name and email come from the
    customer record when there is one.
    """
    uid = user_id or doc.get("userId") or ""
    customer = (customers or {}).get(uid)
    embedded = doc.get("customer") if isinstance(doc.get("customer"), Mapping) else {}

    if customer:
        summary = CustomerSummary(name=customer.full_name, email=customer.email or "N/A")
    else:
        summary = CustomerSummary(
            name=embedded.get("name") or "Unknown User",
            email=embedded.get("email") or "N/A",
        )

    raw_total = first_present(doc, "totalAmount", "total_amount", "price", "totalPrice")

    return Order(
        id=doc_id,
        user_id=uid,
        order_id=str(doc.get("orderId") or doc_id),
        customer=summary,
        order_date=to_datetime(first_present(doc, "orderDate", "order_date")),
        total_amount=parse_number(raw_total) if raw_total else 0,
        order_status=first_present(doc, "orderStatus", "status", default="Pending"),
        shipping_address=normalize_address(first_present(doc, "shippingAddress", "shipping_address")),
        billing_address=normalize_address(first_present(doc, "billingAddress", "billing_address")),
        payment_method=first_present(doc, "paymentMethod", "payment_method"),
        stock_decremented=doc.get("stockDecremented") is True,
        tracking_number=first_present(doc, "trackingNumber", "tracking_number"),
        carrier=doc.get("carrier") or None,
    )


def gst_rate_for(item_doc: Mapping, product_doc: Optional[Mapping]) -> float:
    """
    GST percentage for a line: the line's own rate, else the product's
    gst/tax, else the metal rate for gold and silver products.
    """
    if item_doc.get("gst"):
        return parse_number(item_doc["gst"])
    if not product_doc:
        return 0
    product_rate = first_present(product_doc, "gst", "tax")
    if product_rate:
        return parse_number(product_rate)
    if product_doc.get("type") in ("gold", "silver"):
        return settings.METAL_GST_RATE
    return 0


def normalize_order_item(
    doc: Mapping,
    item_id: str,
    product_doc: Optional[Mapping] = None,
    order_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> OrderItem:
    """
    Resolve a line item's price, quantity, GST and stock.

    ``product_doc`` is the catalog document of the item's productId, or None
    when the line has no product or the product was deleted.
    """
    price = parse_number(first_defined(doc, "price", "unitPrice", "amount", "cost", "value", default=0))
    is_estimate = False

    if price == 0 and product_doc:
        backup_price = parse_number(first_present(product_doc, "price", "unitPrice", "amount", default=0))
        if backup_price > 0:
            price = backup_price
            is_estimate = True

    quantity = parse_number(first_defined(doc, "quantity", "qty", "count", "pieces", default=0))
    rate = gst_rate_for(doc, product_doc)
    base_total = price * quantity
    gst_amount = base_total * rate / 100

    stock = None
    availability = None
    delivery = None
    if product_doc:
        raw_stock = product_doc.get("stockQuantity")
        stock = int(parse_number(raw_stock)) if raw_stock is not None else None
        availability = product_doc.get("availability") or None
        delivery = calculate_delivery_range(availability or "READY TO SHIP", order_date, now=now)

    return OrderItem(
        id=item_id,
        product_id=doc.get("productId") or None,
        name=doc.get("name") or "Unknown Item",
        quantity=quantity,
        price=price,
        is_estimate=is_estimate,
        gst_rate=rate,
        base_total=base_total,
        gst_amount=gst_amount,
        subtotal=base_total + gst_amount,
        status=doc.get("status") or "READY TO SHIP",
        stock=stock,
        availability=availability,
        is_low_stock=(
            availability != "MADE TO ORDER"
            and stock is not None
            and stock < settings.LOW_STOCK_THRESHOLD
        ),
        delivery=delivery,
        raw=dict(doc),
    )


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def sort_orders_by_date(orders: Iterable[Order]) -> list:
    """Newest first; orders without a date go last"""
    return sorted(orders, key=lambda o: o.order_date or _EPOCH, reverse=True)
