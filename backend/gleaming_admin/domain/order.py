"""
Order Domain Models

Orders arrive from the storefront in several historical shapes; these models
are the normalized view the admin API works with (see services.normalization).
"""
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

OrderStatus = Literal["Pending", "Processing", "Shipped", "Delivered", "Cancelled"]

ORDER_STATUSES = ("Pending", "Processing", "Shipped", "Delivered", "Cancelled")

# Statuses in which the ordered units have left stock
STOCK_HOLDING_STATUSES = ("Processing", "Shipped", "Delivered")


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Address(_CamelModel):
    """
    Postal address. ``text`` carries addresses stored as a single string
    (or objects without recognizable keys).
    """

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    text: Optional[str] = None

    def format_lines(self) -> List[str]:
        if self.text and not (self.street or self.city or self.zip):
            return [self.text]
        locality = f"{self.city or ''}, {self.state or ''} {self.zip or ''}".strip()
        lines = [self.street, locality if locality.strip(", ") else None, self.country]
        return [line for line in lines if line]


class CustomerSummary(_CamelModel):
    name: str = "Unknown User"
    email: str = "N/A"


class DeliveryEstimate(_CamelModel):
    estimated_range: str
    is_overdue: bool
    min_date: datetime
    max_date: datetime


class Order(_CamelModel):
    """
    Order domain model - one document of users/{user_id}/orders

    Fields:
        id: Document id
        user_id: Customer that placed the order
        order_id: Storefront order number (falls back to id)
        customer: Display name and email
        order_date: When the order was placed
        total_amount: Order total
        order_status: Pending, Processing, Shipped, Delivered or Cancelled
        shipping_address / billing_address: Normalized addresses
        payment_method: Payment method label
        stock_decremented: Whether the ordered units are currently out of stock
        tracking_number / carrier: Shipment details
    """

    id: str
    user_id: str = ""
    order_id: str = ""
    customer: CustomerSummary = Field(default_factory=CustomerSummary)
    order_date: Optional[datetime] = None
    total_amount: float = 0
    order_status: str = "Pending"
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None
    payment_method: Optional[str] = None
    stock_decremented: bool = False
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None

    @property
    def invoice_number(self) -> str:
        return (self.order_id or self.id)[:6].upper()

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['invoice_number'] = self.invoice_number
        return data


class OrderItem(_CamelModel):
    """
    Order line item with pricing resolved against the product catalog

    price falls back to the catalog price when the line has none
    (is_estimate is then true); subtotal includes GST.
    """

    id: str
    product_id: Optional[str] = None
    name: str = "Unknown Item"
    quantity: float = 0
    price: float = 0
    is_estimate: bool = False
    gst_rate: float = 0
    base_total: float = 0
    gst_amount: float = 0
    subtotal: float = 0
    status: str = "READY TO SHIP"
    stock: Optional[int] = None
    availability: Optional[str] = None
    is_low_stock: bool = False
    delivery: Optional[DeliveryEstimate] = None
    raw: Dict = Field(default_factory=dict, description="Document as stored")


class StatusUpdate(_CamelModel):
    order_status: OrderStatus


class OrderDetailsUpdate(_CamelModel):
    """Edit-order form: status plus shipment details"""

    order_status: OrderStatus
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None


class StatusChangeResult(_CamelModel):
    user_id: str
    order_id: str
    previous_status: str
    new_status: str
    changed: bool
    stock_decremented: bool
    stock_changes: Dict[str, int] = Field(default_factory=dict, description="product id -> new stock")
    skipped_products: List[str] = Field(default_factory=list)
