"""
Order Service - order listing, shipping-status workflow and stock adjustment

Stock leaves the catalog when an order first moves to Processing, Shipped or
Delivered and comes back when an order whose stock was taken is Cancelled.
``stockDecremented`` on the order records which side of that line it is on,
so repeated transitions never double count.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from gleaming_admin.core.database import run_transaction
from gleaming_admin.core.exceptions import OrderNotFoundError
from gleaming_admin.domain.order import (
    ORDER_STATUSES,
    STOCK_HOLDING_STATUSES,
    Order,
    OrderDetailsUpdate,
    OrderItem,
    StatusChangeResult,
)
from gleaming_admin.repositories.customer_repository import CustomerRepository
from gleaming_admin.repositories.order_repository import OrderRepository
from gleaming_admin.repositories.product_repository import ProductRepository
from gleaming_admin.services.normalization import first_defined, first_present, parse_number

logger = logging.getLogger(__name__)


def stock_adjustment(stock_was_decremented: bool, new_status: str) -> Tuple[bool, bool]:
    """
    Decide how a transition to ``new_status`` moves stock.

    Returns:
        (decrement, increment); at most one is true
    """
    decrement = not stock_was_decremented and new_status in STOCK_HOLDING_STATUSES
    increment = stock_was_decremented and new_status == "Cancelled"
    return decrement, increment


def matches_search(order: Order, search: str) -> bool:
    term = search.strip().lower()
    if not term:
        return True
    return (
        term in order.order_id.lower()
        or term in order.id.lower()
        or term in order.customer.name.lower()
        or term in order.customer.email.lower()
    )


class OrderService:
    """Service for order business logic"""

    def __init__(
        self,
        orders: Optional[OrderRepository] = None,
        customers: Optional[CustomerRepository] = None,
    ):
        self.orders = orders or OrderRepository()
        self.customers = customers or CustomerRepository()

    def list_orders(self, search: Optional[str] = None) -> List[Order]:
        """All orders of all customers, newest first, optionally searched"""
        orders = self.orders.find_all(self.customers.find_map())
        if search:
            orders = [order for order in orders if matches_search(order, search)]
        return orders

    def get_order(self, user_id: str, order_id: str) -> Order:
        order = self.orders.find_by_id(user_id, order_id, self.customers.find_map())
        if order is None:
            raise OrderNotFoundError(user_id, order_id)
        return order

    def list_order_items(self, user_id: str, order_id: str, now: Optional[datetime] = None) -> List[OrderItem]:
        order = self.get_order(user_id, order_id)
        return self.orders.find_items(user_id, order_id, order.order_date, now=now)

    def list_customer_orders(self, user_id: str) -> List[Order]:
        return self.orders.find_by_user(user_id, self.customers.find_map())

    def change_order_status(self, user_id: str, order_id: str, new_status: str) -> StatusChangeResult:
        """
        Move an order to ``new_status``, adjusting product stock when the
        transition crosses the stock-holding boundary.

        The order row and every affected product row are locked and written in
        one serializable transaction, retried when a concurrent writer
        conflicts. Products that no longer exist are skipped; stock never goes
        below zero.

        Raises:
            OrderNotFoundError: the order does not exist
            TransactionConflictError: the transaction kept conflicting
        """
        if new_status not in ORDER_STATUSES:
            raise ValueError(f"Invalid order status: {new_status}")

        def work(cursor) -> StatusChangeResult:
            document = OrderRepository.lock_document(cursor, user_id, order_id)
            if document is None:
                raise OrderNotFoundError(user_id, order_id)

            current_status = first_present(document, "orderStatus", "status", default="Pending")
            was_decremented = document.get("stockDecremented") is True

            if current_status == new_status:
                return StatusChangeResult(
                    user_id=user_id,
                    order_id=order_id,
                    previous_status=current_status,
                    new_status=new_status,
                    changed=False,
                    stock_decremented=was_decremented,
                )

            decrement, increment = stock_adjustment(was_decremented, new_status)
            stock_decremented = was_decremented
            stock_changes = {}
            skipped = []

            if decrement or increment:
                items = OrderRepository.item_documents(cursor, user_id, order_id)
                # Lock products in a fixed order
                items = sorted(
                    (item for item in items if item.get("productId")),
                    key=lambda item: str(item["productId"]),
                )
                for item in items:
                    product_id = str(item["productId"])
                    product = ProductRepository.lock_document(cursor, product_id)
                    if product is None:
                        logger.warning(
                            f"Product {product_id} not found; stock not updated for order {order_id}"
                        )
                        skipped.append(product_id)
                        continue

                    current_stock = int(parse_number(first_defined(product, "stockQuantity", default=0)))
                    quantity = int(parse_number(item.get("quantity") or 0))
                    new_stock = current_stock - quantity if decrement else current_stock + quantity
                    new_stock = max(new_stock, 0)

                    ProductRepository.set_stock(cursor, product_id, new_stock)
                    stock_changes[product_id] = new_stock

                stock_decremented = decrement

            OrderRepository.merge_fields(cursor, user_id, order_id, {
                "orderStatus": new_status,
                "status": new_status,
                "stockDecremented": stock_decremented,
            })

            return StatusChangeResult(
                user_id=user_id,
                order_id=order_id,
                previous_status=current_status,
                new_status=new_status,
                changed=True,
                stock_decremented=stock_decremented,
                stock_changes=stock_changes,
                skipped_products=skipped,
            )

        result = run_transaction(work)
        if result.changed:
            logger.info(
                f"Order {user_id}/{order_id}: {result.previous_status} -> {result.new_status} "
                f"(stock adjusted for {len(result.stock_changes)} products)"
            )
        return result

    def update_order_details(self, user_id: str, order_id: str, update: OrderDetailsUpdate) -> Order:
        """
        Save the edit-order form: shipment details, plus a status change
        routed through the stock-adjusting transition.
        """
        order = self.get_order(user_id, order_id)

        if update.order_status != order.order_status:
            self.change_order_status(user_id, order_id, update.order_status)

        updated = self.orders.update_fields(user_id, order_id, {
            "trackingNumber": update.tracking_number or "",
            "carrier": update.carrier or "",
            "updatedAt": datetime.now(timezone.utc).isoformat(),
        })
        if not updated:
            raise OrderNotFoundError(user_id, order_id)

        return self.get_order(user_id, order_id)

    def delete_order(self, user_id: str, order_id: str):
        """Delete an order and its line items; stock is not restored"""
        if not self.orders.delete(user_id, order_id):
            raise OrderNotFoundError(user_id, order_id)
        logger.info(f"Deleted order {user_id}/{order_id}")
