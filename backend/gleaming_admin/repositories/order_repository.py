"""
Order Repository - Data Access Layer for Orders

Orders are nested under the customer that placed them
(users/{user_id}/orders/{order_id}) and their lines under the order
(.../orderItems/{item_id}). Reads return normalized Order / OrderItem models.
"""
from datetime import datetime
from typing import Dict, List, Mapping, Optional

from psycopg2.extras import Json

from gleaming_admin.core.database import db_transaction, get_db_connection_dict
from gleaming_admin.domain.customer import Customer
from gleaming_admin.domain.order import Order, OrderItem
from gleaming_admin.services.normalization import (
    normalize_order,
    normalize_order_item,
    sort_orders_by_date,
)


class OrderRepository:
    """
    Repository for Order data access

    ``customers`` (id -> Customer) enriches orders with the customer's name
    and email; without it the name embedded in the order document is used.
    """

    @staticmethod
    def _map_row_to_order(row: dict, customers: Optional[Mapping[str, Customer]] = None) -> Order:
        return normalize_order(row['data'] or {}, row['id'], row['user_id'], customers)

    def find_all(self, customers: Optional[Mapping[str, Customer]] = None) -> List[Order]:
        """
        Every order of every customer, newest first

        Dates are stored in several formats, so ordering happens after
        normalization.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT user_id, id, data
                FROM orders
            """)

            rows = cursor.fetchall()
            return sort_orders_by_date(self._map_row_to_order(row, customers) for row in rows)

        finally:
            cursor.close()
            conn.close()

    def find_by_user(
        self,
        user_id: str,
        customers: Optional[Mapping[str, Customer]] = None,
    ) -> List[Order]:
        """A customer's orders, newest first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT user_id, id, data
                FROM orders
                WHERE user_id = %s
            """, (user_id,))

            rows = cursor.fetchall()
            return sort_orders_by_date(self._map_row_to_order(row, customers) for row in rows)

        finally:
            cursor.close()
            conn.close()

    def find_by_id(
        self,
        user_id: str,
        order_id: str,
        customers: Optional[Mapping[str, Customer]] = None,
    ) -> Optional[Order]:
        """
        Find order by parent customer and document id

        Returns:
            Order or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT user_id, id, data
                FROM orders
                WHERE user_id = %s AND id = %s
            """, (user_id, order_id))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_order(row, customers)

        finally:
            cursor.close()
            conn.close()

    def find_items(
        self,
        user_id: str,
        order_id: str,
        order_date: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> List[OrderItem]:
        """
        Line items of an order, priced against the current catalog

        Each line is joined with the product its productId points to; lines
        whose product was deleted keep their own data only.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT oi.id, oi.data, p.data AS product
                FROM order_items oi
                LEFT JOIN products p ON p.id = oi.data->>'productId'
                WHERE oi.user_id = %s AND oi.order_id = %s
                ORDER BY oi.created_at, oi.id
            """, (user_id, order_id))

            rows = cursor.fetchall()
            return [
                normalize_order_item(row['data'] or {}, row['id'], row['product'], order_date, now=now)
                for row in rows
            ]

        finally:
            cursor.close()
            conn.close()

    def update_fields(self, user_id: str, order_id: str, fields: dict) -> bool:
        """
        Merge ``fields`` into the order document

        Returns:
            False when the order does not exist
        """
        with db_transaction() as cursor:
            cursor.execute("""
                UPDATE orders
                SET data = data || %s, updated_at = NOW()
                WHERE user_id = %s AND id = %s
            """, (Json(fields), user_id, order_id))
            return cursor.rowcount > 0

    def delete(self, user_id: str, order_id: str) -> bool:
        """
        Delete an order together with its line items

        Returns:
            True if the order existed
        """
        with db_transaction() as cursor:
            cursor.execute("""
                DELETE FROM order_items
                WHERE user_id = %s AND order_id = %s
            """, (user_id, order_id))
            cursor.execute("""
                DELETE FROM orders
                WHERE user_id = %s AND id = %s
            """, (user_id, order_id))
            return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Inside a caller's transaction
    # ------------------------------------------------------------------

    @staticmethod
    def lock_document(cursor, user_id: str, order_id: str) -> Optional[dict]:
        """Read an order and hold its row lock until the transaction ends"""
        cursor.execute("""
            SELECT data
            FROM orders
            WHERE user_id = %s AND id = %s
            FOR UPDATE
        """, (user_id, order_id))
        row = cursor.fetchone()
        return (row['data'] or {}) if row else None

    @staticmethod
    def item_documents(cursor, user_id: str, order_id: str) -> List[Dict]:
        cursor.execute("""
            SELECT id, data
            FROM order_items
            WHERE user_id = %s AND order_id = %s
            ORDER BY created_at, id
        """, (user_id, order_id))
        return [row['data'] or {} for row in cursor.fetchall()]

    @staticmethod
    def merge_fields(cursor, user_id: str, order_id: str, fields: dict):
        cursor.execute("""
            UPDATE orders
            SET data = data || %s, updated_at = NOW()
            WHERE user_id = %s AND id = %s
        """, (Json(fields), user_id, order_id))
