"""
Customer Repository - Data Access Layer for the users collection
"""
from typing import Dict, List, Optional

from psycopg2.extras import Json

from gleaming_admin.core.database import db_transaction, get_db_connection_dict, new_document_id
from gleaming_admin.domain.customer import Customer
from gleaming_admin.services.normalization import normalize_customer


class CustomerRepository:
    """Repository for customer records"""

    @staticmethod
    def _map_row_to_customer(row: dict) -> Customer:
        return normalize_customer(row['data'] or {}, row['id'])

    def find_all(self) -> List[Customer]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, data
                FROM users
                ORDER BY data->>'firstName', data->>'lastName', id
            """)

            rows = cursor.fetchall()
            return [self._map_row_to_customer(row) for row in rows]

        finally:
            cursor.close()
            conn.close()

    def find_map(self) -> Dict[str, Customer]:
        """All customers keyed by id, for enriching orders"""
        return {customer.id: customer for customer in self.find_all()}

    def find_by_id(self, customer_id: str) -> Optional[Customer]:
        document = self.find_document(customer_id)
        if document is None:
            return None
        return normalize_customer(document, customer_id)

    def find_document(self, customer_id: str) -> Optional[dict]:
        """Stored record of a customer, or None"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, data
                FROM users
                WHERE id = %s
            """, (customer_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return row['data'] or {}

        finally:
            cursor.close()
            conn.close()

    def count(self) -> int:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT COUNT(*) as total FROM users")
            return cursor.fetchone()['total']

        finally:
            cursor.close()
            conn.close()

    def create(self, document: dict) -> str:
        """
        Insert a customer record with a new id

        No auth account is created; the customer cannot sign in until one
        is created in the auth service.

        Returns:
            The new customer id
        """
        customer_id = new_document_id()
        with db_transaction() as cursor:
            cursor.execute("""
                INSERT INTO users (id, data)
                VALUES (%s, %s)
            """, (customer_id, Json(document)))
        return customer_id

    def update(self, customer_id: str, document: dict) -> bool:
        """
        Merge ``document`` into an existing record

        Returns:
            False when the customer does not exist
        """
        with db_transaction() as cursor:
            cursor.execute("""
                UPDATE users
                SET data = data || %s, updated_at = NOW()
                WHERE id = %s
            """, (Json(document), customer_id))
            return cursor.rowcount > 0

    def delete(self, customer_id: str) -> bool:
        """Delete the customer record; their orders are kept"""
        with db_transaction() as cursor:
            cursor.execute("DELETE FROM users WHERE id = %s", (customer_id,))
            return cursor.rowcount > 0
