"""
Product Repository - Data Access Layer for Products

Handles all queries against the ``products`` collection and its
``bestsellers`` mirror. Reads return Product domain models; writes take the
camelCase documents the storefront reads.
"""
from typing import Iterable, List, Optional, Tuple

from psycopg2.extras import Json

from gleaming_admin.core.database import db_transaction, get_db_connection_dict
from gleaming_admin.domain.product import Product
from gleaming_admin.services.normalization import normalize_product


def _like_pattern(term: str) -> str:
    """Substring ILIKE pattern with the LIKE wildcards in term matched literally"""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProductRepository:
    """
    Repository for Product data access

    Every write that touches a product also keeps the bestsellers mirror in
    step, inside the same transaction.
    """

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        return normalize_product(row['data'] or {}, row['id'])

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_by_id(self, product_id: str) -> Optional[Product]:
        """
        Find product by document id

        Returns:
            Product or None if not found
        """
        document = self.find_document(product_id)
        if document is None:
            return None
        return normalize_product(document, product_id)

    def find_document(self, product_id: str) -> Optional[dict]:
        """Stored document of a product, or None"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, data
                FROM products
                WHERE id = %s
            """, (product_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return row['data'] or {}

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        product_type: Optional[str] = None,
        search: Optional[str] = None,
        category: Optional[str] = None,
        availability: Optional[str] = None,
        bestsellers_only: bool = False,
    ) -> List[Product]:
        """
        Find products with filters

        Args:
            product_type: gold or silver
            search: Case-insensitive match on the product name
            category: Exact category
            availability: READY TO SHIP or MADE TO ORDER
            bestsellers_only: Only products flagged isBestseller (the live
                products, not the mirror collection)

        Returns:
            List of products ordered by name
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if product_type:
                conditions.append("data->>'type' = %s")
                params.append(product_type)

            if search:
                conditions.append("data->>'name' ILIKE %s")
                params.append(_like_pattern(search))

            if category:
                conditions.append("data->>'category' = %s")
                params.append(category)

            if availability:
                conditions.append("data->>'availability' = %s")
                params.append(availability)

            if bestsellers_only:
                conditions.append("data->'isBestseller' = 'true'::jsonb")

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT id, data
                FROM products
                WHERE {where_clause}
                ORDER BY data->>'name', id
            """, params)

            rows = cursor.fetchall()
            return [self._map_row_to_product(row) for row in rows]

        finally:
            cursor.close()
            conn.close()

    def count(self) -> int:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT COUNT(*) as total FROM products")
            return cursor.fetchone()['total']

        finally:
            cursor.close()
            conn.close()

    def find_low_stock(self, threshold: int, limit: int = 5) -> List[Product]:
        """
        Products whose stock count is below ``threshold``, lowest first.
        Products that never tracked stock are left out.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, data
                FROM products
                WHERE jsonb_typeof(data->'stockQuantity') = 'number'
                  AND (data->>'stockQuantity')::numeric < %s
                ORDER BY (data->>'stockQuantity')::numeric ASC, id
                LIMIT %s
            """, (threshold, limit))

            rows = cursor.fetchall()
            return [self._map_row_to_product(row) for row in rows]

        finally:
            cursor.close()
            conn.close()

    # ------------------------------------------------------------------
    # Writes (each one batch)
    # ------------------------------------------------------------------

    @staticmethod
    def _set(cursor, table: str, doc_id: str, document: dict, merge: bool = False):
        """Create or overwrite a document; ``merge`` keeps fields not in ``document``"""
        update = f"{table}.data || EXCLUDED.data" if merge else "EXCLUDED.data"
        cursor.execute(f"""
            INSERT INTO {table} (id, data)
            VALUES (%s, %s)
            ON CONFLICT (id) DO UPDATE
            SET data = {update}, updated_at = NOW()
        """, (doc_id, Json(document)))

    @staticmethod
    def _delete(cursor, table: str, doc_id: str) -> bool:
        cursor.execute(f"DELETE FROM {table} WHERE id = %s", (doc_id,))
        return cursor.rowcount > 0

    def _mirror(self, cursor, product_id: str, document: dict):
        if document.get("isBestseller"):
            self._set(cursor, "bestsellers", product_id, {**document, "id": product_id})
        else:
            self._delete(cursor, "bestsellers", product_id)

    def create(self, product_id: str, document: dict):
        """Insert a new product, mirrored when it is a bestseller"""
        with db_transaction() as cursor:
            self._set(cursor, "products", product_id, document)
            if document.get("isBestseller"):
                self._set(cursor, "bestsellers", product_id, {**document, "id": product_id})

    def update(self, product_id: str, document: dict) -> bool:
        """
        Update an existing product's fields and set or remove its mirror.

        Returns:
            False when the product does not exist (nothing is written)
        """
        with db_transaction() as cursor:
            cursor.execute("""
                UPDATE products
                SET data = data || %s, updated_at = NOW()
                WHERE id = %s
            """, (Json(document), product_id))

            if cursor.rowcount == 0:
                return False

            self._mirror(cursor, product_id, document)
            return True

    def merge_bestseller(self, product_id: str, document: dict):
        """Merge a bestseller into both the mirror and the products collection"""
        with db_transaction() as cursor:
            self._set(cursor, "bestsellers", product_id, document, merge=True)
            self._set(cursor, "products", product_id, document, merge=True)

    def delete(self, product_id: str) -> bool:
        """
        Delete a product and its mirror in one batch.

        Returns:
            True if the product existed
        """
        with db_transaction() as cursor:
            existed = self._delete(cursor, "products", product_id)
            self._delete(cursor, "bestsellers", product_id)
            return existed

    def insert_many(self, documents: Iterable[Tuple[str, dict]]) -> int:
        """
        Insert products in a single batch, mirroring bestsellers.

        Returns:
            Number of products written
        """
        count = 0
        with db_transaction() as cursor:
            for product_id, document in documents:
                self._set(cursor, "products", product_id, document)
                if document.get("isBestseller"):
                    self._set(cursor, "bestsellers", product_id, {**document, "id": product_id})
                count += 1
        return count

    # ------------------------------------------------------------------
    # Stock (inside a caller's transaction)
    # ------------------------------------------------------------------

    @staticmethod
    def lock_document(cursor, product_id: str) -> Optional[dict]:
        """Read a product and hold its row lock until the transaction ends"""
        cursor.execute("""
            SELECT id, data
            FROM products
            WHERE id = %s
            FOR UPDATE
        """, (product_id,))
        row = cursor.fetchone()
        return (row['data'] or {}) if row else None

    @staticmethod
    def set_stock(cursor, product_id: str, stock: int):
        cursor.execute("""
            UPDATE products
            SET data = data || jsonb_build_object('stockQuantity', %s::int), updated_at = NOW()
            WHERE id = %s
        """, (stock, product_id))
