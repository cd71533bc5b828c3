"""
Unit tests for ProductRepository

These tests validate repository logic without requiring a database connection.
"""
from unittest.mock import MagicMock, patch

from gleaming_admin.domain.product import Product
from gleaming_admin.repositories.product_repository import ProductRepository


def _executed_sql(cursor):
    return [call[0][0] for call in cursor.execute.call_args_list]


class TestProductRepositoryReads:
    """Test read methods"""

    @patch('gleaming_admin.repositories.product_repository.get_db_connection_dict')
    def test_find_by_id_returns_product(self, mock_get_conn, mock_db, sample_product_document):
        """Test find_by_id returns a Product domain model"""
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = {'id': 'p1', 'data': sample_product_document}

        product = ProductRepository().find_by_id('p1')

        assert isinstance(product, Product)
        assert product.id == 'p1'
        assert product.name == 'Temple Jhumka Earrings'
        assert product.type == 'gold'
        assert product.stock_quantity == 4

        mock_cursor.execute.assert_called_once()
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('gleaming_admin.repositories.product_repository.get_db_connection_dict')
    def test_find_by_id_returns_none_when_not_found(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = None

        assert ProductRepository().find_by_id('missing') is None
        mock_conn.close.assert_called_once()

    @patch('gleaming_admin.repositories.product_repository.get_db_connection_dict')
    def test_find_all_with_filters(self, mock_get_conn, mock_db, sample_product_document):
        """Test filters become WHERE conditions with bound parameters"""
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = [{'id': 'p1', 'data': sample_product_document}]

        products = ProductRepository().find_all(
            product_type='gold', search='jhumka', category='Earrings', bestsellers_only=True,
        )

        assert [p.id for p in products] == ['p1']
        sql, params = mock_cursor.execute.call_args[0]
        assert "data->>'type' = %s" in sql
        assert "ILIKE %s" in sql
        assert "data->>'category' = %s" in sql
        assert "'true'::jsonb" in sql
        assert "availability" not in sql
        assert params == ['gold', '%jhumka%', 'Earrings']

    @patch('gleaming_admin.repositories.product_repository.get_db_connection_dict')
    def test_find_all_search_matches_wildcards_literally(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = []
        repository = ProductRepository()

        repository.find_all(search='ring_1')
        assert mock_cursor.execute.call_args[0][1] == ['%ring\\_1%']

        repository.find_all(search='50%')
        assert mock_cursor.execute.call_args[0][1] == ['%50\\%%']

        repository.find_all(search='a\\b')
        assert mock_cursor.execute.call_args[0][1] == ['%a\\\\b%']

    @patch('gleaming_admin.repositories.product_repository.get_db_connection_dict')
    def test_find_all_without_filters(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = []

        assert ProductRepository().find_all() == []
        assert "WHERE 1=1" in mock_cursor.execute.call_args[0][0]

    @patch('gleaming_admin.repositories.product_repository.get_db_connection_dict')
    def test_find_all_tolerates_empty_documents(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = [{'id': 'p2', 'data': None}]

        product = ProductRepository().find_all()[0]
        assert product.id == 'p2'
        assert product.stock_quantity is None

    @patch('gleaming_admin.repositories.product_repository.get_db_connection_dict')
    def test_find_low_stock(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = [{'id': 'p3', 'data': {'name': 'Nose Pin', 'stockQuantity': 1}}]

        products = ProductRepository().find_low_stock(10, limit=5)

        assert products[0].is_low_stock is True
        sql, params = mock_cursor.execute.call_args[0]
        assert "jsonb_typeof(data->'stockQuantity') = 'number'" in sql
        assert params == (10, 5)


class TestProductRepositoryWrites:
    """Test that writes keep the bestsellers mirror in step"""

    def test_create_bestseller_is_mirrored(self, fake_transaction):
        transaction, cursor = fake_transaction
        with patch('gleaming_admin.repositories.product_repository.db_transaction', transaction):
            ProductRepository().create('p1', {'name': 'Ring', 'isBestseller': True})

        sql = _executed_sql(cursor)
        assert len(sql) == 2
        assert "INSERT INTO products" in sql[0]
        assert "INSERT INTO bestsellers" in sql[1]
        mirrored = cursor.execute.call_args_list[1][0][1][1].adapted
        assert mirrored == {'name': 'Ring', 'isBestseller': True, 'id': 'p1'}

    def test_create_regular_product_is_not_mirrored(self, fake_transaction):
        transaction, cursor = fake_transaction
        with patch('gleaming_admin.repositories.product_repository.db_transaction', transaction):
            ProductRepository().create('p1', {'name': 'Ring', 'isBestseller': False})

        assert len(_executed_sql(cursor)) == 1

    def test_update_unflagged_removes_mirror(self, fake_transaction):
        transaction, cursor = fake_transaction
        with patch('gleaming_admin.repositories.product_repository.db_transaction', transaction):
            updated = ProductRepository().update('p1', {'name': 'Ring', 'isBestseller': False})

        assert updated is True
        sql = _executed_sql(cursor)
        assert "UPDATE products" in sql[0]
        assert "DELETE FROM bestsellers" in sql[1]

    def test_update_missing_product_writes_nothing_else(self, fake_transaction):
        transaction, cursor = fake_transaction
        cursor.rowcount = 0
        with patch('gleaming_admin.repositories.product_repository.db_transaction', transaction):
            updated = ProductRepository().update('gone', {'isBestseller': True})

        assert updated is False
        assert len(_executed_sql(cursor)) == 1

    def test_merge_bestseller_merges_both_collections(self, fake_transaction):
        transaction, cursor = fake_transaction
        with patch('gleaming_admin.repositories.product_repository.db_transaction', transaction):
            ProductRepository().merge_bestseller('p1', {'id': 'p1', 'isBestseller': True})

        sql = _executed_sql(cursor)
        assert "INSERT INTO bestsellers" in sql[0]
        assert "INSERT INTO products" in sql[1]
        assert all("data || EXCLUDED.data" in statement for statement in sql)

    def test_delete_removes_mirror(self, fake_transaction):
        transaction, cursor = fake_transaction
        with patch('gleaming_admin.repositories.product_repository.db_transaction', transaction):
            existed = ProductRepository().delete('p1')

        assert existed is True
        sql = _executed_sql(cursor)
        assert "DELETE FROM products" in sql[0]
        assert "DELETE FROM bestsellers" in sql[1]

    def test_insert_many(self, fake_transaction):
        transaction, cursor = fake_transaction
        with patch('gleaming_admin.repositories.product_repository.db_transaction', transaction):
            count = ProductRepository().insert_many([
                ('a', {'isBestseller': True}),
                ('b', {'isBestseller': False}),
            ])

        assert count == 2
        assert len(_executed_sql(cursor)) == 3


class TestProductRepositoryStock:

    def test_lock_document(self):
        cursor = MagicMock()
        cursor.fetchone.return_value = {'id': 'p1', 'data': {'stockQuantity': 3}}

        assert ProductRepository.lock_document(cursor, 'p1') == {'stockQuantity': 3}
        assert "FOR UPDATE" in cursor.execute.call_args[0][0]

    def test_lock_missing_document(self):
        cursor = MagicMock()
        cursor.fetchone.return_value = None
        assert ProductRepository.lock_document(cursor, 'p1') is None

    def test_set_stock(self):
        cursor = MagicMock()
        ProductRepository.set_stock(cursor, 'p1', 7)

        sql, params = cursor.execute.call_args[0]
        assert "jsonb_build_object('stockQuantity', %s::int)" in sql
        assert params == (7, 'p1')
