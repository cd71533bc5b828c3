"""
Unit tests for CustomerRepository
"""
from unittest.mock import patch

from gleaming_admin.repositories.customer_repository import CustomerRepository


class TestCustomerRepository:

    @patch('gleaming_admin.repositories.customer_repository.get_db_connection_dict')
    def test_find_map(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = [
            {'id': 'c1', 'data': {'firstName': 'Asha', 'lastName': 'Rao', 'isAdmin': True}},
            {'id': 'c2', 'data': None},
        ]

        customers = CustomerRepository().find_map()

        assert set(customers) == {'c1', 'c2'}
        assert customers['c1'].full_name == 'Asha Rao'
        assert customers['c1'].is_admin is True
        assert customers['c2'].full_name == ''
        mock_conn.close.assert_called_once()

    @patch('gleaming_admin.repositories.customer_repository.get_db_connection_dict')
    def test_find_document(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = {'id': 'c1', 'data': {'isAdmin': True}}

        assert CustomerRepository().find_document('c1') == {'isAdmin': True}

    @patch('gleaming_admin.repositories.customer_repository.get_db_connection_dict')
    def test_find_by_id_not_found(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = None

        assert CustomerRepository().find_by_id('nope') is None

    @patch('gleaming_admin.repositories.customer_repository.new_document_id', return_value='c9')
    def test_create(self, mock_id, fake_transaction):
        transaction, cursor = fake_transaction
        with patch('gleaming_admin.repositories.customer_repository.db_transaction', transaction):
            customer_id = CustomerRepository().create({'firstName': 'Meera'})

        assert customer_id == 'c9'
        params = cursor.execute.call_args[0][1]
        assert params[0] == 'c9'
        assert params[1].adapted == {'firstName': 'Meera'}

    def test_update_missing(self, fake_transaction):
        transaction, cursor = fake_transaction
        cursor.rowcount = 0
        with patch('gleaming_admin.repositories.customer_repository.db_transaction', transaction):
            assert CustomerRepository().update('nope', {}) is False

    def test_delete(self, fake_transaction):
        transaction, cursor = fake_transaction
        with patch('gleaming_admin.repositories.customer_repository.db_transaction', transaction):
            assert CustomerRepository().delete('c1') is True

        assert "DELETE FROM users" in cursor.execute.call_args[0][0]

    @patch('gleaming_admin.repositories.customer_repository.get_db_connection_dict')
    def test_count(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = {'total': 7}

        assert CustomerRepository().count() == 7
        assert "COUNT(*)" in mock_cursor.execute.call_args[0][0]
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()
