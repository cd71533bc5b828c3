"""
Unit tests for the transaction helpers
"""
from unittest.mock import MagicMock, patch

import pytest
from psycopg2 import errors as pg_errors

from gleaming_admin.core.database import db_transaction, new_document_id, run_transaction
from gleaming_admin.core.exceptions import TransactionConflictError


@pytest.fixture
def connections():
    """Patch connection creation; each attempt gets a fresh MagicMock connection"""
    created = []

    def _connect(*args, **kwargs):
        conn = MagicMock()
        created.append(conn)
        return conn

    with patch('gleaming_admin.core.database.get_db_connection_dict_with_retry', side_effect=_connect):
        yield created


class TestRunTransaction:

    def test_commits_result(self, connections):
        result = run_transaction(lambda cursor: "done")

        assert result == "done"
        conn = connections[0]
        conn.set_session.assert_called_once_with(isolation_level="SERIALIZABLE")
        conn.commit.assert_called_once()
        conn.close.assert_called_once()

    def test_retries_serialization_failures(self, connections):
        attempts = []

        def work(cursor):
            attempts.append(cursor)
            if len(attempts) < 3:
                raise pg_errors.SerializationFailure("could not serialize access")
            return len(attempts)

        assert run_transaction(work, max_attempts=5, retry_delay=0) == 3
        assert len(connections) == 3
        connections[0].rollback.assert_called_once()
        connections[2].commit.assert_called_once()

    def test_gives_up_after_max_attempts(self, connections):
        def work(cursor):
            raise pg_errors.DeadlockDetected("deadlock detected")

        with pytest.raises(TransactionConflictError) as exc_info:
            run_transaction(work, max_attempts=2, retry_delay=0)

        assert exc_info.value.attempts == 2
        assert isinstance(exc_info.value.last_error, pg_errors.DeadlockDetected)
        assert all(conn.close.called for conn in connections)

    def test_other_errors_are_not_retried(self, connections):
        def work(cursor):
            raise KeyError("boom")

        with pytest.raises(KeyError):
            run_transaction(work, max_attempts=5, retry_delay=0)

        assert len(connections) == 1
        connections[0].rollback.assert_called_once()
        connections[0].commit.assert_not_called()


class TestDbTransaction:

    def test_commit(self, connections):
        with db_transaction() as cursor:
            cursor.execute("SELECT 1")
        connections[0].commit.assert_called_once()

    def test_rollback_on_error(self, connections):
        with pytest.raises(ValueError):
            with db_transaction():
                raise ValueError("bad write")

        connections[0].rollback.assert_called_once()
        connections[0].commit.assert_not_called()
        connections[0].close.assert_called_once()


def test_new_document_id():
    first, second = new_document_id(), new_document_id()
    assert len(first) == 20
    assert first != second
