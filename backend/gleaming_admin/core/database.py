"""
PostgreSQL (Supabase) database access

This module centralizes every way of reaching the database:
- psycopg2 direct connections (document reads and writes)
- transaction helpers (batched writes, retried read-then-write transactions)
- SQLAlchemy metadata (table definitions and schema creation)
- Supabase client (auth lookups)

Every collection is a table holding the storefront's JSON document in a
``data JSONB`` column, keyed by ``id`` and, for nested collections, the
parent ids.
"""
import logging
import time
import uuid
from contextlib import contextmanager
from typing import Callable, Optional, TypeVar

import psycopg2
from psycopg2 import errors as pg_errors
from psycopg2.extras import RealDictCursor
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from supabase import Client, create_client

from gleaming_admin.core.config import settings
from gleaming_admin.core.exceptions import TransactionConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ============================================================================
# SQLAlchemy Configuration (table definitions)
# ============================================================================

Base = declarative_base()

_engine = None


def get_engine():
    """Create the SQLAlchemy engine on first use"""
    global _engine
    if _engine is None:
        _engine = create_engine(
            _require_database_url(),
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
        )
    return _engine


# ============================================================================
# psycopg2 Direct Connections
# ============================================================================

def _require_database_url() -> str:
    database_url = settings.DATABASE_URL
    if not database_url:
        raise RuntimeError("DATABASE_URL not configured")
    return database_url


def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Example:
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        cursor.execute("SELECT id, data FROM products")
        rows = cursor.fetchall()  # list of dicts
        cursor.close()
        conn.close()
    """
    return psycopg2.connect(_require_database_url(), cursor_factory=RealDictCursor)


def get_db_connection_dict_with_retry(max_retries=3, retry_delay=1.0):
    """
    Get a RealDictCursor connection with automatic retry on connection failures

    Supabase occasionally drops SSL connections; failed attempts are retried
    with exponential backoff.

    Args:
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    database_url = _require_database_url()
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            return psycopg2.connect(database_url, cursor_factory=RealDictCursor)

        except psycopg2.OperationalError as e:
            last_error = e
            error_msg = str(e)

            if "SSL connection has been closed unexpectedly" in error_msg:
                logger.warning(f"SSL connection error on attempt {attempt}/{max_retries}: {error_msg}")
            else:
                logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {error_msg}")

            if attempt < max_retries:
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")

    raise last_error


# ============================================================================
# Transactions
# ============================================================================

@contextmanager
def db_transaction():
    """
    Context manager for a batch of writes committed atomically.

    Usage:
        with db_transaction() as cursor:
            cursor.execute("DELETE FROM products WHERE id = %s", (product_id,))
            cursor.execute("DELETE FROM bestsellers WHERE id = %s", (product_id,))
    """
    conn = get_db_connection_dict_with_retry()
    cursor = conn.cursor()
    try:
        yield cursor
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()
        conn.close()


RETRYABLE_ERRORS = (pg_errors.SerializationFailure, pg_errors.DeadlockDetected)


def run_transaction(
    work: Callable[..., T],
    max_attempts: Optional[int] = None,
    retry_delay: Optional[float] = None,
) -> T:
    """
    Run ``work(cursor)`` inside a SERIALIZABLE transaction.

    The callable reads, then writes. When Postgres reports a serialization
    failure or deadlock because another writer touched the same rows, the
    whole callable is run again on a fresh connection, up to ``max_attempts``
    times. ``work`` must therefore have no side effects outside the cursor.

    Raises:
        TransactionConflictError: when every attempt conflicted
    """
    max_attempts = max_attempts or settings.TRANSACTION_MAX_ATTEMPTS
    retry_delay = settings.TRANSACTION_RETRY_DELAY if retry_delay is None else retry_delay
    last_error = None

    for attempt in range(1, max_attempts + 1):
        conn = get_db_connection_dict_with_retry()
        conn.set_session(isolation_level="SERIALIZABLE")
        cursor = conn.cursor()
        try:
            result = work(cursor)
            conn.commit()
            return result
        except RETRYABLE_ERRORS as e:
            conn.rollback()
            last_error = e
            logger.warning(f"Transaction conflict on attempt {attempt}/{max_attempts}: {e}")
            if attempt < max_attempts:
                time.sleep(retry_delay * attempt)
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    raise TransactionConflictError(max_attempts, last_error)


# ============================================================================
# Supabase Client
# ============================================================================

_supabase: Optional[Client] = None


def get_supabase() -> Client:
    """
    FastAPI dependency returning the Supabase client (created on first use)

    Usage:
        @app.get("/data")
        def get_data(sb: Client = Depends(get_supabase)):
            ...
    """
    global _supabase
    if _supabase is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise RuntimeError("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not configured")
        _supabase = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    return _supabase


def new_document_id() -> str:
    """Random document id for records created by the admin panel"""
    return uuid.uuid4().hex[:20]
