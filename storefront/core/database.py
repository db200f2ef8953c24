"""
Connections to Supabase

This module centralizes every way of reaching the backend:
- psycopg2 direct connections to the Supabase Postgres database (tables)
- Supabase service-role client (auth admin API, storage)
- Supabase anon client factory (password sign-in)

Author: TM3
Date: 2026-03-02
"""
import logging
import time
from typing import Optional

import psycopg2
from psycopg2.extras import RealDictCursor
from supabase import create_client, Client

from .config import settings
from .errors import BackendError

logger = logging.getLogger(__name__)


# ============================================================================
# Postgres
# ============================================================================

def _connect(**options):
    if not settings.DATABASE_URL:
        raise BackendError("DATABASE_URL is not set")
    return psycopg2.connect(settings.DATABASE_URL, connect_timeout=settings.DB_CONNECT_TIMEOUT, **options)


def get_db_connection():
    """Plain connection, rows come back as tuples"""
    return _connect()


def get_db_connection_dict():
    """
    Connection whose cursors return RealDictRow rows

    Repositories use this one so a row can be passed straight to a model:

        conn = get_db_connection_dict()
        with conn.cursor() as cursor:
            cursor.execute("SELECT * FROM products WHERE id = %s", [product_id])
            row = cursor.fetchone()  # row["name"], row["price"], ...
        conn.close()
    """
    return _connect(cursor_factory=RealDictCursor)


def get_db_connection_with_retry(max_retries=3, retry_delay=1.0):
    """
    Connect and ping, backing off exponentially between failed attempts

    The Supabase pooler closes idle SSL sessions now and then; only
    OperationalError is retried, anything else surfaces immediately.

    Args:
        max_retries: attempts before giving up
        retry_delay: wait after the first failure, doubled after each one

    Raises:
        psycopg2.OperationalError: from the last attempt
    """
    delay = retry_delay
    for attempt in range(1, max_retries + 1):
        try:
            conn = get_db_connection()
            with conn.cursor() as cursor:
                cursor.execute("SELECT 1")
            if attempt > 1:
                logger.info(f"Database reachable after {attempt} attempts")
            return conn
        except psycopg2.OperationalError as e:
            if attempt == max_retries:
                logger.error(f"Giving up on the database after {max_retries} attempts: {e}")
                raise
            logger.warning(f"Database attempt {attempt}/{max_retries} failed, next try in {delay:.1f}s: {e}")
            time.sleep(delay)
            delay *= 2


# ============================================================================
# Supabase Clients
# ============================================================================

_supabase: Optional[Client] = None


def get_supabase() -> Client:
    """
    Shared service-role Supabase client, created on first use

    Backs the auth admin API (user lookup, labels, metadata) and the image
    bucket. Password sign-ins go through create_auth_client instead.
    """
    global _supabase
    if _supabase is None:
        _supabase = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    return _supabase


def create_auth_client() -> Client:
    """
    Fresh anon-key client for a single password sign-in

    Signing in stores the session on the client, so each login gets its own
    instance instead of touching the shared service-role client.
    """
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
