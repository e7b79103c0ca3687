"""
Database clients for the two product stores.

- Public catalog: PostgreSQL, one short-lived connection per unit of work.
- Private store: Supabase, a single shared client.
"""

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator, Optional

import psycopg2
from psycopg2.extensions import connection as PgConnection
from supabase import Client, create_client

from config.settings import get_settings


class SupabaseClientError(Exception):
    """Raised when Supabase client cannot be created."""
    pass


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """
    Get the singleton Supabase client instance.

    Uses lru_cache to ensure only one client is created and reused.

    Returns:
        Client: The Supabase client instance

    Raises:
        SupabaseClientError: If client cannot be created
    """
    settings = get_settings()
    if not settings.private_store_configured:
        raise SupabaseClientError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
    try:
        return create_client(settings.supabase_url, settings.supabase_service_key)
    except Exception as e:
        raise SupabaseClientError(f"Failed to create Supabase client: {e}") from e


def get_supabase_client_optional() -> Optional[Client]:
    """
    Get the Supabase client, returning None if it cannot be created.

    Private products are then unavailable but public assembly still works.
    """
    try:
        return get_supabase_client()
    except SupabaseClientError:
        return None


@contextmanager
def catalog_connection() -> Iterator[PgConnection]:
    """
    Open a connection to the public catalog and close it on exit.

    Connection errors surface as psycopg2.Error.

    Usage:
        with catalog_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
    """
    settings = get_settings()
    conn = psycopg2.connect(**settings.catalog_connect_kwargs)
    try:
        yield conn
    finally:
        conn.close()
