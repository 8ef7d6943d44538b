"""
Supabase client construction. One client per process; the caller owns it.
"""
import logging
from typing import Optional

from supabase import Client, create_client

from core.config import get_supabase_key, get_supabase_url
from core.errors import StorageError

logger = logging.getLogger(__name__)


def create_supabase_client(url: Optional[str] = None, key: Optional[str] = None) -> Client:
    """Build a client from explicit credentials or the environment. Raises StorageError if unconfigured."""
    url = url or get_supabase_url()
    key = key or get_supabase_key()
    if not url or not key:
        logger.error("STORAGE Supabase credentials missing (SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY)")
        raise StorageError("Document store is not configured.")
    logger.info("STORAGE connecting to Supabase url=%s", url)
    return create_client(url, key)
