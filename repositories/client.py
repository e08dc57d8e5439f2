"""
Supabase client initialization.

This module contains *only* the database connection setup. The client is
created lazily on first use so the JSON backend never needs Supabase
credentials.

Environment variables required (Supabase backend only):
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

# The dependency is `supabase` (supabase-py). If your editor can't resolve it,
# install it in your environment: `pip install supabase`.
from supabase import Client, create_client  # type: ignore[import-not-found]


@lru_cache(maxsize=4)
def get_supabase(url: Optional[str], key: Optional[str]) -> Client:
    """
    Return a shared Supabase client for the given credentials.

    Raises:
        RuntimeError: If the URL or key is missing
    """
    if not url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(url, key)


__all__ = ["get_supabase"]
