"""Small helpers shared by the Supabase-backed services."""

from typing import Any, Dict, Optional

from postgrest.exceptions import APIError

UNIQUE_VIOLATION = "23505"


def first_row(result: Any) -> Optional[Dict[str, Any]]:
    """First row of a query result, or None when nothing matched"""
    if result is None or not result.data:
        return None
    if isinstance(result.data, list):
        return result.data[0]
    return result.data


def is_unique_violation(exc: Exception) -> bool:
    """True if a backend error is a Postgres unique-constraint violation"""
    if isinstance(exc, APIError) and exc.code == UNIQUE_VIOLATION:
        return True
    message = str(exc).lower()
    return "duplicate key" in message or UNIQUE_VIOLATION in message


def compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None (fields not provided in a partial update)"""
    return {k: v for k, v in data.items() if v is not None}
