"""Adapter layer for Supabase operations."""
from .supabase_adapter import (
    is_configured,
    insert_row,
    select_rows,
    update_rows,
    call_rpc,
)

__all__ = [
    "is_configured",
    "insert_row",
    "select_rows",
    "update_rows",
    "call_rpc",
]
