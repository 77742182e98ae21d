"""Supabase adapter functions for PostgREST table and RPC operations."""
import os
import httpx
from typing import List, Optional


def _rest_config() -> tuple:
    # Read env vars inside function for testability with monkeypatch
    return os.getenv("SUPABASE_URL"), os.getenv("SUPABASE_SERVICE_KEY")


def _headers(supabase_key: str, **extra) -> dict:
    headers = {
        "apikey": supabase_key,
        "Authorization": f"Bearer {supabase_key}",
        "Content-Type": "application/json",
    }
    headers.update(extra)
    return headers


def is_configured() -> bool:
    """True when both the Supabase URL and service key are set."""
    supabase_url, supabase_key = _rest_config()
    return bool(supabase_url and supabase_key)


async def insert_row(table: str, row: dict) -> dict:
    """
    Insert one row and return the stored representation.

    Args:
        table: Table name, e.g. "typemate_memory"
        row: Column: value pairs to insert

    Returns:
        The inserted row as returned by PostgREST (with id and created_at)

    Raises:
        Exception: If insert fails with non-success status code
    """
    supabase_url, supabase_key = _rest_config()

    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.post(
            f"{supabase_url}/rest/v1/{table}",
            headers=_headers(supabase_key, Prefer="return=representation"),
            json=row,
        )

        if response.status_code not in (200, 201):
            raise Exception(f"Failed to insert into {table}: {response.status_code}")

        data = response.json()
        if isinstance(data, list):
            if not data:
                raise Exception(f"Failed to insert into {table}: empty representation")
            return data[0]
        return data


async def select_rows(
    table: str,
    filters: Optional[dict] = None,
    select: str = "*",
    order: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[dict]:
    """
    Select rows using PostgREST filter syntax.

    Args:
        table: Table name
        filters: Column: operator pairs, e.g. {"user_id": "eq.abc", "embedding": "is.null"}
        select: Column list
        order: Order clause, e.g. "created_at.desc"
        limit: Maximum number of rows

    Raises:
        Exception: If query fails with non-200 status code
    """
    supabase_url, supabase_key = _rest_config()

    params = {"select": select}
    params.update(filters or {})
    if order:
        params["order"] = order
    if limit is not None:
        params["limit"] = str(limit)

    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.get(
            f"{supabase_url}/rest/v1/{table}",
            params=params,
            headers=_headers(supabase_key),
        )

        if response.status_code != 200:
            raise Exception(f"Failed to select from {table}: {response.status_code}")

        return response.json()


async def update_rows(table: str, filters: dict, updates: dict) -> None:
    """
    Update every row matching the filters.

    Args:
        table: Table name
        filters: Column: operator pairs, e.g. {"id": "eq.<uuid>"}
        updates: Dict of field: value pairs to update

    Raises:
        Exception: If update fails with non-success status code
    """
    supabase_url, supabase_key = _rest_config()

    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.patch(
            f"{supabase_url}/rest/v1/{table}",
            params=filters,
            headers=_headers(supabase_key, Prefer="return=minimal"),
            json=updates,
        )

        if response.status_code not in (200, 204):
            raise Exception(f"Failed to update {table}: {response.status_code}")


async def call_rpc(function: str, params: dict) -> list:
    """
    Call a Postgres function through the PostgREST RPC endpoint.

    Raises:
        Exception: If the call fails with non-200 status code
    """
    supabase_url, supabase_key = _rest_config()

    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.post(
            f"{supabase_url}/rest/v1/rpc/{function}",
            headers=_headers(supabase_key),
            json=params,
        )

        if response.status_code != 200:
            raise Exception(f"Failed to call rpc {function}: {response.status_code}")

        return response.json() or []
