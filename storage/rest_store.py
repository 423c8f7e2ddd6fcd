"""Account store backed by a hosted PostgREST API (Supabase)."""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from services.errors import BackendError

from .abstract_store import ACCOUNT_FIELDS, AbstractAccountStore, AccountRecord, is_hex_address


class RestAccountStore(AbstractAccountStore):
    """Read and write the ``users`` table through the PostgREST interface.

    Every call is a single request; failures are not retried.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        table: str = "users",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self.table = table
        self.client = client or httpx.Client(
            base_url=base_url.rstrip("/") + "/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            },
            timeout=timeout,
        )

    def get(self, account_id: str) -> AccountRecord | None:
        return self._first({"id": f"eq.{account_id}"})

    def find_by_email(self, email: str) -> AccountRecord | None:
        return self._first({"email": f"ilike.{_escape_like(email)}"})

    def find_by_wallet(self, wallet_address: str) -> AccountRecord | None:
        if is_hex_address(wallet_address):
            return self._first({"wallet_address": f"ilike.{_escape_like(wallet_address)}"})
        return self._first({"wallet_address": f"eq.{wallet_address}"})

    def list_all(self) -> list[AccountRecord]:
        rows = self._request("GET", params={"select": "*"})
        return [AccountRecord.from_mapping(row) for row in rows]

    def filter_by_id(self, account_id: str) -> list[AccountRecord]:
        rows = self._request("GET", params={"select": "*", "id": f"eq.{account_id}"})
        return [AccountRecord.from_mapping(row) for row in rows]

    def create(self, values: Mapping[str, Any]) -> AccountRecord:
        body = {key: values[key] for key in ACCOUNT_FIELDS if key in values}
        rows = self._request("POST", json=body, returning=True)
        if not rows:
            raise BackendError("Account store returned no row for insert.")
        return AccountRecord.from_mapping(rows[0])

    def update(self, account_id: str, values: Mapping[str, Any]) -> AccountRecord | None:
        body = {key: values[key] for key in ACCOUNT_FIELDS if key in values}
        rows = self._request(
            "PATCH", params={"id": f"eq.{account_id}"}, json=body, returning=True
        )
        return AccountRecord.from_mapping(rows[0]) if rows else None

    def _first(self, filters: dict[str, str]) -> AccountRecord | None:
        params = {"select": "*", "limit": "1", **filters}
        rows = self._request("GET", params=params)
        return AccountRecord.from_mapping(rows[0]) if rows else None

    def _request(
        self,
        method: str,
        *,
        params: dict[str, str] | None = None,
        json: dict | None = None,
        returning: bool = False,
    ) -> list[dict]:
        headers = {"Prefer": "return=representation"} if returning else None
        try:
            response = self.client.request(
                method, f"/{self.table}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as exc:
            raise BackendError(f"Account store request failed: {exc}") from exc

        if response.is_error:
            raise BackendError(_error_message(response))

        try:
            data = response.json()
        except ValueError as exc:
            raise BackendError("Account store returned a non-JSON response.") from exc
        if isinstance(data, dict):
            return [data]
        if not isinstance(data, list):
            raise BackendError("Account store returned an unexpected payload.")
        return data


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``ilike`` matches the literal value."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_").replace("*", "\\*")


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"Account store error ({response.status_code})."
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return f"Account store error ({response.status_code})."
