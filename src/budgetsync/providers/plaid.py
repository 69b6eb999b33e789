"""Plaid implementation of ``TransactionProvider`` over httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from budgetsync.config import Settings
from budgetsync.providers.base import (
    AccountsResult,
    Institution,
    ProviderError,
    ProviderTimeoutError,
    SyncPage,
    TokenExchange,
)

logger = logging.getLogger(__name__)

PLAID_ENV_MAP: dict[str, str] = {
    "sandbox": "https://sandbox.plaid.com",
    "development": "https://development.plaid.com",
    "production": "https://production.plaid.com",
}


class PlaidClient:
    """Async Plaid API client.

    Each call opens a short-lived ``httpx.AsyncClient`` bounded by
    ``timeout``. Pass ``transport`` to route requests elsewhere (tests use
    ``httpx.MockTransport``).
    """

    def __init__(
        self,
        *,
        client_id: str,
        secret: str,
        env: str = "sandbox",
        client_name: str = "Budget Sync",
        country_codes: list[str] | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if env not in PLAID_ENV_MAP:
            raise ProviderError(
                f"Invalid Plaid environment {env!r}. "
                "Expected one of: sandbox, development, production."
            )
        self._client_id = client_id
        self._secret = secret
        self._env = env
        self._client_name = client_name
        self._country_codes = country_codes or ["US"]
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> PlaidClient:
        return cls(
            client_id=settings.plaid_client_id,
            secret=settings.plaid_secret,
            env=settings.plaid_env.lower(),
            client_name=settings.plaid_client_name,
            country_codes=settings.plaid_country_codes,
            timeout=settings.plaid_timeout_seconds,
        )

    @property
    def base_url(self) -> str:
        return PLAID_ENV_MAP[self._env]

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        # Plaid authenticates with client_id + secret in the body.
        body = {"client_id": self._client_id, "secret": self._secret, **payload}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post(path, json=body)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(f"Plaid request to {path} timed out") from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Network error calling Plaid API: {e}") from e

        if resp.status_code >= 400:
            try:
                error_data = resp.json()
            except ValueError:
                error_data = {}
            error_code = error_data.get("error_code", "UNKNOWN")
            error_msg = error_data.get("error_message") or resp.text
            logger.warning(
                f"Plaid API error on {path}",
                extra={"status_code": resp.status_code, "error_code": error_code},
            )
            raise ProviderError(f"Plaid API error [{error_code}]: {error_msg}", error_code)

        try:
            return resp.json()
        except ValueError as e:
            raise ProviderError(f"Failed to parse Plaid response from {path}") from e

    @staticmethod
    def _malformed(path: str, e: Exception) -> ProviderError:
        logger.warning(f"Malformed Plaid response on {path}", extra={"error": type(e).__name__})
        return ProviderError(f"Malformed Plaid response from {path}", "MALFORMED_RESPONSE")

    async def create_link_token(self, user_id: str) -> str:
        data = await self._post(
            "/link/token/create",
            {
                "user": {"client_user_id": user_id},
                "client_name": self._client_name,
                "products": ["transactions"],
                "country_codes": self._country_codes,
                "language": "en",
            },
        )
        try:
            return data["link_token"]
        except (KeyError, TypeError) as e:
            raise self._malformed("/link/token/create", e) from e

    async def exchange_public_token(self, public_token: str) -> TokenExchange:
        data = await self._post("/item/public_token/exchange", {"public_token": public_token})
        try:
            return TokenExchange.parse(data)
        except ValidationError as e:
            raise self._malformed("/item/public_token/exchange", e) from e

    async def list_accounts(self, access_token: str) -> AccountsResult:
        data = await self._post("/accounts/get", {"access_token": access_token})
        try:
            return AccountsResult.parse(data)
        except ValidationError as e:
            raise self._malformed("/accounts/get", e) from e

    async def get_institution(self, institution_id: str) -> Institution:
        data = await self._post(
            "/institutions/get_by_id",
            {
                "institution_id": institution_id,
                "country_codes": self._country_codes,
                "options": {"include_optional_metadata": True},
            },
        )
        try:
            return Institution.parse(data["institution"])
        except (KeyError, TypeError, ValidationError) as e:
            raise self._malformed("/institutions/get_by_id", e) from e

    async def sync_transactions(
        self, access_token: str, cursor: str | None, count: int
    ) -> SyncPage:
        payload: dict[str, Any] = {
            "access_token": access_token,
            "count": count,
            "options": {"include_personal_finance_category": True},
        }
        if cursor:
            payload["cursor"] = cursor
        data = await self._post("/transactions/sync", payload)
        try:
            return SyncPage.parse(data)
        except ValidationError as e:
            raise self._malformed("/transactions/sync", e) from e
