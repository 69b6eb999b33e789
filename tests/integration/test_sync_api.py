"""Integration tests for sync and recategorize endpoints."""

from decimal import Decimal

import pytest
from httpx import AsyncClient

from budgetsync.models.category import Category
from budgetsync.providers.base import ProviderError, ProviderTransaction, SyncPage


def _txn(transaction_id: str, name: str, amount: str, **extra) -> ProviderTransaction:
    return ProviderTransaction(
        transaction_id=transaction_id,
        account_id="acc-checking",
        amount=Decimal(amount),
        iso_currency_code="USD",
        date="2024-03-01",
        name=name,
        **extra,
    )


class TestSyncTransactions:
    @pytest.mark.asyncio
    async def test_sync_requires_linked_bank(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/sync-transactions", headers=auth_headers)

        assert response.status_code == 400
        data = response.json()
        assert data["kind"] == "PRECONDITION_FAILED"
        assert data["user_message"] == "Bank not linked"

    @pytest.mark.asyncio
    async def test_sync_returns_counts(
        self, client: AsyncClient, auth_headers: dict, linked_user, fake_provider, db_session, user_id
    ):
        db_session.add(Category(user_id=user_id, name="Travel", keywords=["airlines"]))
        await db_session.commit()
        fake_provider.pages = [
            SyncPage(
                added=[_txn("t1", "United Airlines", "500"), _txn("t2", "Payroll", "-2500")],
                next_cursor="c1",
            )
        ]

        response = await client.post("/sync-transactions", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"added": 2, "modified": 0, "removed": 0, "recategorized": 1}

        listed = (await client.get("/transactions", headers=auth_headers)).json()
        by_id = {t["id"]: t for t in listed}
        assert by_id["t1"]["categoryName"] == "Travel"
        assert by_id["t1"]["outflow"] == 50000
        assert by_id["t1"]["inflow"] is None
        assert by_id["t2"]["amount"] == -250000
        assert by_id["t2"]["inflow"] == 250000
        assert by_id["t2"]["category"] is None

    @pytest.mark.asyncio
    async def test_provider_failure_is_upstream_error(
        self, client: AsyncClient, auth_headers: dict, linked_user, fake_provider
    ):
        fake_provider.pages = [
            ProviderError("Plaid API error [ITEM_LOGIN_REQUIRED]: login details changed")
        ]

        response = await client.post("/sync-transactions", headers=auth_headers)

        assert response.status_code == 500
        data = response.json()
        assert data["kind"] == "UPSTREAM_ERROR"
        assert "ITEM_LOGIN_REQUIRED" in data["message"]
        assert "Traceback" not in response.text


class TestRecategorize:
    @pytest.mark.asyncio
    async def test_recategorize_reports_counts(
        self, client: AsyncClient, auth_headers: dict, linked_user, fake_provider
    ):
        fake_provider.pages = [SyncPage(added=[_txn("t1", "Shell Oil", "40")], next_cursor="c1")]
        await client.post("/sync-transactions", headers=auth_headers)
        await client.post(
            "/categories", json={"name": "Gas", "keywords": ["shell"]}, headers=auth_headers
        )

        response = await client.post("/recategorize", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["updated"] == 0
        assert data["total"] == 1
        assert data["message"] == "Re-categorized 0 out of 1 transactions"
