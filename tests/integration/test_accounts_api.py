"""Integration tests for account endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from budgetsync.models.account import Account
from budgetsync.models.transaction import Transaction
from budgetsync.providers.base import ProviderError


class TestRefreshAccounts:
    @pytest.mark.asyncio
    async def test_refresh_requires_linked_bank(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/get-accounts", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["kind"] == "PRECONDITION_FAILED"

    @pytest.mark.asyncio
    async def test_refresh_adds_then_updates(
        self, client: AsyncClient, auth_headers: dict, linked_user
    ):
        first = await client.post("/get-accounts", headers=auth_headers)
        second = await client.post("/get-accounts", headers=auth_headers)

        assert first.status_code == 200
        assert first.json() == {"ok": True, "count": 2, "added": 2, "updated": 0}
        assert second.json() == {"ok": True, "count": 2, "added": 0, "updated": 2}

    @pytest.mark.asyncio
    async def test_refresh_stores_institution_and_name_fallback(
        self, client: AsyncClient, auth_headers: dict, linked_user
    ):
        await client.post("/get-accounts", headers=auth_headers)

        response = await client.get("/accounts", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        [group] = data["institutions"]
        assert group["institution_id"] == "ins_1"
        assert group["institution_name"] == "First Platypus Bank"
        assert group["institution_logo"] == "iVBORw0KGgo="
        names = {a["account_id"]: a["name"] for a in data["accounts"]}
        assert names == {"acc-checking": "Checking", "acc-savings": "Plaid Saver"}
        assert len(group["accounts"]) == 2

    @pytest.mark.asyncio
    async def test_logo_failure_is_not_fatal(
        self, client: AsyncClient, auth_headers: dict, linked_user, fake_provider
    ):
        fake_provider.institution = ProviderError("Plaid API error [INSTITUTION_NOT_FOUND]: nope")

        response = await client.post("/get-accounts", headers=auth_headers)

        assert response.status_code == 200
        accounts = (await client.get("/accounts", headers=auth_headers)).json()["accounts"]
        assert all(a["institution_logo"] == "" for a in accounts)
        assert all(a["institution_name"] == "First Platypus Bank" for a in accounts)

    @pytest.mark.asyncio
    async def test_provider_failure_is_upstream_error(
        self, client: AsyncClient, auth_headers: dict, linked_user, fake_provider
    ):
        fake_provider.accounts_error = ProviderError("Plaid API error [ITEM_LOGIN_REQUIRED]: re-auth")

        response = await client.post("/get-accounts", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["kind"] == "UPSTREAM_ERROR"


class TestDeleteAccount:
    @pytest.fixture
    async def accounts_with_transactions(self, db_session, user_id):
        db_session.add_all(
            [
                Account(user_id=user_id, account_id="acc-a", name="Checking"),
                Account(user_id=user_id, account_id="acc-b", name="Credit Card"),
                Transaction(user_id=user_id, id="a1", account_id="acc-a", name="Coffee", amount=300),
                Transaction(user_id=user_id, id="a2", account_id="acc-a", name="Lunch", amount=1200),
                Transaction(user_id=user_id, id="b1", account_id="acc-b", name="Flight", amount=40000),
                Transaction(user_id="user-456", id="a1", account_id="acc-a", name="Theirs", amount=1),
            ]
        )
        await db_session.commit()

    async def _transaction_keys(self, db_session) -> set[tuple[str, str]]:
        result = await db_session.execute(select(Transaction.user_id, Transaction.id))
        return set(result.all())

    @pytest.mark.asyncio
    async def test_delete_with_transactions_removes_exactly_that_account(
        self, client: AsyncClient, auth_headers: dict, db_session, user_id, accounts_with_transactions
    ):
        response = await client.request(
            "DELETE", "/accounts/acc-a", json={"deleteTransactions": True}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json() == {
            "message": "Account deleted successfully",
            "transactionsDeleted": True,
            "transactionsDeletedCount": 2,
        }
        assert await self._transaction_keys(db_session) == {
            (user_id, "b1"),
            ("user-456", "a1"),
        }
        remaining = (await client.get("/accounts", headers=auth_headers)).json()["accounts"]
        assert [a["account_id"] for a in remaining] == ["acc-b"]

    @pytest.mark.asyncio
    async def test_delete_without_body_keeps_transactions(
        self, client: AsyncClient, auth_headers: dict, db_session, accounts_with_transactions
    ):
        response = await client.delete("/accounts/acc-a", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["transactionsDeleted"] is False
        assert len(await self._transaction_keys(db_session)) == 4

    @pytest.mark.asyncio
    async def test_delete_unknown_account_is_not_found(
        self, client: AsyncClient, auth_headers: dict
    ):
        response = await client.delete("/accounts/nope", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "API_003"
