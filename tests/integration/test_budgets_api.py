"""Integration tests for budget endpoints and account initialization."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from budgetsync.models.budget import Budget
from budgetsync.models.category import Category
from budgetsync.models.transaction import Transaction
from budgetsync.repositories.budget import BudgetRepository


async def _count(db_session, model) -> int:
    return await db_session.scalar(select(func.count()).select_from(model))


class TestBudgetCrud:
    @pytest.mark.asyncio
    async def test_create_budget_with_categories(self, client: AsyncClient, auth_headers: dict):
        response = await client.post(
            "/budgets",
            json={
                "name": "Household",
                "categories": [
                    {"name": "Groceries", "amount": 60000, "keywords": ["safeway"]},
                    {"name": "Rent", "amount": 180000, "keywords": ["rent"]},
                ],
            },
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Household"
        assert data["totalBudget"] == 240000
        assert [c["name"] for c in data["categories"]] == ["Groceries", "Rent"]
        assert all(c["budgetId"] == data["id"] for c in data["categories"])
        assert data["recategorized"] == 0

    @pytest.mark.asyncio
    async def test_second_budget_is_conflict_and_creates_nothing(
        self, client: AsyncClient, auth_headers: dict, db_session
    ):
        await client.post(
            "/budgets",
            json={"name": "First", "categories": [{"name": "Food"}]},
            headers=auth_headers,
        )

        response = await client.post(
            "/budgets",
            json={"name": "Second", "categories": [{"name": "Fun"}, {"name": "Misc"}]},
            headers=auth_headers,
        )

        assert response.status_code == 409
        data = response.json()
        assert data["kind"] == "CONFLICT"
        assert data["user_message"] == "User can only have one budget for now"
        assert await _count(db_session, Budget) == 1
        assert await _count(db_session, Category) == 1

    @pytest.mark.asyncio
    async def test_budgets_are_per_user(self, client: AsyncClient, auth_headers: dict):
        from budgetsync.core.security import create_access_token

        other_headers = {"Authorization": f"Bearer {create_access_token('user-456')}"}
        await client.post("/budgets", json={"name": "Mine"}, headers=auth_headers)

        response = await client.post("/budgets", json={"name": "Theirs"}, headers=other_headers)

        assert response.status_code == 201
        listed = (await client.get("/budgets", headers=other_headers)).json()
        assert [b["name"] for b in listed] == ["Theirs"]

    @pytest.mark.asyncio
    async def test_list_budgets_includes_total(self, client: AsyncClient, auth_headers: dict):
        created = (
            await client.post("/budgets", json={"name": "Household"}, headers=auth_headers)
        ).json()
        await client.post(
            "/categories",
            json={"name": "Fun", "amount": 1500, "budgetId": created["id"]},
            headers=auth_headers,
        )
        await client.post("/categories", json={"name": "Gifts", "amount": 2500}, headers=auth_headers)

        response = await client.get("/budgets", headers=auth_headers)

        assert response.status_code == 200
        [budget] = response.json()
        assert budget["totalBudget"] == 4000
        assert [c["name"] for c in budget["categories"]] == ["Fun", "Gifts"]

    @pytest.mark.asyncio
    async def test_rename_budget(self, client: AsyncClient, auth_headers: dict):
        created = (await client.post("/budgets", json={"name": "Old"}, headers=auth_headers)).json()

        response = await client.put(
            f"/budgets/{created['id']}", json={"name": "New"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["name"] == "New"

    @pytest.mark.asyncio
    async def test_delete_budget_cascades_and_recategorizes(
        self, client: AsyncClient, auth_headers: dict, db_session, user_id
    ):
        db_session.add(Transaction(user_id=user_id, id="t1", name="Safeway #12", amount=5000))
        await db_session.commit()
        created = (
            await client.post(
                "/budgets",
                json={"name": "Household", "categories": [{"name": "Groceries", "keywords": ["safeway"]}]},
                headers=auth_headers,
            )
        ).json()
        assert created["recategorized"] == 1

        response = await client.delete(f"/budgets/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"ok": True, "categoriesDeleted": 1, "recategorized": 1}
        assert await _count(db_session, Category) == 0
        txn = await db_session.get(Transaction, (user_id, "t1"), populate_existing=True)
        assert txn.category_id is None
        assert txn.category_name is None

    @pytest.mark.asyncio
    async def test_unknown_budget_is_not_found(self, client: AsyncClient, auth_headers: dict):
        response = await client.delete(
            "/budgets/00000000-0000-0000-0000-000000000000", headers=auth_headers
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "API_004"


class TestInitializeAccount:
    @pytest.mark.asyncio
    async def test_initialize_provisions_defaults(
        self, client: AsyncClient, auth_headers: dict, db_session, user_id
    ):
        db_session.add(Transaction(user_id=user_id, id="t1", name="NETFLIX.COM", amount=1599))
        await db_session.commit()

        response = await client.post("/initialize-account", headers=auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Account initialized with default budget and categories"
        assert data["budget"]["name"] == "My Budget"
        assert [c["name"] for c in data["budget"]["categories"]] == [
            "Food & Dining",
            "Transportation",
            "Shopping",
            "Entertainment",
            "Bills & Utilities",
            "Healthcare",
            "Travel",
            "Education",
        ]
        assert data["budget"]["totalBudget"] == 210000
        assert data["recategorized"] == 1
        listed = (await client.get("/transactions", headers=auth_headers)).json()
        assert listed[0]["categoryName"] == "Entertainment"

    @pytest.mark.asyncio
    async def test_initialize_twice_is_conflict(
        self, client: AsyncClient, auth_headers: dict, db_session
    ):
        await client.post("/initialize-account", headers=auth_headers)

        response = await client.post("/initialize-account", headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["user_message"] == "Account already initialized"
        assert await _count(db_session, Budget) == 1
        assert await _count(db_session, Category) == 8


class TestOneBudgetPerUser:
    @pytest.mark.asyncio
    async def test_storage_rejects_second_budget(self, db_session, user_id):
        db_session.add(Budget(user_id=user_id, name="First"))
        await db_session.commit()

        db_session.add(Budget(user_id=user_id, name="Second"))
        with pytest.raises(IntegrityError):
            await db_session.commit()
        await db_session.rollback()

        assert await _count(db_session, Budget) == 1

    @pytest.mark.asyncio
    async def test_create_racing_past_existence_check_is_conflict(
        self, client: AsyncClient, auth_headers: dict, db_session, monkeypatch
    ):
        await client.post("/budgets", json={"name": "First"}, headers=auth_headers)

        async def never_exists(self, user_id: str) -> bool:
            return False

        monkeypatch.setattr(BudgetRepository, "exists_for_user", never_exists)

        response = await client.post(
            "/budgets",
            json={"name": "Second", "categories": [{"name": "Fun"}]},
            headers=auth_headers,
        )
        initialized = await client.post("/initialize-account", headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["error_code"] == "BUD_001"
        assert initialized.status_code == 409
        assert initialized.json()["error_code"] == "BUD_002"
        assert await _count(db_session, Budget) == 1
        assert await _count(db_session, Category) == 0
