import sys
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

sys.path.append(str(Path(__file__).parents[1] / "src"))

from budgetsync.db.session import get_db
from budgetsync.main import create_app
from budgetsync.providers.base import (
    AccountsResult,
    Institution,
    ProviderAccount,
    ProviderItem,
    SyncPage,
    TokenExchange,
)

TEST_DATABASE_URL = "sqlite+aiosqlite://"

# One shared in-memory connection so every session sees the same tables.
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

TEST_USER_ID = "user-123"
OTHER_USER_ID = "user-456"


class FakeProvider:
    """In-memory transaction provider.

    ``pages`` is consumed one item per ``sync_transactions`` call; an
    exception in the list is raised instead of returned.
    """

    def __init__(self):
        self.pages: list[SyncPage | Exception] = []
        self.sync_calls: list[str | None] = []
        self.link_token = "link-sandbox-token"
        self.link_error: Exception | None = None
        self.exchange = TokenExchange(access_token="access-sandbox-abc", item_id="item-1")
        self.exchange_error: Exception | None = None
        self.accounts = AccountsResult(
            accounts=[
                ProviderAccount(
                    account_id="acc-checking",
                    name="Checking",
                    official_name="Plaid Gold Standard Checking",
                    mask="0000",
                    subtype="checking",
                    type="depository",
                ),
                ProviderAccount(account_id="acc-savings", official_name="Plaid Saver"),
            ],
            item=ProviderItem(
                item_id="item-1", institution_id="ins_1", institution_name="First Platypus Bank"
            ),
        )
        self.accounts_error: Exception | None = None
        self.institution: Institution | Exception = Institution(
            institution_id="ins_1", name="First Platypus Bank", logo="iVBORw0KGgo="
        )
        self.on_sync = None

    async def create_link_token(self, user_id: str) -> str:
        if self.link_error:
            raise self.link_error
        return self.link_token

    async def exchange_public_token(self, public_token: str) -> TokenExchange:
        if self.exchange_error:
            raise self.exchange_error
        return self.exchange

    async def list_accounts(self, access_token: str) -> AccountsResult:
        if self.accounts_error:
            raise self.accounts_error
        return self.accounts

    async def get_institution(self, institution_id: str) -> Institution:
        if isinstance(self.institution, Exception):
            raise self.institution
        return self.institution

    async def sync_transactions(
        self, access_token: str, cursor: str | None, count: int
    ) -> SyncPage:
        self.sync_calls.append(cursor)
        if self.on_sync is not None:
            await self.on_sync()
        if not self.pages:
            return SyncPage(next_cursor=cursor, has_more=False)
        page = self.pages.pop(0)
        if isinstance(page, Exception):
            raise page
        return page


@pytest.fixture(scope="function")
async def setup_database():
    """Create tables for tests that need the database, and drop them after."""
    from budgetsync.models.base import Base

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db_session(setup_database):
    """Provide test database session with fresh connection per test."""
    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def user_id() -> str:
    return TEST_USER_ID


@pytest.fixture
async def auth_headers(user_id: str):
    """Provide authentication headers with valid JWT token."""
    from budgetsync.core.security import create_access_token

    token = create_access_token(user_id=user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def linked_user(db_session: AsyncSession, user_id: str):
    """Store an access credential so sync and account refresh can run."""
    from budgetsync.models.access_credential import AccessCredential

    credential = AccessCredential(
        user_id=user_id, access_token="access-sandbox-abc", item_id="item-1"
    )
    db_session.add(credential)
    await db_session.commit()
    return credential


@pytest.fixture
def app(fake_provider: FakeProvider):
    return create_app(provider=fake_provider)


@pytest.fixture
async def client(app, db_session: AsyncSession):
    """Provide test client with database override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
