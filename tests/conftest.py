"""Test configuration and fixtures"""

from datetime import datetime, timedelta, timezone
from typing import List
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from app.main import app
from app.database import Base, get_db
from app.feed.alerts import AlertSink
from app.models.user import User, UserRole
from app.runtime import Runtime
from app.schemas.waiter_call import WaiterCall
from app.store.sql import SQLDocumentStore
from app.api.auth import create_access_token, get_password_hash


BASE_TIME = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class RecordingAlerts(AlertSink):
    """Alert sink that remembers what it was asked to do"""

    def __init__(self):
        self.new_orders = 0
        self.waiter_calls: List[WaiterCall] = []

    def new_order(self) -> None:
        self.new_orders += 1

    def waiter_call(self, call: WaiterCall) -> None:
        self.waiter_calls.append(call)


class FlakyStore(SQLDocumentStore):
    """Store that can be told to fail the N-th write of its next batch"""

    def __init__(self, session_factory):
        super().__init__(session_factory)
        self.fail_at = None
        self._applied = 0

    async def commit(self, batch):
        self._applied = 0
        try:
            return await super().commit(batch)
        finally:
            self.fail_at = None

    async def _apply(self, session, op):
        self._applied += 1
        if self.fail_at is not None and self._applied == self.fail_at:
            raise SQLAlchemyError("simulated store failure")
        await super()._apply(session, op)


@pytest.fixture
async def session_factory(tmp_path):
    """Create test database"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def store(session_factory):
    return FlakyStore(session_factory)


@pytest.fixture
def alerts():
    return RecordingAlerts()


@pytest.fixture
async def runtime(store, alerts):
    """Engine runtime with live feeds subscribed"""
    runtime = Runtime.build(store, alerts=alerts)
    await runtime.start()
    yield runtime
    runtime.stop()


@pytest.fixture
def make_order(store):
    """Insert a raw order document and return its id"""
    counter = {"n": 0}

    async def _make_order(
        table_id: str,
        items: list,
        order_note=None,
        payment_status: str = "pending",
        status: str = "new",
        timestamp=None,
    ) -> str:
        counter["n"] += 1
        return await store.add("orders", {
            "table_id": table_id,
            "session_id": str(uuid4()),
            "items": items,
            "total_price": sum(it["price"] * it["quantity"] for it in items),
            "status": status,
            "payment_status": payment_status,
            "order_note": order_note,
            "timestamp": timestamp or BASE_TIME + timedelta(minutes=counter["n"]),
        })

    return _make_order


@pytest.fixture
async def test_admin_user(session_factory):
    """Create an admin user"""
    async with session_factory() as db:
        user = User(
            id=str(uuid4()),
            email="admin@example.com",
            hashed_password=get_password_hash("adminpass123"),
            full_name="Admin User",
            role=UserRole.ADMIN,
            is_active=True,
        )
        db.add(user)
        await db.commit()
    return user


@pytest.fixture
async def test_staff_user(session_factory):
    """Create a staff user"""
    async with session_factory() as db:
        user = User(
            id=str(uuid4()),
            email="waiter@example.com",
            hashed_password=get_password_hash("waiterpass123"),
            full_name="Waiter User",
            role=UserRole.STAFF,
            is_active=True,
        )
        db.add(user)
        await db.commit()
    return user


@pytest.fixture
async def client(session_factory, runtime):
    """Create test client with overridden database and runtime"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.runtime = runtime

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(test_admin_user):
    return {"Authorization": f"Bearer {create_access_token(test_admin_user)}"}


@pytest.fixture
def staff_headers(test_staff_user):
    return {"Authorization": f"Bearer {create_access_token(test_staff_user)}"}
