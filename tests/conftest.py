"""Test configuration."""
import os
from collections.abc import AsyncIterator, Iterator
from pathlib import Path
from typing import Any

import pytest
from alembic import command
from alembic.config import Config
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# --- Default env, before the app reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite:///./payhub_test.db")
os.environ.setdefault("PAYHUB_ENV", "test")
os.environ.setdefault("MERCADOPAGO_ACCESS_TOKEN", "TEST-access-token")
os.environ.setdefault("PROMETHEUS_ENABLED", "false")

from app.main import app  # noqa: E402
from app.db import get_db  # noqa: E402
from app.models import Base  # noqa: E402
from app.services.mercadopago import GatewayError, get_gateway_client  # noqa: E402

DB_PATH = Path("./payhub_test.db")


def _run_migrations() -> None:
    cfg = Config(str(Path(__file__).resolve().parents[1] / "alembic.ini"))
    cfg.set_main_option("script_location", str(Path(__file__).resolve().parents[1] / "alembic"))
    cfg.set_main_option("sqlalchemy.url", os.environ["DATABASE_URL"])
    command.upgrade(cfg, "head")


# --- (1) Fresh database file for the session
if DB_PATH.exists():
    DB_PATH.unlink()

engine = create_engine(
    os.environ["DATABASE_URL"],
    connect_args={"check_same_thread": False},
    future=True,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False,
                                   future=True, expire_on_commit=False)

# --- (2) Schema comes from Alembic only
_run_migrations()


class FakeGateway:
    """In-memory stand-in for MercadoPagoClient."""

    def __init__(self) -> None:
        self.payments: dict[str, dict[str, Any]] = {}
        self.error: Exception | None = None
        self.calls: list[tuple[str, Any]] = []
        self.next_payment_id = 9000

    def _maybe_fail(self) -> None:
        if self.error is not None:
            raise self.error

    def get_payment(self, payment_id: str) -> dict[str, Any]:
        self.calls.append(("get_payment", payment_id))
        self._maybe_fail()
        if payment_id not in self.payments:
            raise GatewayError("Payment not found", status_code=404)
        return dict(self.payments[payment_id])

    def create_payment(self, payment_data: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("create_payment", payment_data))
        self._maybe_fail()
        self.next_payment_id += 1
        payment = {"id": self.next_payment_id, "status": "pending", **payment_data}
        self.payments[str(self.next_payment_id)] = payment
        return dict(payment)

    def create_preference(self, items, back_urls, notification_url=None) -> dict[str, Any]:
        self.calls.append(("create_preference", {"items": items, "back_urls": back_urls,
                                                 "notification_url": notification_url}))
        self._maybe_fail()
        return {
            "id": "pref-123",
            "init_point": "https://www.mercadopago.com.br/checkout/v1/redirect?pref_id=pref-123",
            "items": list(items),
            "back_urls": back_urls,
            "notification_url": notification_url,
        }

    def close(self) -> None:
        pass


@pytest.fixture
def db_session() -> Iterator[Session]:
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
        session.close()


@pytest.fixture(autouse=True)
def override_db_dependency(db_session: Session) -> Iterator[None]:
    def _get_db() -> Iterator[Session]:
        yield db_session
    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def gateway() -> Iterator[FakeGateway]:
    fake = FakeGateway()
    app.dependency_overrides[get_gateway_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_gateway_client, None)


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
