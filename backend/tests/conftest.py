"""Pytest configuration and fixtures."""

import os

# Settings are read once, at first import of the app
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "development"

import httpx
import pytest
from collections.abc import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cognicanvas.db.base import Base
from cognicanvas.db.session import get_db
from cognicanvas.main import app
from cognicanvas.services.chat_service import ChatService, get_chat_service
from cognicanvas.services.notifications import notification_center


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    notification_center.reset()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
    notification_center.reset()


@pytest.fixture
def chat_upstream():
    """
    Route the chat service to a stub upstream.

    Usage: requests = chat_upstream(handler) where handler takes an
    httpx.Request and returns an httpx.Response. Every request the service
    sends is appended to the returned list.
    """

    def install(handler, api_key: str | None = "test-key") -> list[httpx.Request]:
        requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        service = ChatService(api_key=api_key, transport=httpx.MockTransport(record))
        app.dependency_overrides[get_chat_service] = lambda: service
        return requests

    yield install
    app.dependency_overrides.pop(get_chat_service, None)


# =============================================================================
# API HELPERS
# =============================================================================


async def make_subject(client: AsyncClient, name: str = "Calculus", **extra) -> dict:
    response = await client.post("/api/subjects/", json={"name": name, **extra})
    assert response.status_code == 201, response.text
    return response.json()


async def make_notebook(client: AsyncClient, subject_id: str, title: str = "Chapter 1") -> dict:
    response = await client.post(f"/api/subjects/{subject_id}/notebooks", json={"title": title})
    assert response.status_code == 201, response.text
    return response.json()


async def make_note(
    client: AsyncClient, notebook_id: str, title: str = "Limits", content: str = ""
) -> dict:
    response = await client.post(
        "/api/notes/", json={"title": title, "content": content, "notebookId": notebook_id}
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
async def hierarchy(client) -> dict:
    """A subject with one notebook holding one note."""
    subject = await make_subject(client)
    notebook = await make_notebook(client, subject["id"])
    note = await make_note(
        client,
        notebook["id"],
        content="<p>A limit exists when both one-sided limits agree.</p>",
    )
    return {"subject": subject, "notebook": notebook, "note": note}
