"""API test fixtures: the app on an in-memory or file-backed SQLite database."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cuadrante.application.services import SyncBus
from cuadrante.infrastructure.database import Base
from cuadrante.infrastructure.database.session import get_db_session
from cuadrante.infrastructure.dependencies import get_file_storage, get_sync_bus
from cuadrante.infrastructure.storage.local_file_storage import LocalFileStorage
from cuadrante.main import app


async def _create_schema(engine) -> async_sessionmaker:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def _api_client(session_factory, sync_bus, upload_dir) -> AsyncGenerator[AsyncClient, None]:
    async def _session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    storage = LocalFileStorage(str(upload_dir))

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_sync_bus] = lambda: sync_bus
    app.dependency_overrides[get_file_storage] = lambda: storage

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield await _create_schema(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """One connection per session, so concurrent requests really contend."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'cuadrante.db'}")
    yield await _create_schema(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def sync_bus():
    bus = SyncBus(queue_size=16)
    yield bus
    await bus.shutdown()


@pytest_asyncio.fixture
async def client(session_factory, sync_bus, tmp_path) -> AsyncGenerator[AsyncClient, None]:
    async with _api_client(session_factory, sync_bus, tmp_path / "uploads") as ac:
        yield ac


@pytest_asyncio.fixture
async def file_client(file_session_factory, sync_bus, tmp_path) -> AsyncGenerator[AsyncClient, None]:
    async with _api_client(file_session_factory, sync_bus, tmp_path / "uploads") as ac:
        yield ac
