"""Unit tests for database startup helpers."""

from pathlib import Path

import pytest

from cuadrante.infrastructure.database.bootstrap import prepare_database, sqlite_file_path


def test_sqlite_file_path():
    assert sqlite_file_path("sqlite:///./cuadrante.db") == Path("cuadrante.db")
    assert sqlite_file_path("sqlite+aiosqlite:////var/lib/cuadrante/app.db") == Path(
        "/var/lib/cuadrante/app.db"
    )


def test_non_file_databases_have_no_path():
    assert sqlite_file_path("sqlite+aiosqlite://") is None
    assert sqlite_file_path("sqlite:///:memory:") is None
    assert sqlite_file_path("postgresql://user:pw@localhost/cuadrante") is None


@pytest.mark.asyncio
async def test_prepare_database_creates_sqlite_directory(tmp_path):
    target = tmp_path / "data" / "nested" / "cuadrante.db"
    await prepare_database(f"sqlite:///{target}")

    assert target.parent.is_dir()
    assert not target.exists()
