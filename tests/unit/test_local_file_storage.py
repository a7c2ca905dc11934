"""Unit tests for the local image store."""

import re

import pytest

from cuadrante.infrastructure.storage.local_file_storage import (
    LocalFileStorage,
    unique_filename,
)

_NAME_RE = re.compile(r"^image-\d{13}-\d+\.jpg$")


def test_unique_filename_keeps_only_the_extension():
    assert _NAME_RE.match(unique_filename("front door.JPG"))
    assert "door" not in unique_filename("front door.JPG")


def test_unique_filename_drops_odd_extensions():
    assert "." not in unique_filename("README")
    assert "." not in unique_filename("x.tar gz")
    assert "." not in unique_filename("evil." + "a" * 20)


@pytest.mark.asyncio
async def test_store_file_writes_bytes_and_returns_url(tmp_path):
    storage = LocalFileStorage(str(tmp_path / "uploads"), url_prefix="/uploads/")
    stored = await storage.store_file(b"\xff\xd8jpeg", "door.jpg")

    assert (tmp_path / "uploads" / stored.filename).read_bytes() == b"\xff\xd8jpeg"
    assert _NAME_RE.match(stored.filename)
    assert stored.url == f"/uploads/{stored.filename}"


@pytest.mark.asyncio
async def test_same_name_uploads_do_not_collide(tmp_path):
    storage = LocalFileStorage(str(tmp_path))
    first = await storage.store_file(b"a", "photo.png")
    second = await storage.store_file(b"b", "photo.png")

    assert first.url != second.url
    assert (tmp_path / first.filename).read_bytes() == b"a"
    assert (tmp_path / second.filename).read_bytes() == b"b"

