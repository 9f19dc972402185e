"""Shared pytest fixtures and helpers for razlib tests."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from botocore.exceptions import ClientError
from botocore.response import StreamingBody

from razlib.config import clear_settings
from razlib.env_settings import clear_env_settings_cache

ENV_VARS = (
    "R2_ACCOUNT_ID",
    "R2_ACCESS_KEY_ID",
    "R2_SECRET_ACCESS_KEY",
    "R2_BUCKET",
    "R2_ENDPOINT_URL",
    "RAZLIB_ENV",
    "LOG_LEVEL",
    "CORS_ORIGIN",
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep settings caches, credentials and log files out of other tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RAZLIB_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("RAZLIB_DATA_DIR", str(tmp_path / "data"))
    clear_settings()
    clear_env_settings_cache()
    yield
    clear_settings()
    clear_env_settings_cache()
    package_logger = logging.getLogger("razlib")
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


def make_files(root: Path, layout: dict[str, list[str]]) -> Path:
    """Create empty-ish files under ``root``.

    Args:
        root: Directory to populate
        layout: Directory (relative, may be nested) → filenames

    Returns:
        ``root``
    """
    for directory, filenames in layout.items():
        target = root / directory
        target.mkdir(parents=True, exist_ok=True)
        for filename in filenames:
            (target / filename).write_bytes(f"content of {filename}".encode())
    return root


# =============================================================================
# Fake S3 client
# =============================================================================


def client_error(code: str, operation: str = "Operation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakePaginator:
    """list_objects_v2 paginator over a FakeS3Client."""

    def __init__(self, client: FakeS3Client) -> None:
        self.client = client

    def paginate(self, Bucket: str, Prefix: str = "") -> Iterator[dict[str, Any]]:  # noqa: N803
        self.client.calls.append(("list_objects_v2", Prefix))
        for failing in self.client.fail_prefixes:
            if Prefix.startswith(failing):
                raise client_error("InternalError", "ListObjectsV2")
        # Listing order is key order, like S3
        keys = sorted(key for key in self.client.objects if key.startswith(Prefix))
        size = self.client.page_size
        for start in range(0, max(len(keys), 1), size):
            page = keys[start : start + size]
            yield {"Contents": [{"Key": key} for key in page]} if page else {"KeyCount": 0}


class FakeS3Client:
    """In-memory stand-in for a boto3 S3 client (only what razlib calls)."""

    def __init__(self, objects: dict[str, bytes] | None = None, page_size: int = 1000) -> None:
        self.objects: dict[str, bytes] = dict(objects or {})
        self.content_types: dict[str, str] = {}
        self.page_size = page_size
        self.fail_prefixes: list[str] = []
        self.fail_puts: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def get_paginator(self, operation: str) -> FakePaginator:
        assert operation == "list_objects_v2"
        return FakePaginator(self)

    def get_object(self, Bucket: str, Key: str) -> dict[str, Any]:  # noqa: N803
        self.calls.append(("get_object", Key))
        if Key not in self.objects:
            raise client_error("NoSuchKey", "GetObject")
        data = self.objects[Key]
        return {
            "Body": StreamingBody(io.BytesIO(data), len(data)),
            "ContentLength": len(data),
        }

    def put_object(  # noqa: N803
        self, Bucket: str, Key: str, Body: Any, ContentType: str
    ) -> dict[str, Any]:
        self.calls.append(("put_object", Key))
        if Key in self.fail_puts:
            raise client_error("AccessDenied", "PutObject")
        self.objects[Key] = Body.read()
        self.content_types[Key] = ContentType
        return {}


@pytest.fixture
def fake_s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def library_roots(tmp_path: Path) -> tuple[Path, Path]:
    """Local library with two levels and the messy directory names seen in practice."""
    pdf_root = make_files(
        tmp_path / "library" / "pdf",
        {
            "A级别pdf": ["01- Farm Animals_Password_Removed.pdf", "02-Zoo Trip.pdf"],
            "A级别pdf/extra": ["Big Cat.pdf"],
            "H 级别PDF": ["1.My House.pdf", ".DS_Store"],
            "notes": ["readme.pdf"],
        },
    )
    audio_root = make_files(
        tmp_path / "library" / "audio",
        {
            "A{mp3}": ["01 Farm Animals.mp3", "Big_Cat.MP3", "cover.jpg"],
            "H[Mp3]": ["1-my house.mp3"],
        },
    )
    return pdf_root, audio_root
