"""
Library sources: where PDF and audio filenames come from.

Two sources implement the same interface:

- LocalLibrary: a PDF root and an audio root on disk, each holding one
  (inconsistently named) directory per level, files nested arbitrarily deep.
- BucketLibrary: an S3-compatible bucket (Cloudflare R2 in production) with
  keys laid out as ``pdf/{level}/{filename}`` and ``audio/{level}/{filename}``.

Both return fully materialized, flat basename lists. Bucket listings drain the
paginator before returning so a catalog is never built from a partial page.
Infrastructure failures raise StorageError; data oddities never do.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from razlib.catalog.parsing import is_hidden
from razlib.exceptions import StorageError
from razlib.levels import DirectoryResolution, FileKind, LevelTable, default_level_table

if TYPE_CHECKING:
    from razlib.config import StorageConfig

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class StoredObject:
    """An opened PDF/audio object ready to stream."""

    chunks: Iterator[bytes]
    content_type: str
    content_length: int | None = None


@dataclass(frozen=True)
class LocalFile:
    """A local file and the bucket key it belongs under."""

    path: Path
    level: str
    kind: FileKind
    key: str

    @property
    def content_type(self) -> str:
        return self.kind.content_type


class LibrarySource(Protocol):
    """What the catalog builder and API need from a library."""

    def list_files(self, level: str, kind: FileKind | str) -> list[str]: ...

    def get_object(
        self, level: str, kind: FileKind | str, filename: str
    ) -> StoredObject | None: ...


def _has_extension(name: str, kind: FileKind) -> bool:
    return name.lower().endswith(kind.extension)


def _iter_file_chunks(handle: BinaryIO) -> Iterator[bytes]:
    with handle:
        while chunk := handle.read(CHUNK_SIZE):
            yield chunk


# =============================================================================
# Local filesystem
# =============================================================================


class LocalLibrary:
    """Library on disk: per-level directories under a PDF root and an audio root.

    Directory entries are visited in sorted name order so repeated scans of an
    unchanged tree produce identical listings.
    """

    def __init__(
        self,
        pdf_root: Path | None,
        audio_root: Path | None,
        levels: LevelTable | None = None,
        *,
        pdf_prefix: str = "pdf",
        audio_prefix: str = "audio",
    ) -> None:
        self.pdf_root = pdf_root
        self.audio_root = audio_root
        self.levels = levels if levels is not None else default_level_table()
        self.prefixes = {FileKind.pdf: pdf_prefix, FileKind.audio: audio_prefix}
        self._resolutions: dict[FileKind, DirectoryResolution] = {}

    def root(self, kind: FileKind) -> Path:
        root = self.pdf_root if kind is FileKind.pdf else self.audio_root
        if root is None:
            raise StorageError(f"No {kind.value} root configured", kind=kind.value)
        if not root.is_dir():
            raise StorageError(f"{kind.value} root is not a directory: {root}", kind=kind.value)
        return root

    def resolve(self, kind: FileKind | str) -> DirectoryResolution:
        """Resolve the top-level directories of one tree to level codes.

        Resolved once per tree and cached; call refresh() after the tree changes.
        """
        kind = FileKind(kind)
        cached = self._resolutions.get(kind)
        if cached is not None:
            return cached
        root = self.root(kind)
        try:
            names = sorted(entry.name for entry in os.scandir(root) if entry.is_dir())
        except OSError as e:
            raise StorageError(f"Cannot list {root}: {e}", kind=kind.value) from e
        resolution = self.levels.resolve_directories(names, kind)
        self._resolutions[kind] = resolution
        return resolution

    def refresh(self) -> None:
        self._resolutions.clear()

    def _walk(self, directory: Path, kind: FileKind) -> Iterator[Path]:
        try:
            entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
        except OSError as e:
            raise StorageError(f"Cannot list {directory}: {e}", kind=kind.value) from e

        for entry in entries:
            if is_hidden(entry.name):
                continue
            if entry.is_dir():
                yield from self._walk(Path(entry.path), kind)
            elif _has_extension(entry.name, kind):
                yield Path(entry.path)

    def collect(self, level: str, kind: FileKind | str) -> list[Path]:
        """All files of ``kind`` for ``level`` across its resolved directories."""
        kind = FileKind(kind)
        root = self.root(kind)
        paths: list[Path] = []
        for directory in self.resolve(kind).directories_for(level):
            paths.extend(self._walk(root / directory, kind))
        return paths

    def list_files(self, level: str, kind: FileKind | str) -> list[str]:
        return [path.name for path in self.collect(level, kind)]

    def get_object(self, level: str, kind: FileKind | str, filename: str) -> StoredObject | None:
        kind = FileKind(kind)
        for path in self.collect(level, kind):
            if path.name == filename:
                return StoredObject(
                    chunks=_iter_file_chunks(path.open("rb")),
                    content_type=kind.content_type,
                    content_length=path.stat().st_size,
                )
        return None

    def iter_local_files(self, levels: Iterable[str] | None = None) -> Iterator[LocalFile]:
        """Every local file with its bucket key, PDFs first then audio."""
        codes = list(levels) if levels is not None else self.levels.codes
        for kind in FileKind:
            resolution = self.resolve(kind)
            for code in codes:
                for directory in resolution.directories_for(code):
                    for path in self._walk(self.root(kind) / directory, kind):
                        yield LocalFile(
                            path=path,
                            level=code,
                            kind=kind,
                            key=f"{self.prefixes[kind]}/{code}/{path.name}",
                        )


# =============================================================================
# S3-compatible bucket
# =============================================================================


def make_s3_client(storage: StorageConfig) -> Any:
    """Create a boto3 S3 client for the configured endpoint (R2 or S3)."""
    kwargs: dict[str, Any] = {
        "region_name": storage.region,
        "config": Config(
            signature_version="s3v4",
            connect_timeout=storage.timeout_seconds,
            read_timeout=storage.timeout_seconds,
            retries={"max_attempts": 3, "mode": "standard"},
        ),
    }
    if storage.endpoint_url:
        kwargs["endpoint_url"] = storage.endpoint_url
    if storage.access_key_id:
        kwargs["aws_access_key_id"] = storage.access_key_id
        kwargs["aws_secret_access_key"] = storage.secret_access_key
    return boto3.client("s3", **kwargs)


def _is_missing(error: ClientError) -> bool:
    code = str(error.response.get("Error", {}).get("Code", ""))
    return code in {"NoSuchKey", "404", "NotFound"}


class BucketLibrary:
    """Library stored in an S3-compatible bucket under ``{prefix}/{level}/``."""

    def __init__(
        self,
        client: Any,
        bucket: str,
        *,
        pdf_prefix: str = "pdf",
        audio_prefix: str = "audio",
    ) -> None:
        self.client = client
        self.bucket = bucket
        self.prefixes = {FileKind.pdf: pdf_prefix, FileKind.audio: audio_prefix}

    @classmethod
    def from_config(cls, storage: StorageConfig) -> BucketLibrary:
        return cls(
            make_s3_client(storage),
            storage.bucket,
            pdf_prefix=storage.pdf_prefix,
            audio_prefix=storage.audio_prefix,
        )

    def level_prefix(self, level: str, kind: FileKind | str) -> str:
        return f"{self.prefixes[FileKind(kind)]}/{level}/"

    def list_keys(self, prefix: str = "", *, level: str | None = None) -> list[str]:
        """All keys under ``prefix``, every page drained before returning."""
        keys: list[str] = []
        paginator = self.client.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    keys.append(obj["Key"])
        except (ClientError, BotoCoreError) as e:
            raise StorageError(
                f"Cannot list s3://{self.bucket}/{prefix}: {e}", level=level, key=prefix
            ) from e
        return keys

    def list_files(self, level: str, kind: FileKind | str) -> list[str]:
        kind = FileKind(kind)
        names: list[str] = []
        for key in self.list_keys(self.level_prefix(level, kind), level=level):
            name = key.rsplit("/", 1)[-1]
            if not name or is_hidden(name) or not _has_extension(name, kind):
                continue
            names.append(name)
        return names

    def get_object(self, level: str, kind: FileKind | str, filename: str) -> StoredObject | None:
        kind = FileKind(kind)
        key = self.level_prefix(level, kind) + filename
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _is_missing(e):
                return None
            raise StorageError(
                f"Cannot read s3://{self.bucket}/{key}: {e}", level=level, key=key
            ) from e
        except BotoCoreError as e:
            raise StorageError(
                f"Cannot read s3://{self.bucket}/{key}: {e}", level=level, key=key
            ) from e

        return StoredObject(
            chunks=response["Body"].iter_chunks(CHUNK_SIZE),
            content_type=kind.content_type,
            content_length=response.get("ContentLength"),
        )

    def put_file(self, local: LocalFile) -> None:
        """Upload one local file to its key."""
        with open(local.path, "rb") as body:
            self.client.put_object(
                Bucket=self.bucket,
                Key=local.key,
                Body=body,
                ContentType=local.content_type,
            )
