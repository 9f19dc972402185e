"""
Bulk upload of a local library into the bucket.

Local files are mapped to ``pdf/{level}/{name}`` and ``audio/{level}/{name}``
keys. Keys already present in the bucket are skipped; the rest are uploaded
by a fixed-size thread pool, each with bounded retries on transient errors.
A failed file is logged and counted and never aborts the run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from botocore.exceptions import BotoCoreError, ClientError

from razlib.exceptions import UploadError
from razlib.levels import FileKind
from razlib.sources import BucketLibrary, LocalFile, LocalLibrary
from razlib.utils.retry import STORAGE_EXCEPTIONS, retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 5


@dataclass
class UploadFailure:
    key: str
    error: str


@dataclass
class UploadSummary:
    """Outcome of an upload run."""

    uploaded: list[str] = field(default_factory=list)
    skipped: int = 0
    failed: list[UploadFailure] = field(default_factory=list)
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        verb = "Would upload" if self.dry_run else "Uploaded"
        return (
            f"{verb} {len(self.uploaded)} files, "
            f"{self.skipped} already present, {len(self.failed)} failed"
        )


def plan_uploads(
    files: Iterable[LocalFile], existing_keys: Iterable[str]
) -> tuple[list[LocalFile], int]:
    """
    Split local files into those missing from the bucket and a skip count.

    A key seen twice locally (same basename in two nested directories of one
    level) is uploaded once; the first file wins.
    """
    existing = set(existing_keys)
    pending: list[LocalFile] = []
    skipped = 0
    for local in files:
        if local.key in existing:
            skipped += 1
            continue
        existing.add(local.key)
        pending.append(local)
    return pending, skipped


def _existing_keys(bucket: BucketLibrary) -> set[str]:
    keys: set[str] = set()
    for kind in FileKind:
        keys.update(bucket.list_keys(f"{bucket.prefixes[kind]}/"))
    return keys


def upload_one(bucket: BucketLibrary, local: LocalFile, *, max_retries: int = 3) -> None:
    """
    Upload a single file, retrying transient store errors.

    Raises:
        UploadError: If the upload still fails after retries
    """

    @retry_with_backoff(max_retries=max_retries, retry_exceptions=STORAGE_EXCEPTIONS)
    def _put() -> None:
        bucket.put_file(local)

    try:
        _put()
    except (ClientError, BotoCoreError, OSError) as e:
        raise UploadError(
            f"Failed to upload {local.key}: {e}", level=local.level, key=local.key
        ) from e


def upload_missing(
    local: LocalLibrary,
    bucket: BucketLibrary,
    *,
    levels: Iterable[str] | None = None,
    concurrency: int = DEFAULT_CONCURRENCY,
    max_retries: int = 3,
    dry_run: bool = False,
    on_progress: Callable[[LocalFile], None] | None = None,
) -> UploadSummary:
    """
    Upload every local file whose key is not yet in the bucket.

    Args:
        local: Local library to read from
        bucket: Destination bucket
        levels: Restrict to these level codes (default: all)
        concurrency: Worker threads
        max_retries: Retries per file after the first attempt
        dry_run: Plan only, upload nothing
        on_progress: Called once per finished file (success or failure)

    Raises:
        StorageError: If the local tree or the bucket cannot be listed
    """
    files = list(local.iter_local_files(levels))
    pending, skipped = plan_uploads(files, _existing_keys(bucket))
    summary = UploadSummary(skipped=skipped, dry_run=dry_run)
    logger.info(
        "%d local files, %d to upload, %d already present", len(files), len(pending), skipped
    )

    if dry_run:
        summary.uploaded = [item.key for item in pending]
        return summary

    with ThreadPoolExecutor(max_workers=max(1, concurrency)) as executor:
        futures = {
            executor.submit(upload_one, bucket, item, max_retries=max_retries): item
            for item in pending
        }
        for future in as_completed(futures):
            item = futures[future]
            try:
                future.result()
            except UploadError as e:
                logger.error("%s", e)
                summary.failed.append(UploadFailure(key=item.key, error=str(e)))
            else:
                logger.debug("Uploaded %s", item.key)
                summary.uploaded.append(item.key)
            if on_progress is not None:
                on_progress(item)

    summary.uploaded.sort()
    logger.info(summary.summary())
    return summary
