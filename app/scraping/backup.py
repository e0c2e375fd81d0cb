"""
Best-effort backup of run output to durable storage.

Uploads run as background asyncio tasks. A failed upload is logged and
dropped; it never reaches the run result or the scraper status.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.domain.review_scraping import PersistedReview, ReviewStats, ScraperConfig
from app.scraping.config.models import ReviewScrapingSettings
from app.scraping.errors import BackupFailure
from app.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)

BACKUP_CONTENT_TYPE = "application/json"


def build_backup_payload(
    *,
    config: ScraperConfig,
    reviews: Sequence[PersistedReview],
    stats: ReviewStats,
    job_id: int | None = None,
    backup_date: datetime | None = None,
) -> bytes:
    """
    Serialize newly saved reviews and run metadata as indented JSON.
    """

    payload: dict[str, Any] = {
        "scraperId": config.id,
        "platform": config.platform,
        "targetUrl": config.target_url,
        "jobId": job_id,
        "backupDate": (backup_date or datetime.now(timezone.utc)).isoformat(),
        "stats": {
            "totalScraped": stats.total_scraped,
            "newCount": stats.new_count,
            "updatedCount": stats.updated_count,
        },
        "reviews": [
            {
                "id": review.id,
                "author_name": review.author_name,
                "author_location": review.author_location,
                "rating": review.rating,
                "title": review.title,
                "content": review.content,
                "review_date": review.review_date,
                "source_url": review.source_url,
                "platform": review.platform,
                "sentiment": review.sentiment,
                "keywords": review.keywords,
                "helpful_votes": review.helpful_votes,
                "verified_purchase": review.verified_purchase,
            }
            for review in reviews
        ],
    }
    return json.dumps(payload, indent=2, default=str).encode("utf-8")


def backup_key(*, prefix: str, owner_id: int, scraper_id: int, stored_at: datetime) -> str:
    timestamp = stored_at.strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    prefix = prefix.strip("/")
    key = f"{owner_id}/{scraper_id}/reviews-{timestamp}.json"
    return f"{prefix}/{key}" if prefix else key


class BackupStorage(Protocol):
    """
    Durable storage for backup payloads. Returns the stored location.
    """

    def upload_backup(self, *, scraper_id: int, owner_id: int, payload: bytes) -> str:
        ...


class S3BackupStorage:
    """
    Stores backups as JSON objects in one S3 bucket.
    """

    def __init__(
        self,
        *,
        bucket: str,
        prefix: str = "backups",
        region: str | None = None,
        client: Any | None = None,
    ) -> None:
        self._bucket = bucket
        self._prefix = prefix
        self._client = client or boto3.client("s3", region_name=region)

    def upload_backup(self, *, scraper_id: int, owner_id: int, payload: bytes) -> str:
        key = backup_key(
            prefix=self._prefix,
            owner_id=owner_id,
            scraper_id=scraper_id,
            stored_at=datetime.now(timezone.utc),
        )
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=payload,
                ContentType=BACKUP_CONTENT_TYPE,
                Metadata={
                    "userId": str(owner_id),
                    "scraperId": str(scraper_id),
                    "type": "reviews",
                },
            )
        except (BotoCoreError, ClientError) as exc:
            raise BackupFailure(f"Failed to upload backup to s3://{self._bucket}/{key}: {exc}") from exc
        return f"s3://{self._bucket}/{key}"


class LocalBackupStorage:
    """
    Local filesystem backup storage using the same key layout as S3.
    """

    def __init__(self, root_dir: str | Path = "data/backups", *, prefix: str = "") -> None:
        self._root_dir = Path(root_dir)
        self._prefix = prefix

    def upload_backup(self, *, scraper_id: int, owner_id: int, payload: bytes) -> str:
        relative_path = Path(
            backup_key(
                prefix=self._prefix,
                owner_id=owner_id,
                scraper_id=scraper_id,
                stored_at=datetime.now(timezone.utc),
            )
        )
        absolute_path = self._root_dir / relative_path
        tmp_path = absolute_path.with_suffix(f"{absolute_path.suffix}.tmp")
        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("wb") as handle:
                handle.write(payload)
            tmp_path.replace(absolute_path)
        except OSError as exc:
            raise BackupFailure(f"Failed to write backup to {absolute_path}: {exc}") from exc
        finally:
            if tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    pass
        return str(absolute_path)


def build_backup_storage(settings: ReviewScrapingSettings) -> BackupStorage:
    if settings.backup_s3_bucket:
        return S3BackupStorage(
            bucket=settings.backup_s3_bucket,
            prefix=settings.backup_s3_prefix,
            region=settings.aws_region,
        )
    return LocalBackupStorage(settings.backup_local_dir)


class BackupSidecar:
    """
    Dispatches backup uploads as fire-and-forget tasks with their own error boundary.
    """

    def __init__(self, *, storage: BackupStorage | None, enabled: bool = True) -> None:
        self._storage = storage
        self._enabled = enabled and storage is not None
        self._pending: set[asyncio.Task[str | None]] = set()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def dispatch(
        self,
        *,
        scraper_id: int,
        owner_id: int,
        payload: bytes,
    ) -> asyncio.Task[str | None] | None:
        """
        Schedule an upload on the running loop and return immediately.
        """

        if not self._enabled:
            return None
        task = asyncio.get_running_loop().create_task(
            self._upload(scraper_id=scraper_id, owner_id=owner_id, payload=payload)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """
        Wait for every pending upload to settle.
        """

        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _upload(self, *, scraper_id: int, owner_id: int, payload: bytes) -> str | None:
        try:
            location = await asyncio.to_thread(
                self._storage.upload_backup,
                scraper_id=scraper_id,
                owner_id=owner_id,
                payload=payload,
            )
        except Exception as exc:
            log_event(
                logger,
                logging.WARNING,
                "backup_failed",
                scraper_id=scraper_id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return None

        log_event(
            logger,
            logging.INFO,
            "backup_uploaded",
            scraper_id=scraper_id,
            location=location,
            payload_bytes=len(payload),
        )
        return location
