"""
Review scraping configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReviewScrapingSettings:
    """
    Process-wide runtime settings for review scraping.
    """

    default_user_agent: str
    headless: bool = True
    navigation_timeout_seconds: float = 30.0
    default_max_pages: int = 10
    backup_enabled: bool = True
    backup_s3_bucket: str | None = None
    backup_s3_prefix: str = "backups"
    aws_region: str | None = None
    backup_local_dir: str = "data/backups"
