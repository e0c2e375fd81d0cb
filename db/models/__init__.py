"""
Model package exports.

Import all SQLAlchemy models here so metadata registration works without
extra imports.
"""

from db.models.review import Review
from db.models.scraper import Scraper, ScraperStatus
from db.models.scraping_job import ScrapingJob, ScrapingJobStatus

__all__ = [
    "Review",
    "Scraper",
    "ScraperStatus",
    "ScrapingJob",
    "ScrapingJobStatus",
]
