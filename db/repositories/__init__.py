"""
Repository layer exports.
"""

from db.repositories.review_repository import ReviewRepository
from db.repositories.scraper_repository import ScraperRepository
from db.repositories.scraping_job_repository import ScrapingJobRepository

__all__ = [
    "ReviewRepository",
    "ScraperRepository",
    "ScrapingJobRepository",
]
