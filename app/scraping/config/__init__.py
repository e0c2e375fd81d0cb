"""
Config helpers for review scraping.
"""

from app.scraping.config.loader import get_review_scraping_settings
from app.scraping.config.models import ReviewScrapingSettings

__all__ = ["ReviewScrapingSettings", "get_review_scraping_settings"]
