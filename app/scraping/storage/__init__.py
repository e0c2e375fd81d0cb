"""
Storage layer exports.
"""

from app.scraping.storage.base import ReviewStore
from app.scraping.storage.sqlalchemy_storage import SQLAlchemyReviewStore

__all__ = ["ReviewStore", "SQLAlchemyReviewStore"]
