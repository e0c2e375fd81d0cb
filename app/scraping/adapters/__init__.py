"""
Built-in platform adapters.
"""

from app.scraping.adapters.amazon import AmazonReviewAdapter
from app.scraping.adapters.google import GoogleReviewAdapter
from app.scraping.adapters.yelp import YelpReviewAdapter

__all__ = ["AmazonReviewAdapter", "GoogleReviewAdapter", "YelpReviewAdapter"]
