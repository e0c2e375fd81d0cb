"""
Parsing helpers for review pages.
"""

from app.scraping.parsing.html_parsers import ReviewHTMLParser, parse_helpful_votes, parse_rating

__all__ = ["ReviewHTMLParser", "parse_helpful_votes", "parse_rating"]
