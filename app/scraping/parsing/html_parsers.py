"""
BeautifulSoup-based field extraction for review pages.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

FLOAT_REGEX = re.compile(r"(\d+\.?\d*)")
INT_REGEX = re.compile(r"\d+")


def parse_rating(value: str | None) -> float:
    """
    First decimal number in free text ("4.5 out of 5 stars" -> 4.5), 0.0 when absent.
    """

    if not value:
        return 0.0
    match = FLOAT_REGEX.search(value)
    if match is None:
        return 0.0
    return float(match.group(1))


def parse_helpful_votes(value: str | None) -> int:
    """
    First integer in free text ("12 people found this helpful" -> 12), 0 when absent.
    """

    if not value:
        return 0
    match = INT_REGEX.search(value)
    if match is None:
        return 0
    return int(match.group(0))


class ReviewHTMLParser:
    """
    Deterministic selector helpers scoped to one review container.
    """

    @staticmethod
    def to_soup(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    @staticmethod
    def select_containers(soup: BeautifulSoup, selector: str) -> list[Tag]:
        if not selector:
            return []
        return list(soup.select(selector))

    @staticmethod
    def has_match(soup: BeautifulSoup | Tag, selector: str | None) -> bool:
        if not selector:
            return False
        return soup.select_one(selector) is not None

    @classmethod
    def select_text(cls, element: Tag, selector: str | None) -> str:
        if not selector:
            return ""
        node = element.select_one(selector)
        if node is None:
            return ""
        return cls.clean_text(node.get_text(" ", strip=True))

    @staticmethod
    def select_attribute(element: Tag, selector: str | None, attribute: str) -> str:
        if not selector:
            return ""
        node = element.select_one(selector)
        if node is None:
            return ""
        value = node.get(attribute)
        if isinstance(value, list):
            value = " ".join(value)
        return (value or "").strip()

    @staticmethod
    def clean_text(value: str) -> str:
        return re.sub(r"\s+", " ", value).strip()
