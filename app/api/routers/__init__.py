"""
app/api/routers package marker.
"""

from app.api.routers.scrapers import router as scrapers_router

__all__ = [
    "scrapers_router",
]
