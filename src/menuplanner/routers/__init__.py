"""API routers for the menuplanner application."""

from menuplanner.routers.conversions import router as conversions_router
from menuplanner.routers.shopping_lists import router as shopping_lists_router

__all__ = [
    "conversions_router",
    "shopping_lists_router",
]
