"""
Route package initialization.
"""
from .contact import router as contact_router
from .regions import router as regions_router
from .scrape import router as scrape_router

__all__ = ["contact_router", "regions_router", "scrape_router"]
