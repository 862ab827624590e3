"""HTTP API (FastAPI). ``create_app`` builds the application."""

from redlist_dashboard.api.app import create_app

__all__ = ["create_app"]
