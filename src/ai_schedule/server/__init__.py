"""HTTP server package for the dashboard REST API."""

from ai_schedule.server.app import create_app

__all__ = ["create_app"]
