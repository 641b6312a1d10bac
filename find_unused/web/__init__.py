"""HTTP API for running analyses (optional `web` extra)."""

from find_unused.web.app import create_app

__all__ = ["create_app"]
