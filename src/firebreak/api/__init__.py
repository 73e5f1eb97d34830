"""HTTP surface for the analysis engine."""

from .app import create_app

__all__ = ["create_app"]
