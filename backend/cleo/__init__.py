"""Expose the application factory at package level.

Provide convenient access to :func:`cleo.factory.create_app` so callers can
``from cleo import create_app`` (and ``flask --app cleo run``).
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
