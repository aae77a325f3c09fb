from __future__ import annotations

from .app import API_PREFIX, create_app
from .handlers import build_router

__all__ = ["API_PREFIX", "build_router", "create_app"]
