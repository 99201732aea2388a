"""HTTP API serving tails and listings of files under a configured root."""

from __future__ import annotations

from .app_factory import create_app

__all__ = ['create_app']
