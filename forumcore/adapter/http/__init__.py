"""HTTP adapter for the forum API."""

from .client import HttpForumClient

__all__ = ["HttpForumClient"]
