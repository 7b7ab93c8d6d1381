"""Data access helpers for JTI records."""

from .jti_repo import JTIRepository

__all__ = ["JTIRepository"]
