# src/jti_store/models/__init__.py
"""SQLAlchemy models for the JTI store."""

from .jti import JTIEntry

__all__ = ["JTIEntry"]
