"""Services built on top of the JTI repository."""

from .jti_store import JTIRecord, JTIStore, get_jti_store

__all__ = ["JTIRecord", "JTIStore", "get_jti_store"]
