from __future__ import annotations

# Re-export common schema classes for convenient imports
from .posts import PostContentCreate, PostContentUpdate  # noqa: F401

__all__ = [
    "PostContentCreate",
    "PostContentUpdate",
]
