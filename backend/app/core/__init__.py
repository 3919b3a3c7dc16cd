"""Core utilities for the board backend."""

from .slug import channel_slug, mention_key

__all__ = ["channel_slug", "mention_key"]
