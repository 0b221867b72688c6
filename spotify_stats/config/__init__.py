"""Configuration module for Spotify Stats."""

from .database import HistoryStore
from .settings import Settings

__all__ = ["HistoryStore", "Settings"]
