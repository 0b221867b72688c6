"""Spotify Stats - now-playing history monitor for the Spotify desktop client."""

__version__ = "0.1.0"
