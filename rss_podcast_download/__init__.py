"""
RSS Podcast Download

Fetches an RSS feed and archives the media files attached to its first
items into a local directory, skipping files that are already present.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
