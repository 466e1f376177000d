"""Local recipe cache and favorites/ingredient synchronization layer."""

__version__ = "1.2.0"
