"""dirpurge - find and remove build caches and dependency folders."""

__version__ = "1.0.0"
