"""SFHB article API: JSON-file backed article publishing service."""

__version__ = "0.1.0"
