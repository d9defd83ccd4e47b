"""Math word-problem worksheet service."""

__version__ = "1.0.0"
