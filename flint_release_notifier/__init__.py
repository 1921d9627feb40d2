"""Watches Flint client-store modifications and reports releases to Discord."""

__version__ = "1.0.0"
