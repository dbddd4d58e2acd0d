"""A tiny shared-password quote board."""

__version__ = "0.1.0"
