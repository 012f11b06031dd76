"""Publish pages from a Notion blog database to WordPress."""

__version__ = "0.1.0"
