"""Weave: turns translation / constants spreadsheets into platform resources."""

__version__ = "6.0.0"
