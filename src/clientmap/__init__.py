"""
Clientmap: client location ingestion for map views.

This package turns a loosely formatted spreadsheet export into typed
client records, with fallback retrieval routes and an offline snapshot.
"""

from importlib.metadata import version

__version__ = version("clientmap")

__all__ = ["__version__"]
