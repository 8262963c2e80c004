"""
Storage services package.

One subpackage per storage kind, each with a backend wrapping the Azure
client and an API module with the page handlers.
"""

from .storage import StorageService, get_storage

__all__ = ["StorageService", "get_storage"]
