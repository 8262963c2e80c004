"""
File Share Package

Contract documents stored in the root of an Azure file share.
"""

from .backend import FileShareBackend, stream_length

__all__ = ["FileShareBackend", "stream_length"]
