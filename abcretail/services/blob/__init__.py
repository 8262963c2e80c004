"""
Blob Container Package

Product images stored in an Azure Blob Storage container.

Author: ABC Retail Platform Team
Date: 2025
"""

from .backend import BlobContainerBackend
from .models import CopyStatus

__all__ = [
    "BlobContainerBackend",
    "CopyStatus",
]
