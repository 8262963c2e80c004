"""
Blob Storage Models

Copy states reported by Azure Blob Storage during a server-side copy.

Author: ABC Retail Platform Team
Date: 2025
"""

from enum import Enum
from typing import Optional


class CopyStatus(str, Enum):
    """Server-side copy status values."""
    PENDING = "pending"
    SUCCESS = "success"
    ABORTED = "aborted"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: Optional[str]) -> "CopyStatus":
        """
        Parse a copy status string from the service.

        A missing status means the copy finished synchronously.
        """
        if value is None:
            return cls.SUCCESS
        return cls(str(value).lower())

    @property
    def is_terminal(self) -> bool:
        return self is not CopyStatus.PENDING
