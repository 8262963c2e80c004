"""
Explicit outcomes for storage operations whose "not found" case is absorbed.

Reads and deletes return a StorageResult instead of raising when the target
does not exist. Any other failure is raised as StorageOperationError.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ResultStatus(str, Enum):
    """Outcome of a storage operation."""
    SUCCESS = "success"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class StorageResult(Generic[T]):
    """Outcome of a read or delete, with the value when there is one."""

    status: ResultStatus
    value: Optional[T] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "StorageResult[T]":
        return cls(ResultStatus.SUCCESS, value)

    @classmethod
    def not_found(cls) -> "StorageResult[T]":
        return cls(ResultStatus.NOT_FOUND)

    @property
    def found(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    def unwrap_or_none(self) -> Optional[T]:
        """Return the value, or None when the target was not found."""
        return self.value if self.found else None
