"""
Shared plumbing for the storage backends.

Each backend owns one long-lived async Azure client and provisions its
resource (table, container, share or queue) on first use.

Author: ABC Retail Platform Team
Date: 2025
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator

from azure.core.exceptions import AzureError, HttpResponseError, ResourceExistsError

from ..core.exceptions import StorageOperationError

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """
    Base class for backends bound to a single storage resource.

    Subclasses implement ``_provision`` (create-if-absent) and ``close``.
    """

    resource_kind: str = "resource"

    def __init__(self, resource_name: str):
        self.resource_name = resource_name
        self._provisioned = False
        self._provision_lock = asyncio.Lock()

    @abstractmethod
    async def _provision(self) -> None:
        """Create the backing resource if it does not exist."""

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying client."""

    async def ensure_provisioned(self) -> None:
        """
        Provision the backing resource once per backend instance.

        A failed attempt leaves the backend unprovisioned so the next call
        tries again.

        Raises:
            StorageOperationError: If the resource cannot be created
        """
        if self._provisioned:
            return
        async with self._provision_lock:
            if self._provisioned:
                return
            async with self.translate_errors("provision"):
                try:
                    await self._provision()
                    logger.info(f"Created {self.resource_kind} '{self.resource_name}'")
                except ResourceExistsError:
                    logger.debug(f"{self.resource_kind.capitalize()} '{self.resource_name}' already exists")
            self._provisioned = True

    @asynccontextmanager
    async def translate_errors(self, operation: str, target: str = "") -> AsyncIterator[None]:
        """
        Convert Azure SDK failures into StorageOperationError.

        Callers catch ResourceNotFoundError themselves before this context
        sees it wherever not-found is an expected outcome.
        """
        resource = f"{self.resource_name}/{target}" if target else self.resource_name
        try:
            yield
        except HttpResponseError as e:
            logger.error(f"{operation} on '{resource}' failed with status {e.status_code}: {e.message}")
            raise StorageOperationError(operation, resource, str(e.message or e), e.status_code) from e
        except AzureError as e:
            logger.error(f"{operation} on '{resource}' failed: {e}")
            raise StorageOperationError(operation, resource, str(e)) from e


def same_name(old_name: str, new_name: str) -> bool:
    """Names that differ only by case are treated as the same entry."""
    return old_name.casefold() == new_name.casefold()
