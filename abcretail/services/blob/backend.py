"""
Blob Container Backend

Product image operations on a single Azure Blob Storage container.

Author: ABC Retail Platform Team
Date: 2025
"""

import asyncio
import logging
from typing import IO, List, Union

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob.aio import ContainerClient

from ...core.exceptions import BlobCopyFailedError
from ...core.results import StorageResult
from ..base import StorageBackend, same_name
from .models import CopyStatus

logger = logging.getLogger(__name__)


class BlobContainerBackend(StorageBackend):
    """
    Blob operations scoped to one private container.

    Uploads overwrite unconditionally. Renames are copy-then-delete and
    therefore not atomic.
    """

    resource_kind = "container"

    def __init__(self, container_client: ContainerClient, copy_poll_interval: float = 1.0):
        super().__init__(container_client.container_name)
        self._container = container_client
        self._copy_poll_interval = copy_poll_interval

    @classmethod
    def from_connection_string(
        cls,
        connection_string: str,
        container_name: str,
        copy_poll_interval: float = 1.0,
    ) -> "BlobContainerBackend":
        client = ContainerClient.from_connection_string(connection_string, container_name=container_name)
        return cls(client, copy_poll_interval=copy_poll_interval)

    async def _provision(self) -> None:
        # No public_access: the container stays private
        await self._container.create_container()

    async def close(self) -> None:
        await self._container.close()

    async def list_blobs(self) -> List[str]:
        """
        List blob names in the container.

        Returns:
            Names sorted ascending (empty list for an empty container)
        """
        await self.ensure_provisioned()
        names: List[str] = []
        async with self.translate_errors("list_blobs"):
            async for name in self._container.list_blob_names():
                names.append(name)
        names.sort()
        logger.info(f"Listed {len(names)} blob(s) in container '{self.resource_name}'")
        return names

    async def upload_blob(self, blob_name: str, data: Union[bytes, IO[bytes]]) -> None:
        """
        Upload a blob, overwriting any existing blob of the same name.

        Args:
            blob_name: Target blob name
            data: Bytes or a readable binary stream
        """
        await self.ensure_provisioned()
        async with self.translate_errors("upload_blob", blob_name):
            await self._container.upload_blob(blob_name, data, overwrite=True)
        logger.info(f"Uploaded blob '{blob_name}' to container '{self.resource_name}'")

    async def delete_blob(self, blob_name: str) -> StorageResult[None]:
        """
        Delete a blob if it exists.

        Returns:
            SUCCESS, or NOT_FOUND when the blob was already absent
        """
        await self.ensure_provisioned()
        async with self.translate_errors("delete_blob", blob_name):
            try:
                await self._container.delete_blob(blob_name)
            except ResourceNotFoundError:
                logger.info(f"Blob '{blob_name}' already absent")
                return StorageResult.not_found()
        logger.info(f"Deleted blob '{blob_name}'")
        return StorageResult.success()

    async def rename_blob_non_atomic(self, old_name: str, new_name: str) -> None:
        """
        Rename a blob by copying it to the new name and deleting the original.

        Names equal ignoring case are a no-op. This is NOT atomic: a failure
        after the copy completes and before the source delete leaves the blob
        under both names.

        Args:
            old_name: Existing blob name
            new_name: Target blob name

        Raises:
            BlobCopyFailedError: If the copy ends failed or aborted; the
                source is left in place
            StorageOperationError: For any other remote failure, including
                a missing source blob
        """
        if same_name(old_name, new_name):
            logger.debug(f"Rename of blob '{old_name}' to '{new_name}' is a no-op")
            return

        await self.ensure_provisioned()
        source = self._container.get_blob_client(old_name)
        destination = self._container.get_blob_client(new_name)

        async with self.translate_errors("start_copy_from_url", new_name):
            copy = await destination.start_copy_from_url(source.url)
            status = CopyStatus.parse(copy.get("copy_status"))
            while not status.is_terminal:
                await asyncio.sleep(self._copy_poll_interval)
                properties = await destination.get_blob_properties()
                status = CopyStatus.parse(properties.copy.status)

        if status is not CopyStatus.SUCCESS:
            raise BlobCopyFailedError(
                "start_copy_from_url",
                f"{self.resource_name}/{new_name}",
                f"copy from '{old_name}' ended with status '{status.value}'",
            )

        async with self.translate_errors("delete_blob", old_name):
            try:
                await source.delete_blob()
            except ResourceNotFoundError:
                logger.warning(f"Source blob '{old_name}' vanished before rename cleanup")
        logger.info(f"Renamed blob '{old_name}' to '{new_name}'")
