"""
Storage Service

Single façade over the table, blob, file share and queue backends used by
the web handlers. Built once at startup from configuration and closed at
shutdown; it holds no per-request state.

Author: ABC Retail Platform Team
Date: 2025
"""

import asyncio
import logging
from typing import IO, List, Optional, Union

from fastapi import Request

from ..core.config_manager import AppConfig
from ..core.exceptions import ConfigurationError
from ..core.results import StorageResult
from .blob.backend import BlobContainerBackend
from .files.backend import FileShareBackend
from .queue.backend import QueueBackend
from .queue.models import QueueMessageView
from .table.backend import CustomerTableBackend
from .table.models import CustomerProfile

logger = logging.getLogger(__name__)


class StorageService:
    """
    Customer table, product image container, contract share and order-event queue.

    Each method is one remote operation (rename_blob_non_atomic is a copy,
    wait and delete sequence). "Not found" on reads and deletes comes back
    as a StorageResult; every other failure raises StorageOperationError.
    """

    def __init__(
        self,
        table: CustomerTableBackend,
        blobs: BlobContainerBackend,
        files: FileShareBackend,
        queue: QueueBackend,
        peek_max_messages: int = 32,
    ):
        self.table = table
        self.blobs = blobs
        self.files = files
        self.queue = queue
        self.peek_max_messages = peek_max_messages

    @classmethod
    def from_config(cls, config: AppConfig) -> "StorageService":
        """
        Build the service and its clients from application configuration.

        Raises:
            ConfigurationError: If no connection string is configured
        """
        storage = config.azure_storage
        if not storage.connection_string:
            raise ConfigurationError(
                "Azure Storage connection string not found. "
                "Set AZURE_STORAGE_CONNECTION_STRING or azure_storage.connection_string."
            )

        conn = storage.connection_string
        service = cls(
            table=CustomerTableBackend.from_connection_string(conn, storage.table_name),
            blobs=BlobContainerBackend.from_connection_string(
                conn,
                storage.blob_container,
                copy_poll_interval=config.blob.copy_poll_interval,
            ),
            files=FileShareBackend.from_connection_string(conn, storage.file_share),
            queue=QueueBackend.from_connection_string(
                conn,
                storage.queue_name,
                delete_receive_passes=config.queue.delete_receive_passes,
                delete_batch_size=config.queue.delete_batch_size,
                delete_visibility_timeout=config.queue.delete_visibility_timeout,
            ),
            peek_max_messages=config.queue.peek_max_messages,
        )
        logger.info(
            f"Storage service ready: table={storage.table_name}, container={storage.blob_container}, "
            f"share={storage.file_share}, queue={storage.queue_name}"
        )
        return service

    async def close(self) -> None:
        """Close all underlying clients."""
        await asyncio.gather(
            self.table.close(),
            self.blobs.close(),
            self.files.close(),
            self.queue.close(),
        )
        logger.info("Storage service closed")

    # Customers

    async def list_customers(self) -> List[CustomerProfile]:
        return await self.table.list_customers()

    async def get_customer(self, row_key: str) -> StorageResult[CustomerProfile]:
        return await self.table.get_customer(row_key)

    async def add_customer(self, customer: CustomerProfile) -> CustomerProfile:
        return await self.table.add_customer(customer)

    async def update_customer(self, customer: CustomerProfile) -> CustomerProfile:
        return await self.table.update_customer(customer)

    async def delete_customer(self, row_key: str) -> StorageResult[None]:
        return await self.table.delete_customer(row_key)

    # Blobs

    async def list_blobs(self) -> List[str]:
        return await self.blobs.list_blobs()

    async def upload_blob(self, blob_name: str, data: Union[bytes, IO[bytes]]) -> None:
        await self.blobs.upload_blob(blob_name, data)

    async def delete_blob(self, blob_name: str) -> StorageResult[None]:
        return await self.blobs.delete_blob(blob_name)

    async def rename_blob_non_atomic(self, old_name: str, new_name: str) -> None:
        await self.blobs.rename_blob_non_atomic(old_name, new_name)

    # Files

    async def list_files(self) -> List[str]:
        return await self.files.list_files()

    async def upload_file(self, file_name: str, data: IO[bytes], length: Optional[int] = None) -> None:
        await self.files.upload_file(file_name, data, length)

    async def delete_file(self, file_name: str) -> StorageResult[None]:
        return await self.files.delete_file(file_name)

    async def rename_file(self, old_name: str, new_name: str) -> None:
        await self.files.rename_file(old_name, new_name)

    # Queue

    async def peek_messages(self, max_messages: Optional[int] = None) -> List[QueueMessageView]:
        return await self.queue.peek_messages(max_messages or self.peek_max_messages)

    async def send_message(self, text: Optional[str]) -> None:
        await self.queue.send_message(text)

    async def delete_message_by_id(self, message_id: Optional[str]) -> StorageResult[None]:
        return await self.queue.delete_message_by_id(message_id)


def get_storage(request: Request) -> StorageService:
    """FastAPI dependency returning the application's storage service."""
    return request.app.state.storage
