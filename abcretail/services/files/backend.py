"""
File Share Backend

Contract document operations on the root directory of an Azure file share.

Author: ABC Retail Platform Team
Date: 2025
"""

import logging
import os
from typing import IO, List, Optional

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.fileshare.aio import ShareClient

from ...core.results import StorageResult
from ..base import StorageBackend, same_name

logger = logging.getLogger(__name__)


def stream_length(stream: IO[bytes]) -> int:
    """
    Return the number of bytes remaining in a seekable stream.

    Raises:
        ValueError: If the stream is not seekable
    """
    if not stream.seekable():
        raise ValueError("File uploads need a seekable stream or an explicit length")
    position = stream.tell()
    end = stream.seek(0, os.SEEK_END)
    stream.seek(position)
    return end - position


class FileShareBackend(StorageBackend):
    """
    File operations on the share root.

    Files are created with their exact length and filled with a single range
    write. Renames use the service's native atomic rename.
    """

    resource_kind = "share"

    def __init__(self, share_client: ShareClient):
        super().__init__(share_client.share_name)
        self._share = share_client
        self._root = share_client.get_directory_client()

    @classmethod
    def from_connection_string(cls, connection_string: str, share_name: str) -> "FileShareBackend":
        return cls(ShareClient.from_connection_string(connection_string, share_name=share_name))

    async def _provision(self) -> None:
        await self._share.create_share()

    async def close(self) -> None:
        await self._share.close()

    async def list_files(self) -> List[str]:
        """
        List files (not directories) in the share root.

        Returns:
            File names sorted ascending
        """
        await self.ensure_provisioned()
        names: List[str] = []
        async with self.translate_errors("list_directories_and_files"):
            async for item in self._root.list_directories_and_files():
                if not item["is_directory"]:
                    names.append(item["name"])
        names.sort()
        logger.info(f"Listed {len(names)} file(s) in share '{self.resource_name}'")
        return names

    async def upload_file(self, file_name: str, data: IO[bytes], length: Optional[int] = None) -> None:
        """
        Create a file of the stream's length and write it in one range at offset 0.

        Args:
            file_name: Target file name in the share root
            data: Readable binary stream
            length: Byte length; taken from the stream when omitted

        Raises:
            ValueError: If length is omitted and the stream is not seekable
        """
        if length is None:
            length = stream_length(data)

        await self.ensure_provisioned()
        file_client = self._root.get_file_client(file_name)
        async with self.translate_errors("upload_file", file_name):
            await file_client.create_file(size=length)
            if length > 0:
                await file_client.upload_range(data.read(length), offset=0, length=length)
        logger.info(f"Uploaded file '{file_name}' ({length} bytes) to share '{self.resource_name}'")

    async def delete_file(self, file_name: str) -> StorageResult[None]:
        """
        Delete a file if it exists.

        Returns:
            SUCCESS, or NOT_FOUND when the file was already absent
        """
        await self.ensure_provisioned()
        file_client = self._root.get_file_client(file_name)
        async with self.translate_errors("delete_file", file_name):
            try:
                await file_client.delete_file()
            except ResourceNotFoundError:
                logger.info(f"File '{file_name}' already absent")
                return StorageResult.not_found()
        logger.info(f"Deleted file '{file_name}'")
        return StorageResult.success()

    async def rename_file(self, old_name: str, new_name: str) -> None:
        """
        Rename a file atomically. Names equal ignoring case are a no-op.

        Raises:
            StorageOperationError: If the service rejects the rename
        """
        if same_name(old_name, new_name):
            logger.debug(f"Rename of file '{old_name}' to '{new_name}' is a no-op")
            return

        await self.ensure_provisioned()
        file_client = self._root.get_file_client(old_name)
        async with self.translate_errors("rename_file", old_name):
            await file_client.rename_file(new_name)
        logger.info(f"Renamed file '{old_name}' to '{new_name}'")
