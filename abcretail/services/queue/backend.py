"""
Queue Backend

Order-event operations on Azure Queue Storage, including delete by message id.

Author: ABC Retail Platform Team
Date: 2025
"""

import logging
from typing import List, Optional

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.queue.aio import QueueClient

from ...core.config_manager import MAX_QUEUE_BATCH
from ...core.results import StorageResult
from ..base import StorageBackend
from .models import QueueMessageView

logger = logging.getLogger(__name__)


class QueueBackend(StorageBackend):
    """
    Queue operations for one storage queue.

    Listing peeks without consuming. Deleting by id needs a pop receipt, so
    the message is located with a bounded number of short receive passes.
    """

    resource_kind = "queue"

    def __init__(
        self,
        queue_client: QueueClient,
        delete_receive_passes: int = 2,
        delete_batch_size: int = MAX_QUEUE_BATCH,
        delete_visibility_timeout: int = 5,
    ):
        super().__init__(queue_client.queue_name)
        self._queue = queue_client
        self.delete_receive_passes = delete_receive_passes
        self.delete_batch_size = delete_batch_size
        self.delete_visibility_timeout = delete_visibility_timeout

    @classmethod
    def from_connection_string(cls, connection_string: str, queue_name: str, **scan_settings) -> "QueueBackend":
        return cls(QueueClient.from_connection_string(connection_string, queue_name=queue_name), **scan_settings)

    async def _provision(self) -> None:
        await self._queue.create_queue()

    async def close(self) -> None:
        await self._queue.close()

    async def peek_messages(self, max_messages: int = MAX_QUEUE_BATCH) -> List[QueueMessageView]:
        """
        Peek at visible messages without changing their visibility.

        Args:
            max_messages: Upper bound on messages returned (1-32)

        Returns:
            Message views with no pop receipt
        """
        if not 1 <= max_messages <= MAX_QUEUE_BATCH:
            raise ValueError(f"max_messages must be between 1 and {MAX_QUEUE_BATCH}")

        await self.ensure_provisioned()
        async with self.translate_errors("peek_messages"):
            peeked = await self._queue.peek_messages(max_messages=max_messages)
        messages = [QueueMessageView.from_peeked(m) for m in peeked]
        logger.info(f"Peeked {len(messages)} message(s) on queue '{self.resource_name}'")
        return messages

    async def send_message(self, text: Optional[str]) -> None:
        """Enqueue the text unchanged (None is sent as an empty message)."""
        await self.ensure_provisioned()
        async with self.translate_errors("send_message"):
            await self._queue.send_message(text or "")
        logger.info(f"Sent message to queue '{self.resource_name}'")

    async def delete_message_by_id(self, message_id: Optional[str]) -> StorageResult[None]:
        """
        Delete a message when only its id is known.

        Makes up to ``delete_receive_passes`` receive passes of up to
        ``delete_batch_size`` messages, each hidden for
        ``delete_visibility_timeout`` seconds, and deletes the first match
        with the pop receipt from that receive. This is best effort: a
        message outside the scanned batches, or one taken by another
        consumer between passes, is not deleted.

        Args:
            message_id: Id of the message, as shown by peek

        Returns:
            SUCCESS when deleted, NOT_FOUND when no pass returned the message
        """
        if not message_id or not message_id.strip():
            return StorageResult.not_found()

        await self.ensure_provisioned()
        for attempt in range(1, self.delete_receive_passes + 1):
            async with self.translate_errors("receive_messages"):
                batch = [
                    message
                    async for message in self._queue.receive_messages(
                        messages_per_page=self.delete_batch_size,
                        max_messages=self.delete_batch_size,
                        visibility_timeout=self.delete_visibility_timeout,
                    )
                ]

            match = next((m for m in batch if m.id == message_id), None)
            if match is None:
                logger.debug(
                    f"Pass {attempt}/{self.delete_receive_passes}: message '{message_id}' "
                    f"not among {len(batch)} received"
                )
                continue

            async with self.translate_errors("delete_message", message_id):
                try:
                    await self._queue.delete_message(match.id, match.pop_receipt)
                except ResourceNotFoundError:
                    # Removed by another consumer after our receive
                    logger.info(f"Message '{message_id}' was removed concurrently")
                    return StorageResult.not_found()
            logger.info(f"Deleted message '{message_id}' from queue '{self.resource_name}' on pass {attempt}")
            return StorageResult.success()

        logger.info(
            f"Message '{message_id}' not found in {self.delete_receive_passes} receive pass(es); nothing deleted"
        )
        return StorageResult.not_found()
