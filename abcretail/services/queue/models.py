"""
Queue Storage Models

View model for order-event messages shown on the queue page.

Author: ABC Retail Platform Team
Date: 2025
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class QueueMessageView(BaseModel):
    """
    A queue message as displayed to users.

    Attributes:
        message_id: Identifier assigned by the service
        pop_receipt: Delivery handle; always None for peeked messages
        text: Message content
        inserted_on: Time the message was enqueued
    """
    model_config = ConfigDict(extra='forbid', frozen=True)

    message_id: str
    pop_receipt: Optional[str] = None
    text: str = ""
    inserted_on: Optional[datetime] = None

    @classmethod
    def from_peeked(cls, message: Any) -> "QueueMessageView":
        """Build a view from a peeked message, which never carries a pop receipt."""
        return cls(
            message_id=message.id,
            pop_receipt=None,
            text=message.content or "",
            inserted_on=message.inserted_on,
        )


def compose_order_event(message: str, status: str) -> str:
    """Append the order status to the message text before sending."""
    return f"{message} - {status}"
