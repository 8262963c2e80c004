"""
Order Event Queue Pages

FastAPI endpoints for peeking, sending and deleting order-event messages.

Author: ABC Retail Platform Team
Date: 2025
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import Response

from ...core.templating import render_template
from ..pages import is_blank, see_other
from ..storage import StorageService, get_storage
from .models import compose_order_event

router = APIRouter(prefix="/queue", tags=["queue"])


@router.get("", name="list_messages", summary="Peek Messages")
async def list_messages(
    request: Request,
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Show visible messages without consuming them."""
    messages = await storage.peek_messages()
    return render_template(request, "queue/index.html", nav_active="queue", messages=messages)


@router.post("/send", summary="Send Message")
async def send_message(
    request: Request,
    message: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Send "<message> - <status>" when both values are given."""
    if not is_blank(message) and not is_blank(status):
        await storage.send_message(compose_order_event(message, status))
    return see_other(request, "list_messages")


@router.post("/delete", summary="Delete Message")
async def delete_message(
    request: Request,
    messageId: Optional[str] = Form(None),
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Delete a message by id; ids that cannot be located are ignored."""
    await storage.delete_message_by_id(messageId)
    return see_other(request, "list_messages")
