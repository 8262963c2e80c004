"""
Queue Package

Order events stored in Azure Queue Storage.

Author: ABC Retail Platform Team
Date: 2025
"""

from .models import QueueMessageView, compose_order_event

__all__ = [
    "QueueMessageView",
    "compose_order_event",
]
