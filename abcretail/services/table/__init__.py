"""
Customer Table Package

Customer profiles stored in Azure Table Storage.

Author: ABC Retail Platform Team
Date: 2025
"""

from .models import (
    CUSTOMER_PARTITION_KEY,
    DEFAULT_LOYALTY_TIER,
    CustomerProfile,
    profile_from_entity,
    profile_to_entity,
)

__all__ = [
    "CUSTOMER_PARTITION_KEY",
    "DEFAULT_LOYALTY_TIER",
    "CustomerProfile",
    "profile_from_entity",
    "profile_to_entity",
]
