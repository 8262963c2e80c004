"""
Customer profile model and table entity mapping.

Customer profiles are stored in Azure Table Storage under a single
partition. The mapping functions here are pure; no validation is applied.
"""

import uuid
from datetime import datetime
from typing import Any, Mapping, Optional

from azure.data.tables import TableEntity
from pydantic import BaseModel, ConfigDict, Field, field_validator

CUSTOMER_PARTITION_KEY = "Customer"
DEFAULT_LOYALTY_TIER = "Bronze"

# Table property names for the mutable fields
FULL_NAME = "FullName"
EMAIL = "Email"
FAVORITE_PRODUCT = "FavoriteProduct"
LOYALTY_TIER = "LoyaltyTier"


class CustomerProfile(BaseModel):
    """
    Customer profile stored as a table entity.

    Attributes:
        partition_key: Group key, always "Customer"
        row_key: Unique identifier, generated once and never empty
        full_name: Customer full name
        email: Contact email (not validated)
        favorite_product: Favorite product name
        loyalty_tier: Loyalty tier, "Bronze" unless set
        timestamp: Last modification time assigned by the service
        etag: Optimistic concurrency token assigned by the service
    """
    model_config = ConfigDict(extra='forbid')

    partition_key: str = CUSTOMER_PARTITION_KEY
    row_key: str = Field(default_factory=lambda: str(uuid.uuid4()))
    full_name: str = ""
    email: str = ""
    favorite_product: str = ""
    loyalty_tier: str = DEFAULT_LOYALTY_TIER
    timestamp: Optional[datetime] = None
    etag: Optional[str] = None

    @field_validator('row_key')
    @classmethod
    def validate_row_key(cls, v: str) -> str:
        """Row keys may not be blank."""
        if not v or not v.strip():
            raise ValueError("row_key cannot be empty")
        return v

    @classmethod
    def new(
        cls,
        full_name: Optional[str],
        email: Optional[str],
        favorite_product: Optional[str],
        loyalty_tier: Optional[str],
    ) -> "CustomerProfile":
        """Build a fresh profile from raw form values."""
        return cls(
            full_name=full_name or "",
            email=email or "",
            favorite_product=favorite_product or "",
            loyalty_tier=normalize_tier(loyalty_tier),
        )

    def apply_edits(
        self,
        full_name: Optional[str],
        email: Optional[str],
        favorite_product: Optional[str],
        loyalty_tier: Optional[str],
    ) -> "CustomerProfile":
        """Return a copy carrying the edited mutable fields."""
        return self.model_copy(update={
            "full_name": full_name or "",
            "email": email or "",
            "favorite_product": favorite_product or "",
            "loyalty_tier": normalize_tier(loyalty_tier),
        })


def normalize_tier(tier: Optional[str]) -> str:
    """Blank or missing tiers fall back to the default tier."""
    if tier is None or not tier.strip():
        return DEFAULT_LOYALTY_TIER
    return tier


def profile_from_entity(entity: Mapping[str, Any]) -> CustomerProfile:
    """
    Map a table entity to a customer profile.

    Absent optional properties become empty strings. Timestamp and etag are
    taken from the entity metadata when the SDK provides it.
    """
    metadata = getattr(entity, "metadata", None) or {}
    return CustomerProfile(
        partition_key=entity.get("PartitionKey") or CUSTOMER_PARTITION_KEY,
        row_key=entity["RowKey"],
        full_name=entity.get(FULL_NAME) or "",
        email=entity.get(EMAIL) or "",
        favorite_product=entity.get(FAVORITE_PRODUCT) or "",
        loyalty_tier=entity.get(LOYALTY_TIER) or "",
        timestamp=metadata.get("timestamp"),
        etag=metadata.get("etag"),
    )


def profile_to_entity(profile: CustomerProfile) -> TableEntity:
    """Map a customer profile to a table entity, always writing all four mutable fields."""
    entity = TableEntity()
    entity["PartitionKey"] = profile.partition_key
    entity["RowKey"] = profile.row_key
    entity[FULL_NAME] = profile.full_name or ""
    entity[EMAIL] = profile.email or ""
    entity[FAVORITE_PRODUCT] = profile.favorite_product or ""
    entity[LOYALTY_TIER] = profile.loyalty_tier or ""
    return entity
