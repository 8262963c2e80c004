"""
Customer Table Backend

Customer profile operations on Azure Table Storage.

Author: ABC Retail Platform Team
Date: 2025
"""

import logging
import uuid
from typing import List

from azure.core.exceptions import ResourceNotFoundError
from azure.data.tables import UpdateMode
from azure.data.tables.aio import TableClient

from ...core.results import StorageResult
from ..base import StorageBackend
from .models import (
    CUSTOMER_PARTITION_KEY,
    CustomerProfile,
    profile_from_entity,
    profile_to_entity,
)

logger = logging.getLogger(__name__)


class CustomerTableBackend(StorageBackend):
    """
    Customer profiles kept in one table under the "Customer" partition.

    All writes are upsert-replace: a write with an existing row key fully
    replaces the stored entity.
    """

    resource_kind = "table"

    def __init__(self, table_client: TableClient):
        super().__init__(table_client.table_name)
        self._table = table_client

    @classmethod
    def from_connection_string(cls, connection_string: str, table_name: str) -> "CustomerTableBackend":
        return cls(TableClient.from_connection_string(connection_string, table_name=table_name))

    async def _provision(self) -> None:
        await self._table.create_table()

    async def close(self) -> None:
        await self._table.close()

    async def list_customers(self) -> List[CustomerProfile]:
        """
        List every customer profile.

        Returns:
            Profiles sorted by full name (empty list when there are none)
        """
        await self.ensure_provisioned()
        customers: List[CustomerProfile] = []
        async with self.translate_errors("query_entities"):
            entities = self._table.query_entities(
                "PartitionKey eq @pk",
                parameters={"pk": CUSTOMER_PARTITION_KEY},
            )
            async for entity in entities:
                customers.append(profile_from_entity(entity))
        customers.sort(key=lambda c: c.full_name)
        logger.info(f"Listed {len(customers)} customer(s) from table '{self.resource_name}'")
        return customers

    async def get_customer(self, row_key: str) -> StorageResult[CustomerProfile]:
        """
        Fetch one customer by row key.

        Args:
            row_key: Customer identifier

        Returns:
            Result carrying the profile, or NOT_FOUND when absent
        """
        await self.ensure_provisioned()
        async with self.translate_errors("get_entity", row_key):
            try:
                entity = await self._table.get_entity(
                    partition_key=CUSTOMER_PARTITION_KEY,
                    row_key=row_key,
                )
            except ResourceNotFoundError:
                logger.info(f"Customer '{row_key}' not found")
                return StorageResult.not_found()
        return StorageResult.success(profile_from_entity(entity))

    async def add_customer(self, customer: CustomerProfile) -> CustomerProfile:
        """
        Insert a customer, forcing the partition key and assigning a row key if needed.

        Returns:
            The profile as written
        """
        customer = customer.model_copy(update={
            "partition_key": CUSTOMER_PARTITION_KEY,
            "row_key": customer.row_key or str(uuid.uuid4()),
        })
        await self._upsert(customer, "add_customer")
        return customer

    async def update_customer(self, customer: CustomerProfile) -> CustomerProfile:
        """Replace the stored customer with the given profile."""
        await self._upsert(customer, "update_customer")
        return customer

    async def _upsert(self, customer: CustomerProfile, operation: str) -> None:
        await self.ensure_provisioned()
        async with self.translate_errors(operation, customer.row_key):
            await self._table.upsert_entity(profile_to_entity(customer), mode=UpdateMode.REPLACE)
        logger.info(f"Upserted customer '{customer.row_key}' ({operation})")

    async def delete_customer(self, row_key: str) -> StorageResult[None]:
        """
        Delete a customer by row key.

        Returns:
            SUCCESS, or NOT_FOUND when there was nothing to delete
        """
        await self.ensure_provisioned()
        async with self.translate_errors("delete_entity", row_key):
            try:
                await self._table.delete_entity(
                    partition_key=CUSTOMER_PARTITION_KEY,
                    row_key=row_key,
                )
            except ResourceNotFoundError:
                logger.info(f"Customer '{row_key}' already absent")
                return StorageResult.not_found()
        logger.info(f"Deleted customer '{row_key}'")
        return StorageResult.success()
