"""
Shared fixtures: in-memory async stand-ins for the Azure storage clients.

The fakes implement only the client methods the backends call and raise the
real azure.core exceptions, so not-found and failure handling run the same
code paths as against the service. Any client method can be made to fail by
adding an exception to the fake's ``failures`` dict under the method name.
"""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.data.tables import TableEntity
from fastapi.testclient import TestClient

from abcretail.app import create_app
from abcretail.core.config_manager import AppConfig, AzureStorageConfig
from abcretail.services.blob.backend import BlobContainerBackend
from abcretail.services.files.backend import FileShareBackend
from abcretail.services.queue.backend import QueueBackend
from abcretail.services.storage import StorageService
from abcretail.services.table.backend import CustomerTableBackend


class FakeClient:
    """Base for the fakes: resource creation tracking and failure injection."""

    def __init__(self):
        self.failures: Dict[str, Exception] = {}
        self.calls: List[str] = []
        self.created = False
        self.create_calls = 0
        self.closed = False

    def _record(self, method: str) -> None:
        self.calls.append(method)
        if method in self.failures:
            raise self.failures[method]

    def _create(self, method: str) -> None:
        self._record(method)
        self.create_calls += 1
        if self.created:
            raise ResourceExistsError(message="The specified resource already exists.")
        self.created = True

    async def close(self) -> None:
        self.closed = True


class FakeTableClient(FakeClient):
    """Stand-in for azure.data.tables.aio.TableClient."""

    def __init__(self, table_name: str = "CustomerProfiles"):
        super().__init__()
        self.table_name = table_name
        self.entities: Dict[tuple, dict] = {}
        self.upsert_modes: List[object] = []

    async def create_table(self):
        self._create("create_table")

    async def query_entities(self, query_filter: str, parameters: Optional[dict] = None, **kwargs):
        self._record("query_entities")
        partition = (parameters or {}).get("pk")
        for (pk, _), stored in list(self.entities.items()):
            if pk == partition:
                yield self._to_entity(stored)

    async def get_entity(self, partition_key: str, row_key: str, **kwargs):
        self._record("get_entity")
        stored = self.entities.get((partition_key, row_key))
        if stored is None:
            raise ResourceNotFoundError(message="The specified resource does not exist.")
        return self._to_entity(stored)

    async def upsert_entity(self, entity, mode=None, **kwargs):
        self._record("upsert_entity")
        self.upsert_modes.append(mode)
        stored = dict(entity)
        stored["_etag"] = f'W/"datetime\'{uuid.uuid4().hex}\'"'
        stored["_timestamp"] = datetime.now(timezone.utc)
        self.entities[(entity["PartitionKey"], entity["RowKey"])] = stored
        return {"etag": stored["_etag"]}

    async def delete_entity(self, partition_key: str, row_key: str, **kwargs):
        self._record("delete_entity")
        if (partition_key, row_key) not in self.entities:
            raise ResourceNotFoundError(message="The specified resource does not exist.")
        del self.entities[(partition_key, row_key)]

    def put(self, **properties) -> None:
        """Store an entity directly, bypassing the mapper."""
        self.entities[(properties["PartitionKey"], properties["RowKey"])] = dict(properties)

    @staticmethod
    def _to_entity(stored: dict) -> TableEntity:
        entity = TableEntity({k: v for k, v in stored.items() if not k.startswith("_")})
        entity._metadata = {"etag": stored.get("_etag"), "timestamp": stored.get("_timestamp")}
        return entity


class FakeBlobClient:
    """Stand-in for azure.storage.blob.aio.BlobClient."""

    def __init__(self, container: "FakeContainerClient", blob_name: str):
        self._container = container
        self.blob_name = blob_name
        self.url = f"https://fake.blob.core.windows.net/{container.container_name}/{blob_name}"
        self._statuses: List[str] = []
        self._source: Optional[str] = None

    async def start_copy_from_url(self, source_url: str, **kwargs):
        self._container._record("start_copy_from_url")
        source = source_url.rsplit("/", 1)[-1]
        if source not in self._container.blobs:
            raise ResourceNotFoundError(message="The specified blob does not exist.")
        self._source = source
        self._statuses = list(self._container.copy_script)
        return {"copy_id": uuid.uuid4().hex, "copy_status": self._advance()}

    async def get_blob_properties(self, **kwargs):
        self._container._record("get_blob_properties")
        return SimpleNamespace(copy=SimpleNamespace(status=self._advance()))

    async def delete_blob(self, **kwargs):
        await self._container.delete_blob(self.blob_name)

    def _advance(self) -> str:
        status = self._statuses.pop(0) if len(self._statuses) > 1 else self._statuses[0]
        if status == "success":
            self._container.blobs[self.blob_name] = self._container.blobs[self._source]
        return status


class FakeContainerClient(FakeClient):
    """Stand-in for azure.storage.blob.aio.ContainerClient."""

    def __init__(self, container_name: str = "product-images"):
        super().__init__()
        self.container_name = container_name
        self.blobs: Dict[str, bytes] = {}
        # Copy statuses reported in turn by start_copy_from_url and get_blob_properties
        self.copy_script: List[str] = ["success"]

    async def create_container(self, **kwargs):
        self._create("create_container")

    async def list_blob_names(self, **kwargs):
        self._record("list_blob_names")
        for name in list(self.blobs):
            yield name

    async def upload_blob(self, name: str, data, overwrite: bool = False, **kwargs):
        self._record("upload_blob")
        if name in self.blobs and not overwrite:
            raise ResourceExistsError(message="The specified blob already exists.")
        self.blobs[name] = data if isinstance(data, bytes) else data.read()

    async def delete_blob(self, blob: str, **kwargs):
        self._record("delete_blob")
        if blob not in self.blobs:
            raise ResourceNotFoundError(message="The specified blob does not exist.")
        del self.blobs[blob]

    def get_blob_client(self, blob: str) -> FakeBlobClient:
        return FakeBlobClient(self, blob)


class FakeFileClient:
    """Stand-in for azure.storage.fileshare.aio.ShareFileClient."""

    def __init__(self, share: "FakeShareClient", file_name: str):
        self._share = share
        self.file_name = file_name

    async def create_file(self, size: int, **kwargs):
        self._share._record("create_file")
        self._share.files[self.file_name] = bytes(size)

    async def upload_range(self, data: bytes, offset: int, length: int, **kwargs):
        self._share._record("upload_range")
        self._share.ranges.append((self.file_name, offset, length))
        current = self._share.files[self.file_name]
        self._share.files[self.file_name] = current[:offset] + data[:length] + current[offset + length:]

    async def delete_file(self, **kwargs):
        self._share._record("delete_file")
        if self.file_name not in self._share.files:
            raise ResourceNotFoundError(message="The specified resource does not exist.")
        del self._share.files[self.file_name]

    async def rename_file(self, new_name: str, **kwargs):
        self._share._record("rename_file")
        if self.file_name not in self._share.files:
            raise ResourceNotFoundError(message="The specified resource does not exist.")
        self._share.files[new_name] = self._share.files.pop(self.file_name)
        return FakeFileClient(self._share, new_name)


class FakeDirectoryClient:
    """Stand-in for the share root azure.storage.fileshare.aio.ShareDirectoryClient."""

    def __init__(self, share: "FakeShareClient"):
        self._share = share

    async def list_directories_and_files(self, **kwargs):
        self._share._record("list_directories_and_files")
        for name in list(self._share.directories):
            yield {"name": name, "is_directory": True}
        for name in list(self._share.files):
            yield {"name": name, "is_directory": False}

    def get_file_client(self, file_name: str) -> FakeFileClient:
        return FakeFileClient(self._share, file_name)


class FakeShareClient(FakeClient):
    """Stand-in for azure.storage.fileshare.aio.ShareClient."""

    def __init__(self, share_name: str = "contracts"):
        super().__init__()
        self.share_name = share_name
        self.files: Dict[str, bytes] = {}
        self.directories: List[str] = []
        self.ranges: List[tuple] = []

    async def create_share(self, **kwargs):
        self._create("create_share")

    def get_directory_client(self, directory_path: Optional[str] = None) -> FakeDirectoryClient:
        return FakeDirectoryClient(self)


class FakeQueueClient(FakeClient):
    """
    Stand-in for azure.storage.queue.aio.QueueClient.

    Visibility runs on a manual clock: received messages stay hidden until
    ``advance`` moves the clock past their visibility timeout.
    """

    def __init__(self, queue_name: str = "order-events"):
        super().__init__()
        self.queue_name = queue_name
        self.messages: List[dict] = []
        self.now = 0.0
        self.receive_calls: List[dict] = []

    async def create_queue(self, **kwargs):
        self._create("create_queue")

    def add(self, content: str) -> str:
        """Enqueue directly and return the new message id."""
        message_id = str(uuid.uuid4())
        self.messages.append({
            "id": message_id,
            "content": content,
            "inserted_on": datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=len(self.messages)),
            "visible_at": self.now,
            "pop_receipt": None,
        })
        return message_id

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def _visible(self) -> List[dict]:
        return [m for m in self.messages if m["visible_at"] <= self.now]

    async def peek_messages(self, max_messages: Optional[int] = None, **kwargs):
        self._record("peek_messages")
        return [
            SimpleNamespace(id=m["id"], content=m["content"], inserted_on=m["inserted_on"], pop_receipt=None)
            for m in self._visible()[:max_messages or 1]
        ]

    async def send_message(self, content, **kwargs):
        self._record("send_message")
        message_id = self.add(content)
        return SimpleNamespace(id=message_id, content=content)

    async def receive_messages(self, messages_per_page=None, max_messages=None, visibility_timeout=None, **kwargs):
        self._record("receive_messages")
        self.receive_calls.append({
            "messages_per_page": messages_per_page,
            "max_messages": max_messages,
            "visibility_timeout": visibility_timeout,
        })
        for m in self._visible()[:max_messages]:
            m["visible_at"] = self.now + visibility_timeout
            m["pop_receipt"] = uuid.uuid4().hex
            yield SimpleNamespace(
                id=m["id"],
                content=m["content"],
                inserted_on=m["inserted_on"],
                pop_receipt=m["pop_receipt"],
            )

    async def delete_message(self, message, pop_receipt=None, **kwargs):
        self._record("delete_message")
        for m in self.messages:
            if m["id"] == message and m["pop_receipt"] == pop_receipt:
                self.messages.remove(m)
                return
        raise ResourceNotFoundError(message="The specified message does not exist.")

    def contents(self) -> List[str]:
        return [m["content"] for m in self.messages]


@pytest.fixture
def table_client():
    return FakeTableClient()


@pytest.fixture
def container_client():
    return FakeContainerClient()


@pytest.fixture
def share_client():
    return FakeShareClient()


@pytest.fixture
def queue_client():
    return FakeQueueClient()


@pytest.fixture
def table_backend(table_client):
    return CustomerTableBackend(table_client)


@pytest.fixture
def blob_backend(container_client):
    return BlobContainerBackend(container_client, copy_poll_interval=0.001)


@pytest.fixture
def file_backend(share_client):
    return FileShareBackend(share_client)


@pytest.fixture
def queue_backend(queue_client):
    return QueueBackend(queue_client)


@pytest.fixture
def storage(table_backend, blob_backend, file_backend, queue_backend):
    return StorageService(table_backend, blob_backend, file_backend, queue_backend)


@pytest.fixture
def app_config():
    return AppConfig(azure_storage=AzureStorageConfig(connection_string="UseDevelopmentStorage=true"))


@pytest.fixture
def app(app_config, storage):
    return create_app(config=app_config, storage=storage)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
