import sys
import os
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from weaviate.exceptions import WeaviateBaseError

# Add the project root directory to the python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from chatmemory.config import Settings
from chatmemory.Domain import (
    IMessageRepository,
    BulkOutcome,
    ErrorKind,
    MessageEntity,
    MessageRole,
    Result,
    ScopeEntity
)
from chatmemory.Infrastructure import MessageRepository, TurnPrompts, WeaviateContext
from chatmemory.Services import ScopeResolver, ContextRetriever, TurnOrchestratorService


# Configure pytest-asyncio default behavior
def pytest_configure(config):
    config.addinivalue_line("markers", "asyncio: mark test as asyncio")


class FakeMessageRepository(IMessageRepository):
    """
    In-memory message store. Timestamps come from a fake clock that ticks
    one second per insert, and semantic search ranks newest first.
    """

    def __init__(self):
        self.messages: List[MessageEntity] = []
        self.clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.schema_calls = 0
        self.search_calls = []
        self.fail_schema = False
        self.fail_insert = False
        self.fail_search = False
        self.fail_lookup = False

    @staticmethod
    def _in_scope(message: MessageEntity, scope: ScopeEntity) -> bool:
        return message.user_id == scope.user_id and message.conversation_id == scope.conversation_id

    async def ensure_schema(self):
        self.schema_calls += 1
        if self.fail_schema:
            return Result.failure(ErrorKind.SCHEMA_CREATE, "schema unavailable")
        return Result.success("Messages")

    async def insert(self, message: MessageEntity):
        if self.fail_insert:
            return Result.failure(ErrorKind.STORE_WRITE, "write refused")
        self.clock += timedelta(seconds=1)
        stored = message.model_copy(update={"timestamp": message.timestamp or self.clock}).stamped()
        self.messages.append(stored)
        return Result.success(stored)

    async def find_latest_user_message(self, scope, content):
        if self.fail_lookup:
            return Result.failure(ErrorKind.STORE_QUERY, "tenant not found")
        matches = [
            m for m in self.messages
            if self._in_scope(m, scope) and m.role == MessageRole.USER and m.content == content
        ]
        if not matches:
            return Result.success("")
        return Result.success(max(matches, key=lambda m: m.sort_key).message_id)

    async def semantic_search(self, scope, query_text, limit):
        self.search_calls.append((scope, query_text, limit))
        if self.fail_search:
            return Result.failure(ErrorKind.STORE_QUERY, "tenant not found")
        hits = [m for m in reversed(self.messages) if self._in_scope(m, scope)]
        return Result.success(hits[:limit])

    async def list_messages(self, scope, limit=50):
        in_scope = sorted((m for m in self.messages if self._in_scope(m, scope)), key=lambda m: m.sort_key)
        return Result.success(in_scope[:limit])

    async def list_conversations(self, user_id, tenant=None, limit=100):
        conversations = []
        for message in sorted(self.messages, key=lambda m: m.sort_key, reverse=True):
            if message.user_id == user_id and message.conversation_id not in conversations:
                conversations.append(message.conversation_id)
        return Result.success(conversations[:limit])

    async def delete_by_scope(self, scope):
        matched = [m for m in self.messages if self._in_scope(m, scope)]
        self.messages = [m for m in self.messages if not self._in_scope(m, scope)]
        return Result.success(BulkOutcome(matched=len(matched), succeeded=len(matched), pages=1 if matched else 0))

    async def rename_scope(self, scope, new_conversation_id):
        count = 0
        for idx, message in enumerate(self.messages):
            if self._in_scope(message, scope):
                self.messages[idx] = message.model_copy(update={"conversation_id": new_conversation_id})
                count += 1
        return Result.success(BulkOutcome(matched=count, succeeded=count, pages=1 if count else 0))

    async def health_check(self):
        return True

    def in_scope(self, user_id: str, conversation_id: str) -> List[MessageEntity]:
        return [m for m in self.messages if m.user_id == user_id and m.conversation_id == conversation_id]


class FakeWeaviate:
    """
    In-memory stand-in for the async Weaviate client.

    Every client the context opens shares one object table. Filters are
    evaluated as property equality, `errors` maps an operation name to the
    message it fails with, and ids in `failing_ids` refuse updates and
    deletes. Deletes of `sticky_ids` are acknowledged but the object stays.
    """

    def __init__(self):
        self.schemas: Dict[str, dict] = {}
        self.objects: Dict[str, tuple] = {}
        self.calls: List[tuple] = []
        self.errors: Dict[str, str] = {}
        self.failing_ids = set()
        self.sticky_ids = set()
        self.distances: Dict[str, float] = {}
        self.connection = None
        self.collections = _FakeCollections(self)

    def factory(self, connection):
        self.connection = connection
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def is_ready(self):
        self.fail_if_configured("is_ready")
        return True

    def fail_if_configured(self, operation: str):
        if operation in self.errors:
            raise WeaviateBaseError(self.errors[operation])

    def add(self, properties: dict, tenant: Optional[str] = None) -> str:
        object_id = str(uuid.uuid4())
        self.objects[object_id] = (tenant, dict(properties))
        return object_id

    def properties_of(self, conversation_id: str) -> List[dict]:
        return [props for _, props in self.objects.values() if props.get("conversation_id") == conversation_id]


def filter_matches(filters: Any, properties: dict) -> bool:
    if filters is None:
        return True
    children = getattr(filters, "filters", None)
    if children is not None:
        return all(filter_matches(child, properties) for child in children)
    return properties.get(filters.target) == filters.value


class _FakeCollections:
    def __init__(self, store: FakeWeaviate):
        self.store = store

    async def exists(self, name):
        self.store.fail_if_configured("exists")
        return name in self.store.schemas

    async def create(self, name, **kwargs):
        self.store.fail_if_configured("create")
        if name in self.store.schemas:
            raise WeaviateBaseError(f"class name {name!r} already exists")
        self.store.schemas[name] = kwargs

    def get(self, name):
        return _FakeCollection(self.store, name)


class _FakeCollection:
    """Serves both `collection.data` and `collection.query`"""

    def __init__(self, store: FakeWeaviate, name: str, tenant: Optional[str] = None):
        self.store = store
        self.name = name
        self.tenant = tenant
        self.data = self
        self.query = self

    def with_tenant(self, tenant):
        return _FakeCollection(self.store, self.name, tenant)

    def _rows(self, filters) -> List[str]:
        return [
            object_id for object_id, (tenant, props) in self.store.objects.items()
            if tenant == self.tenant and filter_matches(filters, props)
        ]

    def _object(self, object_id: str, return_properties=None):
        _, props = self.store.objects[object_id]
        if return_properties is not None:
            props = {key: value for key, value in props.items() if key in return_properties}
        return SimpleNamespace(
            uuid=uuid.UUID(object_id),
            properties=dict(props),
            metadata=SimpleNamespace(distance=self.store.distances.get(object_id))
        )

    async def insert(self, properties):
        self.store.fail_if_configured("insert")
        self.store.calls.append(("insert", self.tenant, {"properties": properties}))
        return uuid.UUID(self.store.add(properties, self.tenant))

    async def update(self, uuid, properties):
        object_id = str(uuid)
        if object_id in self.store.failing_ids:
            raise WeaviateBaseError("update refused")
        self.store.objects[object_id][1].update(properties)

    async def delete_by_id(self, uuid):
        object_id = str(uuid)
        if object_id in self.store.failing_ids:
            raise WeaviateBaseError("delete refused")
        if object_id in self.store.sticky_ids:
            return True
        return self.store.objects.pop(object_id, None) is not None

    async def near_text(self, query, certainty=None, filters=None, limit=None, return_metadata=None):
        self.store.fail_if_configured("near_text")
        self.store.calls.append(("near_text", self.tenant, {"query": query, "certainty": certainty, "limit": limit}))
        rows = sorted(
            self._rows(filters),
            key=lambda object_id: str(self.store.objects[object_id][1].get("timestamp", "")),
            reverse=True
        )
        return SimpleNamespace(objects=[self._object(object_id) for object_id in rows[:limit]])

    async def fetch_objects(self, filters=None, sort=None, limit=None, return_properties=None):
        self.store.fail_if_configured("fetch_objects")
        self.store.calls.append(("fetch_objects", self.tenant, {"limit": limit}))
        rows = self._rows(filters)[:limit]
        return SimpleNamespace(objects=[self._object(object_id, return_properties) for object_id in rows])


def make_settings(**overrides) -> Settings:
    values = {"WEAVIATE_ENV": "local", "AGENT_HOST": "http://agent.test"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def local_settings() -> Settings:
    return make_settings()


@pytest.fixture
def prod_settings() -> Settings:
    return make_settings(
        WEAVIATE_ENV="prod",
        WEAVIATE_HOST="weaviate.test",
        WEAVIATE_DANK_API_KEY="key-123",
        WEAVIATE_DANK_PROJECT_ID="project-9"
    )


@pytest.fixture
def fake_repo() -> FakeMessageRepository:
    return FakeMessageRepository()


@pytest.fixture
def prompts() -> TurnPrompts:
    return TurnPrompts()


@pytest.fixture
def scope_resolver(local_settings) -> ScopeResolver:
    return ScopeResolver(local_settings)


@pytest.fixture
def retriever(fake_repo, prompts) -> ContextRetriever:
    return ContextRetriever(fake_repo, prompts)


@pytest.fixture
def orchestrator(fake_repo, scope_resolver, retriever, prompts, local_settings) -> TurnOrchestratorService:
    return TurnOrchestratorService(
        message_repo=fake_repo,
        scope_resolver=scope_resolver,
        context_retriever=retriever,
        prompts=prompts,
        config=local_settings
    )


def scope_of(user_id: str, conversation_id: str, tenant: Optional[str] = None) -> ScopeEntity:
    return ScopeEntity(user_id=user_id, conversation_id=conversation_id, tenant=tenant)


@pytest.fixture
def fake_weaviate() -> FakeWeaviate:
    return FakeWeaviate()


def weaviate_repository(store: FakeWeaviate, config: Optional[Settings] = None) -> MessageRepository:
    config = config or make_settings()
    return MessageRepository(WeaviateContext(config, client_factory=store.factory), config)
