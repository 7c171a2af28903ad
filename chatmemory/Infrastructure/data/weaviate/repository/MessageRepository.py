# chatmemory/Infrastructure/data/weaviate/repository/MessageRepository.py
import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Set

from pydantic import ValidationError
from weaviate.classes.config import Configure, DataType, Property
from weaviate.classes.query import Filter, MetadataQuery, Sort
from weaviate.exceptions import WeaviateBaseError

from chatmemory.config import Settings, settings
from chatmemory.Domain import (
    IMessageRepository,
    BulkOutcome,
    ErrorKind,
    MessageEntity,
    MessageRole,
    Result,
    ScopeEntity,
    MESSAGE_PROPERTIES
)
from chatmemory.Infrastructure.data.weaviate.context.weaviateContext import WeaviateContext

logger = logging.getLogger(__name__)

# Client failures and rows that do not parse into a MessageEntity
STORE_ERRORS = (WeaviateBaseError, ValidationError)

PARENT_LOOKUP_LIMIT = 5


def describe_error(error: Exception) -> str:
    return str(error) or error.__class__.__name__


def is_tenant_missing(detail: str) -> bool:
    return "tenant not found" in detail.lower()


class MessageRepository(IMessageRepository):
    """
    Weaviate backed message store.

    Every operation opens its own async client. Bulk mutations fetch
    matching object ids and mutate them one by one, since batch mutations
    are not available on every deployment.
    """

    def __init__(
        self,
        context: Optional[WeaviateContext] = None,
        config: Optional[Settings] = None
    ):
        self.config = config or settings
        self.db = context or WeaviateContext(self.config)
        self.class_name = self.config.WEAVIATE_CLASS_NAME

    @property
    def connection(self):
        return self.db.connection

    @property
    def multi_tenant(self) -> bool:
        return not self.config.is_local and bool(self.config.WEAVIATE_DANK_PROJECT_ID)

    def _collection(self, client, tenant: Optional[str]):
        collection = client.collections.get(self.class_name)
        return collection.with_tenant(tenant) if tenant else collection

    @staticmethod
    def _scope_filter(scope: ScopeEntity, *extra):
        return Filter.all_of([
            Filter.by_property("conversation_id").equal(scope.conversation_id),
            Filter.by_property("user_id").equal(scope.user_id),
            *extra
        ])

    @staticmethod
    def _to_messages(objects: List[Any], tenant: Optional[str]) -> List[MessageEntity]:
        return [MessageEntity.from_object(obj, tenant) for obj in objects]

    def _query_failure(self, label: str, action: str, error: Exception) -> Result:
        detail = describe_error(error)
        if is_tenant_missing(detail):
            logger.info(f"[{label}] Tenant does not exist yet, nothing to {action}")
        else:
            logger.warning(f"[{label}] ⚠️ Error on {action}: {detail}")
        return Result.failure(ErrorKind.STORE_QUERY, detail)

    # ========== SCHEMA ==========

    def _schema_properties(self) -> List[Property]:
        return [
            Property(name=name, data_type=DataType.DATE if name == "timestamp" else DataType.TEXT)
            for name in MESSAGE_PROPERTIES
        ]

    async def ensure_schema(self) -> Result[str]:
        """Creates the messages collection when missing and returns its name"""
        try:
            async with self.db.client() as client:
                if await client.collections.exists(self.class_name):
                    return Result.success(self.class_name)

                logger.info(f"{self.class_name} schema does not exist. Creating...")
                try:
                    await client.collections.create(
                        name=self.class_name,
                        description="Chat messages",
                        properties=self._schema_properties(),
                        multi_tenancy_config=Configure.multi_tenancy(
                            enabled=True,
                            auto_tenant_creation=True
                        ) if self.multi_tenant else None
                    )
                except WeaviateBaseError as e:
                    # Another turn created it between our check and our create
                    if "already exists" not in str(e):
                        raise
                    logger.info(f"{self.class_name} schema already created concurrently")
                    return Result.success(self.class_name)

            logger.info(f"✅ {self.class_name} schema created on {self.connection.base_url}")
            return Result.success(self.class_name)
        except WeaviateBaseError as e:
            detail = describe_error(e)
            logger.error(f"❌ Error ensuring {self.class_name} schema: {detail}")
            return Result.failure(ErrorKind.SCHEMA_CREATE, detail)

    # ========== WRITES ==========

    async def insert(self, message: MessageEntity) -> Result[MessageEntity]:
        """Stores one message, generating message_id and timestamp when missing"""
        stamped = message.stamped()
        label = f"{stamped.user_id}/{stamped.conversation_id}"
        try:
            async with self.db.client() as client:
                object_id = await self._collection(client, stamped.tenant).data.insert(
                    properties=stamped.to_properties()
                )
        except WeaviateBaseError as e:
            detail = describe_error(e)
            logger.error(f"[{label}] ❌ Error storing {stamped.role.value} message: {detail}")
            return Result.failure(ErrorKind.STORE_WRITE, detail)

        parent_info = f" parent={stamped.parent_id}" if stamped.role == MessageRole.ASSISTANT and stamped.parent_id else ""
        logger.info(
            f"[{label}] ✅ Stored {stamped.role.value} message: {stamped.message_id} "
            f"host={self.connection.base_url}{parent_info}"
        )
        return Result.success(stamped.model_copy(update={"object_id": str(object_id) if object_id else None}))

    # ========== READS ==========

    async def find_latest_user_message(self, scope: ScopeEntity, content: str) -> Result[str]:
        """Exact-content lookup of the newest user message in scope; '' when none"""
        content = content or ""
        try:
            async with self.db.client() as client:
                response = await self._collection(client, scope.tenant).query.fetch_objects(
                    filters=self._scope_filter(
                        scope,
                        Filter.by_property("role").equal(MessageRole.USER.value),
                        Filter.by_property("content").equal(content)
                    ),
                    sort=Sort.by_property("timestamp", ascending=False),
                    limit=PARENT_LOOKUP_LIMIT
                )
            messages = self._to_messages(response.objects, scope.tenant)
        except STORE_ERRORS as e:
            return self._query_failure(scope.label, "look up the parent message", e)

        # Text equality in the store is token based; keep exact matches only
        messages = [m for m in messages if m.content == content]
        if not messages:
            return Result.success("")

        messages.sort(key=lambda m: m.sort_key, reverse=True)
        return Result.success(messages[0].message_id or "")

    async def semantic_search(
        self,
        scope: ScopeEntity,
        query_text: str,
        limit: int
    ) -> Result[List[MessageEntity]]:
        """nearText search restricted to the scope, closest `limit` messages"""
        try:
            async with self.db.client() as client:
                response = await self._collection(client, scope.tenant).query.near_text(
                    query=query_text,
                    certainty=self.config.CONTEXT_CERTAINTY,
                    filters=self._scope_filter(scope),
                    limit=limit,
                    return_metadata=MetadataQuery(distance=True)
                )
            return Result.success(self._to_messages(response.objects, scope.tenant))
        except STORE_ERRORS as e:
            return self._query_failure(scope.label, "retrieve conversation context", e)

    async def list_messages(self, scope: ScopeEntity, limit: int = 50) -> Result[List[MessageEntity]]:
        """Conversation history, oldest first"""
        try:
            async with self.db.client() as client:
                response = await self._collection(client, scope.tenant).query.fetch_objects(
                    filters=self._scope_filter(scope),
                    sort=Sort.by_property("timestamp", ascending=True),
                    limit=limit
                )
            messages = self._to_messages(response.objects, scope.tenant)
        except STORE_ERRORS as e:
            return self._query_failure(scope.label, "load conversation history", e)

        messages.sort(key=lambda m: m.sort_key)
        return Result.success(messages)

    async def list_conversations(
        self,
        user_id: str,
        tenant: Optional[str] = None,
        limit: int = 100
    ) -> Result[List[str]]:
        """Distinct conversation ids of a user, most recently active first"""
        try:
            async with self.db.client() as client:
                response = await self._collection(client, tenant).query.fetch_objects(
                    filters=Filter.by_property("user_id").equal(user_id),
                    sort=Sort.by_property("timestamp", ascending=False),
                    limit=limit,
                    return_properties=["conversation_id", "timestamp"]
                )
            messages = self._to_messages(response.objects, tenant)
        except STORE_ERRORS as e:
            return self._query_failure(user_id, "list conversations", e)

        conversations: List[str] = []
        for message in sorted(messages, key=lambda m: m.sort_key, reverse=True):
            if message.conversation_id not in conversations:
                conversations.append(message.conversation_id)
        return Result.success(conversations)

    async def health_check(self) -> bool:
        try:
            async with self.db.client() as client:
                return await client.is_ready()
        except WeaviateBaseError:
            return False

    # ========== BULK ==========

    async def _fetch_ids(self, collection, scope: ScopeEntity, limit: int) -> List[str]:
        response = await collection.query.fetch_objects(
            filters=self._scope_filter(scope),
            limit=limit,
            return_properties=["conversation_id"]
        )
        return [str(obj.uuid) for obj in response.objects]

    async def _delete_one(self, collection, object_id: str, scope: ScopeEntity) -> bool:
        try:
            # False means already gone, which is what we want
            await collection.data.delete_by_id(object_id)
            return True
        except WeaviateBaseError as e:
            logger.warning(f"[{scope.label}] ⚠️ Could not delete {object_id}: {describe_error(e)}")
            return False

    async def _patch_one(self, collection, object_id: str, scope: ScopeEntity, new_conversation_id: str) -> bool:
        try:
            await collection.data.update(uuid=object_id, properties={"conversation_id": new_conversation_id})
            return True
        except WeaviateBaseError as e:
            logger.warning(f"[{scope.label}] ⚠️ Could not relabel {object_id}: {describe_error(e)}")
            return False

    async def _for_each_page(
        self,
        scope: ScopeEntity,
        action: str,
        mutate: Callable[[Any, str], Awaitable[bool]]
    ) -> Result[BulkOutcome]:
        """
        Fetches pages of object ids still matching `scope` and mutates each id.

        Ids whose mutation failed stay in scope, so each fetch asks for
        BULK_PAGE_SIZE ids plus the failures so far and pages past them.
        `truncated` is set whenever untried ids may remain in scope.
        """
        outcome = BulkOutcome()
        attempted: Set[str] = set()
        page_size = self.config.BULK_PAGE_SIZE

        try:
            async with self.db.client() as client:
                collection = self._collection(client, scope.tenant)
                while outcome.pages < self.config.BULK_MAX_PAGES:
                    limit = page_size + outcome.failed
                    ids = await self._fetch_ids(collection, scope, limit)

                    fresh = [object_id for object_id in ids if object_id not in attempted]
                    if not fresh:
                        # A full page of already attempted ids hides whatever comes after it
                        outcome.truncated = len(ids) >= limit
                        break

                    attempted.update(fresh)
                    outcome.pages += 1
                    outcome.matched += len(fresh)

                    results = await asyncio.gather(*(mutate(collection, object_id) for object_id in fresh))
                    done = sum(1 for ok in results if ok)
                    outcome.succeeded += done
                    outcome.failed += len(fresh) - done

                    if len(ids) < limit:
                        break
                else:
                    remaining = await self._fetch_ids(collection, scope, page_size + outcome.failed)
                    outcome.truncated = any(object_id not in attempted for object_id in remaining)
        except STORE_ERRORS as e:
            if outcome.pages == 0:
                return self._query_failure(scope.label, action, e)
            logger.warning(f"[{scope.label}] ⚠️ Stopped {action} after {outcome.pages} pages: {describe_error(e)}")
            outcome.truncated = True

        logger.info(
            f"[{scope.label}] {action}: matched={outcome.matched} succeeded={outcome.succeeded} "
            f"failed={outcome.failed} pages={outcome.pages} truncated={outcome.truncated}"
        )
        return Result.success(outcome)

    async def delete_by_scope(self, scope: ScopeEntity) -> Result[BulkOutcome]:
        """Best-effort delete of every message in scope"""
        return await self._for_each_page(
            scope,
            "delete conversation",
            lambda collection, object_id: self._delete_one(collection, object_id, scope)
        )

    async def rename_scope(self, scope: ScopeEntity, new_conversation_id: str) -> Result[BulkOutcome]:
        """Best-effort relabel of conversation_id on every message in scope"""
        if not new_conversation_id or new_conversation_id == scope.conversation_id:
            return Result.success(BulkOutcome())

        return await self._for_each_page(
            scope,
            f"rename conversation to {new_conversation_id}",
            lambda collection, object_id: self._patch_one(collection, object_id, scope, new_conversation_id)
        )
