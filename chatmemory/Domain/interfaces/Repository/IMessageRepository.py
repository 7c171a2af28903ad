# chatmemory/Domain/interfaces/Repository/IMessageRepository.py
from abc import ABC, abstractmethod
from typing import List, Optional
from chatmemory.Domain import (
    BulkOutcome,
    MessageEntity,
    Result,
    ScopeEntity
)


class IMessageRepository(ABC):

    @abstractmethod
    async def ensure_schema(self) -> Result[str]:
        pass

    @abstractmethod
    async def insert(self, message: MessageEntity) -> Result[MessageEntity]:
        pass

    @abstractmethod
    async def find_latest_user_message(
        self,
        scope: ScopeEntity,
        content: str
        ) -> Result[str]:
        pass

    @abstractmethod
    async def semantic_search(
        self,
        scope: ScopeEntity,
        query_text: str,
        limit: int
        ) -> Result[List[MessageEntity]]:
        pass

    @abstractmethod
    async def list_messages(
        self,
        scope: ScopeEntity,
        limit: int = 50
        ) -> Result[List[MessageEntity]]:
        pass

    @abstractmethod
    async def list_conversations(
        self,
        user_id: str,
        tenant: Optional[str] = None,
        limit: int = 100
        ) -> Result[List[str]]:
        pass

    @abstractmethod
    async def delete_by_scope(self, scope: ScopeEntity) -> Result[BulkOutcome]:
        pass

    @abstractmethod
    async def rename_scope(
        self,
        scope: ScopeEntity,
        new_conversation_id: str
        ) -> Result[BulkOutcome]:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass
