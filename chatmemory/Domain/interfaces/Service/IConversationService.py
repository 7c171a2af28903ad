from abc import ABC,abstractmethod
from typing import List, Optional
from chatmemory.Domain import BulkOutcome, ChatReplyEntity, ConversationHistoryEntity


class IConversationService(ABC):
    @abstractmethod
    async def send_message(
                                self,
                                user_id: str,
                                conversation_id: Optional[str],
                                text: str
                            ) -> ChatReplyEntity:...

    @abstractmethod
    async def get_history(self, user_id: str, conversation_id: str, limit: int = 50) -> ConversationHistoryEntity:...

    @abstractmethod
    async def list_conversations(self, user_id: str, limit: int = 100) -> List[str]:...

    @abstractmethod
    async def clear_conversation(self, user_id: str, conversation_id: str) -> BulkOutcome:...

    @abstractmethod
    async def rename_conversation(
                                self,
                                user_id: str,
                                old_conversation_id: str,
                                new_conversation_id: str
                            ) -> Optional[BulkOutcome]:...
