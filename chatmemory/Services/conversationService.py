import logging
import uuid
from typing import List, Optional
from chatmemory.Domain import (
    IConversationService,
    IMessageRepository,
    IScopeResolver,
    IAgentClient,
    BulkOutcome,
    ChatReplyEntity,
    ConversationHistoryEntity
)

logger = logging.getLogger(__name__)


class ConversationService(IConversationService):
    """Backend of the chat UI: send prompts, browse, clear and rename conversations"""

    def __init__(
        self,
        message_repo: IMessageRepository,
        scope_resolver: IScopeResolver,
        agent_client: IAgentClient
    ):
        self.message_repo = message_repo
        self.scope_resolver = scope_resolver
        self.agent_client = agent_client

    @staticmethod
    def new_conversation_id() -> str:
        return f"chat-{uuid.uuid4().hex[:4]}"

    async def send_message(
        self,
        user_id: str,
        conversation_id: Optional[str],
        text: str
    ) -> ChatReplyEntity:
        """
        Sends the user's text to the agent. The agent runtime calls the
        memory hooks itself, so nothing is stored here.

        AgentCallError propagates: it is the one failure the user sees.
        """
        conversation_id = conversation_id or self.new_conversation_id()
        logger.info(f"[{user_id}/{conversation_id}] 📨 Sending prompt: {text[:100]}")

        response = await self.agent_client.send_prompt(
            text,
            user_id=user_id,
            conversation_id=conversation_id
        )

        logger.info(f"[{user_id}/{conversation_id}] 💬 Agent replied: {response[:100]}")
        return ChatReplyEntity(conversation_id=conversation_id, response=response)

    async def get_history(self, user_id: str, conversation_id: str, limit: int = 50) -> ConversationHistoryEntity:
        scope = self.scope_resolver.resolve(user_id, conversation_id)
        result = await self.message_repo.list_messages(scope, limit=limit)

        # A conversation whose tenant/partition does not exist yet simply has no history
        return ConversationHistoryEntity(
            user_id=scope.user_id,
            conversation_id=scope.conversation_id,
            messages=result.value_or([]) or []
        )

    async def list_conversations(self, user_id: str, limit: int = 100) -> List[str]:
        tenant = self.scope_resolver.resolve(user_id, None).tenant
        result = await self.message_repo.list_conversations(user_id, tenant=tenant, limit=limit)
        return result.value_or([]) or []

    async def clear_conversation(self, user_id: str, conversation_id: str) -> BulkOutcome:
        scope = self.scope_resolver.resolve(user_id, conversation_id)
        outcome = (await self.message_repo.delete_by_scope(scope)).unwrap()
        logger.info(f"[{scope.label}] 🗑️ Conversation cleared ({outcome.succeeded}/{outcome.matched})")
        return outcome

    async def rename_conversation(
        self,
        user_id: str,
        old_conversation_id: str,
        new_conversation_id: str
    ) -> Optional[BulkOutcome]:
        new_conversation_id = (new_conversation_id or "").strip()
        if not user_id or not old_conversation_id or not new_conversation_id or new_conversation_id == old_conversation_id:
            return None

        scope = self.scope_resolver.resolve(user_id, old_conversation_id)
        outcome = (await self.message_repo.rename_scope(scope, new_conversation_id)).unwrap()
        logger.info(f"[{scope.label}] ✏️ Conversation renamed to {new_conversation_id} ({outcome.succeeded}/{outcome.matched})")
        return outcome
