import logging
from typing import Optional
from chatmemory.config import Settings, settings
from chatmemory.Domain import (
    ITurnOrchestratorService,
    IMessageRepository,
    IScopeResolver,
    IContextRetriever,
    ITurnPrompts,
    MessageEntity,
    MessageRole,
    ScopeEntity,
    TurnStartResult,
    TurnEndResult
)

logger = logging.getLogger(__name__)


class TurnOrchestratorService(ITurnOrchestratorService):
    """
    Lifecycle hooks called by the agent runtime around one completion.

    Memory failures never abort a turn: the pre-call hook falls back to the
    original prompt and the post-call hook always returns the response.
    """

    def __init__(
        self,
        message_repo: IMessageRepository,
        scope_resolver: IScopeResolver,
        context_retriever: IContextRetriever,
        prompts: ITurnPrompts,
        config: Optional[Settings] = None
    ):
        self.message_repo = message_repo
        self.scope_resolver = scope_resolver
        self.context_retriever = context_retriever
        self.prompts = prompts
        self.window_size = (config or settings).CONTEXT_WINDOW_SIZE

    def _message(self, scope: ScopeEntity, role: MessageRole, content: str, parent_id: str = "") -> MessageEntity:
        return MessageEntity(
            role=role,
            content=content or "",
            conversation_id=scope.conversation_id,
            user_id=scope.user_id,
            parent_id=parent_id,
            tenant=scope.tenant
        )

    async def on_turn_start(
        self,
        user_id: Optional[str],
        conversation_id: Optional[str],
        prompt: str
    ) -> TurnStartResult:
        """
        1. Retrieves context for the prompt
        2. Stores the user message (after retrieval, so it never matches itself)
        3. Returns the enhanced prompt, or the original one when there is no context
        """
        if not user_id or not conversation_id:
            logger.warning("Missing userId or conversationId - skipping memory.")
            return TurnStartResult(prompt=prompt, warning=self.prompts.get_start_warning())

        scope = self.scope_resolver.resolve(user_id, conversation_id)
        try:
            (await self.message_repo.ensure_schema()).unwrap()

            context = await self.context_retriever.retrieve(scope, prompt, self.window_size)

            (await self.message_repo.insert(
                self._message(scope, MessageRole.USER, prompt)
            )).unwrap()
        except Exception as e:
            logger.error(f"[{scope.label}] ❌ Memory unavailable for this turn, passing prompt through: {e}")
            return TurnStartResult(prompt=prompt)

        if not context:
            return TurnStartResult(prompt=prompt)

        logger.info(f"[{scope.label}] ✅ Prompt enhanced with conversation context")
        return TurnStartResult(prompt=self.prompts.get_enhanced_prompt(context, prompt))

    async def on_turn_end(
        self,
        user_id: Optional[str],
        conversation_id: Optional[str],
        prompt: str,
        response: str
    ) -> TurnEndResult:
        """Stores the assistant reply linked to the user message that produced it"""
        if not user_id or not conversation_id:
            logger.warning("Missing userId or conversationId - skipping memory store.")
            return TurnEndResult(response=f"{response}{self.prompts.get_end_warning()}")

        scope = self.scope_resolver.resolve(user_id, conversation_id)
        try:
            (await self.message_repo.ensure_schema()).unwrap()

            parent = await self.message_repo.find_latest_user_message(scope, prompt)
            if not parent.ok:
                logger.info(f"[{scope.label}] Could not find parent message ID, storing without parent reference")
            parent_id = parent.value_or("") or ""

            if response:
                stored = await self.message_repo.insert(
                    self._message(scope, MessageRole.ASSISTANT, response, parent_id=parent_id)
                )
                if not stored.ok:
                    logger.error(f"[{scope.label}] ❌ Assistant message lost: {stored.detail}")
        except Exception as e:
            logger.error(f"[{scope.label}] ❌ Error storing interaction: {e}")

        return TurnEndResult(response=response)
