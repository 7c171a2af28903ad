import logging
from typing import List
from chatmemory.Domain import (
    IContextRetriever,
    IMessageRepository,
    ITurnPrompts,
    MessageEntity,
    MessageRole,
    ScopeEntity
)

logger = logging.getLogger(__name__)


class ContextRetriever(IContextRetriever):
    """
    Builds the context block injected ahead of a prompt.

    Semantic similarity picks the candidate pool (twice the window size),
    then the pool is re-sorted chronologically and only the most recent
    `window_size` messages are kept.
    """

    def __init__(self, message_repo: IMessageRepository, prompts: ITurnPrompts):
        self.message_repo = message_repo
        self.prompts = prompts

    async def retrieve(self, scope: ScopeEntity, prompt: str, window_size: int = 10) -> str:
        if window_size <= 0:
            return ""

        result = await self.message_repo.semantic_search(scope, prompt, limit=window_size * 2)
        if not result.ok:
            # Already logged by the repository; no context is not a failure
            return ""

        candidates = [
            message for message in (result.value or [])
            if message.user_id == scope.user_id and message.conversation_id == scope.conversation_id
        ]
        if not candidates:
            logger.info(f"[{scope.label}] No relevant messages found via vector search")
            return ""

        chronological = sorted(candidates, key=lambda m: m.sort_key)[-window_size:]
        return self.render(scope, chronological)

    def render(self, scope: ScopeEntity, messages: List[MessageEntity]) -> str:
        lines = [self.prompts.get_context_header()]
        for idx, message in enumerate(messages, 1):
            role_label = "User" if message.role == MessageRole.USER else "Assistant"
            similarity = message.similarity if message.similarity is not None else "N/A"
            logger.debug(
                f"[{scope.label}] Message {idx}: role={message.role.value}, "
                f"similarity={similarity}, timestamp={message.timestamp}"
            )
            lines.append(f"{role_label}: {message.content}\n\n")
        return "".join(lines)
