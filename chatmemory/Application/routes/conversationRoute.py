from fastapi import APIRouter, HTTPException, Query, status
from typing import List
from pydantic import BaseModel
import logging

from chatmemory.Application.dependencies import dependencies
from chatmemory.Domain import (
    AgentCallError,
    ChatMemoryError,
    BulkOutcome,
    ChatRequestEntity,
    ChatReplyEntity,
    ConversationHistoryEntity,
    RenameConversationEntity
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Conversations"])


# ========== DTOs ==========

class ConversationListDTO(BaseModel):
    conversations: List[str]


class HealthDTO(BaseModel):
    weaviate: bool
    agent: bool


# ========== CHAT ==========

@router.post("/chat", response_model=ChatReplyEntity)
async def chat(request: ChatRequestEntity):
    """
    Sends a prompt to the agent.

    A missing **conversationId** starts a new conversation; the id used is
    returned with the reply.
    """
    conversationService = dependencies.conversationService()
    try:
        return await conversationService.send_message(
            user_id=request.user_id,
            conversation_id=request.conversation_id,
            text=request.text.strip()
        )
    except AgentCallError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


# ========== CONVERSATIONS ==========

@router.get("/conversations", response_model=ConversationListDTO)
async def list_conversations(
    user_id: str = Query(..., alias="userId", min_length=1),
    limit: int = Query(100, ge=1, le=1000)
):
    conversationService = dependencies.conversationService()
    conversations = await conversationService.list_conversations(user_id, limit=limit)
    return ConversationListDTO(conversations=conversations)


@router.get("/conversations/{conversation_id}/messages", response_model=ConversationHistoryEntity)
async def get_history(
    conversation_id: str,
    user_id: str = Query(..., alias="userId", min_length=1),
    limit: int = Query(50, ge=1, le=1000)
):
    conversationService = dependencies.conversationService()
    return await conversationService.get_history(user_id, conversation_id, limit=limit)


@router.delete("/conversations/{conversation_id}", response_model=BulkOutcome)
async def clear_conversation(
    conversation_id: str,
    user_id: str = Query(..., alias="userId", min_length=1)
):
    conversationService = dependencies.conversationService()
    try:
        return await conversationService.clear_conversation(user_id, conversation_id)
    except ChatMemoryError as e:
        logger.error(f"[{user_id}/{conversation_id}] Error clearing conversation: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to clear conversation history: {e}")


@router.patch("/conversations/{conversation_id}")
async def rename_conversation(
    conversation_id: str,
    request: RenameConversationEntity,
    user_id: str = Query(..., alias="userId", min_length=1)
):
    conversationService = dependencies.conversationService()
    try:
        outcome = await conversationService.rename_conversation(
            user_id,
            conversation_id,
            request.new_conversation_id
        )
    except ChatMemoryError as e:
        logger.error(f"[{user_id}/{conversation_id}] Error renaming conversation: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to rename conversation: {e}")

    if outcome is None:
        return {"status": "ignored"}
    return outcome


# ========== HEALTH ==========

@router.get("/health", response_model=HealthDTO)
async def health():
    messageRepository = dependencies.messageRepository()
    agentClient = dependencies.agentClient()
    return HealthDTO(
        weaviate=await messageRepository.health_check(),
        agent=await agentClient.health_check()
    )
