from pydantic import BaseModel, Field
from typing import List, Optional

from chatmemory.Domain.entities.messageEntity import MessageEntity


class ChatRequestEntity(BaseModel):
    user_id: str = Field(..., min_length=1, alias="userId")
    conversation_id: Optional[str] = Field(default=None, alias="conversationId")
    text: str = Field(..., min_length=1)

    model_config = {"populate_by_name": True}


class ChatReplyEntity(BaseModel):
    conversation_id: str = Field(..., serialization_alias="conversationId")
    response: str


class ConversationHistoryEntity(BaseModel):
    """Messages of one conversation, oldest first"""
    user_id: str
    conversation_id: str
    messages: List[MessageEntity] = Field(default_factory=list)


class RenameConversationEntity(BaseModel):
    new_conversation_id: str = Field(..., alias="newConversationId")

    model_config = {"populate_by_name": True}
