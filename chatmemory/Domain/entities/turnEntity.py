from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class TurnParams(BaseModel):
    """Caller metadata forwarded by the agent runtime"""
    user_id: Optional[str] = Field(default=None, alias="userId")
    conversation_id: Optional[str] = Field(default=None, alias="conversationId")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class TurnStartEntity(BaseModel):
    """Payload of the pre-call lifecycle event"""
    prompt: str = ""
    params: TurnParams = Field(default_factory=TurnParams)


class TurnEndEntity(TurnStartEntity):
    """Payload of the post-call lifecycle event"""
    response: str = ""


class TurnStartResult(BaseModel):
    prompt: str
    warning: Optional[str] = None


class TurnEndResult(BaseModel):
    response: str
