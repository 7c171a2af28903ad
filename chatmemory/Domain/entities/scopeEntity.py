from pydantic import BaseModel, ConfigDict
from typing import Optional


class ScopeEntity(BaseModel):
    """(user, conversation[, tenant]) partition of the message store"""
    user_id: str
    conversation_id: str
    tenant: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def label(self) -> str:
        return f"{self.user_id}/{self.conversation_id}"
