from typing import Optional
from chatmemory.config import Settings, settings
from chatmemory.Domain import (
    IScopeResolver,
    ScopeEntity,
    DEFAULT_USER_ID,
    DEFAULT_CONVERSATION_ID
)


class ScopeResolver(IScopeResolver):
    """Applies the sentinel defaults and the deployment tenant to a request's ids"""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or settings

    @property
    def tenant(self) -> Optional[str]:
        if self.config.is_local:
            return None
        return self.config.WEAVIATE_DANK_PROJECT_ID or None

    def resolve(self, user_id: Optional[str], conversation_id: Optional[str]) -> ScopeEntity:
        return ScopeEntity(
            user_id=user_id or DEFAULT_USER_ID,
            conversation_id=conversation_id or DEFAULT_CONVERSATION_ID,
            tenant=self.tenant
        )
