from abc import ABC,abstractmethod
from typing import Optional
from chatmemory.Domain import ScopeEntity


class IScopeResolver(ABC):
    @abstractmethod
    def resolve(self, user_id: Optional[str], conversation_id: Optional[str]) -> ScopeEntity:...
