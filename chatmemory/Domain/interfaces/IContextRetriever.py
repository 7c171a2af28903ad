from abc import ABC,abstractmethod
from chatmemory.Domain import ScopeEntity


class IContextRetriever(ABC):
    @abstractmethod
    async def retrieve(self, scope: ScopeEntity, prompt: str, window_size: int = 10) -> str:...
