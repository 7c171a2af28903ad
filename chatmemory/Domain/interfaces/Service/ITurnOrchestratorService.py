from abc import ABC,abstractmethod
from typing import Optional
from chatmemory.Domain import TurnStartResult, TurnEndResult


class ITurnOrchestratorService(ABC):
    @abstractmethod
    async def on_turn_start(
                                self,
                                user_id: Optional[str],
                                conversation_id: Optional[str],
                                prompt: str
                            ) -> TurnStartResult:...

    @abstractmethod
    async def on_turn_end(
                                self,
                                user_id: Optional[str],
                                conversation_id: Optional[str],
                                prompt: str,
                                response: str
                            ) -> TurnEndResult:...
