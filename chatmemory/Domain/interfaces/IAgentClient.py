from abc import ABC,abstractmethod
from typing import Optional

class IAgentClient(ABC):
    @abstractmethod
    async def send_prompt(
        self,
        prompt: str,
        user_id: Optional[str] = None,
        conversation_id: Optional[str] = None
    ) -> str:...

    @abstractmethod
    async def health_check(self) -> bool:...
