from abc import ABC,abstractmethod
from typing import Dict, Optional, Tuple


class IProxyRelay(ABC):
    @abstractmethod
    async def forward(
        self,
        target: str,
        method: str,
        path: str,
        query: str,
        headers: Dict[str, str],
        body: Optional[bytes]
    ) -> Tuple[int, Dict[str, str], bytes]:...
