import logging
from typing import Optional
import httpx
from chatmemory.config import Settings, settings
from chatmemory.Domain import IAgentClient, AgentCallError

logger = logging.getLogger(__name__)

# Agent replies may carry a metadata footer after this marker
METADATA_FOOTER = "\n\n---\n"
HEALTH_TIMEOUT_SECONDS = 5


class AgentClient(IAgentClient):
    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config or settings
        self.base_url = self.config.AGENT_HOST.rstrip("/")
        self.timeout = self.config.AGENT_TIMEOUT_SECONDS
        self.transport = transport

        self.headers = {
            "Content-Type": "application/json",
        }
        if self.config.AGENT_DANK_API_KEY:
            self.headers["X-API-Key"] = self.config.AGENT_DANK_API_KEY

    def _client(self, timeout: float) -> httpx.AsyncClient:
        kwargs = {"timeout": timeout, "headers": self.headers}
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return httpx.AsyncClient(**kwargs)

    @staticmethod
    def extract_text(response: httpx.Response) -> str:
        """
        Pulls the reply text out of an agent response

        :param response: body is either a bare string or {"response"|"message": ...}
        """
        try:
            data = response.json()
        except ValueError:
            data = response.text

        if isinstance(data, str):
            text = data
        elif isinstance(data, dict):
            text = data.get("response") or data.get("message") or str(data)
        else:
            text = str(data)

        return text.split(METADATA_FOOTER)[0].strip()

    async def send_prompt(
        self,
        prompt: str,
        user_id: Optional[str] = None,
        conversation_id: Optional[str] = None
    ) -> str:
        """
        Sends a prompt to the agent and returns the reply text

        :param prompt: user text
        :param user_id: forwarded so the agent hooks can resolve the scope
        :param conversation_id: forwarded so the agent hooks can resolve the scope
        """
        if not self.base_url:
            raise AgentCallError("Agent host is not configured (AGENT_HOST).")

        payload = {"prompt": prompt}
        if user_id:
            payload["userId"] = user_id
        if conversation_id:
            payload["conversationId"] = conversation_id

        url = f"{self.base_url}/prompt"
        try:
            async with self._client(self.timeout) as client:
                response = await client.post(url, json=payload)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"Agent timed out after {self.timeout:g}s: {url}", exc_info=True)
            raise AgentCallError(f"Agent did not respond within {self.timeout:g} seconds.") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Agent returned {e.response.status_code}: {url}", exc_info=True)
            raise AgentCallError(
                f"Agent error: {e.response.status_code} - {self._error_detail(e.response)}"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Agent unreachable: {url}", exc_info=True)
            raise AgentCallError(
                f"Unable to connect to agent at {self.base_url}. Check if it's running."
            ) from e

        return self.extract_text(response)

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.reason_phrase
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return response.reason_phrase

    async def health_check(self) -> bool:
        if not self.base_url:
            return False
        try:
            async with self._client(HEALTH_TIMEOUT_SECONDS) as client:
                response = await client.get(f"{self.base_url}/health")
            if response.status_code == 200:
                return True
        except httpx.HTTPError:
            pass

        # /health is optional on the agent; fall back to a minimal prompt
        try:
            async with self._client(HEALTH_TIMEOUT_SECONDS) as client:
                response = await client.post(f"{self.base_url}/prompt", json={"prompt": "ping"})
            return response.is_success
        except httpx.HTTPError:
            return False
