class ChatMemoryError(Exception):
    """Base error for the conversation memory layer"""


class SchemaCreateError(ChatMemoryError):
    """Schema existence check or creation failed"""


class StoreQueryError(ChatMemoryError):
    """Semantic search or exact-match lookup failed"""


class StoreWriteError(ChatMemoryError):
    """Insert, patch or delete failed"""


class AgentCallError(ChatMemoryError):
    """The external completion call failed or timed out"""
