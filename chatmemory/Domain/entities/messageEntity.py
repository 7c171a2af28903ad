from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from enum import Enum
import json
import time
import uuid

DEFAULT_USER_ID = "default-user"
DEFAULT_CONVERSATION_ID = "default-conversation"
DEFAULT_METADATA = json.dumps({"source": "dank-agent"})

# Property set of the Messages class, in schema order
MESSAGE_PROPERTIES = (
    "role",
    "content",
    "conversation_id",
    "message_id",
    "parent_id",
    "timestamp",
    "user_id",
    "metadata",
)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


def new_message_id(role: Optional[str]) -> str:
    """msg-<epoch millis>-<random suffix>-<role>"""
    return f"msg-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}-{role or 'message'}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class MessageEntity(BaseModel):
    role: MessageRole
    content: str = Field(..., description="Message text, empty string allowed")

    conversation_id: str = DEFAULT_CONVERSATION_ID
    user_id: str = DEFAULT_USER_ID

    message_id: Optional[str] = None
    parent_id: str = ""
    timestamp: Optional[datetime] = None
    metadata: str = DEFAULT_METADATA
    tenant: Optional[str] = None

    # Read side only
    object_id: Optional[str] = None
    distance: Optional[float] = None

    @property
    def similarity(self) -> Optional[float]:
        if self.distance is None:
            return None
        return round(1 - self.distance, 3)

    @property
    def sort_key(self) -> datetime:
        if self.timestamp is None:
            return _EPOCH
        if self.timestamp.tzinfo is None:
            return self.timestamp.replace(tzinfo=timezone.utc)
        return self.timestamp

    def stamped(self) -> "MessageEntity":
        """Copy with message_id and timestamp filled in when missing"""
        return self.model_copy(update={
            "message_id": self.message_id or new_message_id(self.role.value),
            "timestamp": self.timestamp or utc_now(),
        })

    def to_properties(self) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content or "",
            "conversation_id": self.conversation_id or DEFAULT_CONVERSATION_ID,
            "message_id": self.message_id or "",
            "parent_id": self.parent_id or "",
            "timestamp": format_timestamp(self.timestamp or utc_now()),
            "user_id": self.user_id or DEFAULT_USER_ID,
            "metadata": self.metadata,
        }

    @classmethod
    def from_object(cls, obj: Any, tenant: Optional[str] = None) -> "MessageEntity":
        """Builds a message from a Weaviate query object (uuid, properties, metadata)"""
        data = obj.properties or {}
        metadata = getattr(obj, "metadata", None)
        return cls(
            role=data.get("role") or MessageRole.USER,
            content=data.get("content") or "",
            conversation_id=data.get("conversation_id") or DEFAULT_CONVERSATION_ID,
            user_id=data.get("user_id") or DEFAULT_USER_ID,
            message_id=data.get("message_id") or None,
            parent_id=data.get("parent_id") or "",
            timestamp=data.get("timestamp") or None,
            metadata=data.get("metadata") or DEFAULT_METADATA,
            tenant=tenant,
            object_id=str(obj.uuid) if obj.uuid else None,
            distance=getattr(metadata, "distance", None),
        )
