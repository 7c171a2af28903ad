from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

from chatmemory.Domain.exceptions import (
    AgentCallError,
    SchemaCreateError,
    StoreQueryError,
    StoreWriteError,
)

T = TypeVar("T")


class ErrorKind(str, Enum):
    SCHEMA_CREATE = "schema_create"
    STORE_QUERY = "store_query"
    STORE_WRITE = "store_write"
    AGENT_CALL = "agent_call"


_ERROR_TYPES = {
    ErrorKind.SCHEMA_CREATE: SchemaCreateError,
    ErrorKind.STORE_QUERY: StoreQueryError,
    ErrorKind.STORE_WRITE: StoreWriteError,
    ErrorKind.AGENT_CALL: AgentCallError,
}


class Result(BaseModel, Generic[T]):
    """
    Outcome of a store operation: either a value or an error kind.

    Store operations never raise; the caller decides whether to swallow
    the error (log and continue) or to propagate it with unwrap().
    """
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    detail: str = ""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value=None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, detail: str = "") -> "Result":
        return cls(error=error, detail=detail)

    def value_or(self, default):
        return self.value if self.ok else default

    def unwrap(self):
        if self.ok:
            return self.value
        raise _ERROR_TYPES[self.error](self.detail or self.error.value)


class BulkOutcome(BaseModel):
    """Counters for a best-effort fetch-ids-then-mutate operation"""
    matched: int = 0
    succeeded: int = 0
    failed: int = 0
    pages: int = 0
    truncated: bool = False
