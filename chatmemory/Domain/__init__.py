from .exceptions import (
    ChatMemoryError,
    SchemaCreateError,
    StoreQueryError,
    StoreWriteError,
    AgentCallError
)

from .entities.resultEntity import Result, ErrorKind, BulkOutcome
from .entities.messageEntity import (
    MessageEntity,
    MessageRole,
    DEFAULT_USER_ID,
    DEFAULT_CONVERSATION_ID,
    MESSAGE_PROPERTIES,
    new_message_id
)
from .entities.scopeEntity import ScopeEntity
from .entities.turnEntity import (
    TurnParams,
    TurnStartEntity,
    TurnEndEntity,
    TurnStartResult,
    TurnEndResult
)
from .entities.conversationEntity import (
    ChatRequestEntity,
    ChatReplyEntity,
    ConversationHistoryEntity,
    RenameConversationEntity
)

#Infrastructure CrossCutting
from .interfaces.IAgentClient import IAgentClient
from .interfaces.ITurnPrompts import ITurnPrompts
from .interfaces.IProxyRelay import IProxyRelay

#Infrastructure Repository
from .interfaces.Repository.IMessageRepository import IMessageRepository

#Service
from .interfaces.IScopeResolver import IScopeResolver
from .interfaces.IContextRetriever import IContextRetriever
from .interfaces.Service.ITurnOrchestratorService import ITurnOrchestratorService
from .interfaces.Service.IConversationService import IConversationService
