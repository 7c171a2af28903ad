from .scopeResolverService import ScopeResolver
from .contextRetrieverService import ContextRetriever
from .turnOrchestratorService import TurnOrchestratorService
from .conversationService import ConversationService
