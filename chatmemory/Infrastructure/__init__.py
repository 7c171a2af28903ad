

from .cross_cutting.agentClient import AgentClient
from .cross_cutting.proxyRelay import ProxyRelay
from .cross_cutting.turnPrompts import TurnPrompts

from .data.weaviate.context.weaviateContext import WeaviateContext, WeaviateConnection

from .data.weaviate.repository.MessageRepository import MessageRepository
