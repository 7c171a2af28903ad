from dependency_injector import containers,providers

from chatmemory.config import settings
from chatmemory.Domain import (
                           #SERVICES
                           ITurnOrchestratorService,
                           IConversationService,
                           IScopeResolver,
                           IContextRetriever,

                           #INFRASTRUCTURE
                           IMessageRepository,
                           IAgentClient,
                           IProxyRelay,
                           ITurnPrompts
                        )
from chatmemory.Services import (
                           ScopeResolver,
                           ContextRetriever,
                           TurnOrchestratorService,
                           ConversationService
                         )
from chatmemory.Infrastructure import (
                                 WeaviateContext,
                                 MessageRepository,
                                 AgentClient,
                                 ProxyRelay,
                                 TurnPrompts
                               )


class Dependencies(containers.DeclarativeContainer):

   config = providers.Object(settings)

   # ========== INFRASTRUCTURE ==========

   weaviateContext: providers.Singleton[WeaviateContext] = \
   providers.Singleton(WeaviateContext, config=config)

   # Repositories
   messageRepository: providers.Singleton[IMessageRepository] = \
   providers.Singleton(
       MessageRepository,
       context=weaviateContext,
       config=config
   )

   # Cross cutting
   agentClient: providers.Singleton[IAgentClient] = \
   providers.Singleton(AgentClient, config=config)

   proxyRelay: providers.Singleton[IProxyRelay] = \
   providers.Singleton(ProxyRelay, config=config)

   turnPrompts: providers.Singleton[ITurnPrompts] = \
   providers.Singleton(TurnPrompts)

   # ========== SERVICES ==========

   scopeResolver: providers.Singleton[IScopeResolver] = \
   providers.Singleton(ScopeResolver, config=config)

   contextRetriever: providers.Singleton[IContextRetriever] = \
   providers.Singleton(
       ContextRetriever,
       message_repo=messageRepository,
       prompts=turnPrompts
   )

   # Lifecycle hooks (pre-call / post-call)
   turnOrchestratorService: providers.Singleton[ITurnOrchestratorService] = \
   providers.Singleton(
       TurnOrchestratorService,
       message_repo=messageRepository,
       scope_resolver=scopeResolver,
       context_retriever=contextRetriever,
       prompts=turnPrompts,
       config=config
   )

   # Chat UI backend
   conversationService: providers.Singleton[IConversationService] = \
   providers.Singleton(
       ConversationService,
       message_repo=messageRepository,
       scope_resolver=scopeResolver,
       agent_client=agentClient
   )


dependencies = Dependencies()
