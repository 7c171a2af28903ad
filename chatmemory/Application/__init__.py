from .routes.hookRoute import router as hookRoute
from .routes.conversationRoute import router as conversationRoute
from .routes.proxyRoute import router as proxyRoute

__all__ = ['hookRoute', 'conversationRoute', 'proxyRoute']


from .mapper.hookPayloadMapper import map_payload_to_turn_start, map_payload_to_turn_end
