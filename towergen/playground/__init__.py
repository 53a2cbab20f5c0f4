from .rules import PlaygroundRules
from .handlers import DevHandler, DevItem, HANDLER_REGISTRY, build_handlers, dispatch

__all__ = ['PlaygroundRules', 'DevHandler', 'DevItem', 'HANDLER_REGISTRY', 'build_handlers', 'dispatch']
