"""
Event Bus - publish/subscribe owned by a game session

A bus is created when a session starts and closed when it ends. Nothing
registers listeners globally.
"""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class Events:
    """Event names emitted by the generator."""
    ROW_GENERATED = 'row_generated'
    ROW_RETIRED = 'row_retired'
    MAZE_STARTED = 'maze_started'
    MAZE_FINISHED = 'maze_finished'
    ENEMY_SPAWNED = 'enemy_spawned'
    ITEM_SPAWNED = 'item_spawned'
    GENERATION_FROZEN = 'generation_frozen'
    GENERATION_RESUMED = 'generation_resumed'
    RISER_TOGGLED = 'riser_toggled'
    PLAYER_CAUGHT = 'player_caught'


class EventBus:
    def __init__(self):
        self._listeners: Dict[str, List[Callable[..., Any]]] = {}
        self.closed = False

    def on(self, event: str, callback: Callable[..., Any]) -> None:
        if self.closed:
            logger.warning("Listener for '%s' ignored: bus is closed", event)
            return
        self._listeners.setdefault(event, []).append(callback)

    def off(self, event: str, callback: Callable[..., Any]) -> None:
        listeners = self._listeners.get(event)
        if listeners and callback in listeners:
            listeners.remove(callback)
            if not listeners:
                del self._listeners[event]

    def emit(self, event: str, *args, **kwargs) -> int:
        """
        Call every listener registered for an event.

        Returns:
            Number of listeners invoked
        """
        listeners = list(self._listeners.get(event, ()))
        for callback in listeners:
            callback(*args, **kwargs)
        return len(listeners)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def close(self) -> None:
        """Drop all listeners; later registrations are ignored."""
        self._listeners.clear()
        self.closed = True
