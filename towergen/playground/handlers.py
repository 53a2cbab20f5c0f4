"""
Dev handlers - playground spawn menus described as data

Each handler is a DevHandler record built by a function in HANDLER_REGISTRY
and dispatched by kind. Adding a category means adding one registry entry.
"""

from dataclasses import dataclass, field
from functools import partial
import logging
from typing import Any, Callable, Dict, List, Optional

from towergen.entities.enemy_pool import ENEMY_SIZES, EnemyType

logger = logging.getLogger(__name__)

MAZE_SPAWN_OFFSET = 150
PLATFORM_SPAWN_OFFSET = 100


@dataclass
class DevItem:
    label: str
    icon: str
    callback: Callable[[], Any]
    color: Optional[tuple] = None


@dataclass
class DevHandler:
    kind: str
    category_label: str
    icon: str
    items: List[DevItem] = field(default_factory=list)


def spawn_maze(session, index: int):
    """Spawn library pattern `index` just above the player."""
    level = session.level
    if level.maze_spawner is None:
        logger.warning("Maze spawner not available; cannot spawn maze %s", index)
        return []
    if session.library.find_pattern(index) is None:
        return []
    _, player_y = session.host.player_position()
    rows = level.spawn_pattern(player_y - MAZE_SPAWN_OFFSET, index)
    logger.info("Spawned maze %d (%d rows)", index + 1, len(rows))
    return rows


def spawn_test_platform(session, moving: bool):
    player_x, player_y = session.host.player_position()
    return session.level.spawn_platform(player_x, player_y - PLATFORM_SPAWN_OFFSET,
                                        session.config.platform_width, moving, 96 if moving else 0)


def spawn_test_enemy(session, enemy_type: EnemyType):
    """Drop an enemy on the closest row above the player."""
    level = session.level
    if level.pools is None:
        logger.warning("Enemy pools not available")
        return None
    _, player_y = session.host.player_position()
    above = [r for r in level.rows + level.manual_rows if r.y < player_y and r.platforms]
    if not above:
        logger.warning("No row above the player to place a %s on", enemy_type.value)
        return None
    row = max(above, key=lambda r: r.y)
    surface = max(row.platforms, key=lambda p: p.width)
    enemy = level.pools[enemy_type].acquire(surface.x, surface.y - surface.height / 2, row.row_id)
    if enemy is None:
        return None
    half = ENEMY_SIZES[enemy_type] / 2
    enemy.patrol_min_x, enemy.patrol_max_x = surface.left + half, surface.right - half
    if session.host is not None:
        enemy.handle = session.host.materialize_enemy(enemy)
    row.enemies.append(enemy)
    return enemy


def toggle_riser(session):
    session.set_riser_enabled(not session.riser.enabled)
    return session.riser.enabled


def reset_riser(session):
    _, player_y = session.host.player_position()
    session.riser.reset(player_y + session.config.riser_start_offset)
    return session.riser.y


def _maze_handler(session) -> DevHandler:
    items = [
        DevItem(f"Maze {i + 1}", 'maze', partial(spawn_maze, session, i))
        for i in range(len(session.library))
    ]
    return DevHandler('maze', 'MAZES', 'maze', items)


def _platform_handler(session) -> DevHandler:
    return DevHandler('platform', 'PLATFORMS', 'platform', [
        DevItem("Static", 'platform', partial(spawn_test_platform, session, False)),
        DevItem("Moving", 'platform_moving', partial(spawn_test_platform, session, True)),
    ])


def _enemy_handler(session) -> DevHandler:
    return DevHandler('enemy', 'ENEMIES', 'enemy', [
        DevItem(t.value.replace('_', ' ').title(), t.value, partial(spawn_test_enemy, session, t))
        for t in EnemyType
    ])


def _riser_handler(session) -> DevHandler:
    return DevHandler('riser', 'RISER', 'riser', [
        DevItem("Toggle", 'riser', partial(toggle_riser, session)),
        DevItem("Reset", 'riser_reset', partial(reset_riser, session)),
    ])


HANDLER_REGISTRY: Dict[str, Callable[[Any], DevHandler]] = {
    'maze': _maze_handler,
    'platform': _platform_handler,
    'enemy': _enemy_handler,
    'riser': _riser_handler,
}


def build_handlers(session) -> Dict[str, DevHandler]:
    return {kind: factory(session) for kind, factory in HANDLER_REGISTRY.items()}


def dispatch(handlers: Dict[str, DevHandler], kind: str, index: int):
    """Run item `index` of the handler registered for `kind`."""
    handler = handlers.get(kind)
    if handler is None:
        logger.warning("No dev handler for '%s'", kind)
        return None
    if not 0 <= index < len(handler.items):
        logger.warning("Dev handler '%s' has no item %d", kind, index)
        return None
    return handler.items[index].callback()
