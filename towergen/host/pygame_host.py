"""
Pygame host - draws generated terrain for the demo and playground

The climber is scripted: it hops from row to row along the generated
reference points, so the generator can be watched without a physics engine.
"""

import logging
from typing import Any, Dict, List, Tuple

import pygame

from towergen.config import (
    WIDTH, HEIGHT, BG, WHITE, CYAN, PLATFORM_COLOR, MOVING_COLOR, MAZE_COLOR,
    WALL_COLOR, WALL_WIDTH, ENEMY_COLORS, ITEM_COLORS, RISER_COLORS,
)
from towergen.core.movement import MovementPhysics
from towergen.host.capabilities import HostCapabilities
from towergen.systems.camera import Camera

logger = logging.getLogger(__name__)

HOP_SECONDS = 0.45


class PygameHost(HostCapabilities):
    def __init__(self, screen: pygame.Surface, start: Tuple[float, float], physics: MovementPhysics = None):
        self.screen = screen
        self.physics = physics or MovementPhysics()
        self.camera = Camera()
        self.player_x, self.player_y = start
        self.camera.snap_to(self.player_y)
        self._platforms: Dict[int, Any] = {}
        self._enemies: Dict[int, Any] = {}
        self._items: Dict[int, Any] = {}
        self._next_handle = 0
        self._hop_timer = 0.0
        self.font = pygame.font.SysFont(None, 18)

    # --- Capabilities ---

    def _handle(self) -> int:
        self._next_handle += 1
        return self._next_handle

    def materialize_platform(self, platform) -> Any:
        handle = self._handle()
        self._platforms[handle] = platform
        return handle

    def materialize_enemy(self, enemy) -> Any:
        handle = self._handle()
        self._enemies[handle] = enemy
        return handle

    def materialize_item(self, item) -> Any:
        handle = self._handle()
        self._items[handle] = item
        return handle

    def release_visual(self, handle: Any) -> None:
        self._platforms.pop(handle, None)
        self._enemies.pop(handle, None)
        self._items.pop(handle, None)

    def player_position(self) -> Tuple[float, float]:
        return self.player_x, self.player_y

    def physics_constants(self) -> MovementPhysics:
        return self.physics

    # --- Demo climber ---

    def advance_climber(self, dt: float, rows: List[Any]) -> None:
        self._hop_timer += dt
        if self._hop_timer < HOP_SECONDS:
            return
        self._hop_timer = 0.0
        above = [r for r in rows if r.y < self.player_y - 1]
        if above:
            target = max(above, key=lambda r: r.y)
            self.player_x, self.player_y = target.reference_x, target.y - 24
        self.camera.update(self.player_y)

    # --- Drawing ---

    def draw(self, session, paused: bool = False) -> None:
        cam = self.camera
        cam.update(self.player_y)
        self.screen.fill(BG)
        for platform in self._platforms.values():
            if not cam.is_visible(platform.rect):
                continue
            rect = cam.to_screen_rect(platform.rect)
            if platform.role == 'maze_block':
                color = MAZE_COLOR
            elif platform.is_moving:
                color = MOVING_COLOR
            else:
                color = PLATFORM_COLOR
            pygame.draw.rect(self.screen, color, rect, border_radius=4)
        for row in session.level.rows:
            for x, y, _ in row.decorations:
                pygame.draw.circle(self.screen, WALL_COLOR, cam.to_screen((x, y)), 3)
        for enemy in self._enemies.values():
            color = ENEMY_COLORS.get(enemy.enemy_type.value, WHITE)
            pygame.draw.rect(self.screen, color, cam.to_screen_rect(enemy.rect))
        for item in self._items.values():
            color = ITEM_COLORS.get(item.item_type.value, WHITE)
            pygame.draw.circle(self.screen, color, cam.to_screen((item.x, item.y)), item.rect.width // 3)

        pygame.draw.rect(self.screen, WALL_COLOR, pygame.Rect(0, 0, WALL_WIDTH, HEIGHT))
        pygame.draw.rect(self.screen, WALL_COLOR, pygame.Rect(WIDTH - WALL_WIDTH, 0, WALL_WIDTH, HEIGHT))

        riser_top = int(session.riser.y - cam.y)
        if riser_top < HEIGHT:
            color = RISER_COLORS.get(session.riser.riser_type.name, (240, 80, 30))
            pygame.draw.rect(self.screen, color, pygame.Rect(0, max(0, riser_top), WIDTH, HEIGHT))

        px, py = cam.to_screen((self.player_x, self.player_y))
        pygame.draw.rect(self.screen, CYAN, pygame.Rect(px - 10, py - 12, 20, 24))

        height = session.level.height_climbed
        state = session.level.state
        label = f"height {height:.0f}  tier {state.difficulty_tier}  rows {len(session.level.rows)}"
        if paused:
            label += "  [PLAYGROUND]"
        self.screen.blit(self.font.render(label, True, WHITE), (WALL_WIDTH + 6, 6))
        pygame.display.flip()
