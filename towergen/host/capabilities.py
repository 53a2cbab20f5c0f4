"""
Host capabilities - what the generator needs from the game around it

The generator computes geometry only. Drawing, physics bodies and player
input belong to the host, which is handed to the generator at construction.
"""

from typing import Any, List, Tuple

from towergen.core.movement import MovementPhysics


class HostCapabilities:
    """Base host. Subclasses override the methods they support."""

    def materialize_platform(self, platform) -> Any:
        """Create the visible/physical counterpart of a platform; returns a handle."""
        raise NotImplementedError

    def materialize_enemy(self, enemy) -> Any:
        raise NotImplementedError

    def materialize_item(self, item) -> Any:
        """Coins and powerups; hosts without items return None and the item stays headless."""
        return None

    def release_visual(self, handle: Any) -> None:
        """Forget a handle returned by a materialize call."""
        pass

    def player_position(self) -> Tuple[float, float]:
        raise NotImplementedError

    def physics_constants(self) -> MovementPhysics:
        return MovementPhysics()


class HeadlessHost(HostCapabilities):
    """Records everything it is asked to materialize; never draws."""

    def __init__(self, player_x: float = 200, player_y: float = 560, physics: MovementPhysics = None):
        self.player_x = player_x
        self.player_y = player_y
        self.physics = physics or MovementPhysics()
        self.platforms: List[Any] = []
        self.enemies: List[Any] = []
        self.items: List[Any] = []
        self.released: List[Any] = []

    def materialize_platform(self, platform) -> Any:
        self.platforms.append(platform)
        return ('platform', len(self.platforms) - 1)

    def materialize_enemy(self, enemy) -> Any:
        self.enemies.append(enemy)
        return ('enemy', len(self.enemies) - 1)

    def materialize_item(self, item) -> Any:
        self.items.append(item)
        return ('item', len(self.items) - 1)

    def release_visual(self, handle: Any) -> None:
        self.released.append(handle)

    def player_position(self) -> Tuple[float, float]:
        return self.player_x, self.player_y

    def physics_constants(self) -> MovementPhysics:
        return self.physics
