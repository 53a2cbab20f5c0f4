"""
Game Session - owns the generator collaborators and the event bus for one run
"""

import logging
from typing import List, Optional

from towergen.core.event_bus import EventBus, Events
from towergen.core.movement import MovementPhysics
from towergen.host.capabilities import HostCapabilities
from towergen.level.generation_config import GenerationConfig
from towergen.level.level_manager import LevelManager
from towergen.level.pattern_library import PATTERN_LIBRARY, PatternLibrary
from towergen.level.row_data import Row
from towergen.level.seed_manager import SeedManager
from towergen.systems.riser_manager import RiserManager

logger = logging.getLogger(__name__)


class GameSession:
    def __init__(self, host: HostCapabilities, config: Optional[GenerationConfig] = None,
                 library: PatternLibrary = PATTERN_LIBRARY):
        """
        Build a session.

        Raises:
            InvalidPhysicsConstants: if the host's physics cannot be trusted
        """
        self.host = host
        self.config = config or GenerationConfig()
        self.library = library
        self.events = EventBus()

        physics = host.physics_constants()
        if not isinstance(physics, MovementPhysics):
            physics = MovementPhysics(**physics)
        self.physics = physics
        self.constraints = physics.constraints

        self.seeds = SeedManager(self.config.world_seed)
        self.riser = RiserManager(
            self.config.start_platform_y + self.config.riser_start_offset,
            self.config.riser_type,
            self.config.riser_enabled,
        )
        self.level = LevelManager.create(
            self.constraints, self.config, host=host, seeds=self.seeds,
            events=self.events, riser=self.riser, library=library,
        )
        self.level.spawn_start_platform()
        self.game_over = False
        logger.info("Session started: seed=%s motion=%s", self.seeds.world_seed, physics.motion_version)
        logger.debug("Reachability: %s", self.constraints.as_dict())

    def update(self, dt: float) -> List[Row]:
        """One frame: move the riser, generate and retire rows, check the player."""
        if self.events.closed:
            return []
        _, player_y = self.host.player_position()
        self.riser.tick(dt, player_y)
        rows = self.level.update(player_y, dt)
        if not self.game_over and self.riser.is_player_caught(player_y):
            self.game_over = True
            logger.info("Player caught by riser at y=%.1f", player_y)
            self.events.emit(Events.PLAYER_CAUGHT, player_y, self.riser.y)
            self.riser.trigger_rising()
        return rows

    def set_riser_enabled(self, enabled: bool) -> None:
        self.riser.set_enabled(enabled)
        self.events.emit(Events.RISER_TOGGLED, enabled)

    def close(self) -> None:
        self.events.close()
        logger.info("Session closed")
