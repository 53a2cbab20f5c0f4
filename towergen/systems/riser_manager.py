"""
Riser Manager - the rising hazard front

The riser climbs toward the player every tick. When the player gets far
ahead it speeds up to keep the pressure on. It never climbs past the ceiling
the level manager sets, which keeps it at least one jump below the
generation frontier.
"""

from dataclasses import dataclass
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

CATCH_UP_FAR = 800
CATCH_UP_NEAR = 600
CATCH_UP_NEAR_FACTOR = 0.7


@dataclass(frozen=True)
class RiserType:
    name: str
    base_speed: float
    max_speed: float
    acceleration: float


RISER_TYPES: Dict[str, RiserType] = {
    'lava': RiserType('lava', 54, 180, 0.02),
    'water': RiserType('water', 40, 150, 0.01),
    'acid': RiserType('acid', 60, 200, 0.03),
    'fire': RiserType('fire', 70, 220, 0.04),
}


@dataclass
class HazardFront:
    y: float
    speed: float = 0.0
    enabled: bool = True


class RiserManager:
    def __init__(self, start_y: float, riser_type: str = 'lava', enabled: bool = True):
        if riser_type not in RISER_TYPES:
            logger.warning("Unknown riser type '%s', using lava", riser_type)
            riser_type = 'lava'
        self.riser_type = RISER_TYPES[riser_type]
        self.base_speed = self.riser_type.base_speed
        self.hazard_front = HazardFront(y=start_y, speed=self.base_speed, enabled=enabled)
        self.ceiling_y: Optional[float] = None
        self.rising_triggered = False

    @property
    def enabled(self) -> bool:
        return self.hazard_front.enabled

    @property
    def y(self) -> float:
        return self.hazard_front.y

    def set_enabled(self, enabled: bool) -> None:
        """Start or stop the riser; its position is kept either way."""
        if self.hazard_front.enabled != bool(enabled):
            logger.info("Riser %s at y=%.1f", "enabled" if enabled else "disabled", self.hazard_front.y)
        self.hazard_front.enabled = bool(enabled)

    def set_base_speed(self, tier_speed: float) -> None:
        """Apply a difficulty tier's riser speed, scaled by this riser type."""
        scale = self.riser_type.base_speed / RISER_TYPES['lava'].base_speed
        self.base_speed = min(self.riser_type.max_speed, tier_speed * scale)

    def set_ceiling(self, y: Optional[float]) -> None:
        """Highest point (smallest y) the front may reach; None removes the cap."""
        self.ceiling_y = y

    def target_speed(self, player_y: Optional[float]) -> float:
        if self.rising_triggered:
            return self.riser_type.max_speed
        if player_y is not None:
            distance = self.hazard_front.y - player_y
            if distance > CATCH_UP_FAR:
                return self.riser_type.max_speed
            if distance > CATCH_UP_NEAR:
                return self.riser_type.max_speed * CATCH_UP_NEAR_FACTOR
        return self.base_speed

    def tick(self, dt: float, player_y: Optional[float] = None) -> float:
        """
        Advance the front by one frame.

        Args:
            dt: Elapsed seconds
            player_y: Player y, used for catch-up speed

        Returns:
            The front's y after the tick
        """
        front = self.hazard_front
        if not front.enabled or dt <= 0:
            return front.y

        target = self.target_speed(player_y)
        blend = min(1.0, self.riser_type.acceleration * dt * 60)
        front.speed += (target - front.speed) * blend
        front.y -= front.speed * dt
        if self.ceiling_y is not None and front.y < self.ceiling_y:
            front.y = self.ceiling_y
        return front.y

    def is_player_caught(self, player_y: float) -> bool:
        return self.hazard_front.enabled and player_y >= self.hazard_front.y

    def trigger_rising(self) -> None:
        """Push the riser to full speed, e.g. for a game-over sequence."""
        self.rising_triggered = True
        self.hazard_front.enabled = True
        self.ceiling_y = None

    def reset(self, start_y: float) -> None:
        self.hazard_front.y = start_y
        self.hazard_front.speed = self.base_speed
        self.rising_triggered = False
