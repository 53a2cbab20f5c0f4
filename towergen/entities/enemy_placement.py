"""
Enemy Placement Policy - decides whether a fresh row gets an enemy and where

A row is eligible only when it offers a wide enough static surface, sits far
enough above the hazard front, and leaves room for the enemy inside the edge
padding. Eligible rows then roll the tier's spawn chance and pick a type from
the tier's weighted distribution.
"""

import logging
import random
from typing import Dict, Optional

from towergen.entities.enemy_pool import ENEMY_SIZES, PATROL_BOUNDS_MARGIN, Enemy, EnemyPools, EnemyType
from towergen.level.difficulty import DifficultyProgression
from towergen.level.generation_config import GenerationConfig
from towergen.level.row_data import Platform, Row

logger = logging.getLogger(__name__)

MAZE_ENEMY_TYPES = (EnemyType.PATROL, EnemyType.SHOOTER)


class EnemyPlacementPolicy:
    def __init__(self, pools: EnemyPools, config: Optional[GenerationConfig] = None,
                 progression: Optional[DifficultyProgression] = None,
                 rng: Optional[random.Random] = None, host=None):
        self.pools = pools
        self.config = config or GenerationConfig()
        self.progression = progression or DifficultyProgression()
        self.rng = rng or random.Random()
        self.host = host

    def _surface(self, row: Row) -> Optional[Platform]:
        """Widest static platform of the row that meets the minimum width."""
        candidates = [
            p for p in row.platforms
            if not p.is_moving and p.role != 'safety' and p.width >= self.config.enemy_min_platform_width
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda p: p.width)

    def _above_hazard(self, row: Row, hazard_front) -> bool:
        if hazard_front is None:
            return True
        return hazard_front.y - row.y >= self.config.enemy_spawn_safe_padding

    def _pick_type(self, distribution: Dict[str, float], allowed=None) -> Optional[EnemyType]:
        weights = []
        for name, weight in distribution.items():
            enemy_type = EnemyType(name)
            if weight > 0 and (allowed is None or enemy_type in allowed):
                weights.append((enemy_type, weight))
        if not weights:
            return None
        roll = self.rng.uniform(0, sum(w for _, w in weights))
        cumulative = 0.0
        for enemy_type, weight in weights:
            cumulative += weight
            if roll <= cumulative:
                return enemy_type
        return weights[-1][0]

    def place_if_eligible(self, row: Row, hazard_front, difficulty_tier: int = 0) -> Optional[Enemy]:
        """
        Optionally put one enemy on a row.

        Args:
            row: Freshly generated row
            hazard_front: Object with a y attribute, or None when there is no riser
            difficulty_tier: Tier index used for chance and type weights

        Returns:
            The placed Enemy, or None when the row is ineligible or the roll fails
        """
        surface = self._surface(row)
        if surface is None or not self._above_hazard(row, hazard_front):
            return None

        tier = self.progression.tier_at(difficulty_tier)
        if row.is_maze:
            if not tier.maze_allow_enemies:
                return None
            chance, allowed = tier.maze_enemy_chance, MAZE_ENEMY_TYPES
        else:
            chance, allowed = tier.enemy_chance, None
        if chance <= 0 or self.rng.random() >= chance:
            return None

        enemy_type = self._pick_type(tier.enemy_distribution, allowed)
        if enemy_type is None:
            return None

        pad = self.config.safe_zone_padding
        half = ENEMY_SIZES[enemy_type] / 2
        min_x, max_x = surface.left + pad + half, surface.right - pad - half
        if min_x > max_x:
            return None

        x = self.rng.uniform(min_x, max_x)
        enemy = self.pools[enemy_type].acquire(x, surface.y - surface.height / 2, row.row_id)
        if enemy is None:
            return None
        if enemy_type == EnemyType.PATROL:
            enemy.patrol_min_x = min_x + PATROL_BOUNDS_MARGIN
            enemy.patrol_max_x = max(enemy.patrol_min_x, max_x - PATROL_BOUNDS_MARGIN)
        if self.host is not None:
            enemy.handle = self.host.materialize_enemy(enemy)
        row.enemies.append(enemy)
        logger.debug("Placed %s on row %d at x=%.1f", enemy_type.value, row.row_id, x)
        return enemy
