"""
Difficulty Progression - maps height climbed to a difficulty tier

Tiers are data. Each one tells the spawners how wide platforms are, how often
they move, how often enemies and mazes show up, and how fast the riser climbs.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple


@dataclass(frozen=True)
class DifficultyTier:
    index: int
    min_height: float
    name: str
    platform_width: int
    moving_chance: float
    moving_speed: float
    enemy_chance: float
    enemy_distribution: Dict[str, float] = field(default_factory=dict)
    maze_enabled: bool = False
    maze_chance: float = 0.0
    maze_groups: Tuple[str, ...] = ()
    maze_allow_enemies: bool = False
    maze_enemy_chance: float = 0.0
    riser_speed: float = 41.0
    powerup_chance: float = 0.08


DEFAULT_TIERS: Tuple[DifficultyTier, ...] = (
    DifficultyTier(0, 0, "Tutorial", 140, 0.0, 0, 0.0, riser_speed=41, powerup_chance=0.10),
    DifficultyTier(1, 300, "Maze Intro", 130, 0.0, 0, 0.0,
                   maze_enabled=True, maze_chance=0.15, maze_groups=('easy',), riser_speed=45, powerup_chance=0.20),
    DifficultyTier(2, 500, "Moving Platforms", 120, 0.2, 60, 0.0,
                   maze_enabled=True, maze_chance=0.15, maze_groups=('easy',), riser_speed=50, powerup_chance=0.10),
    DifficultyTier(3, 800, "First Enemies", 110, 0.2, 70, 0.2, {'patrol': 70, 'spike': 30},
                   maze_enabled=True, maze_chance=0.25, maze_groups=('easy',),
                   maze_allow_enemies=True, maze_enemy_chance=0.4, riser_speed=59, powerup_chance=0.08),
    DifficultyTier(4, 1500, "Rising Pressure", 100, 0.3, 80, 0.3, {'patrol': 70, 'spike': 30},
                   maze_enabled=True, maze_chance=0.25, maze_groups=('easy',),
                   maze_allow_enemies=True, maze_enemy_chance=0.4, riser_speed=62, powerup_chance=0.08),
    DifficultyTier(5, 3000, "Shooters", 95, 0.3, 90, 0.4, {'patrol': 60, 'shooter': 40},
                   maze_enabled=True, maze_chance=0.3, maze_groups=('easy', 'medium'),
                   maze_allow_enemies=True, maze_enemy_chance=0.5, riser_speed=72, powerup_chance=0.05),
    DifficultyTier(6, 3500, "Mixed Threats", 90, 0.35, 100, 0.55, {'patrol': 50, 'shooter': 50},
                   maze_enabled=True, maze_chance=0.3, maze_groups=('medium', 'hard'),
                   maze_allow_enemies=True, maze_enemy_chance=0.5, riser_speed=90, powerup_chance=0.05),
    DifficultyTier(7, 6000, "Jumpers", 85, 0.4, 110, 0.6,
                   {'patrol': 30, 'shooter': 30, 'jumper_shooter': 40},
                   maze_enabled=True, maze_chance=0.35, maze_groups=('medium', 'hard'),
                   maze_allow_enemies=True, maze_enemy_chance=0.6, riser_speed=95, powerup_chance=0.05),
    DifficultyTier(8, 6500, "Everything", 80, 0.5, 120, 0.7,
                   {'patrol': 20, 'shooter': 40, 'jumper_shooter': 40},
                   maze_enabled=True, maze_chance=0.35, maze_groups=('easy', 'medium', 'hard'),
                   maze_allow_enemies=True, maze_enemy_chance=0.6, riser_speed=100, powerup_chance=0.05),
)


class DifficultyProgression:
    """Resolves the tier for a given height climbed"""

    def __init__(self, tiers: Sequence[DifficultyTier] = DEFAULT_TIERS):
        if not tiers:
            raise ValueError("at least one difficulty tier is required")
        self.tiers: List[DifficultyTier] = sorted(tiers, key=lambda t: t.min_height)

    def get_tier(self, height: float) -> DifficultyTier:
        """
        Get the tier active at a height.

        Heights below the first tier's threshold resolve to the first tier.
        """
        current = self.tiers[0]
        for tier in self.tiers:
            if height >= tier.min_height:
                current = tier
            else:
                break
        return current

    def tier_at(self, index: int) -> DifficultyTier:
        """Tier by index, clamped to the table."""
        index = max(0, min(index, len(self.tiers) - 1))
        return self.tiers[index]
