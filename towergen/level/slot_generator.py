"""
Slot Generator - pacing controller choosing the kind of each new row

ACTIVE: plans rows normally.
SUSPENDED: every plan request returns None and any maze in flight is
cancelled, so the level manager never sees half a maze.
"""

from dataclasses import dataclass
from enum import Enum
import logging
import random
from typing import Optional

from towergen.level.difficulty import DifficultyProgression
from towergen.level.generation_config import GenerationConfig
from towergen.level.maze_spawner import MazeSpawner
from towergen.level.pattern_library import PatternLibrary
from towergen.level.row_data import GenerationState, RowKind

logger = logging.getLogger(__name__)

# Seconds without a maze after which the maze chance is doubled
MAZE_OVERDUE_SECONDS = 60.0


class SlotState(Enum):
    ACTIVE = 'active'
    SUSPENDED = 'suspended'


@dataclass(frozen=True)
class RowPlan:
    kind: RowKind
    pattern_ref: Optional[int] = None
    mirrored: bool = False
    resume: bool = False


class SlotGenerator:
    def __init__(self, maze_spawner: MazeSpawner, config: Optional[GenerationConfig] = None,
                 progression: Optional[DifficultyProgression] = None,
                 rng: Optional[random.Random] = None, library: Optional[PatternLibrary] = None):
        self.maze_spawner = maze_spawner
        self.library = library or maze_spawner.library
        self.config = config or GenerationConfig()
        self.progression = progression or DifficultyProgression()
        self.rng = rng or random.Random()
        self.state = SlotState.ACTIVE
        self.last_pattern: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.state == SlotState.ACTIVE

    def suspend(self) -> None:
        if self.state == SlotState.SUSPENDED:
            return
        self.maze_spawner.cancel_progress()
        self.state = SlotState.SUSPENDED
        logger.info("Slot generator suspended")

    def resume(self) -> None:
        if self.state == SlotState.ACTIVE:
            return
        self.state = SlotState.ACTIVE
        logger.info("Slot generator resumed")

    def maze_chance(self, state: GenerationState) -> float:
        tier = self.progression.tier_at(state.difficulty_tier)
        if not tier.maze_enabled:
            return 0.0
        overdue = min(1.0, (state.elapsed - state.last_maze_at) / MAZE_OVERDUE_SECONDS)
        return min(1.0, tier.maze_chance * (1.0 + overdue))

    def next_row_type(self, state: GenerationState) -> Optional[RowPlan]:
        """
        Plan the next row.

        Returns:
            RowPlan, or None while suspended
        """
        if self.state == SlotState.SUSPENDED:
            return None

        progress = self.maze_spawner.progress
        if progress is not None:
            return RowPlan(RowKind.MAZE, progress.pattern_index, progress.mirrored, resume=True)

        if state.rows_generated < self.config.tutorial_rows:
            return RowPlan(RowKind.PLATFORM)
        if state.rows_since_maze <= self.config.maze_cooldown_rows:
            return RowPlan(RowKind.PLATFORM)

        chance = self.maze_chance(state)
        if chance <= 0 or self.rng.random() >= chance:
            return RowPlan(RowKind.PLATFORM)

        tier = self.progression.tier_at(state.difficulty_tier)
        index = self.library.random_index(self.rng, tier.maze_groups, exclude=self.last_pattern)
        if index is None:
            return RowPlan(RowKind.PLATFORM)
        self.last_pattern = index
        return RowPlan(RowKind.MAZE, index, mirrored=self.rng.random() < 0.5)
