"""
Row data structures shared by the spawners and the level manager.

Coordinates follow screen space: y grows downward, so climbing means y
decreases. A gap dy is measured upward as previous.y - next.y.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple
import itertools

import pygame

from towergen.config import PLATFORM_HEIGHT

_row_ids = itertools.count(1)


class RowKind(str, Enum):
    PLATFORM = 'platform'
    MAZE = 'maze'


@dataclass
class Platform:
    """A solid surface centred on (x, y)."""
    x: float
    y: float
    width: float
    is_moving: bool = False
    move_range: float = 0.0
    move_speed: float = 0.0
    height: float = PLATFORM_HEIGHT
    role: str = 'platform'  # 'platform', 'maze_block' or 'safety'
    origin_x: Optional[float] = None
    direction: int = 1

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width / 2

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(round(self.left)), int(round(self.y - self.height / 2)),
                           int(round(self.width)), int(round(self.height)))

    def advance(self, dt: float) -> None:
        """Slide a moving platform back and forth around its origin."""
        if not self.is_moving or self.move_range <= 0:
            return
        if self.origin_x is None:
            self.origin_x = self.x
        half = self.move_range / 2
        self.x += self.direction * self.move_speed * dt
        if abs(self.x - self.origin_x) >= half:
            self.x = self.origin_x + half * (1 if self.x > self.origin_x else -1)
            self.direction = -self.direction


@dataclass
class Row:
    y: float
    kind: RowKind
    platforms: List[Platform] = field(default_factory=list)
    pattern_index: Optional[int] = None
    pattern_row: Optional[int] = None
    mirrored: bool = False
    gap: Optional[Tuple[float, float]] = None
    gap_x: Optional[float] = None
    enemies: List[Any] = field(default_factory=list)
    items: List[Any] = field(default_factory=list)
    visuals: List[Any] = field(default_factory=list)
    decorations: List[Tuple[float, float, str]] = field(default_factory=list)
    row_id: int = field(default_factory=lambda: next(_row_ids))

    @property
    def reference_x(self) -> float:
        """Horizontal anchor the next row's dx is measured from."""
        if self.gap_x is not None:
            return self.gap_x
        if self.platforms:
            return self.platforms[0].x
        return 0.0

    @property
    def segments(self) -> List[Tuple[float, float]]:
        """Standing surfaces as (left, right) intervals."""
        return [(p.left, p.right) for p in self.platforms]

    @property
    def is_maze(self) -> bool:
        return self.kind == RowKind.MAZE


@dataclass
class MazeProgress:
    """Cursor for a maze emitted one row per generation step."""
    pattern: Any
    pattern_index: Optional[int]
    next_row: int
    mirrored: bool
    last_row: Optional[Row] = None

    @property
    def finished(self) -> bool:
        return self.next_row >= self.pattern.row_count


@dataclass
class GenerationState:
    last_platform_y: float
    last_platform_x: float = 0.0
    difficulty_tier: int = 0
    generation_enabled: bool = True
    rows_generated: int = 0
    rows_since_maze: int = 0
    max_height: float = 0.0
    elapsed: float = 0.0
    last_maze_at: float = 0.0

    def commit_row(self, row: Row) -> None:
        """Record a fully built row as the new generation frontier."""
        self.last_platform_y = row.y
        self.last_platform_x = row.reference_x
        self.rows_generated += 1
        if row.is_maze:
            self.rows_since_maze = 0
            self.last_maze_at = self.elapsed
        else:
            self.rows_since_maze += 1
