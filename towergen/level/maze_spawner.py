"""
Maze Spawner - turns maze patterns into concrete rows of blocks

A maze row is a band of solid blocks with one opening the player climbs
through. Rows are placed one pitch apart (the top of the safe vertical band)
and checked against their predecessor before they are emitted.
"""

from dataclasses import dataclass, astuple
import logging
import math
import random
from typing import Any, List, Optional, Tuple

from towergen.config import MAZE_GAP_MARGIN_MAX, MAZE_GAP_MARGIN_RATIO
from towergen.core.errors import PatternNotFound, UnreachableGapAttempt
from towergen.core.movement import ReachabilityConstraints
from towergen.level.generation_config import GenerationConfig
from towergen.level.pattern_library import (
    PATTERN_LIBRARY, DecorationPattern, MazePattern, MazeRowDef, MazeRowType, PatternLibrary,
    TRANSFORMS, choose_transform,
)
from towergen.level.row_data import MazeProgress, Platform, Row, RowKind

logger = logging.getLogger(__name__)


@dataclass
class MazeRowHooks:
    """
    Optional per-row placement hooks.

    All five slots are reserved extension points and currently have no
    effect on placement. They exist so call sites can pass them positionally
    (or by name) and always forward the same five values, None by default.
    """
    row_index: Optional[int] = None
    pattern: Any = None
    tint_color: Any = None
    enemy_budget: Optional[int] = None
    coin_budget: Optional[int] = None

    @classmethod
    def from_positional(cls, *values) -> 'MazeRowHooks':
        if len(values) > 5:
            raise TypeError(f"at most 5 maze row hooks, got {len(values)}")
        return cls(*values)

    def as_positional(self) -> Tuple[Any, Any, Any, Any, Any]:
        return astuple(self)


class MazeSpawner:
    def __init__(
        self,
        constraints: ReachabilityConstraints,
        config: Optional[GenerationConfig] = None,
        library: PatternLibrary = PATTERN_LIBRARY,
        rng: Optional[random.Random] = None,
        host=None,
        decorate: bool = True,
    ):
        self.constraints = constraints
        self.config = config or GenerationConfig()
        self.library = library
        self.rng = rng or random.Random()
        self.host = host
        self.decorate = decorate
        self.progress: Optional[MazeProgress] = None

    @property
    def row_pitch(self) -> float:
        return self.constraints.dy_safe.max

    @property
    def in_progress(self) -> bool:
        return self.progress is not None

    def begin(self, config, mirrored: bool = False, anchor: Optional[Row] = None) -> bool:
        """
        Start a stepwise maze run whose first row is checked against anchor.

        Returns:
            False when the pattern cannot be resolved
        """
        try:
            maze, index, _ = self._resolve(config)
        except (PatternNotFound, KeyError, ValueError) as exc:
            logger.warning("Maze run not started: %s", exc)
            return False
        if maze is None:
            logger.warning("Maze run needs a whole pattern, got a single row")
            return False
        self.progress = MazeProgress(pattern=maze, pattern_index=index, next_row=0,
                                     mirrored=mirrored, last_row=anchor)
        logger.info("Maze %s (%s) started, mirrored=%s", index, maze.name, mirrored)
        return True

    def cancel_progress(self) -> None:
        if self.progress is not None:
            logger.info("Maze %s cancelled at row %d", self.progress.pattern_index, self.progress.next_row)
        self.progress = None

    # --- Geometry ---

    def _snap(self, value: float) -> int:
        tile = self.config.tile
        return max(tile, int(math.floor(value / tile)) * tile)

    def build_row(self, row_def: MazeRowDef, y: float, mirrored: bool = False) -> Row:
        """Compute blocks and opening of one maze row (no materialization)."""
        cfg = self.config
        tile = cfg.tile
        if mirrored:
            row_def = row_def.mirrored()

        left, right = cfg.wall_width, cfg.game_width - cfg.wall_width
        playable = max(tile, right - left)
        center = (left + right) / 2
        scale = cfg.game_width / cfg.design_width
        w1 = self._snap(max(tile, min(playable, row_def.width * scale)))
        w2 = self._snap(max(tile, min(playable, row_def.width2 * scale)))
        max_side = self._snap(max(tile, playable - cfg.maze_min_gap))

        if row_def.type == MazeRowType.LEFT:
            w1 = self._snap(min(w1, max_side))
            blocks = [(left, left + w1)]
            gap = (left + w1, right)
        elif row_def.type == MazeRowType.RIGHT:
            w1 = self._snap(min(w1, max_side))
            blocks = [(right - w1, right)]
            gap = (left, right - w1)
        elif row_def.type == MazeRowType.SPLIT:
            max_total = self._snap(max(tile * 2, playable - cfg.maze_min_gap))
            if w1 + w2 > max_total:
                ratio = max_total / (w1 + w2)
                w1 = self._snap(math.floor(w1 * ratio))
                w2 = self._snap(math.floor(w2 * ratio))
            blocks = [(left, left + w1), (right - w2, right)]
            gap = (left + w1, right - w2)
        else:
            w1 = self._snap(min(w1, max_side))
            block = (center - w1 / 2, center + w1 / 2)
            blocks = [block]
            gap = (left, block[0]) if self.rng.random() < 0.5 else (block[1], right)

        gap_width = max(10, gap[1] - gap[0])
        margin = min(MAZE_GAP_MARGIN_MAX, gap_width * MAZE_GAP_MARGIN_RATIO)
        gap_x = max(gap[0] + margin, min(gap[1] - margin, (gap[0] + gap[1]) / 2))

        platforms = [
            Platform(x=(a + b) / 2, y=y, width=b - a, height=cfg.maze_row_thickness, role='maze_block')
            for a, b in blocks
        ]
        return Row(y=y, kind=RowKind.MAZE, platforms=platforms, mirrored=mirrored, gap=gap, gap_x=gap_x)

    def _validate(self, row: Row, predecessor: Optional[Row]) -> Optional[Row]:
        """Clamp the row's height and drop it if its opening is out of reach."""
        if predecessor is None:
            return row
        c = self.constraints
        dy = predecessor.y - row.y
        if abs(dy) > c.dy_hard.max:
            clamped = predecessor.y - c.clamp_dy(dy)
            logger.warning("Maze row at y=%.1f clamped to y=%.1f", row.y, clamped)
            row.y = clamped
            for platform in row.platforms:
                platform.y = clamped
            dy = predecessor.y - clamped

        gap_left, gap_right = row.gap
        dx = min(
            (max(0.0, gap_left - right, left - gap_right) for left, right in predecessor.segments),
            default=0.0,
        )
        try:
            c.check_gap(dx, dy)
        except UnreachableGapAttempt as exc:
            logger.warning("Maze row %s/%s skipped: %s", row.pattern_index, row.pattern_row, exc)
            return None
        return row

    def _decorate(self, row: Row) -> None:
        decorations = self.library.decorations
        if not self.decorate or not decorations:
            return
        pattern = self.rng.choice(decorations).transformed(TRANSFORMS[choose_transform(self.rng)])
        for platform in row.platforms:
            count = self._decoration_count(pattern, platform.width)
            if count <= 0:
                continue
            top = platform.y - platform.height / 2
            points = pattern.project(platform.left, platform.right, top, platform.height)
            row.decorations.extend(self.rng.sample(points, count))

    def _decoration_count(self, pattern: DecorationPattern, width: float) -> int:
        """density is decorations per tile of block width, capped by the pattern's item count."""
        expected = pattern.density * width / self.config.tile
        count = int(expected)
        if self.rng.random() < expected - count:
            count += 1
        return min(count, len(pattern.items))

    def _emit(self, row: Row) -> Row:
        self._decorate(row)
        if self.host is not None:
            for platform in row.platforms:
                row.visuals.append(self.host.materialize_platform(platform))
        return row

    # --- Public operations ---

    def _resolve(self, config) -> Tuple[Optional[MazePattern], Optional[int], Optional[MazeRowDef]]:
        if isinstance(config, MazeRowDef):
            return None, None, config
        if isinstance(config, dict):
            return None, None, MazeRowDef(MazeRowType(config['type']), config.get('width', 0), config.get('width2', 0))
        if isinstance(config, MazePattern):
            index = next((i for i in range(len(self.library)) if self.library.get_pattern(i) is config), None)
            return config, index, None
        return self.library.get_pattern(config), config, None

    def spawn_maze_row_from_config(self, start_y: float, config, mirrored: bool = False, partial: bool = False,
                                   row_index=None, pattern=None, tint_color=None,
                                   enemy_budget=None, coin_budget=None) -> List[Row]:
        """
        Instantiate maze rows starting at start_y.

        Args:
            start_y: y of the first emitted row
            config: pattern index, MazePattern, or a single MazeRowDef/dict row
            mirrored: mirror horizontally
            partial: emit only the next pending row of the maze in progress,
                starting a new run when none is in progress for this pattern.
                When False the whole pattern is emitted, stacked upward.
            row_index, pattern, tint_color, enemy_budget, coin_budget:
                reserved hooks, see MazeRowHooks

        Returns:
            Emitted rows, bottom first. Empty when the pattern is unknown.
        """
        hooks = MazeRowHooks(row_index, pattern, tint_color, enemy_budget, coin_budget)
        logger.debug("Maze rows requested at y=%.1f hooks=%s", start_y, hooks)
        try:
            maze, index, single = self._resolve(config)
        except (PatternNotFound, KeyError, ValueError) as exc:
            logger.warning("Maze spawn ignored: %s", exc)
            return []

        if single is not None:
            row = self._validate(self.build_row(single, start_y, mirrored), None)
            return [self._emit(row)]

        if partial:
            return self._spawn_next_row(start_y, maze, index, mirrored)

        rows = []
        predecessor = None
        y = start_y
        for i, row_def in enumerate(maze.rows):
            row = self.build_row(row_def, y, mirrored)
            row.pattern_index, row.pattern_row = index, i
            row = self._validate(row, predecessor)
            if row is not None:
                rows.append(self._emit(row))
                predecessor = row
                y = row.y
            y -= self.row_pitch
        return rows

    def _spawn_next_row(self, y: float, maze: MazePattern, index: Optional[int], mirrored: bool) -> List[Row]:
        progress = self.progress
        if progress is None or progress.pattern is not maze or progress.mirrored != mirrored:
            progress = MazeProgress(pattern=maze, pattern_index=index, next_row=0, mirrored=mirrored)
            self.progress = progress
            logger.info("Maze %s (%s) started at y=%.1f mirrored=%s", index, maze.name, y, mirrored)

        row_number = progress.next_row
        row = self.build_row(maze.rows[row_number], y, mirrored)
        row.pattern_index, row.pattern_row = index, row_number
        row = self._validate(row, progress.last_row)
        progress.next_row += 1
        if row is not None:
            progress.last_row = self._emit(row)
        if progress.finished:
            logger.info("Maze %s finished", index)
            self.progress = None
        return [row] if row is not None else []

    def spawn_pattern(self, start_y: float, pattern) -> List[Row]:
        """Materialize a whole pattern at start_y, bypassing pacing and enemies."""
        return self.spawn_maze_row_from_config(start_y, pattern, False, False)
