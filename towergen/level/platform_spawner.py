"""
Platform Spawner - builds simple platform rows inside the jump envelope

Each row is one platform placed relative to the previous row's reference
point. The vertical gap comes from the safe band at low tiers and, from
GenerationConfig.hard_band_tier on, increasingly from the hard band. Neither
gap ever leaves the hard envelope.
"""

import logging
import random
from typing import Optional, Tuple

from towergen.core.errors import UnreachableGapAttempt
from towergen.core.movement import Band, ReachabilityConstraints
from towergen.level.difficulty import DifficultyProgression, DifficultyTier
from towergen.level.generation_config import GenerationConfig
from towergen.level.platform_validator import PlatformValidator
from towergen.level.row_data import GenerationState, Platform, Row, RowKind

logger = logging.getLogger(__name__)

MAX_PLACEMENT_ATTEMPTS = 6
MAX_MOVE_RANGE = 96
MIN_MOVE_RANGE = 32
MANUAL_MOVE_SPEED = 60


class PlatformSpawner:
    def __init__(
        self,
        constraints: ReachabilityConstraints,
        config: Optional[GenerationConfig] = None,
        rng: Optional[random.Random] = None,
        host=None,
        state: Optional[GenerationState] = None,
        progression: Optional[DifficultyProgression] = None,
    ):
        self.constraints = constraints
        self.config = config or GenerationConfig()
        self.rng = rng or random.Random()
        self.host = host
        self.state = state
        self.progression = progression or DifficultyProgression()
        self.validator = PlatformValidator(constraints, self.config)

    # --- Geometry helpers ---

    def center_bounds(self, width: float) -> Tuple[float, float]:
        """Legal range for a platform centre of the given width."""
        cfg = self.config
        lo = cfg.wall_width + cfg.wall_margin + width / 2
        hi = cfg.game_width - cfg.wall_width - cfg.wall_margin - width / 2
        if lo > hi:
            mid = cfg.game_width / 2
            return mid, mid
        return lo, hi

    def hard_band_chance(self, difficulty_tier: int) -> float:
        threshold = self.config.hard_band_tier
        if difficulty_tier < threshold:
            return 0.0
        return min(0.8, 0.25 * (difficulty_tier - threshold + 1))

    def _sample_gap(self, difficulty_tier: int) -> Tuple[float, Band, float]:
        """Returns (dy, vertical band, dx_limit) for the tier's band."""
        c = self.constraints
        if self.rng.random() < self.hard_band_chance(difficulty_tier):
            return c.dy_hard.sample(self.rng), c.dy_hard, c.dx_hard
        return c.dy_safe.sample(self.rng), c.dy_safe, c.dx_safe

    def _place_x(self, prev_x: float, magnitude: float, width: float) -> float:
        lo, hi = self.center_bounds(width)
        direction = self.rng.choice((-1, 1))
        x = prev_x + direction * magnitude
        if not lo <= x <= hi:
            x = prev_x - direction * magnitude
        if not lo <= x <= hi:
            x = max(lo, min(hi, x))
        return x

    def _move_range(self, tier: DifficultyTier, x: float, width: float, dx: float, dx_limit: float) -> float:
        if tier.moving_chance <= 0 or self.rng.random() >= tier.moving_chance:
            return 0.0
        lo, hi = self.center_bounds(width)
        room = 2 * min(x - lo, hi - x)
        # The whole sweep has to stay inside the horizontal envelope
        reach_room = 2 * (dx_limit - abs(dx))
        move_range = min(MAX_MOVE_RANGE, room, reach_room)
        return move_range if move_range >= MIN_MOVE_RANGE else 0.0

    # --- Public operations ---

    def spawn_row(self, previous_row: Row, difficulty_tier: int) -> Row:
        """
        Build the next platform row above previous_row.

        Args:
            previous_row: Row the player jumps from
            difficulty_tier: Index into the difficulty table

        Returns:
            A materialized Row; GenerationState (if attached) is advanced to it
        """
        tier = self.progression.tier_at(difficulty_tier)
        width = max(self.config.min_platform_width, tier.platform_width)
        prev_x, prev_y = previous_row.reference_x, previous_row.y

        candidate = None
        dx = dy = dx_limit = 0.0
        for attempt in range(MAX_PLACEMENT_ATTEMPTS):
            dy, band, dx_limit = self._sample_gap(difficulty_tier)
            x = self._place_x(prev_x, self.rng.uniform(0, dx_limit), width)
            dx = x - prev_x
            platform = Platform(x=x, y=prev_y - dy, width=width)
            try:
                self.constraints.check_gap(dx, dy)
            except UnreachableGapAttempt as exc:
                logger.warning("Rejected platform candidate: %s", exc)
                continue
            if self.validator.is_valid_position(platform):
                candidate = platform
                break
            legal_y = self.validator.next_legal_y(platform, prev_y - band.max)
            if legal_y is not None:
                logger.debug("Platform candidate pushed up from y=%.1f to y=%.1f", platform.y, legal_y)
                platform.y = legal_y
                candidate = platform
                break
            logger.debug("Platform candidate at y=%.1f crowded (attempt %d)", platform.y, attempt + 1)

        if candidate is None:
            candidate, dx, dx_limit = self._safe_fallback(prev_x, prev_y, width)

        move_range = self._move_range(tier, candidate.x, width, dx, dx_limit)
        if move_range:
            candidate.is_moving = True
            candidate.move_range = move_range
            candidate.move_speed = tier.moving_speed

        row = Row(y=candidate.y, kind=RowKind.PLATFORM, platforms=[candidate])
        self._materialize(row)
        if self.state is not None:
            self.state.commit_row(row)
        logger.debug("Platform row %d at y=%.1f x=%.1f (tier %d)", row.row_id, row.y, candidate.x, difficulty_tier)
        return row

    def _safe_fallback(self, prev_x: float, prev_y: float, width: float):
        """
        Lowest legal y inside the safe band, as close to the previous anchor as the walls allow.

        When the whole safe band is crowded the row goes to the middle of the band anyway.
        """
        c = self.constraints
        dy = (c.dy_safe.min + c.dy_safe.max) / 2
        lo, hi = self.center_bounds(width)
        x = max(lo, min(hi, prev_x))
        dx = c.clamp_dx(x - prev_x)
        x = prev_x + dx
        platform = Platform(x=x, y=prev_y - c.dy_safe.min, width=width)
        legal_y = self.validator.next_legal_y(platform, prev_y - c.dy_safe.max)
        if legal_y is not None:
            platform.y = legal_y
            logger.warning("Platform placement clamped to safe band at y=%.1f", legal_y)
        else:
            platform.y = prev_y - dy
            logger.warning("Platform placement clamped to safe band at y=%.1f; overlap with active platforms accepted",
                           platform.y)
        return platform, dx, c.dx_safe

    def spawn(self, x: float, y: float, width: float, is_moving: bool = False, move_range: float = 0) -> Row:
        """Materialize one explicit platform with no pacing or reachability sampling."""
        platform = Platform(x=x, y=y, width=width, is_moving=bool(is_moving), move_range=move_range or 0,
                            move_speed=MANUAL_MOVE_SPEED if is_moving else 0.0)
        row = Row(y=y, kind=RowKind.PLATFORM, platforms=[platform])
        self._materialize(row)
        return row

    def _materialize(self, row: Row) -> None:
        for platform in row.platforms:
            self.validator.track(platform)
            if self.host is not None:
                row.visuals.append(self.host.materialize_platform(platform))
