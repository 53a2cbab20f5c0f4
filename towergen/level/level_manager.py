"""
Level Manager - orchestrates endless row generation

RUNNING: rows are generated as the player climbs.
FROZEN: generate_next_row is a no-op; direct spawns and moving-platform
updates keep working. Only outside callers switch between the two.
"""

from enum import Enum
import logging
from typing import Any, List, Optional

from towergen.core.errors import SpawnerUnavailable
from towergen.core.event_bus import EventBus, Events
from towergen.core.movement import ReachabilityConstraints
from towergen.entities.enemy_placement import EnemyPlacementPolicy
from towergen.entities.enemy_pool import EnemyPools
from towergen.entities.item_placement import ItemPlacementPolicy
from towergen.entities.item_pool import Item, ItemPools
from towergen.level.difficulty import DifficultyProgression
from towergen.level.generation_config import GenerationConfig
from towergen.level.maze_spawner import MazeRowHooks, MazeSpawner
from towergen.level.pattern_library import PATTERN_LIBRARY, PatternLibrary
from towergen.level.platform_spawner import PlatformSpawner
from towergen.level.row_data import GenerationState, Platform, Row, RowKind
from towergen.level.seed_manager import SeedManager
from towergen.level.slot_generator import RowPlan, SlotGenerator

logger = logging.getLogger(__name__)

# Seconds of riser travel kept generated ahead of the front
RISER_LOOKAHEAD_SECONDS = 2.0


class LevelState(Enum):
    RUNNING = 'running'
    FROZEN = 'frozen'


class LevelManager:
    def __init__(
        self,
        constraints: ReachabilityConstraints,
        config: Optional[GenerationConfig] = None,
        platform_spawner: Optional[PlatformSpawner] = None,
        maze_spawner: Optional[MazeSpawner] = None,
        slot_generator: Optional[SlotGenerator] = None,
        placement: Optional[EnemyPlacementPolicy] = None,
        pools: Optional[EnemyPools] = None,
        riser=None,
        progression: Optional[DifficultyProgression] = None,
        events: Optional[EventBus] = None,
        host=None,
        state: Optional[GenerationState] = None,
        item_placement: Optional[ItemPlacementPolicy] = None,
        item_pools: Optional[ItemPools] = None,
    ):
        self.constraints = constraints
        self.config = config or GenerationConfig()
        self.platform_spawner = platform_spawner
        self.maze_spawner = maze_spawner
        self.slot_generator = slot_generator
        self.placement = placement
        self.pools = pools
        self.item_placement = item_placement
        self.item_pools = item_pools
        self.riser = riser
        self.progression = progression or DifficultyProgression()
        self.events = events
        self.host = host
        self.state = state or GenerationState(
            last_platform_y=self.config.start_platform_y,
            last_platform_x=self.config.game_width / 2,
        )
        self.origin_y = self.state.last_platform_y
        self.level_state = LevelState.RUNNING
        self.rows: List[Row] = []
        self.manual_rows: List[Row] = []
        self._generating = False

    @classmethod
    def create(cls, constraints: ReachabilityConstraints, config: Optional[GenerationConfig] = None,
               host=None, seeds: Optional[SeedManager] = None, events: Optional[EventBus] = None,
               riser=None, library: PatternLibrary = PATTERN_LIBRARY,
               last_platform_y: Optional[float] = None) -> 'LevelManager':
        """Build a LevelManager with every collaborator wired to shared state."""
        config = config or GenerationConfig()
        seeds = seeds or SeedManager(config.world_seed)
        progression = DifficultyProgression()
        start_y = config.start_platform_y if last_platform_y is None else last_platform_y
        state = GenerationState(last_platform_y=start_y, last_platform_x=config.game_width / 2)

        platform_spawner = PlatformSpawner(constraints, config, seeds.get_random('platforms'),
                                           host=host, state=state, progression=progression)
        maze_spawner = MazeSpawner(constraints, config, library, seeds.get_random('mazes'), host=host)
        slot_generator = SlotGenerator(maze_spawner, config, progression, seeds.get_random('pacing'), library)
        pools = EnemyPools(grow_size=config.enemy_pool_grow_size)
        placement = EnemyPlacementPolicy(pools, config, progression, seeds.get_random('enemies'), host=host)
        item_pools = ItemPools(grow_size=config.item_pool_grow_size)
        item_placement = ItemPlacementPolicy(item_pools, config, progression, seeds.get_random('items'), host=host)
        return cls(constraints, config, platform_spawner, maze_spawner, slot_generator, placement,
                   pools, riser, progression, events, host, state,
                   item_placement=item_placement, item_pools=item_pools)

    # --- Helpers ---

    def _emit(self, event: str, *args) -> None:
        if self.events is not None:
            self.events.emit(event, *args)

    def _require(self, name: str):
        collaborator = getattr(self, name, None)
        if collaborator is None:
            raise SpawnerUnavailable(name)
        return collaborator

    @property
    def is_frozen(self) -> bool:
        return self.level_state == LevelState.FROZEN

    @property
    def last_row(self) -> Row:
        """Most recent generated row, or a stand-in for the start platform."""
        if self.rows:
            return self.rows[-1]
        anchor = Platform(x=self.state.last_platform_x, y=self.state.last_platform_y,
                          width=self.config.platform_width)
        return Row(y=anchor.y, kind=RowKind.PLATFORM, platforms=[anchor])

    @property
    def height_climbed(self) -> float:
        return self.origin_y - self.state.last_platform_y

    # --- State machine ---

    def freeze(self) -> None:
        if self.level_state == LevelState.FROZEN:
            return
        self.level_state = LevelState.FROZEN
        logger.info("Level generation frozen at y=%.1f", self.state.last_platform_y)
        self._emit(Events.GENERATION_FROZEN, self.state.last_platform_y)

    def unfreeze(self) -> None:
        if self.level_state == LevelState.RUNNING:
            return
        self.level_state = LevelState.RUNNING
        logger.info("Level generation resumed at y=%.1f", self.state.last_platform_y)
        self._emit(Events.GENERATION_RESUMED, self.state.last_platform_y)

    # --- Generation ---

    def spawn_start_platform(self) -> Optional[Row]:
        """Materialize the floor the player starts on and use it as the first anchor."""
        try:
            spawner = self._require('platform_spawner')
        except SpawnerUnavailable as exc:
            logger.warning("Start platform skipped: %s", exc)
            return None
        row = spawner.spawn(self.state.last_platform_x, self.state.last_platform_y,
                            self.config.game_width - 2 * self.config.wall_width, False, 0)
        self.rows.append(row)
        return row

    def generate_next_row(self) -> Optional[Row]:
        """
        Produce the next row above the current frontier.

        Returns:
            The new Row, or None when frozen, suspended, or a collaborator is missing
        """
        if self.level_state == LevelState.FROZEN or not self.state.generation_enabled:
            return None
        if self._generating:
            logger.warning("generate_next_row called re-entrantly; ignored")
            return None

        self._generating = True
        committed_before = self.state.rows_generated
        below = self.last_row
        try:
            plan = self._require('slot_generator').next_row_type(self.state)
            if plan is None:
                return None
            if plan.kind == RowKind.MAZE:
                row = self._generate_maze_row(plan)
            else:
                row = self._generate_platform_row()
            if row is not None:
                self._record(row, already_committed=self.state.rows_generated != committed_before, below=below)
            return row
        except SpawnerUnavailable as exc:
            logger.warning("Row generation skipped: %s", exc)
            return None
        finally:
            self._generating = False

    def _generate_platform_row(self) -> Row:
        spawner = self._require('platform_spawner')
        return spawner.spawn_row(self.last_row, self.state.difficulty_tier)

    def _generate_maze_row(self, plan: RowPlan) -> Optional[Row]:
        maze = self._require('maze_spawner')
        if not plan.resume:
            # Entering a maze: a wide platform first, the maze rows on later steps
            safety = self._spawn_safety_platform()
            if maze.begin(plan.pattern_ref, plan.mirrored, anchor=safety):
                self._emit(Events.MAZE_STARTED, plan.pattern_ref, plan.mirrored)
            return safety

        progress = maze.progress
        y = self.state.last_platform_y - maze.row_pitch
        rows = maze.spawn_maze_row_from_config(y, progress.pattern, plan.mirrored, True)
        if maze.progress is None:
            self._emit(Events.MAZE_FINISHED, plan.pattern_ref)
        return rows[0] if rows else None

    def _spawn_safety_platform(self) -> Row:
        spawner = self._require('platform_spawner')
        dy = (self.constraints.dy_safe.min + self.constraints.dy_safe.max) / 2
        row = spawner.spawn(self.config.game_width / 2, self.state.last_platform_y - dy,
                            self.config.maze_safety_platform_width, False, 0)
        for platform in row.platforms:
            platform.role = 'safety'
        return row

    def _record(self, row: Row, already_committed: bool = False, below: Optional[Row] = None) -> None:
        if not already_committed:
            self.state.commit_row(row)
        self.rows.append(row)

        self.state.max_height = max(self.state.max_height, self.height_climbed)
        tier = self.progression.get_tier(self.state.max_height)
        if tier.index > self.state.difficulty_tier:
            logger.info("Difficulty tier %d (%s) at height %.0f", tier.index, tier.name, self.state.max_height)
            self.state.difficulty_tier = tier.index
            if self.riser is not None:
                self.riser.set_base_speed(tier.riser_speed)

        if self.placement is not None:
            hazard = self.riser.hazard_front if self.riser is not None else None
            enemy = self.placement.place_if_eligible(row, hazard, self.state.difficulty_tier)
            if enemy is not None:
                self._emit(Events.ENEMY_SPAWNED, enemy, row)

        if self.item_placement is not None:
            items = self.item_placement.place_on_row(row, below, self.state.elapsed, self.state.difficulty_tier)
            for item in items:
                self._emit(Events.ITEM_SPAWNED, item, row)

        self._refresh_riser_ceiling()
        logger.debug("Row %d (%s) recorded at y=%.1f", row.row_id, row.kind.value, row.y)
        self._emit(Events.ROW_GENERATED, row)

    def _refresh_riser_ceiling(self) -> None:
        if self.riser is not None:
            self.riser.set_ceiling(self.state.last_platform_y + self.constraints.max_jump_height)

    # --- Direct pass-throughs ---

    def spawn_platform(self, x, y, width, is_moving=False, move_range=0):
        """Explicit platform with no pacing; delegates straight to the platform spawner."""
        try:
            spawner = self._require('platform_spawner')
        except SpawnerUnavailable as exc:
            logger.warning("spawn_platform ignored: %s", exc)
            return None
        row = spawner.spawn(x, y, width, is_moving, move_range)
        if isinstance(row, Row):
            self.manual_rows.append(row)
        return row

    def spawn_maze_row_from_config(self, start_y, config, mirrored=False, partial=False, *hooks,
                                   options: Optional[MazeRowHooks] = None):
        """
        Delegate to the maze spawner, always forwarding all five hook slots.

        Hooks may be given positionally or as a MazeRowHooks via options.
        """
        if hooks and options is not None:
            raise TypeError("pass maze row hooks positionally or via options, not both")
        values = options if options is not None else MazeRowHooks.from_positional(*hooks)
        try:
            spawner = self._require('maze_spawner')
        except SpawnerUnavailable as exc:
            logger.warning("spawn_maze_row_from_config ignored: %s", exc)
            return []
        rows = spawner.spawn_maze_row_from_config(start_y, config, mirrored, partial, *values.as_positional())
        if isinstance(rows, list):
            self.manual_rows.extend(r for r in rows if isinstance(r, Row))
        return rows

    def spawn_pattern(self, start_y: float, pattern) -> List[Row]:
        """Playground entry point: materialize a whole pattern, no pacing or enemies."""
        try:
            spawner = self._require('maze_spawner')
        except SpawnerUnavailable as exc:
            logger.warning("spawn_pattern ignored: %s", exc)
            return []
        rows = spawner.spawn_pattern(start_y, pattern)
        self.manual_rows.extend(rows)
        return rows

    # --- Per-tick work ---

    def generation_lookahead(self) -> float:
        lookahead = self.config.spawn_buffer
        if self.riser is not None and self.riser.enabled:
            lookahead += self.riser.hazard_front.speed * RISER_LOOKAHEAD_SECONDS
        return lookahead

    def update(self, player_y: float, dt: float = 0.0) -> List[Row]:
        """
        Per-frame hook: generate ahead of the player, retire rows behind.

        Returns:
            Rows generated during this call
        """
        self.state.elapsed += dt
        generated = []
        if not self.is_frozen:
            lookahead = self.generation_lookahead()
            for _ in range(self.config.max_rows_per_update):
                if player_y - lookahead >= self.state.last_platform_y:
                    break
                row = self.generate_next_row()
                if row is None:
                    break
                generated.append(row)
        self.update_entities(dt)
        self.retire_rows(player_y)
        return generated

    def update_entities(self, dt: float) -> None:
        """Moving platforms keep moving even while generation is frozen."""
        for row in self.rows + self.manual_rows:
            for platform in row.platforms:
                platform.advance(dt)

    def retire_rows(self, player_y: float) -> List[Row]:
        """Drop rows that are cleanup_distance below the player and recycle their enemies and items."""
        limit = player_y + self.config.cleanup_distance
        frontier = self.rows[-1] if self.rows else None
        retired = [r for r in self.rows if r.y > limit and r is not frontier]
        retired += [r for r in self.manual_rows if r.y > limit]
        if not retired:
            return []

        retired_ids = {r.row_id for r in retired}
        self.rows = [r for r in self.rows if r.row_id not in retired_ids]
        self.manual_rows = [r for r in self.manual_rows if r.row_id not in retired_ids]
        for row in retired:
            self._release_row(row)
            self._emit(Events.ROW_RETIRED, row)
        if self.platform_spawner is not None:
            self.platform_spawner.validator.cleanup(limit)
        logger.debug("Retired %d rows below y=%.1f", len(retired), limit)
        return retired

    def _release_row(self, row: Row) -> None:
        for enemy in row.enemies:
            if self.host is not None and enemy.handle is not None:
                self.host.release_visual(enemy.handle)
            if self.pools is not None:
                self.pools.release(enemy)
        row.enemies = []
        for item in row.items:
            self._release_item(item)
        row.items = []
        if self.host is not None:
            for handle in row.visuals:
                self.host.release_visual(handle)
        row.visuals = []

    def active_enemies(self) -> List[Any]:
        return [enemy for row in self.rows for enemy in row.enemies]

    def active_items(self) -> List[Item]:
        return [item for row in self.rows for item in row.items]

    def collect_item(self, item: Item) -> bool:
        """Take a picked-up item off its row and back to its pool."""
        for row in self.rows:
            if item in row.items:
                row.items.remove(item)
                self._release_item(item)
                return True
        return False

    def _release_item(self, item: Item) -> None:
        if self.host is not None and item.handle is not None:
            self.host.release_visual(item.handle)
        if self.item_pools is not None:
            self.item_pools.release(item)
