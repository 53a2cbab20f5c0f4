"""
Item Placement Policy - scatters coins and powerups through the climb

Platform rows get items in the air between them and the row below. Spots
must clear both rows' platforms by half an item and stay item_spacing away
from recent items. Maze rows get a single item centred over their opening.

Powerups are rationed: one needs powerup_min_distance of climb and
powerup_cooldown seconds since the last one, then the tier's chance roll.
Spots that miss the powerup fall back to the coin roll. Maze openings
always get a coin when both rolls miss.
"""

import logging
import math
import random
from typing import List, Optional, Tuple

from towergen.entities.item_pool import ITEM_SIZE, Item, ItemPools, ItemType
from towergen.level.difficulty import DifficultyProgression
from towergen.level.generation_config import GenerationConfig
from towergen.level.row_data import Row

logger = logging.getLogger(__name__)

ITEM_HALF = ITEM_SIZE / 2
# Extra lift above a maze block top
MAZE_ITEM_LIFT = 16
RECENT_ITEMS_KEPT = 16


class ItemPlacementPolicy:
    def __init__(self, pools: ItemPools, config: Optional[GenerationConfig] = None,
                 progression: Optional[DifficultyProgression] = None,
                 rng: Optional[random.Random] = None, host=None):
        self.pools = pools
        self.config = config or GenerationConfig()
        self.progression = progression or DifficultyProgression()
        self.rng = rng or random.Random()
        self.host = host
        self.last_powerup_y: Optional[float] = None
        self.last_powerup_time: Optional[float] = None
        self.recent: List[Tuple[float, float]] = []

    def x_bounds(self) -> Tuple[float, float]:
        cfg = self.config
        inset = cfg.wall_width + cfg.wall_margin + ITEM_HALF
        return inset, cfg.game_width - inset

    def powerup_ready(self, y: float, elapsed: float) -> bool:
        cfg = self.config
        if self.last_powerup_y is not None and self.last_powerup_y - y < cfg.powerup_min_distance:
            return False
        if self.last_powerup_time is not None and elapsed - self.last_powerup_time < cfg.powerup_cooldown:
            return False
        return True

    def _pick_type(self, y: float, elapsed: float, powerup_chance: float) -> Optional[ItemType]:
        if self.powerup_ready(y, elapsed) and self.rng.random() < powerup_chance:
            return ItemType.POWERUP
        if self.rng.random() < self.config.coin_chance:
            return ItemType.COIN
        return None

    def _too_close(self, x: float, y: float) -> bool:
        spacing = self.config.item_spacing
        return any(math.hypot(x - ox, y - oy) < spacing for ox, oy in self.recent)

    @staticmethod
    def _collides(x: float, y: float, rows: List[Row]) -> bool:
        for row in rows:
            for p in row.platforms:
                half_h = p.height / 2
                if (p.left - ITEM_HALF <= x <= p.right + ITEM_HALF
                        and p.y - half_h - ITEM_HALF <= y <= p.y + half_h + ITEM_HALF):
                    return True
        return False

    def _spawn(self, item_type: ItemType, x: float, y: float, row: Row, elapsed: float) -> Optional[Item]:
        item = self.pools[item_type].acquire(x, y, row.row_id)
        if item is None:
            return None
        if item_type == ItemType.POWERUP:
            self.last_powerup_y, self.last_powerup_time = y, elapsed
            logger.info("Powerup placed at x=%.1f y=%.1f", x, y)
        if self.host is not None:
            item.handle = self.host.materialize_item(item)
        self.recent.append((x, y))
        del self.recent[:-RECENT_ITEMS_KEPT]
        row.items.append(item)
        return item

    def maze_spot(self, row: Row) -> Optional[Tuple[float, float]]:
        """Above the row's opening, pulled clear of the walls."""
        if row.gap_x is None or not row.platforms:
            return None
        lo, hi = self.x_bounds()
        x = max(lo, min(hi, row.gap_x))
        top = min(p.y - p.height / 2 for p in row.platforms)
        return x, top - ITEM_HALF - MAZE_ITEM_LIFT

    def place_on_row(self, row: Row, below: Optional[Row] = None, elapsed: float = 0.0,
                     difficulty_tier: int = 0) -> List[Item]:
        """
        Scatter items for a freshly generated row.

        Args:
            row: Row that was just generated
            below: The row under it; platform rows get no air items without one
            elapsed: Session seconds, for the powerup cooldown
            difficulty_tier: Tier index whose powerup chance applies

        Returns:
            Items placed, also appended to row.items
        """
        if not self.config.items_enabled:
            return []
        chance = self.progression.tier_at(difficulty_tier).powerup_chance

        if row.is_maze:
            spot = self.maze_spot(row)
            if spot is None:
                return []
            item_type = self._pick_type(spot[1], elapsed, chance) or ItemType.COIN
            item = self._spawn(item_type, spot[0], spot[1], row, elapsed)
            return [item] if item is not None else []

        if below is None:
            return []
        top, bottom = row.y + ITEM_HALF, below.y - ITEM_HALF
        if top > bottom:
            return []
        lo, hi = self.x_bounds()
        placed = []
        for _ in range(self.config.item_spot_attempts):
            x, y = self.rng.uniform(lo, hi), self.rng.uniform(top, bottom)
            if self._too_close(x, y) or self._collides(x, y, [row, below]):
                continue
            item_type = self._pick_type(y, elapsed, chance)
            if item_type is None:
                continue
            item = self._spawn(item_type, x, y, row, elapsed)
            if item is not None:
                placed.append(item)
        if placed:
            logger.debug("Placed %d items for row %d", len(placed), row.row_id)
        return placed

    def reset(self) -> None:
        self.last_powerup_y = self.last_powerup_time = None
        self.recent = []
