"""
Item pools - reusable coin and powerup records

Same contract as the enemy pools: grow on demand, never shrink, and take
items back when their row retires or the player collects them.
"""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Dict, List, Optional

import pygame

logger = logging.getLogger(__name__)

ITEM_SIZE = 32


class ItemType(str, Enum):
    COIN = 'coin'
    POWERUP = 'powerup'


@dataclass(eq=False)
class Item:
    item_type: ItemType
    x: float = 0.0
    y: float = 0.0
    row_id: Optional[int] = None
    active: bool = False
    handle: object = None

    @property
    def rect(self) -> pygame.Rect:
        half = ITEM_SIZE // 2
        return pygame.Rect(int(self.x) - half, int(self.y) - half, ITEM_SIZE, ITEM_SIZE)


class ItemPool:
    def __init__(self, item_type: ItemType, grow_size: int = 8, max_size: Optional[int] = None):
        self.item_type = item_type
        self.grow_size = max(1, grow_size)
        self.max_size = max_size
        self._free: List[Item] = []
        self._active: List[Item] = []
        self.stats = {'created': 0, 'spawned': 0, 'despawned': 0, 'max_active': 0}

    def grow(self, count: int) -> int:
        if self.max_size is not None:
            count = min(count, self.max_size - self.total)
        for _ in range(max(0, count)):
            self._free.append(Item(self.item_type))
            self.stats['created'] += 1
        return max(0, count)

    @property
    def total(self) -> int:
        return len(self._free) + len(self._active)

    @property
    def active(self) -> List[Item]:
        return list(self._active)

    def acquire(self, x: float, y: float, row_id: Optional[int] = None) -> Optional[Item]:
        if not self._free and self.grow(self.grow_size) == 0:
            logger.warning("Item pool '%s' exhausted at %d", self.item_type.value, self.total)
            return None
        item = self._free.pop()
        item.x, item.y, item.row_id = x, y, row_id
        item.active = True
        self._active.append(item)
        self.stats['spawned'] += 1
        self.stats['max_active'] = max(self.stats['max_active'], len(self._active))
        return item

    def release(self, item: Item) -> bool:
        if item not in self._active:
            return False
        self._active.remove(item)
        item.active = False
        item.row_id = None
        item.handle = None
        self._free.append(item)
        self.stats['despawned'] += 1
        return True


class ItemPools:
    """One ItemPool per ItemType."""

    def __init__(self, grow_size: int = 8, max_size: Optional[int] = None):
        self.pools: Dict[ItemType, ItemPool] = {
            t: ItemPool(t, grow_size=grow_size, max_size=max_size) for t in ItemType
        }

    def __getitem__(self, item_type) -> ItemPool:
        return self.pools[ItemType(item_type)]

    def release(self, item: Item) -> bool:
        return self.pools[item.item_type].release(item)

    def active_count(self) -> int:
        return sum(len(pool.active) for pool in self.pools.values())
