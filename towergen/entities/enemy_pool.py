"""
Enemy pools - reusable enemy records keyed by enemy type

Pools only ever grow. Enemies go back to their pool when their row retires
or they are defeated.
"""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Dict, List, Optional

import pygame

logger = logging.getLogger(__name__)


class EnemyType(str, Enum):
    PATROL = 'patrol'
    SHOOTER = 'shooter'
    JUMPER_SHOOTER = 'jumper_shooter'
    SPIKE = 'spike'


ENEMY_SIZES: Dict[EnemyType, int] = {
    EnemyType.PATROL: 20,
    EnemyType.SHOOTER: 32,
    EnemyType.JUMPER_SHOOTER: 32,
    EnemyType.SPIKE: 20,
}

PATROL_BOUNDS_MARGIN = 2


@dataclass(eq=False)
class Enemy:
    enemy_type: EnemyType
    x: float = 0.0
    y: float = 0.0
    patrol_min_x: float = 0.0
    patrol_max_x: float = 0.0
    row_id: Optional[int] = None
    active: bool = False
    handle: object = None

    @property
    def size(self) -> int:
        return ENEMY_SIZES[self.enemy_type]

    @property
    def rect(self) -> pygame.Rect:
        s = self.size
        return pygame.Rect(int(self.x - s / 2), int(self.y - s), s, s)


class EnemyPool:
    """Pool for one enemy type."""

    def __init__(self, enemy_type: EnemyType, initial_size: int = 0, grow_size: int = 4,
                 max_size: Optional[int] = None):
        self.enemy_type = enemy_type
        self.grow_size = max(1, grow_size)
        self.max_size = max_size
        self._free: List[Enemy] = []
        self._active: List[Enemy] = []
        self.stats = {'created': 0, 'spawned': 0, 'despawned': 0, 'max_active': 0}
        self.grow(initial_size)

    def grow(self, count: int) -> int:
        if self.max_size is not None:
            count = min(count, self.max_size - self.total)
        for _ in range(max(0, count)):
            self._free.append(Enemy(self.enemy_type))
            self.stats['created'] += 1
        return max(0, count)

    @property
    def total(self) -> int:
        return len(self._free) + len(self._active)

    @property
    def active(self) -> List[Enemy]:
        return list(self._active)

    @property
    def available(self) -> int:
        return len(self._free)

    def acquire(self, x: float, y: float, row_id: Optional[int] = None) -> Optional[Enemy]:
        """Borrow an enemy, growing the pool when empty. None once max_size is reached."""
        if not self._free and self.grow(self.grow_size) == 0:
            logger.warning("Enemy pool '%s' exhausted at %d", self.enemy_type.value, self.total)
            return None
        enemy = self._free.pop()
        enemy.x, enemy.y, enemy.row_id = x, y, row_id
        enemy.patrol_min_x = enemy.patrol_max_x = x
        enemy.active = True
        self._active.append(enemy)
        self.stats['spawned'] += 1
        self.stats['max_active'] = max(self.stats['max_active'], len(self._active))
        return enemy

    def release(self, enemy: Enemy) -> bool:
        if enemy not in self._active:
            return False
        self._active.remove(enemy)
        enemy.active = False
        enemy.row_id = None
        enemy.handle = None
        self._free.append(enemy)
        self.stats['despawned'] += 1
        return True

    def release_all(self) -> int:
        count = 0
        for enemy in list(self._active):
            count += self.release(enemy)
        return count


class EnemyPools:
    """One EnemyPool per EnemyType."""

    def __init__(self, grow_size: int = 4, max_size: Optional[int] = None):
        self.pools: Dict[EnemyType, EnemyPool] = {
            t: EnemyPool(t, grow_size=grow_size, max_size=max_size) for t in EnemyType
        }

    def __getitem__(self, enemy_type) -> EnemyPool:
        return self.pools[EnemyType(enemy_type)]

    def release(self, enemy: Enemy) -> bool:
        return self.pools[enemy.enemy_type].release(enemy)

    def release_all(self) -> int:
        return sum(pool.release_all() for pool in self.pools.values())

    def active_count(self) -> int:
        return sum(len(pool.active) for pool in self.pools.values())
