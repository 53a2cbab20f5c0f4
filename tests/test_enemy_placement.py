import random

import pytest

from towergen.entities.enemy_placement import EnemyPlacementPolicy
from towergen.entities.enemy_pool import Enemy, EnemyPool, EnemyPools, EnemyType
from towergen.level.difficulty import DifficultyProgression, DifficultyTier
from towergen.level.generation_config import GenerationConfig
from towergen.level.row_data import RowKind
from towergen.systems.riser_manager import HazardFront


@pytest.fixture
def pools():
    return EnemyPools(grow_size=2)


@pytest.fixture
def policy(pools, config, enemy_progression, host):
    return EnemyPlacementPolicy(pools, config, enemy_progression, random.Random(3), host=host)


@pytest.fixture
def far_hazard():
    return HazardFront(y=10_000)


class TestEligibility:
    @pytest.mark.parametrize("seed", range(20))
    def test_narrow_row_never_gets_enemy(self, pools, config, enemy_progression, make_row, far_hazard, seed):
        """Rows narrower than the minimum width are ineligible"""
        policy = EnemyPlacementPolicy(pools, config, enemy_progression, random.Random(seed))
        row = make_row(width=config.enemy_min_platform_width - 1)
        assert policy.place_if_eligible(row, far_hazard) is None

    @pytest.mark.parametrize("gap", [-200, 0, 5, 9.9])
    def test_row_too_close_to_hazard(self, policy, config, make_row, gap):
        """Rows within ENEMY_SPAWN_SAFE_PADDING of the front (or below it) are ineligible"""
        row = make_row(y=0, width=200)
        assert policy.place_if_eligible(row, HazardFront(y=row.y + gap)) is None

    def test_moving_platform_ineligible(self, policy, make_row, far_hazard):
        assert policy.place_if_eligible(make_row(width=200, is_moving=True), far_hazard) is None

    def test_padding_wider_than_surface(self, pools, enemy_progression, make_row, far_hazard):
        config = GenerationConfig(safe_zone_padding=60)
        policy = EnemyPlacementPolicy(pools, config, enemy_progression, random.Random(0))
        assert policy.place_if_eligible(make_row(width=128), far_hazard) is None

    def test_zero_chance_tier(self, pools, config, make_row, far_hazard):
        """The tutorial tier never rolls enemies"""
        policy = EnemyPlacementPolicy(pools, config, DifficultyProgression(), random.Random(0))
        for _ in range(30):
            assert policy.place_if_eligible(make_row(width=200), far_hazard, difficulty_tier=0) is None


class TestPlacement:
    def test_enemy_inside_safe_zone(self, policy, pools, config, make_row, far_hazard, host):
        row = make_row(x=200, y=0, width=128)
        enemy = policy.place_if_eligible(row, far_hazard)
        assert enemy is not None
        assert enemy.enemy_type == EnemyType.PATROL
        platform = row.platforms[0]
        half = enemy.size / 2
        assert platform.left + config.safe_zone_padding + half <= enemy.x
        assert enemy.x <= platform.right - config.safe_zone_padding - half
        assert enemy.y == pytest.approx(platform.y - platform.height / 2)
        assert platform.left <= enemy.patrol_min_x <= enemy.patrol_max_x <= platform.right
        assert row.enemies == [enemy]
        assert host.enemies == [enemy]
        assert pools[EnemyType.PATROL].stats['spawned'] == 1

    def test_no_hazard_means_no_vertical_limit(self, policy, make_row):
        assert policy.place_if_eligible(make_row(width=200), None) is not None

    def test_maze_rows_exclude_jumpers(self, pools, config, make_row, far_hazard):
        tier = DifficultyTier(0, 0, "Jumpers", 128, 0.0, 0, 1.0, {'jumper_shooter': 1},
                              maze_allow_enemies=True, maze_enemy_chance=1.0)
        policy = EnemyPlacementPolicy(pools, config, DifficultyProgression([tier]), random.Random(0))
        assert policy.place_if_eligible(make_row(width=200, kind=RowKind.MAZE), far_hazard) is None
        assert policy.place_if_eligible(make_row(width=200), far_hazard).enemy_type == EnemyType.JUMPER_SHOOTER

    def test_type_follows_distribution(self, pools, config, make_row, far_hazard):
        tier = DifficultyTier(0, 0, "Mixed", 128, 0.0, 0, 1.0, {'patrol': 50, 'shooter': 50})
        policy = EnemyPlacementPolicy(pools, config, DifficultyProgression([tier]), random.Random(12))
        kinds = {policy.place_if_eligible(make_row(width=200), far_hazard).enemy_type for _ in range(60)}
        assert kinds == {EnemyType.PATROL, EnemyType.SHOOTER}

    def test_safety_platform_skipped(self, policy, make_row, far_hazard):
        row = make_row(width=200)
        row.platforms[0].role = 'safety'
        assert policy.place_if_eligible(row, far_hazard) is None


class TestEnemyPool:
    def test_grows_when_empty(self):
        """Acquiring from an empty pool allocates grow_size new enemies"""
        pool = EnemyPool(EnemyType.SHOOTER, grow_size=3)
        enemy = pool.acquire(10, 20, row_id=7)
        assert enemy.active and (enemy.x, enemy.y, enemy.row_id) == (10, 20, 7)
        assert pool.total == 3
        assert pool.stats['created'] == 3

    def test_release_and_reuse(self):
        pool = EnemyPool(EnemyType.PATROL, grow_size=1)
        first = pool.acquire(0, 0)
        assert pool.release(first)
        assert not first.active
        assert pool.acquire(5, 5) is first
        assert pool.stats['despawned'] == 1
        assert pool.total == 1

    def test_release_foreign_enemy(self):
        pool = EnemyPool(EnemyType.PATROL)
        assert not pool.release(Enemy(EnemyType.PATROL))

    def test_identical_enemies_released_by_identity(self):
        pool = EnemyPool(EnemyType.SPIKE, grow_size=2)
        a = pool.acquire(0, 0)
        b = pool.acquire(0, 0)
        pool.release(b)
        assert pool.active == [a]

    def test_max_size(self, caplog):
        pool = EnemyPool(EnemyType.SPIKE, grow_size=2, max_size=2)
        assert pool.acquire(0, 0) and pool.acquire(0, 0)
        assert pool.acquire(0, 0) is None
        assert pool.stats['max_active'] == 2
        assert "exhausted" in caplog.text

    def test_pools_release_all(self, pools):
        pools['patrol'].acquire(0, 0)
        pools[EnemyType.SHOOTER].acquire(0, 0)
        assert pools.active_count() == 2
        assert pools.release_all() == 2
        assert pools.active_count() == 0

    def test_rect(self):
        enemy = Enemy(EnemyType.SHOOTER, x=100, y=50)
        assert enemy.rect.size == (32, 32)
        assert enemy.rect.bottom == 50
