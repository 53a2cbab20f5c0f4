import logging
import random

import pytest

from towergen.level.generation_config import GenerationConfig
from towergen.level import platform_spawner
from towergen.level.platform_spawner import PlatformSpawner
from towergen.level.row_data import GenerationState

EPS = 1e-6


def climb(spawner, start_row, tier, count):
    rows = [start_row]
    for _ in range(count):
        rows.append(spawner.spawn_row(rows[-1], tier))
    return rows


@pytest.fixture
def state():
    return GenerationState(last_platform_y=560, last_platform_x=200)


class TestReachabilityInvariant:
    @pytest.mark.parametrize("tier", range(9))
    def test_every_gap_inside_tier_band(self, constraints, config, state, make_row, tier):
        """Consecutive rows stay in the safe band below the threshold and the hard envelope above it"""
        spawner = PlatformSpawner(constraints, config, random.Random(tier), state=state)
        rows = climb(spawner, make_row(x=200, y=560), tier, 150)
        c = constraints
        for prev, row in zip(rows, rows[1:]):
            dy = prev.y - row.y
            dx = row.reference_x - prev.reference_x
            assert -c.dy_hard.max - EPS <= dy <= c.dy_hard.max + EPS
            assert abs(dx) <= c.dx_hard + EPS
            if tier < config.hard_band_tier:
                assert c.dy_safe.min - EPS <= dy <= c.dy_safe.max + EPS
                assert abs(dx) <= c.dx_safe + EPS
            else:
                assert c.dy_safe.min - EPS <= dy <= c.dy_hard.max + EPS

    def test_high_tier_reaches_hard_band(self, constraints, config, state, make_row):
        """Top tiers sample from the hard band at least sometimes"""
        spawner = PlatformSpawner(constraints, config, random.Random(8), state=state)
        rows = climb(spawner, make_row(x=200, y=560), 8, 100)
        gaps = [prev.y - row.y for prev, row in zip(rows, rows[1:])]
        assert any(g > constraints.dy_safe.max for g in gaps)

    def test_low_tier_never_hard(self, constraints, config):
        spawner = PlatformSpawner(constraints, config, random.Random(0))
        assert spawner.hard_band_chance(0) == 0.0
        assert spawner.hard_band_chance(config.hard_band_tier - 1) == 0.0
        assert 0 < spawner.hard_band_chance(config.hard_band_tier) <= spawner.hard_band_chance(8) <= 0.8

    def test_platforms_stay_between_walls(self, constraints, config, state, make_row):
        spawner = PlatformSpawner(constraints, config, random.Random(11), state=state)
        for row in climb(spawner, make_row(x=200, y=560), 5, 80)[1:]:
            p = row.platforms[0]
            assert p.left >= config.wall_width + config.wall_margin - EPS
            assert p.right <= config.game_width - config.wall_width - config.wall_margin + EPS


class TestTierScaling:
    def test_width_shrinks_with_tier(self, constraints, config, make_row):
        low = PlatformSpawner(constraints, config, random.Random(1)).spawn_row(make_row(y=560), 0)
        high = PlatformSpawner(constraints, config, random.Random(1)).spawn_row(make_row(y=560), 8)
        assert high.platforms[0].width < low.platforms[0].width

    def test_tutorial_tier_has_no_moving_platforms(self, constraints, config, state, make_row):
        spawner = PlatformSpawner(constraints, config, random.Random(2), state=state)
        rows = climb(spawner, make_row(y=560), 0, 60)
        assert not any(p.is_moving for r in rows for p in r.platforms)

    def test_moving_sweep_stays_reachable(self, constraints, config, state, make_row):
        """A moving platform's whole sweep stays inside the horizontal envelope"""
        spawner = PlatformSpawner(constraints, config, random.Random(4), state=state)
        rows = climb(spawner, make_row(y=560), 8, 120)
        moving = 0
        for prev, row in zip(rows, rows[1:]):
            p = row.platforms[0]
            if p.is_moving:
                moving += 1
                assert abs(p.x - prev.reference_x) + p.move_range / 2 <= constraints.dx_hard + EPS
                assert p.move_speed > 0
        assert moving > 0


class TestStateAndHost:
    def test_spawn_row_advances_state(self, constraints, config, state, make_row, host):
        spawner = PlatformSpawner(constraints, config, random.Random(0), host=host, state=state)
        row = spawner.spawn_row(make_row(y=560), 0)
        assert state.last_platform_y == row.y
        assert state.rows_generated == 1
        assert host.platforms == row.platforms
        assert len(row.visuals) == 1

    def test_spawn_row_without_state(self, constraints, config, make_row):
        """A detached spawner still returns rows"""
        row = PlatformSpawner(constraints, config, random.Random(0)).spawn_row(make_row(y=0), 0)
        assert row.y < 0

    def test_explicit_spawn(self, constraints, config, host, state):
        """spawn() places exactly what it is asked and leaves generation state alone"""
        spawner = PlatformSpawner(constraints, config, random.Random(0), host=host, state=state)
        row = spawner.spawn(10, 20, 100, True, 50)
        p = row.platforms[0]
        assert (p.x, p.y, p.width, p.is_moving, p.move_range) == (10, 20, 100, True, 50)
        assert state.last_platform_y == 560
        assert host.platforms == [p]

    def test_crowded_candidates_fall_back_to_safe_band(self, constraints, make_row, caplog):
        """When every sample collides, the row is clamped into the safe band"""
        caplog.set_level(logging.WARNING, logger="towergen.level.platform_spawner")
        spawner = PlatformSpawner(constraints, GenerationConfig(), random.Random(0))
        spawner.validator.min_vertical_spacing = 10_000
        spawner.spawn(200, 0, 128)
        row = spawner.spawn_row(make_row(y=0), 0)
        dy = 0 - row.y
        assert constraints.dy_safe.contains(dy)
        assert "overlap with active platforms accepted" in caplog.text

    @pytest.mark.parametrize("seed", range(30))
    @pytest.mark.parametrize("blocker_y", [-20, -40])
    def test_crowded_candidate_stays_in_safe_band(self, constraints, make_row, seed, blocker_y):
        """Pushing a crowded tier-0 candidate up never leaves the safe band"""
        spawner = PlatformSpawner(constraints, GenerationConfig(), random.Random(seed))
        spawner.spawn(200, blocker_y, 128)
        row = spawner.spawn_row(make_row(y=0), 0)
        dy = 0 - row.y
        assert constraints.dy_safe.min - EPS <= dy <= constraints.dy_safe.max + EPS

    def test_fallback_finds_legal_slot_in_safe_band(self, constraints, make_row, monkeypatch):
        """With no sampled attempts left the fallback still clears active platforms when it can"""
        monkeypatch.setattr(platform_spawner, 'MAX_PLACEMENT_ATTEMPTS', 0)
        spawner = PlatformSpawner(constraints, GenerationConfig(), random.Random(0))
        spawner.spawn(200, -20, 128)
        row = spawner.spawn_row(make_row(y=0), 0)
        dy = 0 - row.y
        assert constraints.dy_safe.contains(dy)
        assert abs(row.y - (-20)) >= spawner.validator.min_vertical_spacing - EPS
