import random

import pytest

from towergen.core.movement import MovementPhysics
from towergen.host.capabilities import HeadlessHost
from towergen.level.difficulty import DifficultyProgression, DifficultyTier
from towergen.level.generation_config import GenerationConfig
from towergen.level.row_data import Platform, Row, RowKind


@pytest.fixture
def physics():
    return MovementPhysics(gravity=1200, jump_velocity=-600, max_speed_x=276)


@pytest.fixture
def constraints(physics):
    return physics.constraints


@pytest.fixture
def config():
    return GenerationConfig(world_seed=1234)


@pytest.fixture
def host():
    return HeadlessHost(player_x=200, player_y=560)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def enemy_tier():
    """Single tier that always rolls a patrol enemy and always allows mazes."""
    return DifficultyTier(0, 0, "Test", 128, 0.0, 0, 1.0, {'patrol': 1},
                          maze_enabled=True, maze_chance=1.0, maze_groups=('easy',),
                          maze_allow_enemies=True, maze_enemy_chance=1.0)


@pytest.fixture
def enemy_progression(enemy_tier):
    return DifficultyProgression([enemy_tier])


@pytest.fixture
def make_row():
    """Factory for single-platform rows."""
    def _make(x=200, y=0, width=128, is_moving=False, kind=RowKind.PLATFORM):
        return Row(y=y, kind=kind, platforms=[Platform(x=x, y=y, width=width, is_moving=is_moving)])
    return _make
