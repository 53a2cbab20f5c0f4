import pytest

from towergen.core.errors import InvalidPhysicsConstants
from towergen.core.event_bus import Events
from towergen.host.capabilities import HeadlessHost
from towergen.level.level_manager import LevelState
from towergen.level.slot_generator import SlotState
from towergen.playground import PlaygroundRules, build_handlers, dispatch
from towergen.playground.handlers import MAZE_SPAWN_OFFSET, spawn_maze
from towergen.session import GameSession


class DictPhysicsHost(HeadlessHost):
    def __init__(self, physics):
        super().__init__()
        self.raw_physics = physics

    def physics_constants(self):
        return self.raw_physics


@pytest.fixture
def session(host, config):
    session = GameSession(host, config)
    yield session
    session.close()


@pytest.fixture
def handlers(session):
    return build_handlers(session)


class TestSession:
    def test_start_platform_and_first_update(self, session, config):
        assert len(session.level.rows) == 1
        assert session.level.rows[0].y == config.start_platform_y
        rows = session.update(1 / 60)
        assert rows
        assert session.riser.y < config.start_platform_y + config.riser_start_offset

    def test_physics_from_dict(self, config):
        session = GameSession(DictPhysicsHost({'gravity': 1200, 'jump_velocity': -600, 'max_speed_x': 276}), config)
        assert session.constraints.max_jump_height == pytest.approx(150)

    def test_invalid_physics_rejected(self, config):
        with pytest.raises(InvalidPhysicsConstants):
            GameSession(DictPhysicsHost({'gravity': 0, 'jump_velocity': -600, 'max_speed_x': 276}), config)

    def test_player_caught_once(self, session, host):
        caught = []
        session.events.on(Events.PLAYER_CAUGHT, lambda player_y, riser_y: caught.append(player_y))
        host.player_y = session.riser.y + 50
        session.update(1 / 60)
        session.update(1 / 60)
        assert session.game_over
        assert caught == [host.player_y]
        assert session.riser.rising_triggered

    def test_close_stops_updates(self, session):
        session.close()
        assert session.events.closed
        assert session.update(1 / 60) == []


class TestPlaygroundRules:
    def test_start_rules(self, session):
        toggled = []
        session.events.on(Events.RISER_TOGGLED, toggled.append)
        session.update(1 / 60)
        PlaygroundRules.apply_start_rules(session)

        assert session.level.level_state == LevelState.FROZEN
        assert session.level.slot_generator.state == SlotState.SUSPENDED
        assert not session.riser.enabled
        assert toggled == [False]

        frontier = session.level.state.last_platform_y
        riser_y = session.riser.y
        session.host.player_y = frontier - 2000
        assert session.update(0.5) == []
        assert session.level.state.last_platform_y == frontier
        assert session.riser.y == riser_y

    def test_moving_platforms_keep_moving(self, session, handlers):
        PlaygroundRules.apply_start_rules(session)
        row = dispatch(handlers, 'platform', 1)
        platform = row.platforms[0]
        assert platform.is_moving
        start = platform.x
        session.update(0.5)
        assert platform.x != start

    def test_release_resumes_generation(self, session):
        PlaygroundRules.apply_start_rules(session)
        PlaygroundRules.release(session)
        assert session.level.level_state == LevelState.RUNNING
        assert session.level.slot_generator.is_active
        assert session.riser.enabled
        assert session.update(1 / 60)


class TestHandlers:
    def test_registry_kinds(self, handlers, session):
        assert set(handlers) == {'maze', 'platform', 'enemy', 'riser'}
        assert len(handlers['maze'].items) == len(session.library)
        assert handlers['maze'].items[0].label == "Maze 1"

    def test_spawn_maze_above_player(self, session, handlers, host):
        PlaygroundRules.apply_start_rules(session)
        rows = dispatch(handlers, 'maze', 0)
        assert len(rows) == session.library.get_pattern(0).row_count
        assert rows[0].y == host.player_y - MAZE_SPAWN_OFFSET
        assert all(r in session.level.manual_rows for r in rows)
        assert not any(r.enemies for r in rows)

    def test_spawn_maze_out_of_range(self, session, handlers, caplog):
        assert dispatch(handlers, 'maze', len(session.library)) is None
        assert spawn_maze(session, 999) == []
        assert session.level.manual_rows == []

    def test_spawn_maze_without_spawner(self, session, caplog):
        session.level.maze_spawner = None
        assert spawn_maze(session, 0) == []
        assert "Maze spawner not available" in caplog.text

    def test_unknown_kind(self, handlers, caplog):
        assert dispatch(handlers, 'coins', 0) is None
        assert "No dev handler" in caplog.text

    def test_spawn_enemy_on_row_above(self, session, handlers, host):
        session.update(1 / 60)
        enemy = dispatch(handlers, 'enemy', 0)
        assert enemy is not None
        assert enemy.y < host.player_y
        assert enemy in session.level.active_enemies()
        assert enemy in host.enemies

    def test_riser_items(self, session, handlers, host):
        assert dispatch(handlers, 'riser', 0) is False
        assert dispatch(handlers, 'riser', 0) is True
        assert dispatch(handlers, 'riser', 1) == host.player_y + session.config.riser_start_offset
