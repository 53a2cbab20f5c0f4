import pytest

from towergen.systems.riser_manager import CATCH_UP_NEAR_FACTOR, RISER_TYPES, RiserManager


@pytest.fixture
def riser():
    return RiserManager(start_y=1000, riser_type='lava')


class TestTick:
    def test_rises_toward_player(self, riser):
        """y decreases by roughly speed * dt"""
        y = riser.tick(0.5, player_y=900)
        assert y < 1000
        assert 1000 - y == pytest.approx(riser.hazard_front.speed * 0.5)

    def test_disabled_does_not_move(self, riser):
        riser.set_enabled(False)
        assert riser.tick(1.0, player_y=0) == 1000

    def test_toggle_keeps_position(self, riser):
        """set_enabled never resets accumulated travel"""
        riser.tick(1.0)
        y = riser.y
        riser.set_enabled(False)
        riser.set_enabled(True)
        assert riser.y == y
        assert riser.tick(1.0) < y

    def test_ceiling_caps_travel(self, riser):
        riser.set_ceiling(990)
        for _ in range(20):
            riser.tick(1.0)
        assert riser.y == 990
        riser.set_ceiling(None)
        assert riser.tick(1.0) < 990

    def test_zero_dt(self, riser):
        assert riser.tick(0) == 1000


class TestSpeed:
    def test_catch_up_targets(self, riser):
        lava = RISER_TYPES['lava']
        assert riser.target_speed(100) == lava.max_speed
        assert riser.target_speed(300) == pytest.approx(lava.max_speed * CATCH_UP_NEAR_FACTOR)
        assert riser.target_speed(900) == riser.base_speed
        assert riser.target_speed(None) == riser.base_speed

    def test_speed_eases_toward_target(self, riser):
        start = riser.hazard_front.speed
        riser.tick(1 / 60, player_y=-5000)
        assert start < riser.hazard_front.speed < RISER_TYPES['lava'].max_speed

    def test_tier_speed_scaled_by_type(self):
        acid = RiserManager(0, 'acid')
        acid.set_base_speed(90)
        assert acid.base_speed == pytest.approx(90 * 60 / 54)

    def test_unknown_type_falls_back(self, caplog):
        riser = RiserManager(0, 'plasma')
        assert riser.riser_type.name == 'lava'
        assert "Unknown riser type" in caplog.text

    def test_trigger_rising(self, riser):
        riser.set_enabled(False)
        riser.set_ceiling(999)
        riser.trigger_rising()
        assert riser.enabled
        assert riser.ceiling_y is None
        assert riser.target_speed(999) == RISER_TYPES['lava'].max_speed


class TestCaught:
    def test_caught_below_front(self, riser):
        assert riser.is_player_caught(1000)
        assert riser.is_player_caught(1200)
        assert not riser.is_player_caught(900)

    def test_disabled_riser_never_catches(self, riser):
        riser.set_enabled(False)
        assert not riser.is_player_caught(5000)
