from towergen.core.event_bus import EventBus, Events


def test_emit_reaches_listeners_in_order():
    bus = EventBus()
    calls = []
    bus.on(Events.ROW_GENERATED, lambda row: calls.append(('a', row)))
    bus.on(Events.ROW_GENERATED, lambda row: calls.append(('b', row)))
    assert bus.emit(Events.ROW_GENERATED, 1) == 2
    assert calls == [('a', 1), ('b', 1)]


def test_emit_without_listeners():
    assert EventBus().emit(Events.MAZE_STARTED, 0, False) == 0


def test_off_removes_listener():
    bus = EventBus()
    calls = []
    bus.on(Events.ROW_RETIRED, calls.append)
    bus.off(Events.ROW_RETIRED, calls.append)
    bus.off(Events.ROW_RETIRED, calls.append)
    bus.emit(Events.ROW_RETIRED, 'row')
    assert calls == []
    assert bus.listener_count(Events.ROW_RETIRED) == 0


def test_listener_may_unsubscribe_during_emit():
    bus = EventBus()
    calls = []

    def once(value):
        calls.append(value)
        bus.off(Events.ENEMY_SPAWNED, once)

    bus.on(Events.ENEMY_SPAWNED, once)
    bus.emit(Events.ENEMY_SPAWNED, 1)
    bus.emit(Events.ENEMY_SPAWNED, 2)
    assert calls == [1]


def test_close_drops_listeners(caplog):
    bus = EventBus()
    calls = []
    bus.on(Events.PLAYER_CAUGHT, calls.append)
    bus.close()
    bus.on(Events.PLAYER_CAUGHT, calls.append)
    assert bus.emit(Events.PLAYER_CAUGHT, 0) == 0
    assert calls == []
    assert "bus is closed" in caplog.text


def test_separate_buses_are_isolated():
    first, second = EventBus(), EventBus()
    calls = []
    first.on(Events.RISER_TOGGLED, calls.append)
    second.emit(Events.RISER_TOGGLED, True)
    assert calls == []
