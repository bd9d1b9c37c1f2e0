"""Tests for the event bus."""

from forest_dash.core.events import Event, EventBus, EventType, input_event, keypad_event


def test_subscribe_and_emit(bus):
    received = []
    bus.subscribe(EventType.SCORE_CHANGED, received.append)

    bus.emit(Event(EventType.SCORE_CHANGED, data={"score": 1}))
    bus.emit(Event(EventType.GAME_WON))

    assert [e.data for e in received] == [{"score": 1}]


def test_unsubscribe(bus):
    received = []
    unsubscribe = bus.subscribe(EventType.GAME_LOST, received.append)

    unsubscribe()
    bus.emit(Event(EventType.GAME_LOST))

    assert received == []


def test_handler_errors_are_contained(bus, caplog):
    received = []

    def broken(event):
        raise ValueError("bad handler")

    bus.subscribe(EventType.GAME_WON, broken)
    bus.subscribe(EventType.GAME_WON, received.append)

    bus.emit(Event(EventType.GAME_WON))

    assert len(received) == 1
    assert "bad handler" in caplog.text


def test_history(bus):
    for i in range(3):
        bus.emit(Event(EventType.SCORE_CHANGED, data={"score": i}))
    bus.emit(Event(EventType.GAME_WON))

    scores = bus.get_history(EventType.SCORE_CHANGED, limit=2)
    assert [e.data["score"] for e in scores] == [1, 2]

    bus.clear_history()
    assert bus.get_history() == []


def test_helpers():
    pressed = input_event("jump")
    released = input_event("jump", pressed=False)
    key = keypad_event("7")

    assert pressed.type is EventType.INPUT_PRESSED
    assert released.type is EventType.INPUT_RELEASED
    assert pressed.data == {"action": "jump"}
    assert key.type is EventType.KEYPAD_INPUT
    assert key.data == {"key": "7"}


async def test_queue_runs_both_kinds(bus):
    received = []

    async def async_handler(event):
        received.append(("async", event.type))

    bus.subscribe(EventType.GAME_WON, async_handler)
    bus.subscribe(EventType.GAME_WON, lambda e: received.append(("sync", e.type)))

    bus.queue_event(Event(EventType.GAME_WON))
    await bus.process_queue()

    assert sorted(received) == [("async", EventType.GAME_WON), ("sync", EventType.GAME_WON)]


async def test_sync_emit_skips_async_handlers(bus):
    received = []

    async def async_handler(event):
        received.append(event)

    bus.subscribe(EventType.GAME_WON, async_handler)
    bus.emit(Event(EventType.GAME_WON))

    assert received == []


async def test_queue_is_processed_in_order():
    bus = EventBus()
    keys = []
    bus.subscribe(EventType.KEYPAD_INPUT, lambda e: keys.append(e.data["key"]))

    for key in "1345":
        bus.queue_event(keypad_event(key))
    assert keys == []

    await bus.process_queue()

    assert keys == ["1", "3", "4", "5"]


async def test_process_empty_queue():
    await EventBus().process_queue()
