"""Tests for the game event emitter."""

from casino.games.events import EventEmitter, EventType, GameEvent


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_subscribe_to_type(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append, EventType.CARD_DEALT)

        emitter.emit_new(EventType.CARD_DEALT, card="A♠")
        emitter.emit_new(EventType.PLAYER_HIT)

        assert [e.event_type for e in received] == [EventType.CARD_DEALT]
        assert received[0].data == {"card": "A♠"}

    def test_subscribe_to_all(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append)
        emitter.emit_new(EventType.CARD_DEALT)
        emitter.emit_new(EventType.PLAYER_HIT)
        assert len(received) == 2

    def test_unsubscribe(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append)
        emitter.unsubscribe(received.append)
        emitter.unsubscribe(print)
        emitter.emit_new(EventType.CARD_DEALT)
        assert received == []

    def test_history_is_bounded(self):
        emitter = EventEmitter(history_size=3)
        for _ in range(5):
            emitter.emit_new(EventType.COUNTDOWN_TICK)
        assert len(emitter.history) == 3

    def test_of_type_and_clear(self):
        emitter = EventEmitter()
        emitter.emit(GameEvent(EventType.PUSH))
        emitter.emit_new(EventType.PLAYER_WINS, amount=20.0)
        assert len(emitter.of_type(EventType.PUSH)) == 1

        emitter.clear_history()
        assert emitter.history == []

    def test_event_str(self):
        event = GameEvent(EventType.PLAYER_WINS, {"amount": 20.0})
        assert str(event) == "PLAYER_WINS: {'amount': 20.0}"
