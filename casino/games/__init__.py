"""Game engines and shared event plumbing."""

from casino.games.events import GameEvent, EventType
from casino.games.base import ActionResult, GameEngine, Reason
from casino.games.baccarat import BaccaratGame
from casino.games.blackjack import BlackjackGame
from casino.games.crash import CrashGame
from casino.games.holdem import HoldemGame
from casino.games.mines import MinesGame
from casino.games.roulette import RouletteGame
from casino.games.slots import SlotsGame
from casino.games.video_poker import VideoPokerGame

__all__ = [
    "GameEvent",
    "EventType",
    "ActionResult",
    "GameEngine",
    "Reason",
    "BaccaratGame",
    "BlackjackGame",
    "CrashGame",
    "HoldemGame",
    "MinesGame",
    "RouletteGame",
    "SlotsGame",
    "VideoPokerGame",
]
