"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field
from decimal import Decimal


def _env_decimal(name: str, default: str) -> Decimal:
    return Decimal(os.getenv(name, default))


def _env_float(name: str, default: str) -> float:
    return float(os.getenv(name, default))


def _env_int(name: str, default: str) -> int:
    return int(os.getenv(name, default))


@dataclass(frozen=True)
class BlackjackConfig:
    """Blackjack table configuration."""

    default_bet: int = 20
    dealer_stands_on: int = 17
    natural_return: Decimal = Decimal("2.5")
    # Enough cards for the longest possible player and dealer hands.
    cards_per_round: int = 26
    history_size: int = 10

    def __post_init__(self) -> None:
        if self.natural_return < 1:
            raise ValueError("natural_return must be at least 1")


@dataclass(frozen=True)
class BaccaratConfig:
    """Baccarat table configuration."""

    countdown_seconds: float = field(
        default_factory=lambda: _env_float("CASINO_BACCARAT_COUNTDOWN", "5")
    )
    reveal_delay: float = 1.5
    history_size: int = 15

    def __post_init__(self) -> None:
        if self.countdown_seconds <= 0:
            raise ValueError("countdown_seconds must be positive")


@dataclass(frozen=True)
class RouletteConfig:
    """Roulette wheel configuration."""

    spin_seconds: float = 3.0
    history_size: int = 10


@dataclass(frozen=True)
class CrashConfig:
    """Crash round timing and curve configuration."""

    countdown_seconds: int = field(
        default_factory=lambda: _env_int("CASINO_CRASH_COUNTDOWN", "10")
    )
    cooldown_seconds: float = field(
        default_factory=lambda: _env_float("CASINO_CRASH_COOLDOWN", "5")
    )
    frame_interval: float = 0.05
    growth_rate: float = 0.12
    default_bet: int = 10
    history_size: int = 10

    def __post_init__(self) -> None:
        if self.countdown_seconds < 1:
            raise ValueError("countdown_seconds must be at least 1")
        if self.frame_interval <= 0:
            raise ValueError("frame_interval must be positive")


@dataclass(frozen=True)
class MinesConfig:
    """Mines board configuration."""

    house_edge: Decimal = field(
        default_factory=lambda: _env_decimal("CASINO_MINES_HOUSE_EDGE", "0.95")
    )
    default_mines: int = 3
    default_bet: int = 10
    history_size: int = 10

    def __post_init__(self) -> None:
        if not 0 < self.house_edge <= 1:
            raise ValueError("house_edge must be in (0, 1]")


@dataclass(frozen=True)
class HoldemConfig:
    """Texas Hold'em table configuration."""

    default_bet: int = 50
    raise_amount: int = field(default_factory=lambda: _env_int("CASINO_HOLDEM_RAISE", "50"))
    history_size: int = 10

    def __post_init__(self) -> None:
        if self.raise_amount <= 0:
            raise ValueError("raise_amount must be positive")


@dataclass(frozen=True)
class VideoPokerConfig:
    """Video poker machine configuration."""

    default_bet: int = 10
    history_size: int = 10


@dataclass(frozen=True)
class SlotsConfig:
    """Slot machine configuration."""

    reels: int = 5
    rows: int = 3
    spin_seconds: float = 1.1
    default_bet: int = 10
    default_theme: str = "blasting"
    history_size: int = 10


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    starting_balance: Decimal = field(
        default_factory=lambda: _env_decimal("CASINO_STARTING_BALANCE", "1000")
    )

    blackjack: BlackjackConfig = field(default_factory=BlackjackConfig)
    baccarat: BaccaratConfig = field(default_factory=BaccaratConfig)
    roulette: RouletteConfig = field(default_factory=RouletteConfig)
    crash: CrashConfig = field(default_factory=CrashConfig)
    mines: MinesConfig = field(default_factory=MinesConfig)
    holdem: HoldemConfig = field(default_factory=HoldemConfig)
    video_poker: VideoPokerConfig = field(default_factory=VideoPokerConfig)
    slots: SlotsConfig = field(default_factory=SlotsConfig)


# Global configuration instance; engines and wallets fall back to it
config = AppConfig()
