"""Hand evaluators shared by the card games."""

from casino.evaluators.baccarat import Coup, Outcome, play_coup, score
from casino.evaluators.poker import (
    PAYTABLE,
    HandCategory,
    HandRank,
    PaytableEntry,
    evaluate_best,
    evaluate_five,
    score_video_poker,
)

__all__ = [
    "Coup",
    "Outcome",
    "play_coup",
    "score",
    "PAYTABLE",
    "HandCategory",
    "HandRank",
    "PaytableEntry",
    "evaluate_best",
    "evaluate_five",
    "score_video_poker",
]
