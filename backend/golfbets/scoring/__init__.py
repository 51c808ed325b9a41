"""Scoring and settlement engine for golf rounds and their wagers."""

from . import (
    handicap,
    junk,
    match_play,
    nassau,
    net_scores,
    nine_point,
    settlement,
    side_bets,
    skins,
    wagers,
    winnings,
)

__all__ = [
    "handicap",
    "junk",
    "match_play",
    "nassau",
    "net_scores",
    "nine_point",
    "settlement",
    "side_bets",
    "skins",
    "wagers",
    "winnings",
]
