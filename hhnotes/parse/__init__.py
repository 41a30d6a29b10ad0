"""
Hand history parsing module.
Turns PokerStars-style Omaha hand text into a structured ParsedHand.
"""

from .schemas import (
    Blinds,
    Board,
    Event,
    NoteFields,
    ParsedHand,
    ShowdownInfo,
    StreetClass,
    STREETS,
    POSTFLOP_STREETS,
)
from .lines import ClassifiedLine, classify_line
from .tracker import HandTracker, track_hand

__all__ = [
    'Blinds',
    'Board',
    'Event',
    'NoteFields',
    'ParsedHand',
    'ShowdownInfo',
    'StreetClass',
    'STREETS',
    'POSTFLOP_STREETS',
    'ClassifiedLine',
    'classify_line',
    'HandTracker',
    'track_hand',
]
