"""
Derived facts for parsed hands: positions, target, hand strength, draws.
"""

from .positions import assign_positions
from .target import extract_target_id_hint, extract_target_identity, find_target_player
from .strength import (
    classify_hand,
    classify_streets,
    nut_straight_high,
    upgrade_nut_straight,
)
from .texture import street_tags
from .showdown import build_showdown

__all__ = [
    'assign_positions',
    'extract_target_id_hint',
    'extract_target_identity',
    'find_target_player',
    'classify_hand',
    'classify_streets',
    'nut_straight_high',
    'upgrade_nut_straight',
    'street_tags',
    'build_showdown',
]
