"""
Seat to position assignment for 2-9 handed Omaha tables.
"""
from typing import Dict, List, Optional
import logging

from hhnotes.config import get_config

logger = logging.getLogger(__name__)


def _order_from_button(seats: List[int], btn: Optional[int]) -> List[int]:
    """
    Order seats clockwise starting from the button.

    Falls back to the lowest seat when the button is unknown or not seated.
    """
    ordered = sorted(set(seats))
    if not ordered:
        return []
    if btn not in ordered:
        btn = ordered[0]
    start = ordered.index(btn)
    return ordered[start:] + ordered[:start]


def labels_for_count(n: int) -> List[str]:
    """
    Position labels for a table of n seated players.

    Unknown table sizes reuse the fallback (6-max) list; slots past the end
    of the list are labelled P<index+1>.
    """
    cfg = get_config().positions
    base = cfg.labels_by_count.get(n) or cfg.labels_by_count.get(cfg.fallback_count, [])
    return [base[i] if i < len(base) else f"P{i + 1}" for i in range(n)]


def assign_positions(button_seat: Optional[int], seats: Dict[int, str]) -> Dict[str, str]:
    """
    Assign table positions from the button seat and seat -> player mapping.

    Returns:
        Dict mapping player name to position label (BTN/SB/BB/UTG/...)
    """
    try:
        if not seats:
            logger.debug(f"[assign_positions] no seats, button={button_seat}")
            return {}

        order = _order_from_button(list(seats.keys()), button_seat)
        labels = labels_for_count(len(order))

        positions: Dict[str, str] = {}
        for seat, label in zip(order, labels):
            name = seats.get(seat)
            if name:
                positions[name] = label

        logger.debug(f"[assign_positions] Assigned {len(positions)} positions, button={button_seat}")
        return positions

    except Exception as e:
        logger.error(f"Error assigning positions (button={button_seat}): {e}")
        return {}
