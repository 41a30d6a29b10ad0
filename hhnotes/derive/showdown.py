"""
Showdown info: who revealed what, and how strong it was on each street.
"""
import logging
from collections import Counter
from typing import Dict, List, Optional

from hhnotes.parse.schemas import STREETS, Board, ShowdownInfo, ShowEvent, StreetClass
from .strength import classify_streets
from .texture import street_tags

logger = logging.getLogger(__name__)


def show_cards_by_player(show_events: List[ShowEvent]) -> Dict[str, List[str]]:
    """First non-empty reveal per player, in reveal order."""
    result: Dict[str, List[str]] = {}
    for event in show_events:
        if event.cards and event.player not in result:
            result[event.player] = list(event.cards)
    return result


def pick_primary_opponent(
    target: str,
    revealed: Dict[str, List[str]],
    events: Dict[str, list],
) -> str:
    """
    The revealed opponent most involved in the hand (most timeline events).
    Ties keep reveal order.
    """
    activity = Counter(
        event.player for street in STREETS for event in events.get(street, [])
    )
    best = ""
    best_count = -1
    for player in revealed:
        if player == target:
            continue
        if activity[player] > best_count:
            best, best_count = player, activity[player]
    return best


def build_showdown(
    target: str,
    board: Board,
    events: Dict[str, list],
    show_events: List[ShowEvent],
    voluntary_show_events: Optional[List[ShowEvent]] = None,
    showdown_seen: bool = False,
) -> ShowdownInfo:
    """
    Assemble ShowdownInfo for one hand.

    mandatory is true only when a showdown section was present and at
    least one player revealed cards.
    """
    revealed = show_cards_by_player(show_events)

    classes: Dict[str, StreetClass] = {}
    tags: Dict[str, Dict[str, List[str]]] = {}
    for player, cards in revealed.items():
        classes[player] = classify_streets(cards, board)
        player_tags = street_tags(cards, board, classes[player])
        if player_tags:
            tags[player] = player_tags

    primary = pick_primary_opponent(target, revealed, events)

    info = ShowdownInfo(
        seen=showdown_seen,
        mandatory=bool(showdown_seen and show_events),
        show_events=list(show_events),
        voluntary_show_events=list(voluntary_show_events or []),
        target_cards=revealed.get(target, []) if target else [],
        target_street_class=classes.get(target, StreetClass()) if target else StreetClass(),
        primary_opponent=primary,
        primary_opponent_cards=revealed.get(primary, []),
        opponent_street_class=classes.get(primary, StreetClass()),
        show_cards_by_player=revealed,
        street_class_by_player=classes,
        street_tags_by_player=tags,
    )
    logger.debug(
        f"[showdown] seen={info.seen} mandatory={info.mandatory} "
        f"revealed={len(revealed)} primary={primary or '-'}"
    )
    return info
