"""
Deterministic per-street notes for the target player.

A street note is the target fragment followed by the other actors'
fragments, all joined by " / ":

    SB_86761294 x QhJcTdTc8c_nutstr onKc9d6s7d [z] / CO xb Ks6c5s5h4d_2p_oe
"""
import logging
from typing import List

from hhnotes.config import get_config
from hhnotes.parse.schemas import AGGRESSIVE_TYPES, STREETS, NoteFields, ParsedHand
from .rules import (
    StreetView,
    actor_tags,
    last_preflop_aggressor,
    street_view,
    target_actor_tags,
    target_tags,
)
from .tokens import (
    action_token,
    actor_label,
    board_token,
    hand_token,
    join_parts,
    player_prefix,
)

logger = logging.getLogger(__name__)

SEPARATOR = " / "


def straddle_marker(parsed: ParsedHand) -> str:
    """'5c straddle' when the target straddled a 5-card game."""
    target = parsed.target_player
    straddled = any(
        event.type == "straddle" and event.player == target
        for event in parsed.street_events("preflop")
    )
    if not straddled:
        return ""
    if parsed.game_card_count:
        return f"{parsed.game_card_count}c straddle"
    return "straddle"


def target_fragment(view: StreetView) -> str:
    """Target prefix fragment for one street, '' without a target action."""
    parsed = view.parsed
    event = view.primary
    if event is None:
        return ""

    street = view.street
    cbet = (
        street == "flop"
        and event.type == "bet"
        and last_preflop_aggressor(parsed) == parsed.target_player
    )

    return join_parts(
        straddle_marker(parsed) if street == "preflop" else "",
        player_prefix(parsed, event.player),
        action_token(event, cbet=cbet),
        hand_token(parsed, event.player, street),
        "allin" if getattr(event, "all_in", False) else "",
        board_token(parsed, street) if street != "preflop" else "",
        *target_tags(view),
        *target_actor_tags(view),
    )


def _opponent_window(view: StreetView) -> List[int]:
    """
    Indexes of the actions that opponent fragments may describe.

    Preflop starts at the last aggressive action (just after it when the
    target made it) and drops folds.
    """
    indexes = list(range(len(view.actions)))
    if view.street != "preflop":
        return indexes

    last_aggr = None
    for index, event in enumerate(view.actions):
        if event.type in AGGRESSIVE_TYPES:
            last_aggr = index
    if last_aggr is not None:
        start = last_aggr + 1 if view.actions[last_aggr].player == view.target else last_aggr
        indexes = indexes[start:]

    if get_config().notes.omit_preflop_folds:
        indexes = [i for i in indexes if view.actions[i].type != "fold"]
    return indexes


def _is_check_behind(view: StreetView, index: int) -> bool:
    if view.street == "preflop" or index == 0:
        return False
    event = view.actions[index]
    previous = view.actions[index - 1]
    return (
        event.type == "check"
        and previous.type == "check"
        and previous.player == view.target
        and not view.aggression_before(index)
    )


def opponent_fragments(view: StreetView) -> List[str]:
    parsed = view.parsed
    fragments = []
    for index in _opponent_window(view):
        event = view.actions[index]
        if event.player == view.target:
            continue
        cards = hand_token(parsed, event.player, view.street)
        fragments.append(join_parts(
            actor_label(parsed, event.player),
            action_token(event, check_behind=_is_check_behind(view, index)),
            cards,
            "allin" if getattr(event, "all_in", False) else "",
            *([] if cards else actor_tags(view, event)),
        ))
    return fragments


def synthesize_street(parsed: ParsedHand, street: str) -> str:
    view = street_view(parsed, street)
    parts = [target_fragment(view)] + opponent_fragments(view)
    return SEPARATOR.join(part for part in parts if part)


def synthesize(parsed: ParsedHand) -> NoteFields:
    """
    Deterministic notes for every street of a parsed hand.

    Streets without a target are empty, so callers keep dictated text.
    """
    if not parsed.target_player:
        logger.debug("[synthesize] no target player, nothing to synthesize")
        return NoteFields()

    notes = {street: synthesize_street(parsed, street) for street in STREETS}
    return NoteFields(**notes)
