"""
Compact note token grammar.

Tokens read like "SB_86761294 cb75 QhJcTdTc8c_p_wrap onKc9d6s": a
position-prefixed player, an action letter with its size (bb preflop,
percent of pot postflop), the player's cards joined with their class and
draw tags, and the board.
"""
from typing import Optional

from hhnotes.parse.schemas import EventBase, ParsedHand
from hhnotes.parse.utils import format_num

ACTION_LETTERS = {
    "fold": "f",
    "check": "x",
    "call": "c",
    "bet": "b",
    "raise": "r",
}


def compact_cards(cards) -> str:
    return "".join(cards or [])


def board_token(parsed: ParsedHand, street: str) -> str:
    cards = parsed.board.cards_for(street)
    return f"on{compact_cards(cards)}" if cards else ""


def player_prefix(parsed: ParsedHand, player: str) -> str:
    """'POS_player', or just the player when the position is unknown."""
    position = parsed.position_of(player)
    return f"{position}_{player}" if position else player


def actor_label(parsed: ParsedHand, player: str) -> str:
    """Position label, falling back to the player name."""
    return parsed.position_of(player) or player


def bb_size(value: Optional[float]) -> str:
    text = format_num(value)
    return f"{text}bb" if text else ""


def pct_size(value: Optional[float]) -> str:
    """Pot percentage; tiny non-zero sizes never collapse to 0."""
    if value is None:
        return ""
    if 0 < value < 0.01:
        return "0.01"
    return format_num(value)


def action_token(event: EventBase, check_behind: bool = False, cbet: bool = False) -> str:
    """
    Action letter plus size for a check/fold/call/bet/raise event.

    Preflop sizes are in bb, postflop sizes in percent of the pot before
    the action. Returns '' for other event types.
    """
    kind = event.type
    if kind not in ACTION_LETTERS:
        return ""
    if kind == "fold":
        return "f"
    if kind == "check":
        return "xb" if check_behind else "x"

    preflop = event.street == "preflop"

    if kind == "call":
        return f"c{bb_size(event.amount_bb)}" if preflop else "c"

    if kind == "bet":
        letter = "cb" if cbet else "b"
        size = bb_size(event.amount_bb) if preflop else pct_size(event.pct_pot)
        return f"{letter}{size}"

    # raise: new total preferred, delta as fallback
    if preflop:
        size = bb_size(event.to_amount_bb if event.to_amount_bb is not None else event.amount_bb)
    else:
        size = pct_size(event.to_pct_pot if event.to_pct_pot is not None else event.pct_pot)
    return f"r{size}"


def hand_token(parsed: ParsedHand, player: str, street: str) -> str:
    """
    Revealed cards of a player: compact cards preflop, cards joined with
    the street class and draw/texture tags postflop. '' when not shown.
    """
    showdown = parsed.showdown
    cards = showdown.show_cards_by_player.get(player)
    if not cards:
        return ""
    compact = compact_cards(cards)
    if street == "preflop":
        return compact

    classes = showdown.street_class_by_player.get(player)
    token = classes.get(street) if classes else ""
    if not token:
        return compact

    tags = showdown.street_tags_by_player.get(player, {}).get(street, [])
    return "_".join([compact, token] + list(tags))


def join_parts(*parts: str) -> str:
    return " ".join(part for part in parts if part)
