"""
Plain-text summary of a parsed hand, one fact per line.
"""
from typing import List

from hhnotes.parse.schemas import POSTFLOP_STREETS, STREETS, EventBase, ParsedHand
from hhnotes.parse.utils import format_num

SHORT_ACTIONS = {
    "check": "x",
    "fold": "f",
    "call": "c",
    "bet": "b",
    "raise": "r",
    "ante": "ante",
    "small_blind": "sb",
    "big_blind": "bb",
    "straddle": "straddle",
    "show": "shows",
    "other": "other",
}


def showdown_mode(parsed: ParsedHand) -> str:
    if parsed.showdown.mandatory:
        return "mandatory"
    if parsed.showdown.seen:
        return "present_without_cards"
    return "none"


def describe_event(event: EventBase, target: str) -> str:
    """e.g. 'TARGET:86761294 b 252 (42bb, 75%pot)'."""
    role = "TARGET" if target and event.player == target else "OTHER"
    parts = [f"{role}:{event.player}", SHORT_ACTIONS.get(event.type, event.type)]

    if event.type == "show":
        parts.append(" ".join(event.cards))
    elif event.type == "raise":
        parts.append(format_num(event.amount_raw))
        if event.to_amount is not None:
            parts.append(f"to {format_num(event.to_amount)}")
    elif getattr(event, "amount", None) is not None:
        parts.append(format_num(event.amount))

    sizes = []
    size_bb = getattr(event, "to_amount_bb", None) if event.type == "raise" else None
    if size_bb is None:
        size_bb = getattr(event, "amount_bb", None)
    if size_bb is not None:
        sizes.append(f"{format_num(size_bb)}bb")
    pct = getattr(event, "pct_pot", None)
    if pct is not None:
        sizes.append(f"{format_num(pct)}%pot")
    if sizes:
        parts.append(f"({', '.join(sizes)})")
    if getattr(event, "all_in", False):
        parts.append("allin")

    return " ".join(part for part in parts if part)


def build_hand_history_context(parsed: ParsedHand) -> str:
    """
    Multi-line key=value header followed by one line per event:

        target_player=86761294
        blinds=SB:3 BB:6
        ...
        flop: TARGET:86761294 b 252 (42bb, 75%pot)
    """
    target = parsed.target_player
    blinds = parsed.blinds
    showdown = parsed.showdown

    lines: List[str] = [
        f"hand_id={parsed.hand_id or ''}",
        f"target_player={target}",
        f"target_id_hint={parsed.target_id_hint}",
        f"blinds=SB:{format_num(blinds.small_blind) or '?'} BB:{format_num(blinds.big_blind) or '?'}",
        "street_start_pot=" + " ".join(
            f"{street}:{format_num(parsed.street_start_pot.get(street)) or '-'}" for street in STREETS
        ),
        "board=" + " ".join(
            f"{street}:{''.join(parsed.board.cards_for(street)) or '-'}" for street in POSTFLOP_STREETS
        ),
        f"target_cards={' '.join(parsed.target_cards)}",
        f"target_position={parsed.position_of(target) if target else ''}",
        "positions=" + " ".join(f"{pos}:{player}" for player, pos in parsed.positions_by_player.items()),
        f"showdown_mode={showdown_mode(parsed)}",
        f"voluntary_shows={len(showdown.voluntary_show_events)}",
        "target_class_by_street=" + " ".join(
            f"{street}:{showdown.target_street_class.get(street) or '-'}" for street in POSTFLOP_STREETS
        ),
        f"primary_opponent={showdown.primary_opponent}",
        "opponent_class_by_street=" + " ".join(
            f"{street}:{showdown.opponent_street_class.get(street) or '-'}" for street in POSTFLOP_STREETS
        ),
    ]

    for street in STREETS:
        for event in parsed.street_events(street):
            lines.append(f"{street}: {describe_event(event, target)}")

    return "\n".join(lines)
