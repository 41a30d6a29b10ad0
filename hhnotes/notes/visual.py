"""
Hand visual model: a replayer-friendly view of one parsed hand.

Action labels are integer-rounded bb sizes (X, F, C10, B9, R57), with
re-raises annotated by their multiple over the previous aggression,
e.g. "R57 (6x)".
"""
import re
from typing import List, Optional, Tuple

from pydantic import BaseModel

from hhnotes.parse.schemas import POSTFLOP_STREETS, ACTIONABLE_TYPES, EventBase, ParsedHand
from hhnotes.parse.utils import format_num, round2, round_half_up, safe_ratio
from hhnotes.derive.strength import parse_card


class VisualCard(BaseModel):
    rank: str
    suit: str
    raw: str


class VisualAction(BaseModel):
    player: str
    pos: str = ""
    hero: bool = False
    label: str
    cards: List[VisualCard] = []


class VisualMeta(BaseModel):
    game: str = "Omaha"
    limit: str = ""
    bb: str = ""
    hero: str = ""


class VisualPreflop(BaseModel):
    pot_bb: Optional[float] = None
    actions: List[VisualAction] = []


class VisualStreet(BaseModel):
    id: str
    board: List[VisualCard] = []
    pot_bb: Optional[float] = None
    actions: List[VisualAction] = []


class HandVisual(BaseModel):
    meta: VisualMeta
    hero_cards: List[VisualCard] = []
    preflop: VisualPreflop
    streets: List[VisualStreet] = []

    def street(self, street_id: str) -> Optional[VisualStreet]:
        for item in self.streets:
            if item.id == street_id:
                return item
        return None


def visual_cards(tokens) -> List[VisualCard]:
    cards = []
    for token in tokens or []:
        card = parse_card(token)
        if card is not None:
            cards.append(VisualCard(rank=card.rank, suit=card.suit, raw=str(card)))
    return cards


def game_label(raw_text: str, parsed: ParsedHand) -> str:
    """
    'Omaha5' style label from a '"gt":"PLO5"' comment, the
    'N Card Omaha' header, or the parsed card count.
    """
    text = raw_text or ""
    gt = re.search(r'"gt"\s*:\s*"([^"]+)"', text, re.IGNORECASE)
    if gt:
        value = gt.group(1).upper()
        plo = re.search(r'PLO(\d+)', value)
        return f"Omaha{plo.group(1)}" if plo else value

    cards = re.search(r'(\d+)\s*Card\s+Omaha', text, re.IGNORECASE)
    if cards:
        return f"Omaha{cards.group(1)}"
    if parsed.game_card_count:
        return f"Omaha{parsed.game_card_count}"
    return "Omaha"


def limit_label(parsed: ParsedHand) -> str:
    bb = parsed.blinds.big_blind
    if not bb:
        return ""
    return f"PL{round_half_up(bb * 100)}"


def action_label(event: EventBase, big_blind: Optional[float],
                 previous_aggression_bb: Optional[float]) -> Tuple[str, Optional[float]]:
    """
    Label for one action and the aggression size (bb) carried forward.
    """
    if event.type == "check":
        return "X", previous_aggression_bb
    if event.type == "fold":
        return "F", previous_aggression_bb

    if event.type == "call":
        size = safe_ratio(event.amount, big_blind)
        return f"C{_rounded(size)}", previous_aggression_bb

    if event.type == "bet":
        size = safe_ratio(event.amount, big_blind)
        return f"B{_rounded(size)}", size

    if event.type == "raise":
        size = safe_ratio(event.to_amount, big_blind)
        multiple = ""
        if previous_aggression_bb and size is not None:
            multiple = f" ({_rounded(round2(size / previous_aggression_bb))}x)"
        return f"R{_rounded(size)}{multiple}", size

    return "", previous_aggression_bb


def _rounded(value: Optional[float]) -> str:
    rounded = round_half_up(value)
    return "" if rounded is None else str(rounded)


def _visual_action(parsed: ParsedHand, event: EventBase, label: str) -> VisualAction:
    return VisualAction(
        player=event.player,
        pos=parsed.position_of(event.player),
        hero=bool(parsed.target_player) and event.player == parsed.target_player,
        label=label,
        cards=visual_cards(parsed.showdown.show_cards_by_player.get(event.player)),
    )


def preflop_actions(parsed: ParsedHand) -> List[VisualAction]:
    """Calls, bets and raises from the first preflop aggression on."""
    events = [e for e in parsed.street_events("preflop") if e.type in ("call", "bet", "raise")]
    start = next((i for i, e in enumerate(events) if e.type in ("bet", "raise")), 0)
    bb = parsed.blinds.big_blind

    actions = []
    for event in events[start:]:
        label, _ = action_label(event, bb, None)
        if label:
            actions.append(_visual_action(parsed, event, label))
    return actions


def street_actions(parsed: ParsedHand, street: str) -> List[VisualAction]:
    bb = parsed.blinds.big_blind
    previous = None
    actions = []
    for event in parsed.street_events(street):
        if event.type not in ACTIONABLE_TYPES:
            continue
        label, previous = action_label(event, bb, previous)
        if label:
            actions.append(_visual_action(parsed, event, label))
    return actions


def build_hand_visual_model(raw_text: str, parsed: ParsedHand) -> HandVisual:
    """
    Build the visual model for one parsed hand.

    Args:
        raw_text: Raw hand text (scanned for the game label)
        parsed: Result of parse_hand_history for the same text

    Returns:
        HandVisual
    """
    bb = parsed.blinds.big_blind
    pots = {street: safe_ratio(parsed.street_start_pot.get(street) or 0.0, bb)
            for street in POSTFLOP_STREETS}

    streets = []
    for street in POSTFLOP_STREETS:
        board = list(parsed.board.flop)
        if street in ("turn", "river") and parsed.board.turn:
            board.append(parsed.board.turn)
        if street == "river" and parsed.board.river:
            board.append(parsed.board.river)
        streets.append(VisualStreet(
            id=street,
            board=visual_cards(board),
            pot_bb=pots[street],
            actions=street_actions(parsed, street),
        ))

    return HandVisual(
        meta=VisualMeta(
            game=game_label(raw_text, parsed),
            limit=limit_label(parsed),
            bb=format_num(bb) if bb else "",
            hero=parsed.target_player,
        ),
        hero_cards=visual_cards(parsed.showdown.show_cards_by_player.get(parsed.target_player)),
        preflop=VisualPreflop(pot_bb=pots["flop"], actions=preflop_actions(parsed)),
        streets=streets,
    )
