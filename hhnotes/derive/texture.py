"""
Draw and board-texture tags for revealed Omaha holdings.

Draws are only reported while cards are still to come (flop, turn).
Made hands get fragile tags when the board makes them vulnerable.
"""
from collections import Counter
from typing import Dict, List, Sequence

from hhnotes.parse.schemas import Board, StreetClass
from .strength import (
    RANKS,
    Card,
    RANK_VALUES,
    best_straight_high,
    board_is_paired,
    board_max_suit_count,
    to_cards,
)

DRAW_STREETS = ("flop", "turn")

# made classes that already beat a straight / flush draw
NO_STRAIGHT_DRAW = {"str", "nutstr", "strflush", "full", "quads"}
NO_FLUSH_DRAW = {"flush", "strflush", "full", "quads"}


def flush_draw_tag(hole_tokens: Sequence[str], board_tokens: Sequence[str]) -> str:
    """
    'nfd' / 'fd' when the board shows exactly two of a suit the player holds
    twice or more; 'nfd' when the player has the ace of that suit.
    """
    hole = to_cards(hole_tokens)
    board_suits = Counter(card.suit for card in to_cards(board_tokens))
    hole_suits = Counter(card.suit for card in hole)

    best = ""
    for suit, on_board in board_suits.items():
        if on_board != 2 or hole_suits.get(suit, 0) < 2:
            continue
        if any(card.suit == suit and card.rank == "A" for card in hole):
            return "nfd"
        best = "fd"
    return best


def straight_out_ranks(hole_tokens: Sequence[str], board_tokens: Sequence[str]) -> List[str]:
    """Ranks whose arrival on the board gives the holding a straight."""
    hole = to_cards(hole_tokens)
    board = to_cards(board_tokens)
    if len(hole) < 2 or len(board) < 3:
        return []

    outs = []
    for rank in RANKS:
        # suit-less card so the lookahead never makes a flush
        next_card = Card(rank, "?", RANK_VALUES[rank])
        if best_straight_high(hole, board + [next_card]):
            outs.append(rank)
    return outs


def straight_draw_tag(hole_tokens: Sequence[str], board_tokens: Sequence[str]) -> str:
    """'wrap' for 4+ out ranks, 'oe' for 2-3, 'g' (gutshot) for 1."""
    count = len(straight_out_ranks(hole_tokens, board_tokens))
    if count >= 4:
        return "wrap"
    if count >= 2:
        return "oe"
    if count == 1:
        return "g"
    return ""


def board_straight_count(board_tokens: Sequence[str]) -> int:
    """Most distinct board ranks inside any five-rank window (ace plays low too)."""
    values = {card.value for card in to_cards(board_tokens)}
    if 14 in values:
        values.add(1)
    best = 0
    for low in range(1, 11):
        best = max(best, len([v for v in values if low <= v <= low + 4]))
    return best


def fragile_tags(token: str, board_tokens: Sequence[str]) -> List[str]:
    """
    Tags marking made hands that the board threatens:
    STRB (straighty board), FLB (flushy board), pairedboard, lowstr.
    """
    if not token or not board_tokens:
        return []

    tags: List[str] = []
    straight_count = board_straight_count(board_tokens)
    flushy = board_max_suit_count(board_tokens) >= 3

    if token == "set" and straight_count >= 3:
        tags.append("STRB")
    if token in ("set", "str", "nutstr") and flushy:
        tags.append("FLB")
    if token in ("str", "nutstr", "flush") and board_is_paired(board_tokens):
        tags.append("pairedboard")
    if token == "str" and straight_count >= 4:
        tags.extend(["lowstr", "STRB"])
    return tags


def street_tags(hole_tokens: Sequence[str], board: Board, classes: StreetClass) -> Dict[str, List[str]]:
    """
    Draw and texture tags per postflop street, e.g. {"flop": ["wrap"]}.
    Streets without tags are omitted.
    """
    result: Dict[str, List[str]] = {}
    for street in ("flop", "turn", "river"):
        board_cards = board.cards_for(street)
        token = classes.get(street)
        if not token or not board_cards:
            continue

        tags: List[str] = []
        if street in DRAW_STREETS:
            if token not in NO_STRAIGHT_DRAW:
                draw = straight_draw_tag(hole_tokens, board_cards)
                if draw:
                    tags.append(draw)
            if token not in NO_FLUSH_DRAW:
                draw = flush_draw_tag(hole_tokens, board_cards)
                if draw:
                    tags.append(draw)

        tags.extend(fragile_tags(token, board_cards))
        if tags:
            result[street] = tags
    return result
