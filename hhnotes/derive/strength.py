"""
Omaha best-hand evaluation.

Omaha hands use exactly two hole cards and three board cards, so the best
hand is the maximum over every 2-card hole combination times every 3-card
board combination. Hands are scored by category (8 straight flush down to
0 high card) with the straight top card as tiebreak.
"""
import logging
from collections import Counter
from functools import lru_cache
from itertools import combinations
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from hhnotes.parse.schemas import POSTFLOP_STREETS, Board, StreetClass

logger = logging.getLogger(__name__)

RANKS = "23456789TJQKA"
SUITS = "cdhs"
RANK_VALUES = {rank: index + 2 for index, rank in enumerate(RANKS)}

CLASS_TOKENS = {
    8: "strflush",
    7: "quads",
    6: "full",
    5: "flush",
    4: "str",
    3: "set",
    2: "2p",
    1: "p",
    0: "air",
}
STRAIGHT_CATEGORIES = (4, 8)


class Card(NamedTuple):
    rank: str
    suit: str
    value: int

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"


class HandScore(NamedTuple):
    """Comparable score; straight_high is 0 outside straight categories."""
    category: int
    straight_high: int = 0

    @property
    def token(self) -> str:
        return CLASS_TOKENS[self.category]


def parse_card(token: str) -> Optional[Card]:
    token = (token or "").strip()
    if len(token) != 2:
        return None
    rank, suit = token[0].upper(), token[1].lower()
    if rank not in RANK_VALUES or suit not in SUITS:
        return None
    return Card(rank, suit, RANK_VALUES[rank])


def to_cards(tokens: Iterable[str]) -> List[Card]:
    """Parse card tokens, silently dropping anything unparseable."""
    cards = []
    for token in tokens or []:
        card = parse_card(token)
        if card is not None:
            cards.append(card)
    return cards


def straight_high(values: Iterable[int]) -> int:
    """
    Top card of the best 5-in-a-row among the given rank values.

    The ace also plays low, so A-2-3-4-5 returns 5. Returns 0 without a
    straight.
    """
    distinct = set(values)
    if 14 in distinct:
        distinct.add(1)
    for top in range(14, 4, -1):
        if all(top - offset in distinct for offset in range(5)):
            return top
    return 0


def evaluate_five(cards: Sequence[Card]) -> HandScore:
    """Score exactly five cards."""
    values = [card.value for card in cards]
    counts = sorted(Counter(values).values(), reverse=True)
    is_flush = len({card.suit for card in cards}) == 1
    high = straight_high(values) if len(set(values)) == 5 else 0

    if is_flush and high:
        return HandScore(8, high)
    if counts[0] == 4:
        return HandScore(7)
    if counts[:2] == [3, 2]:
        return HandScore(6)
    if is_flush:
        return HandScore(5)
    if high:
        return HandScore(4, high)
    if counts[0] == 3:
        return HandScore(3)
    if counts[:2] == [2, 2]:
        return HandScore(2)
    if counts[0] == 2:
        return HandScore(1)
    return HandScore(0)


def _omaha_hands(hole: Sequence[Card], board: Sequence[Card]):
    for hole_pair in combinations(hole, 2):
        for board_trio in combinations(board, 3):
            yield hole_pair + board_trio


def evaluate_omaha(hole: Sequence[Card], board: Sequence[Card]) -> Optional[HandScore]:
    """
    Best score using exactly two hole and three board cards.

    Returns None with fewer than 2 hole or 3 board cards.
    """
    if len(hole) < 2 or len(board) < 3:
        return None
    return max(evaluate_five(hand) for hand in _omaha_hands(hole, board))


def best_straight_high(hole: Sequence[Card], board: Sequence[Card]) -> int:
    """Highest straight (or straight flush) top card the holding can make."""
    best = 0
    if len(hole) < 2 or len(board) < 3:
        return best
    for hand in _omaha_hands(hole, board):
        score = evaluate_five(hand)
        if score.category in STRAIGHT_CATEGORIES and score.straight_high > best:
            best = score.straight_high
    return best


def classify_hand(hole_tokens: Sequence[str], board_tokens: Sequence[str]) -> Tuple[str, int]:
    """
    Class token and straight high for a holding on a board.

    Returns:
        ('', 0) when there are fewer than 2 hole or 3 board cards
    """
    score = evaluate_omaha(to_cards(hole_tokens), to_cards(board_tokens))
    if score is None:
        return "", 0
    return score.token, score.straight_high


def board_is_paired(board_tokens: Sequence[str]) -> bool:
    ranks = [card.value for card in to_cards(board_tokens)]
    return len(ranks) != len(set(ranks))


def board_max_suit_count(board_tokens: Sequence[str]) -> int:
    suits = Counter(card.suit for card in to_cards(board_tokens))
    return max(suits.values()) if suits else 0


@lru_cache(maxsize=512)
def _nut_straight_high(board_key: Tuple[str, ...]) -> int:
    board = to_cards(board_key)
    used = {(card.rank, card.suit) for card in board}
    deck = [Card(rank, suit, RANK_VALUES[rank])
            for rank in RANKS for suit in SUITS if (rank, suit) not in used]
    best = 0
    for holding in combinations(deck, 2):
        high = best_straight_high(holding, board)
        if high > best:
            best = high
            if best == 14:
                break
    return best


def nut_straight_high(board_tokens: Sequence[str]) -> int:
    """
    Highest straight any two unseen cards can make on this board.

    Scores every two-card holding from the deck minus the board with the
    same five-card scorer. Cached per board.
    """
    key = tuple(sorted(str(card) for card in to_cards(board_tokens)))
    if len(key) < 3:
        return 0
    return _nut_straight_high(key)


def upgrade_nut_straight(token: str, high: int, board_tokens: Sequence[str]) -> str:
    """
    Turn 'str' into 'nutstr' when nothing on the board beats it.

    Requires an unpaired board with no suit three or more times and a
    straight equal to the nut straight. Idempotent on 'nutstr'.
    """
    if token not in ("str", "nutstr"):
        return token
    if board_is_paired(board_tokens) or board_max_suit_count(board_tokens) >= 3:
        return "str"
    if high and high == nut_straight_high(board_tokens):
        return "nutstr"
    return "str"


def classify_streets(hole_tokens: Sequence[str], board: Board) -> StreetClass:
    """Per-street class tokens for a revealed holding."""
    result = StreetClass()
    highs = {}
    for street in POSTFLOP_STREETS:
        board_cards = board.cards_for(street)
        token, high = classify_hand(hole_tokens, board_cards)
        if token == "str":
            token = upgrade_nut_straight(token, high, board_cards)
        setattr(result, street, token)
        if high:
            highs[street] = high
    result.straight_high = highs
    return result
