"""
Line classifier for PokerStars-style Omaha hand histories.

Each trimmed line is recognized as one structural kind (header, button,
seat, street marker, summary, uncalled-bet return or player action) with
its fields extracted. Unrecognized lines classify as None and are dropped
by the tracker.
"""

import re
import logging
from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel

from .utils import clean_amount, safe_match, parse_cards

logger = logging.getLogger(__name__)

LineKind = Literal["header", "button", "seat", "street", "summary", "uncalled", "action"]
StreetMarker = Literal["hole_cards", "flop", "turn", "river", "showdown"]

STREET_MARKER_RE = (
    r'^\*\*\*\s*(?:(FIRST|SECOND)\s+)?'
    r'(HOLE\s+CARDS|FLOP|TURN|RIVER|SHOW\s*DOWN|SUMMARY)\s*\*\*\*(.*)$'
)
HEADER_RE = r'Hand\s*#\s*(\w+)'
GAME_RE = r'(\d+)\s*Card\s+Omaha[A-Za-z\s]*'
BUTTON_RE = r'Seat\s+#?(\d+)\s+is\s+the\s+button'
SEAT_RE = r'^Seat\s+(\d+):\s+(.+?)\s+\([^)]+in\s+chips[^)]*\)'
UNCALLED_RE = r'^Uncalled\s+bet\s+\(([^)]+)\)\s+returned\s+to\s+(.+)$'
ACTION_RE = r'^(.+?):\s+(.+)$'
AMOUNT_RE = r'(\d[\d.,]*)'
TO_AMOUNT_RE = r'\bto\s+[^0-9]*(\d[\d.,]*)'
ALLIN_RE = r'\ball-?in\b'

# Order matters: more specific verbs first
ACTION_PATTERNS: List[Tuple[str, str]] = [
    (r'^posts\s+(?:the\s+)?ante\b', 'ante'),
    (r'^posts\s+small\s+blind\b', 'small_blind'),
    (r'^posts\s+big\s+blind\b', 'big_blind'),
    (r'^posts\s+(?:a\s+)?straddle\b', 'straddle'),
    (r'^checks\b', 'check'),
    (r'^folds\b', 'fold'),
    (r'^calls\b', 'call'),
    (r'^bets\b', 'bet'),
    (r'^raises\b', 'raise'),
    (r'^shows\b', 'show'),
]


class ClassifiedLine(BaseModel):
    """A recognized line with the fields relevant to its kind."""
    kind: LineKind
    raw: str = ""

    # header
    hand_id: Optional[str] = None
    game_label: Optional[str] = None
    card_count: Optional[int] = None
    small_blind: Optional[float] = None
    big_blind: Optional[float] = None

    # button / seat
    button_seat: Optional[int] = None
    seat: Optional[int] = None

    # street marker
    marker: Optional[StreetMarker] = None
    run: Optional[Literal["first", "second"]] = None

    # action / uncalled
    player: Optional[str] = None
    action: Optional[str] = None
    amount: Optional[float] = None
    to_amount: Optional[float] = None
    all_in: bool = False
    cards: List[str] = []


def parse_stakes(line: str) -> Tuple[Optional[float], Optional[float]]:
    """
    Extract small/big blind from a stake label such as "(¥3/¥6 CNY)".

    Returns:
        (small_blind, big_blind), either may be None
    """
    for group in re.findall(r'\(([^)]*)\)', line):
        if '/' not in group:
            continue
        numbers = re.findall(AMOUNT_RE, group)
        if len(numbers) >= 2:
            return clean_amount(numbers[0]), clean_amount(numbers[1])
    return None, None


def _classify_street(line: str) -> Optional[ClassifiedLine]:
    match = safe_match(STREET_MARKER_RE, line, re.IGNORECASE)
    if not match:
        return None

    run = match.group(1).lower() if match.group(1) else None
    name = re.sub(r'\s+', '', match.group(2).upper())
    tail = match.group(3) or ''

    if name == 'SUMMARY':
        return ClassifiedLine(kind='summary', raw=line)

    marker = {
        'HOLECARDS': 'hole_cards',
        'FLOP': 'flop',
        'TURN': 'turn',
        'RIVER': 'river',
        'SHOWDOWN': 'showdown',
    }[name]

    groups = re.findall(r'\[([^\]]+)\]', tail)
    cards: List[str] = []
    if marker == 'flop' and groups:
        cards = parse_cards(groups[0])[:3]
    elif marker in ('turn', 'river') and len(groups) >= 2:
        cards = parse_cards(groups[-1])[:1]

    return ClassifiedLine(kind='street', raw=line, marker=marker, run=run, cards=cards)


def _classify_header(line: str) -> Optional[ClassifiedLine]:
    hand_match = safe_match(HEADER_RE, line, re.IGNORECASE)
    game_match = safe_match(GAME_RE, line, re.IGNORECASE)
    if not hand_match and not game_match:
        return None

    small_blind, big_blind = parse_stakes(line)
    return ClassifiedLine(
        kind='header',
        raw=line,
        hand_id=hand_match.group(1) if hand_match else None,
        game_label=' '.join(game_match.group(0).split()) if game_match else None,
        card_count=int(game_match.group(1)) if game_match else None,
        small_blind=small_blind,
        big_blind=big_blind,
        button_seat=_button_seat(line),
    )


def _button_seat(line: str) -> Optional[int]:
    match = safe_match(BUTTON_RE, line, re.IGNORECASE)
    return int(match.group(1)) if match else None


def parse_action(player: str, rest: str, line: str = '') -> ClassifiedLine:
    """
    Classify the text after "name: " into an action.

    The amount is the first number after the verb; raises also take the
    number following "to" as the new total. Unknown verbs give 'other'.
    """
    for pattern, action_type in ACTION_PATTERNS:
        verb = safe_match(pattern, rest, re.IGNORECASE)
        if not verb:
            continue

        after = rest[verb.end():]
        result = ClassifiedLine(
            kind='action',
            raw=line or f"{player}: {rest}",
            player=player,
            action=action_type,
            all_in=bool(safe_match(ALLIN_RE, rest, re.IGNORECASE)),
        )

        if action_type == 'show':
            bracket = safe_match(r'\[([^\]]+)\]', after)
            result.cards = parse_cards(bracket.group(1)) if bracket else []
            return result

        if action_type in ('check', 'fold'):
            return result

        amount = safe_match(AMOUNT_RE, after)
        result.amount = clean_amount(amount.group(1)) if amount else None

        if action_type == 'raise':
            to_amount = safe_match(TO_AMOUNT_RE, after, re.IGNORECASE)
            result.to_amount = clean_amount(to_amount.group(1)) if to_amount else None

        return result

    return ClassifiedLine(kind='action', raw=line, player=player, action='other')


def classify_line(line: str) -> Optional[ClassifiedLine]:
    """
    Recognize one trimmed, non-empty hand-history line.

    Returns:
        ClassifiedLine, or None for unrecognized lines
    """
    line = line.strip()
    if not line:
        return None

    street = _classify_street(line)
    if street:
        return street

    if re.match(r'^Total\s+pot\b', line, re.IGNORECASE):
        return ClassifiedLine(kind='summary', raw=line)

    header = _classify_header(line)
    if header:
        return header

    button_seat = _button_seat(line)
    if button_seat is not None:
        return ClassifiedLine(kind='button', raw=line, button_seat=button_seat)

    seat = safe_match(SEAT_RE, line, re.IGNORECASE)
    if seat:
        return ClassifiedLine(
            kind='seat',
            raw=line,
            seat=int(seat.group(1)),
            player=seat.group(2).strip(),
        )

    uncalled = safe_match(UNCALLED_RE, line, re.IGNORECASE)
    if uncalled:
        return ClassifiedLine(
            kind='uncalled',
            raw=line,
            amount=clean_amount(uncalled.group(1)),
            player=uncalled.group(2).strip(),
        )

    action = safe_match(ACTION_RE, line)
    if action:
        player = action.group(1).strip()
        if player.startswith('#') or player.lower().startswith('seat '):
            logger.debug(f"Skipping non-action line: {line}")
            return None
        return parse_action(player, action.group(2).strip(), line)

    logger.debug(f"Unrecognized line: {line}")
    return None
