"""
Utility functions for hand history parsing.
Provides money/card parsing, rounding helpers and the multi-hand splitter.
"""

import re
import logging
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

CARD_PATTERN = r'[AKQJT2-9][schd]'

HAND_START_PATTERNS = [
    r'^PokerStars\s+(?:Hand|Game|Zoom\s+Hand)\s*#\d+',
    r'^Poker\s+Hand\s*#\w+',
    r'^Hand\s*#\d+',
]


def iter_hands(text: str) -> Iterator[Tuple[int, int, str]]:
    """
    Iterate through individual hands in a multi-hand export.

    Yields tuples of (start_offset, end_offset, hand_text). A file without
    any recognizable header is yielded whole when it carries a
    "*** HOLE CARDS ***" marker.
    """
    combined_pattern = '|'.join(f'(?:{p})' for p in HAND_START_PATTERNS)
    hand_pattern = re.compile(combined_pattern, re.MULTILINE | re.IGNORECASE)

    matches = list(hand_pattern.finditer(text))

    if not matches:
        if safe_match(r'\*\*\*\s*HOLE\s+CARDS\s*\*\*\*', text, re.IGNORECASE):
            yield (0, len(text), text.strip())
        return

    for i, match in enumerate(matches):
        start_idx = match.start()
        end_idx = matches[i + 1].start() if i < len(matches) - 1 else len(text)

        hand_text = text[start_idx:end_idx].strip()
        if hand_text:
            yield (start_idx, end_idx, hand_text)


def clean_amount(s: Optional[str]) -> Optional[float]:
    """
    Clean and normalize monetary amounts.

    Everything except digits, '.', ',' and '-' is stripped first, so
    currency symbols and codes disappear:
    - "¥1,234.56" -> 1234.56
    - "1234,56" -> 1234.56 (comma as decimal separator)
    - "$100" -> 100.0

    Returns None when nothing numeric is left.
    """
    if not s:
        return None

    s = re.sub(r'[^0-9.,\-]', '', str(s))
    s = s.rstrip('.,')

    if not s or not re.search(r'\d', s):
        return None

    try:
        if ',' in s and '.' not in s:
            parts = s.split(',')
            if len(parts) == 2 and len(parts[1]) <= 2:
                s = s.replace(',', '.')
            else:
                s = s.replace(',', '')
        elif ',' in s and '.' in s:
            s = s.replace(',', '')

        return float(s)
    except ValueError:
        logger.debug(f"Could not parse amount: {s}")
        return None


def safe_match(pattern: str, line: str, flags: int = 0) -> Optional[re.Match]:
    """
    Safe regex matching with error handling.

    Args:
        pattern: Regex pattern string
        line: Text to match against
        flags: Optional regex flags

    Returns:
        Match object if found, None otherwise
    """
    try:
        return re.search(pattern, line, flags)
    except re.error as e:
        logger.error(f"Regex error with pattern '{pattern}': {e}")
        return None


def parse_cards(card_string: str) -> List[str]:
    """
    Parse card representations into standardized format.

    - "Ah Kd" -> ["Ah", "Kd"]
    - "[Ah Kd]" -> ["Ah", "Kd"]
    - "A♥ K♦" -> ["Ah", "Kd"]
    """
    if not card_string:
        return []

    card_string = card_string.strip('[]')

    suit_map = {
        '♠': 's', '♣': 'c', '♥': 'h', '♦': 'd',
        '♤': 's', '♧': 'c', '♡': 'h', '♢': 'd'
    }
    for unicode_suit, letter in suit_map.items():
        card_string = card_string.replace(unicode_suit, letter)

    cards = re.findall(CARD_PATTERN, card_string, re.IGNORECASE)
    return [card[0].upper() + card[1].lower() for card in cards]


def round2(value: Optional[float]) -> Optional[float]:
    """Round half-up to two decimals (2.675 -> 2.68, not banker's rounding)."""
    if value is None:
        return None
    try:
        quantized = Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None
    return float(quantized)


def round_half_up(value: Optional[float]) -> Optional[int]:
    """Round to the nearest integer, halves away from zero (10.5 -> 11)."""
    if value is None:
        return None
    try:
        return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return None


def format_num(value: Optional[float]) -> str:
    """
    Compact number formatting used in note tokens.

    Rounds to two decimals and drops trailing zeros: 16.0 -> "16",
    10.50 -> "10.5", 8.6957 -> "8.7". None formats as an empty string.
    """
    rounded = round2(value)
    if rounded is None:
        return ''
    text = f"{rounded:.2f}".rstrip('0').rstrip('.')
    if text in ('-0', ''):
        return '0'
    return text


def safe_ratio(numerator: Optional[float], denominator: Optional[float], scale: float = 1.0) -> Optional[float]:
    """numerator / denominator * scale, rounded; None when undefined."""
    if numerator is None or denominator is None or denominator <= 0:
        return None
    return round2(numerator / denominator * scale)
