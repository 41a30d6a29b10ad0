"""
Entry points for parsing hand histories.
Runs the tracker, then derives positions, target and showdown info.
"""

import logging
from pathlib import Path
from typing import Iterator, List, Tuple, Union

from hhnotes.derive.positions import assign_positions
from hhnotes.derive.showdown import build_showdown
from hhnotes.derive.target import extract_target_id_hint, find_target_player
from .schemas import ParsedHand
from .tracker import track_hand
from .utils import iter_hands

logger = logging.getLogger(__name__)


def parse_hand_history(text: str, opponent: str = "") -> ParsedHand:
    """
    Parse one hand for one target identifier.

    Never raises: malformed input degrades to empty or None fields.

    Args:
        text: Raw text of a single hand
        opponent: External identifier of the target player

    Returns:
        ParsedHand
    """
    try:
        tracked = track_hand(text or "")
        target = find_target_player(opponent, tracked.players)
        showdown = build_showdown(
            target,
            tracked.board,
            tracked.events,
            tracked.show_events,
            voluntary_show_events=tracked.voluntary_show_events,
            showdown_seen=tracked.showdown_seen,
        )

        return ParsedHand(
            hand_id=tracked.hand_id,
            game_label=tracked.game_label,
            game_card_count=tracked.game_card_count,
            blinds=tracked.blinds,
            button_seat=tracked.button_seat,
            seats=tracked.seats,
            players=tracked.players,
            positions_by_player=assign_positions(tracked.button_seat, tracked.seats),
            board=tracked.board,
            street_start_pot=tracked.street_start_pot,
            events=tracked.events,
            target_player=target,
            target_id_hint=extract_target_id_hint(opponent),
            target_cards=showdown.target_cards,
            showdown=showdown,
        )
    except Exception as e:
        logger.warning(f"Failed to parse hand ({len(text or '')} chars): {e}")
        return ParsedHand(target_id_hint=extract_target_id_hint(opponent))


class ParserRunner:
    """Splits multi-hand exports and parses each hand for one target."""

    def __init__(self, opponent: str = ""):
        """
        Args:
            opponent: External identifier of the target player
        """
        self.opponent = opponent

    def iter_text(self, text: str) -> Iterator[Tuple[str, ParsedHand]]:
        """Yield (hand_text, parsed) for every hand in the text."""
        for _, _, hand_text in iter_hands(text):
            yield hand_text, parse_hand_history(hand_text, self.opponent)

    def parse_text(self, text: str, file_id: str = "unknown") -> List[ParsedHand]:
        """
        Parse every hand in a text blob.

        Args:
            text: Raw hand history text
            file_id: Identifier used in log messages

        Returns:
            List of ParsedHand
        """
        hands = [parsed for _, parsed in self.iter_text(text)]
        logger.info(f"Parsed {len(hands)} hands from {file_id}")
        return hands

    def read_file(self, file_path: Union[str, Path]) -> str:
        file_path = Path(file_path)
        if not file_path.exists():
            logger.error(f"File not found: {file_path}")
            return ""
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()

    def parse_file(self, file_path: Union[str, Path]) -> List[ParsedHand]:
        """
        Parse a single file containing hand histories.

        Returns:
            List of ParsedHand, empty when the file is missing
        """
        return self.parse_text(self.read_file(file_path), file_id=Path(file_path).name)
