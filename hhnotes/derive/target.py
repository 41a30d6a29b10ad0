"""
Target player resolution.

Matches an externally supplied opponent identifier (free text from the UI
or an import job, e.g. "ThatWas 86761294") against the players of a hand.
"""
import re
import logging
from typing import List

logger = logging.getLogger(__name__)

ID_HINT_RE = re.compile(r'\d{4,}')


def extract_target_id_hint(identifier: str) -> str:
    """
    Longest run of 4+ digits in the identifier; on ties the last run wins.

    Returns '' when the identifier has no such run.
    """
    runs = ID_HINT_RE.findall(identifier or '')
    best = ''
    for run in runs:
        if len(run) >= len(best):
            best = run
    return best


def extract_target_identity(identifier: str) -> str:
    """
    Stable identity key for an identifier: its numeric hint when present,
    otherwise the lowercase alphanumeric characters only.

    Idempotent: extract_target_identity(extract_target_identity(x)) equals
    extract_target_identity(x).
    """
    hint = extract_target_id_hint(identifier)
    if hint:
        return hint
    normalized = re.sub(r'[^a-z0-9]', '', (identifier or '').lower())
    # separators removed above can join digits into a new hint
    return extract_target_id_hint(normalized) or normalized


def find_target_player(identifier: str, players: List[str]) -> str:
    """
    Resolve the identifier to one of the players, first match wins.

    Priority:
    1. player name containing the identifier's digit hint
    2. exact case-insensitive name
    3. case-insensitive containment in either direction

    Returns:
        Matching player name, or '' when nothing matches
    """
    identifier = (identifier or '').strip()
    if not identifier or not players:
        return ''

    hint = extract_target_id_hint(identifier)
    if hint:
        for player in players:
            if hint in player:
                return player

    lowered = identifier.lower()
    for player in players:
        if player.lower() == lowered:
            return player

    for player in players:
        name = player.lower()
        if name and (lowered in name or name in lowered):
            return player

    logger.debug(f"No player matches identifier '{identifier}'")
    return ''
