"""
Merging dictated per-street notes with facts from the hand history.

Two passes, both idempotent for stable input:

- normalize_units: chip amounts typed after an action prefix ("r96",
  "cb252") become bb preflop and percent of pot postflop ("r16bb", "cb75").
- merge: cleans artifacts, handles showdown wording and replaces each
  street with the synthesized note when there is one.
"""
import re
import logging
from typing import Dict, List, Tuple, Union

from hhnotes.config import get_config
from hhnotes.parse.schemas import STREETS, NoteFields, ParsedHand
from hhnotes.parse.utils import format_num, safe_ratio
from .synthesizer import synthesize
from .tokens import bb_size, pct_size

logger = logging.getLogger(__name__)

FieldsLike = Union[NoteFields, Dict[str, str], None]

ARTIFACT_PATTERNS = [
    r'\(\s*\d+\s+\d+(?:\.\d+)?bb\s*\)',
    r'\bvs\s*\d+c\b',
    r'\b(?:tclass|vclass|tcards|vcards)_[a-z0-9_]*',
]
SHOW_TOKEN_RE = re.compile(r'\bshow(?:ed)?\b', re.IGNORECASE)


def as_fields(fields: FieldsLike) -> NoteFields:
    if fields is None:
        return NoteFields()
    if isinstance(fields, NoteFields):
        return fields.model_copy()
    return NoteFields(**{k: (v or "") for k, v in fields.items() if k in NoteFields.model_fields})


def _tidy(text: str) -> str:
    """Normalize ' / ' separators and whitespace, trim edge slashes."""
    text = re.sub(r'(?:\s*/\s*)+', ' / ', text)
    text = re.sub(r'^(?:\s*/\s*)+|(?:\s*/\s*)+$', '', text)
    return re.sub(r'\s+', ' ', text).strip()


def sanitize_artifacts(text: str) -> str:
    """Drop bb annotations, 'vs<n>c' markers and internal class/card tags."""
    text = text or ""
    for pattern in ARTIFACT_PATTERNS:
        text = re.sub(pattern, ' ', text, flags=re.IGNORECASE)
    return _tidy(text)


def strip_showed_token(text: str) -> str:
    return _tidy(SHOW_TOKEN_RE.sub(' ', text or ""))


def _has_token(text: str, token: str) -> bool:
    return bool(re.search(rf'(?<![\w]){re.escape(token)}(?![\w])', text or "", re.IGNORECASE))


def unit_replacements(parsed: ParsedHand, street: str) -> List[Tuple[str, str]]:
    """
    (raw, normalized) pairs for the target's chip amounts on a street.
    A raise contributes its new total, its delta and the number as written,
    each sized on its own. Longest raw text first, first mapping per raw
    value kept.
    """
    target = parsed.target_player
    if not target:
        return []

    big_blind = parsed.blinds.big_blind
    pairs: List[Tuple[float, str]] = []
    for event in parsed.street_events(street):
        if event.player != target:
            continue
        kind = event.type
        if street == "preflop":
            if kind == "raise":
                pairs.append((event.to_amount, bb_size(event.to_amount_bb)))
                pairs.append((event.amount, bb_size(event.amount_bb)))
                pairs.append((event.amount_raw, bb_size(safe_ratio(event.amount_raw, big_blind))))
            elif kind in ("call", "bet"):
                pairs.append((event.amount, bb_size(event.amount_bb)))
        else:
            if kind == "bet":
                pairs.append((event.amount, pct_size(event.pct_pot)))
            elif kind == "raise":
                pairs.append((event.to_amount, pct_size(event.to_pct_pot)))
                pairs.append((event.amount, pct_size(event.pct_pot)))
                pairs.append((event.amount_raw, pct_size(safe_ratio(event.amount_raw, event.pot_before, 100))))

    seen: Dict[str, str] = {}
    for raw, normalized in pairs:
        raw_text = format_num(raw)
        if raw_text and normalized and raw_text not in seen:
            seen[raw_text] = normalized
    return sorted(seen.items(), key=lambda item: len(item[0]), reverse=True)


def canonicalize_text(text: str, replacements: List[Tuple[str, str]]) -> str:
    """Rewrite '<prefix><raw>' occurrences in one pass."""
    if not text or not replacements:
        return text or ""

    prefixes = sorted(get_config().canonicalize.action_prefixes, key=len, reverse=True)
    mapping = dict(replacements)
    pattern = re.compile(
        r'\b(' + '|'.join(re.escape(p) for p in prefixes) + r')\s*('
        + '|'.join(re.escape(raw) for raw, _ in replacements)
        + r')(?!\.?\d)(?!bb\b)',
        re.IGNORECASE,
    )
    return pattern.sub(lambda m: f"{m.group(1)}{mapping[m.group(2)]}", text)


def normalize_units(fields: FieldsLike, parsed: ParsedHand) -> NoteFields:
    """
    Convert chip amounts in dictated street text to bb / pot percentage.
    The presupposition field is left untouched.
    """
    result = as_fields(fields)
    for street in STREETS:
        replacements = unit_replacements(parsed, street)
        setattr(result, street, canonicalize_text(result.get(street), replacements))
    return result


def merge(fields: FieldsLike, parsed: ParsedHand) -> NoteFields:
    """
    Final note fields for one hand.

    Steps: sanitize every field; on a mandatory showdown strip 'show(ed)';
    replace each street by its synthesized note when non-empty; on a
    mandatory showdown append one showdown token to the river (or to the
    presupposition when the river is empty).
    """
    result = as_fields(fields)
    mandatory = parsed.showdown.mandatory
    names = list(STREETS) + ["presupposition"]

    for name in names:
        text = sanitize_artifacts(result.get(name))
        if mandatory:
            text = strip_showed_token(text)
        setattr(result, name, text)

    synthesized = synthesize(parsed)
    for street in STREETS:
        note = synthesized.get(street)
        if note:
            setattr(result, street, note)

    if mandatory:
        token = get_config().notes.showdown_token
        field = "river" if result.river else "presupposition"
        if not _has_token(result.get(field), token):
            setattr(result, field, f"{result.get(field)} {token}".strip())

    logger.debug(f"[merge] hand={parsed.hand_id} target={parsed.target_player or '-'} mandatory={mandatory}")
    return result
