"""
Situational tag rules.

Each rule is a pure predicate over one street of an already structured
hand. Target rules tag the target's street fragment, actor rules tag an
action fragment of any player. New rules only need an entry in the tables.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from hhnotes.parse.schemas import ACTIONABLE_TYPES, AGGRESSIVE_TYPES, EventBase, ParsedHand
from hhnotes.derive.strength import board_is_paired

STREET_LETTERS = {"flop": "f", "turn": "t", "river": "r"}


@dataclass(frozen=True)
class StreetView:
    """Actionable events of one street, with the target's primary action."""
    parsed: ParsedHand
    street: str
    actions: Tuple[EventBase, ...]
    primary: Optional[EventBase]

    @property
    def target(self) -> str:
        return self.parsed.target_player

    def index_of(self, event: EventBase) -> int:
        for index, candidate in enumerate(self.actions):
            if candidate is event:
                return index
        return -1

    def aggression_before(self, index: int) -> bool:
        return any(event.type in AGGRESSIVE_TYPES for event in self.actions[:index])


def actionable_events(parsed: ParsedHand, street: str) -> List[EventBase]:
    return [event for event in parsed.street_events(street) if event.type in ACTIONABLE_TYPES]


def find_primary_action(parsed: ParsedHand, street: str) -> Optional[EventBase]:
    """
    The target's defining action on a street.

    Preflop it is the target's last bet or raise, else their first action;
    postflop it is their first action.
    """
    target = parsed.target_player
    if not target:
        return None
    own = [event for event in actionable_events(parsed, street) if event.player == target]
    if not own:
        return None
    if street == "preflop":
        aggressive = [event for event in own if event.type in AGGRESSIVE_TYPES]
        if aggressive:
            return aggressive[-1]
    return own[0]


def street_view(parsed: ParsedHand, street: str) -> StreetView:
    return StreetView(
        parsed=parsed,
        street=street,
        actions=tuple(actionable_events(parsed, street)),
        primary=find_primary_action(parsed, street),
    )


def last_preflop_aggressor(parsed: ParsedHand) -> str:
    aggressive = [e for e in actionable_events(parsed, "preflop") if e.type in AGGRESSIVE_TYPES]
    return aggressive[-1].player if aggressive else ""


# ----------------------------------------------------------------------
# Target rules
# ----------------------------------------------------------------------

def is_slowplayed_nuts(view: StreetView) -> bool:
    """Turn: target checks the nut straight, nobody bets, an opponent checks behind."""
    if view.street != "turn" or view.primary is None or view.primary.type != "check":
        return False
    if view.parsed.showdown.target_street_class.turn != "nutstr":
        return False
    if any(event.type in AGGRESSIVE_TYPES for event in view.actions):
        return False
    start = view.index_of(view.primary)
    return any(
        event.type == "check" and event.player != view.target
        for event in view.actions[start + 1:]
    )


def is_pot_control(view: StreetView) -> bool:
    """River: target checks on a paired board."""
    if view.street != "river" or view.primary is None or view.primary.type != "check":
        return False
    return board_is_paired(view.parsed.board.cards_for("river"))


TARGET_RULES: List[Tuple[str, Callable[[StreetView], bool]]] = [
    ("[z]", is_slowplayed_nuts),
    ("[potctrl]", is_pot_control),
]


def target_tags(view: StreetView) -> List[str]:
    return [tag for tag, rule in TARGET_RULES if rule(view)]


# ----------------------------------------------------------------------
# Actor rules
# ----------------------------------------------------------------------

def is_light_fold(view: StreetView, event: EventBase) -> bool:
    """A fold by a player who bet or raised earlier after the flop."""
    if event.type != "fold" or view.street not in STREET_LETTERS:
        return False
    index = view.index_of(event)
    if any(e.player == event.player and e.type in AGGRESSIVE_TYPES for e in view.actions[:index]):
        return True
    for street in ("flop", "turn"):
        if street == view.street:
            break
        if any(e.player == event.player and e.type in AGGRESSIVE_TYPES
               for e in actionable_events(view.parsed, street)):
            return True
    return False


def is_steal(view: StreetView, event: EventBase) -> bool:
    """A postflop bet or raise that only gets folds."""
    if event.type not in AGGRESSIVE_TYPES or view.street not in STREET_LETTERS:
        return False
    responses = [e for e in view.actions[view.index_of(event) + 1:] if e.player != event.player]
    return bool(responses) and all(e.type == "fold" for e in responses)


ACTOR_RULES: List[Tuple[str, Callable[[StreetView, EventBase], bool]]] = [
    ("L", is_light_fold),
    ("S", is_steal),
]


def actor_tags(view: StreetView, event: EventBase) -> List[str]:
    """Actor tags carry the street letter, e.g. 'Lt' for a light turn fold."""
    letter = STREET_LETTERS.get(view.street, "")
    return [f"{prefix}{letter}" for prefix, rule in ACTOR_RULES if rule(view, event)]


def target_fold_street(parsed: ParsedHand) -> str:
    """First postflop street the target folds on, '' when none or the target showed."""
    target = parsed.target_player
    if not target or parsed.showdown.show_cards_by_player.get(target):
        return ""
    for street in STREET_LETTERS:
        if any(e.player == target and e.type == "fold" for e in actionable_events(parsed, street)):
            return street
    return ""


def target_actor_tags(view: StreetView) -> List[str]:
    """
    Actor tags on the target's own postflop fragment, only without shown cards.
    A later postflop fold is carried back: every target street up to the fold
    street gets 'L' with the fold street letter.
    """
    if view.primary is None or view.street not in STREET_LETTERS:
        return []
    if view.parsed.showdown.show_cards_by_player.get(view.target):
        return []

    tags = []
    fold_street = target_fold_street(view.parsed)
    streets = list(STREET_LETTERS)
    if fold_street and streets.index(view.street) <= streets.index(fold_street):
        tags.append(f"L{STREET_LETTERS[fold_street]}")
    tags.extend(tag for tag in actor_tags(view, view.primary) if tag not in tags)
    return tags
