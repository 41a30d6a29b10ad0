"""
Pydantic schemas for parsed Omaha hand histories.
Defines events, board, blinds, showdown info and the per-hand parse result.
"""

from typing import Annotated, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field

# Type definitions
Street = Literal["preflop", "flop", "turn", "river"]

STREETS = ("preflop", "flop", "turn", "river")
POSTFLOP_STREETS = ("flop", "turn", "river")

PostType = Literal["ante", "small_blind", "big_blind", "straddle"]
PassiveType = Literal["check", "fold"]
WagerType = Literal["call", "bet"]

ACTIONABLE_TYPES = ("check", "fold", "call", "bet", "raise")
AGGRESSIVE_TYPES = ("bet", "raise")
FORCED_TYPES = ("ante", "small_blind", "big_blind", "straddle")


class EventBase(BaseModel):
    """Fields shared by every timeline event."""
    street: Street
    player: str
    raw: str = ""
    pot_before: float = 0.0
    pot_after: float = 0.0


class PostEvent(EventBase):
    """Forced money: ante, blinds and straddles."""
    type: PostType
    amount: Optional[float] = None
    amount_bb: Optional[float] = None


class PassiveEvent(EventBase):
    type: PassiveType


class WagerEvent(EventBase):
    """A call or a bet; `amount` is the money added to the pot."""
    type: WagerType
    amount: Optional[float] = None
    all_in: bool = False
    amount_bb: Optional[float] = None
    pct_pot: Optional[float] = None
    uncalled_returned: Optional[float] = None


class RaiseEvent(EventBase):
    """
    A raise. `amount` is the delta actually added to the pot,
    `amount_raw` the number written on the line and `to_amount`
    the new round total.
    """
    type: Literal["raise"]
    amount: Optional[float] = None
    amount_raw: Optional[float] = None
    to_amount: Optional[float] = None
    all_in: bool = False
    amount_bb: Optional[float] = None
    to_amount_bb: Optional[float] = None
    pct_pot: Optional[float] = None
    to_pct_pot: Optional[float] = None
    uncalled_returned: Optional[float] = None


class ShowEvent(EventBase):
    type: Literal["show"]
    cards: List[str] = []


class OtherEvent(EventBase):
    """Action line with a verb outside the known set."""
    type: Literal["other"]


Event = Annotated[
    Union[PostEvent, PassiveEvent, WagerEvent, RaiseEvent, ShowEvent, OtherEvent],
    Field(discriminator="type"),
]


class Blinds(BaseModel):
    small_blind: Optional[float] = None
    big_blind: Optional[float] = None


class Board(BaseModel):
    """Community cards. A turn implies a full flop, a river implies a turn."""
    flop: List[str] = []
    turn: Optional[str] = None
    river: Optional[str] = None

    def cards_for(self, street: str) -> List[str]:
        """Board visible on a postflop street, or [] when it is incomplete."""
        if len(self.flop) < 3:
            return []
        if street == "flop":
            return list(self.flop)
        if street == "turn":
            return list(self.flop) + [self.turn] if self.turn else []
        if street == "river":
            if self.turn and self.river:
                return list(self.flop) + [self.turn, self.river]
            return []
        return []


class StreetClass(BaseModel):
    """Best-hand token per postflop street, empty when not computable."""
    flop: str = ""
    turn: str = ""
    river: str = ""
    straight_high: Dict[str, int] = {}

    def get(self, street: str) -> str:
        return getattr(self, street, "") if street in POSTFLOP_STREETS else ""


class ShowdownInfo(BaseModel):
    """Revealed cards and their per-street classification."""
    seen: bool = False
    mandatory: bool = False
    show_events: List[ShowEvent] = []
    voluntary_show_events: List[ShowEvent] = []

    target_cards: List[str] = []
    target_street_class: StreetClass = Field(default_factory=StreetClass)
    primary_opponent: str = ""
    primary_opponent_cards: List[str] = []
    opponent_street_class: StreetClass = Field(default_factory=StreetClass)

    show_cards_by_player: Dict[str, List[str]] = {}
    street_class_by_player: Dict[str, StreetClass] = {}
    # draw and board-texture tags, e.g. {"flop": ["wrap"], "turn": ["FLB"]}
    street_tags_by_player: Dict[str, Dict[str, List[str]]] = {}


def _empty_events() -> Dict[str, List[Event]]:
    return {street: [] for street in STREETS}


def _empty_start_pots() -> Dict[str, Optional[float]]:
    return {street: None for street in STREETS}


class ParsedHand(BaseModel):
    """Complete parse result for one hand and one target identifier."""
    # Metadata
    hand_id: Optional[str] = None
    game_label: str = ""
    game_card_count: Optional[int] = None
    blinds: Blinds = Field(default_factory=Blinds)

    # Table
    button_seat: Optional[int] = None
    seats: Dict[int, str] = {}
    players: List[str] = []
    positions_by_player: Dict[str, str] = {}

    # Action
    board: Board = Field(default_factory=Board)
    street_start_pot: Dict[str, Optional[float]] = Field(default_factory=_empty_start_pots)
    events: Dict[str, List[Event]] = Field(default_factory=_empty_events)

    # Target
    target_player: str = ""
    target_id_hint: str = ""
    target_cards: List[str] = []

    showdown: ShowdownInfo = Field(default_factory=ShowdownInfo)

    def street_events(self, street: str) -> List[EventBase]:
        return list(self.events.get(street, []))

    def position_of(self, player: str) -> str:
        return self.positions_by_player.get(player, "")


class NoteFields(BaseModel):
    """Per-street note text, as exchanged with the dictation parser."""
    preflop: str = ""
    flop: str = ""
    turn: str = ""
    river: str = ""
    presupposition: str = ""

    def get(self, field: str) -> str:
        return getattr(self, field, "") or ""
