"""
Event/pot tracker for a single hand.

Classified lines are fed in document order to a small state machine whose
states are the betting streets plus showdown and summary. Round-scoped
bookkeeping (running pot, per-player contribution this round) lives in a
RoundState that is recreated on every street transition.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .lines import ClassifiedLine, classify_line
from .schemas import (
    AGGRESSIVE_TYPES,
    FORCED_TYPES,
    Blinds,
    Board,
    EventBase,
    OtherEvent,
    PassiveEvent,
    PostEvent,
    RaiseEvent,
    ShowEvent,
    STREETS,
    WagerEvent,
)
from .utils import round2, safe_ratio

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    """Tracker states; the first four are betting streets."""
    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    SHOWDOWN = "showdown"
    SUMMARY = "summary"

    @property
    def is_betting(self) -> bool:
        return self.value in STREETS


@dataclass
class RoundState:
    """Money state scoped to one betting round."""
    pot: float
    contributions: Dict[str, float] = field(default_factory=dict)

    def contributed(self, player: str) -> float:
        return self.contributions.get(player, 0.0)

    def add(self, player: str, amount: float, count_for_round: bool = True) -> None:
        self.pot = round2(self.pot + amount)
        if count_for_round:
            self.contributions[player] = round2(self.contributed(player) + amount)


@dataclass
class TrackedHand:
    """Everything the tracker collects for one hand."""
    hand_id: Optional[str] = None
    game_label: str = ""
    game_card_count: Optional[int] = None
    blinds: Blinds = field(default_factory=Blinds)
    button_seat: Optional[int] = None
    seats: Dict[int, str] = field(default_factory=dict)
    players: List[str] = field(default_factory=list)
    board: Board = field(default_factory=Board)
    street_start_pot: Dict[str, Optional[float]] = field(
        default_factory=lambda: {street: None for street in STREETS}
    )
    events: Dict[str, List[EventBase]] = field(
        default_factory=lambda: {street: [] for street in STREETS}
    )
    show_events: List[ShowEvent] = field(default_factory=list)
    voluntary_show_events: List[ShowEvent] = field(default_factory=list)
    showdown_seen: bool = False

    def add_player(self, player: str) -> None:
        if player and player not in self.players:
            self.players.append(player)


class HandTracker:
    """
    Consumes the lines of one hand and builds its event timeline.

    Usage:
        tracker = HandTracker()
        for line in text.splitlines():
            tracker.feed(line)
        tracked = tracker.finish()
    """

    def __init__(self):
        self.phase = Phase.PREFLOP
        self.street = "preflop"
        self.dealt = False
        self.round = RoundState(pot=0.0)
        self.hand = TrackedHand()
        self._posted_blinds: Dict[str, float] = {}

    # ------------------------------------------------------------------
    # Line dispatch
    # ------------------------------------------------------------------

    def feed(self, line: str) -> None:
        if self.phase is Phase.SUMMARY:
            return

        classified = classify_line(line)
        if classified is None:
            return

        handler = getattr(self, f"_on_{classified.kind}")
        handler(classified)

    def feed_lines(self, lines) -> "HandTracker":
        for line in lines:
            self.feed(line)
        return self

    def _on_header(self, line: ClassifiedLine) -> None:
        hand = self.hand
        if line.hand_id and not hand.hand_id:
            hand.hand_id = line.hand_id
        if line.game_label and not hand.game_label:
            hand.game_label = line.game_label
            hand.game_card_count = line.card_count
        if hand.blinds.big_blind is None and line.big_blind is not None:
            hand.blinds = Blinds(small_blind=line.small_blind, big_blind=line.big_blind)
        if line.button_seat is not None and hand.button_seat is None:
            hand.button_seat = line.button_seat

    def _on_button(self, line: ClassifiedLine) -> None:
        if self.hand.button_seat is None:
            self.hand.button_seat = line.button_seat

    def _on_seat(self, line: ClassifiedLine) -> None:
        # seat lines after the deal are summary or rebuy noise
        if self.dealt:
            return
        self.hand.seats[line.seat] = line.player
        self.hand.add_player(line.player)

    def _on_summary(self, line: ClassifiedLine) -> None:
        self.phase = Phase.SUMMARY

    def _on_street(self, line: ClassifiedLine) -> None:
        marker = line.marker
        if marker == "hole_cards":
            self.dealt = True
            return

        if marker == "showdown":
            self.phase = Phase.SHOWDOWN
            self.hand.showdown_seen = True
            return

        self._record_board(marker, line.cards, line.run)

        # later run-it-twice markers never move back to an earlier street
        if STREETS.index(marker) <= STREETS.index(self.street):
            return

        self.dealt = True
        self.phase = Phase(marker)
        self.street = marker
        if self.hand.street_start_pot[marker] is None:
            self.hand.street_start_pot[marker] = round2(self.round.pot)
        self.round = RoundState(pot=self.round.pot)

    def _record_board(self, marker: str, cards: List[str], run: Optional[str]) -> None:
        board = self.hand.board
        if run == "second" and (board.flop or board.turn or board.river):
            return
        if marker == "flop":
            if not board.flop and len(cards) == 3:
                board.flop = cards
        elif marker == "turn":
            if board.turn is None and len(board.flop) == 3 and cards:
                board.turn = cards[0]
        elif marker == "river":
            if board.river is None and board.turn and cards:
                board.river = cards[0]

    def _on_uncalled(self, line: ClassifiedLine) -> None:
        """
        Attach an uncalled-bet return to the player's latest bet or raise.

        The pot is left untouched. When the bet was partly matched by a
        call or raise, its effective amount shrinks by the returned chips.
        """
        if not self.phase.is_betting or line.amount is None:
            return

        street_events = self.hand.events[self.street]
        for index in range(len(street_events) - 1, -1, -1):
            prev = street_events[index]
            if prev.player != line.player:
                continue
            if prev.type not in AGGRESSIVE_TYPES:
                continue

            prev.uncalled_returned = line.amount
            matched = any(
                later.player != line.player and later.type in ("call", "raise")
                for later in street_events[index + 1:]
            )
            if matched and prev.amount is not None:
                prev.amount = round2(max(0.0, prev.amount - line.amount))
            break

    def _on_action(self, line: ClassifiedLine) -> None:
        if line.action == "other":
            if self.dealt and self.phase.is_betting:
                self.hand.events[self.street].append(
                    OtherEvent(street=self.street, player=line.player, raw=line.raw,
                               type="other", pot_before=self.round.pot, pot_after=self.round.pot)
                )
            return

        if line.action == "show":
            self._on_show(line)
            return

        if self.phase is Phase.SHOWDOWN:
            logger.debug(f"Ignoring action during showdown: {line.raw}")
            return

        self.hand.add_player(line.player)
        event = self._build_event(line)
        self.hand.events[self.street].append(event)

    def _on_show(self, line: ClassifiedLine) -> None:
        self.hand.add_player(line.player)
        event = ShowEvent(
            street=self.street,
            player=line.player,
            raw=line.raw,
            type="show",
            cards=line.cards,
            pot_before=self.round.pot,
            pot_after=self.round.pot,
        )
        self.hand.show_events.append(event)
        if self.phase is not Phase.SHOWDOWN:
            self.hand.voluntary_show_events.append(event)
            self.hand.events[self.street].append(event)

    # ------------------------------------------------------------------
    # Money bookkeeping
    # ------------------------------------------------------------------

    def _build_event(self, line: ClassifiedLine) -> EventBase:
        player = line.player
        action = line.action
        pot_before = self.round.pot
        common = dict(street=self.street, player=player, raw=line.raw, pot_before=pot_before)

        if action in ("check", "fold"):
            return PassiveEvent(type=action, pot_after=pot_before, **common)

        amount = line.amount

        if action in FORCED_TYPES:
            if amount is not None:
                self.round.add(player, amount, count_for_round=(action != "ante"))
                if action in ("small_blind", "big_blind"):
                    self._posted_blinds.setdefault(action, amount)
            return PostEvent(type=action, amount=amount, pot_after=self.round.pot, **common)

        if action in ("call", "bet"):
            if amount is not None:
                self.round.add(player, amount)
            return WagerEvent(type=action, amount=amount, all_in=line.all_in,
                              pot_after=self.round.pot, **common)

        # raise
        to_amount = line.to_amount
        previous = self.round.contributed(player)
        delta = amount
        if to_amount is not None and to_amount - previous >= 0:
            delta = round2(to_amount - previous)

        if delta is not None:
            self.round.pot = round2(self.round.pot + delta)
            if to_amount is not None:
                self.round.contributions[player] = to_amount
            else:
                self.round.contributions[player] = round2(previous + delta)

        return RaiseEvent(type="raise", amount=delta, amount_raw=amount, to_amount=to_amount,
                          all_in=line.all_in, pot_after=self.round.pot, **common)

    # ------------------------------------------------------------------
    # Finalization
    # ------------------------------------------------------------------

    def finish(self) -> TrackedHand:
        """Fill fallbacks and attach bb / pot-percentage decorations."""
        hand = self.hand

        if hand.blinds.big_blind is None and "big_blind" in self._posted_blinds:
            hand.blinds = Blinds(
                small_blind=self._posted_blinds.get("small_blind"),
                big_blind=self._posted_blinds["big_blind"],
            )

        if hand.street_start_pot["preflop"] is None:
            forced = sum(
                event.amount or 0.0
                for event in hand.events["preflop"]
                if event.type in FORCED_TYPES
            )
            hand.street_start_pot["preflop"] = round2(forced)

        bb = hand.blinds.big_blind
        for street in STREETS:
            for event in hand.events[street]:
                decorate_event(event, bb)

        return hand


def decorate_event(event: EventBase, big_blind: Optional[float]) -> None:
    """
    Set amount_bb on every amount-bearing event and pot percentages on
    calls, bets and raises. Raise percentages use the delta.
    """
    if event.type in ("check", "fold", "show", "other"):
        return

    event.amount_bb = safe_ratio(event.amount, big_blind)
    if event.type in FORCED_TYPES:
        return

    event.pct_pot = safe_ratio(event.amount, event.pot_before, 100)
    if event.type == "raise":
        event.to_amount_bb = safe_ratio(event.to_amount, big_blind)
        event.to_pct_pot = safe_ratio(event.to_amount, event.pot_before, 100)


def track_hand(text: str) -> TrackedHand:
    """Run the tracker over the lines of one hand."""
    return HandTracker().feed_lines(text.splitlines()).finish()
