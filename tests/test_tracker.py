"""
Tests for the event/pot tracker and the parse entry points.
"""

from hhnotes.parse.runner import ParserRunner, parse_hand_history
from hhnotes.parse.schemas import ParsedHand
from hhnotes.parse.tracker import HandTracker, Phase, track_hand
from hand_samples import (
    ALLIN_RUN_TWICE_HH,
    FULL_UNCALLED_RETURN_HH,
    RAISE_MULTIPLE_HH,
    RUN_TWICE_SHOWDOWN_HH,
    STRADDLE_SHOWDOWN_HH,
    SUMMARY_SEATS_HH,
    VOLUNTARY_SHOW_HH,
)


def _first(events, player, event_type):
    return next(e for e in events if e.player == player and e.type == event_type)


class TestPotTracking:
    """Pot sizes, raise deltas and pot percentages."""

    def setup_method(self):
        self.hand = track_hand(STRADDLE_SHOWDOWN_HH)

    def test_metadata(self):
        assert self.hand.hand_id == '1423128345'
        assert self.hand.game_label == '5 Card Omaha Pot Limit'
        assert self.hand.game_card_count == 5
        assert self.hand.blinds.small_blind == 3
        assert self.hand.blinds.big_blind == 6
        assert self.hand.button_seat == 4
        assert self.hand.seats[5] == '86761294'
        assert len(self.hand.players) == 6

    def test_street_start_pots(self):
        assert self.hand.street_start_pot == {
            'preflop': 54, 'flop': 336, 'turn': 840, 'river': 840,
        }

    def test_board(self):
        assert self.hand.board.flop == ['Kc', '9d', '6s']
        assert self.hand.board.turn == '7d'
        assert self.hand.board.river == '9h'

    def test_raise_uses_delta_over_previous_contribution(self):
        raise_event = _first(self.hand.events['preflop'], '86761294', 'raise')
        assert raise_event.amount == 84
        assert raise_event.amount_raw == 84
        assert raise_event.to_amount == 96
        assert raise_event.pot_before == 84
        assert raise_event.pot_after == 168
        assert raise_event.amount_bb == 14
        assert raise_event.to_amount_bb == 16
        assert raise_event.pct_pot == 100
        assert raise_event.to_pct_pot == 114.29

    def test_bet_percentage(self):
        bet = _first(self.hand.events['flop'], '86761294', 'bet')
        assert bet.pot_before == 336
        assert bet.amount_bb == 42
        assert bet.pct_pot == 75

    def test_pot_after_is_pot_before_plus_amount(self):
        for street, events in self.hand.events.items():
            for event in events:
                if event.type in ('call', 'bet', 'raise', 'small_blind', 'big_blind', 'straddle', 'ante'):
                    assert round(event.pot_before + event.amount, 2) == event.pot_after

    def test_pot_never_decreases(self):
        for events in self.hand.events.values():
            for event in events:
                assert event.pot_after >= event.pot_before

    def test_passive_events_carry_no_money(self):
        checks = [e for e in self.hand.events['turn'] if e.type == 'check']
        assert len(checks) == 2
        assert all(e.pot_before == e.pot_after == 840 for e in checks)

    def test_showdown_shows_stay_off_the_timeline(self):
        assert self.hand.showdown_seen
        assert len(self.hand.show_events) == 2
        assert self.hand.voluntary_show_events == []
        assert all(e.type != 'show' for e in self.hand.events['river'])


class TestDecimalRaise:

    def setup_method(self):
        self.hand = track_hand(RAISE_MULTIPLE_HH)

    def test_open_raise_without_prior_contribution(self):
        raise_event = _first(self.hand.events['preflop'], '56962166', 'raise')
        assert raise_event.amount == 63
        assert raise_event.amount_raw == 57
        assert raise_event.to_amount_bb == 10.5

    def test_turn_sizes(self):
        assert self.hand.street_start_pot['turn'] == 171
        bet = _first(self.hand.events['turn'], '86761294', 'bet')
        assert bet.pct_pot == 33
        raise_event = _first(self.hand.events['turn'], '56962166', 'raise')
        assert raise_event.pot_before == 227.43
        assert raise_event.amount == 340.29
        assert abs(raise_event.to_amount_bb - 56.72) <= 0.01
        call = _first(self.hand.events['turn'], '86761294', 'call')
        assert call.amount_bb == 47.31


class TestAllInAndRunItTwice:

    def setup_method(self):
        self.hand = track_hand(ALLIN_RUN_TWICE_HH)

    def test_multiple_straddles(self):
        straddles = [e for e in self.hand.events['preflop'] if e.type == 'straddle']
        assert [e.amount for e in straddles] == [15, 40, 60]
        assert self.hand.street_start_pot['preflop'] == 160

    def test_uncalled_return_reduces_matched_bet(self):
        assert self.hand.street_start_pot['flop'] == 2070
        bet = _first(self.hand.events['flop'], '85033665', 'bet')
        assert bet.uncalled_returned == 1890
        assert bet.amount == 180
        assert bet.pct_pot == 8.7

    def test_call_is_all_in(self):
        call = _first(self.hand.events['flop'], '12121116', 'call')
        assert call.all_in is True
        assert call.amount == 180

    def test_first_run_board_wins(self):
        assert self.hand.board.flop == ['4c', 'Qc', '4d']
        assert self.hand.board.turn == '9c'
        assert self.hand.board.river == '8d'

    def test_shows_before_showdown_are_voluntary(self):
        assert not self.hand.showdown_seen
        assert len(self.hand.voluntary_show_events) == 2
        assert [e.type for e in self.hand.events['flop']][-2:] == ['show', 'show']

    def test_summary_stops_parsing(self):
        assert self.hand.street_start_pot['turn'] == self.hand.street_start_pot['river']
        assert len(self.hand.players) == 3


class TestTrackerEdgeCases:

    def test_full_uncalled_return_keeps_amount(self):
        hand = track_hand(FULL_UNCALLED_RETURN_HH)
        bet = _first(hand.events['flop'], '11111111', 'bet')
        assert bet.uncalled_returned == 9
        assert bet.amount == 9
        assert bet.pct_pot == 75

    def test_summary_seats_are_not_players(self):
        hand = track_hand(SUMMARY_SEATS_HH)
        assert hand.players == ['11111111', '22222222']
        assert hand.seats == {1: '11111111', 2: '22222222'}
        assert hand.show_events == []

    def test_run_it_twice_showdown(self):
        hand = track_hand(RUN_TWICE_SHOWDOWN_HH)
        assert hand.board.flop == ['Ac', 'Kd', '7h']
        assert hand.board.turn == '2c'
        assert hand.board.river == '3d'
        assert hand.showdown_seen
        assert hand.street_start_pot['flop'] == 36

    def test_blinds_fall_back_to_posts(self):
        text = "\n".join([
            "Seat 1: alice (100 in chips)",
            "Seat 2: bob (100 in chips)",
            "alice: posts small blind 1",
            "bob: posts big blind 2",
            "*** HOLE CARDS ***",
            "alice: folds",
        ])
        hand = track_hand(text)
        assert hand.blinds.small_blind == 1
        assert hand.blinds.big_blind == 2

    def test_other_verbs_before_deal_are_dropped(self):
        tracker = HandTracker()
        tracker.feed("Seat 1: alice (100 in chips)")
        tracker.feed("alice: sits out")
        tracker.feed("*** HOLE CARDS ***")
        tracker.feed("alice: is disconnected")
        hand = tracker.finish()
        assert [e.type for e in hand.events['preflop']] == ['other']

    def test_phase_tracks_streets(self):
        tracker = HandTracker()
        assert tracker.phase is Phase.PREFLOP
        tracker.feed("*** FLOP *** [Ac Kd 7h]")
        assert tracker.phase is Phase.FLOP
        tracker.feed("*** SHOW DOWN ***")
        assert tracker.phase is Phase.SHOWDOWN
        assert not tracker.phase.is_betting
        tracker.feed("*** SUMMARY ***")
        assert tracker.phase is Phase.SUMMARY

    def test_empty_text(self):
        hand = track_hand("")
        assert hand.players == []
        assert hand.street_start_pot['preflop'] == 0


class TestParseEntryPoints:

    def test_parse_hand_history_round_trips_through_json(self, straddle_hand):
        restored = ParsedHand.model_validate(straddle_hand.model_dump())
        assert restored.model_dump() == straddle_hand.model_dump()
        raise_event = _first(restored.events['preflop'], '86761294', 'raise')
        assert raise_event.to_amount_bb == 16

    def test_parse_hand_history_never_raises(self):
        parsed = parse_hand_history("garbage\n*** FLOP *** [zz]", "Player 123456")
        assert isinstance(parsed, ParsedHand)
        assert parsed.target_player == ''
        assert parsed.target_id_hint == '123456'

    def test_parse_none_text(self):
        parsed = parse_hand_history(None, "")
        assert parsed.players == []

    def test_runner_parses_every_hand(self):
        text = "\n\n".join([STRADDLE_SHOWDOWN_HH, RAISE_MULTIPLE_HH, ALLIN_RUN_TWICE_HH])
        hands = ParserRunner('86761294').parse_text(text)
        assert [h.hand_id for h in hands] == ['1423128345', '721173495', '1413806286']
        assert [h.target_player for h in hands] == ['86761294', '86761294', '']

    def test_runner_parse_file(self, tmp_path):
        path = tmp_path / "hands.txt"
        path.write_text(VOLUNTARY_SHOW_HH, encoding="utf-8")
        hands = ParserRunner('11111111').parse_file(path)
        assert len(hands) == 1
        assert hands[0].target_player == '11111111'

    def test_runner_missing_file(self, tmp_path):
        assert ParserRunner().parse_file(tmp_path / "missing.txt") == []
