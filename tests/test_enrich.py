"""
Tests for unit normalization and merging of dictated notes.
"""

from hhnotes.notes.enrich import (
    canonicalize_text,
    merge,
    normalize_units,
    sanitize_artifacts,
    strip_showed_token,
    unit_replacements,
)
from hhnotes.parse.runner import parse_hand_history
from hhnotes.parse.schemas import NoteFields
from hand_samples import RAISE_MULTIPLE_HH, RUN_TWICE_SHOWDOWN_HH, VOLUNTARY_SHOW_HH


class TestNormalizeUnits:

    def test_replacements(self, straddle_hand):
        assert unit_replacements(straddle_hand, 'preflop') == [('96', '16bb'), ('84', '14bb')]
        assert unit_replacements(straddle_hand, 'flop') == [('252', '75')]
        assert unit_replacements(straddle_hand, 'turn') == []

    def test_raise_number_as_written_sized_on_its_own(self):
        parsed = parse_hand_history(RAISE_MULTIPLE_HH, '56962166')
        assert unit_replacements(parsed, 'preflop') == [('63', '10.5bb'), ('57', '9.5bb')]
        fields = normalize_units({'preflop': 'r57', 'turn': 'r283.86'}, parsed)
        assert fields.preflop == 'r9.5bb'
        assert fields.turn == 'r124.81'

    def test_chip_amounts_become_bb_and_percent(self, straddle_hand):
        fields = normalize_units(
            {'preflop': 'r96 with the nuts', 'flop': 'cb252 then gave up', 'presupposition': 'r96'},
            straddle_hand,
        )
        assert fields.preflop == 'r16bb with the nuts'
        assert fields.flop == 'cb75 then gave up'
        assert fields.presupposition == 'r96'

    def test_already_normalized_text_is_stable(self, straddle_hand):
        once = normalize_units({'preflop': 'r96', 'flop': 'cb252'}, straddle_hand)
        twice = normalize_units(once, straddle_hand)
        assert twice.model_dump() == once.model_dump()

    def test_amounts_with_units_or_longer_numbers_untouched(self, straddle_hand):
        replacements = unit_replacements(straddle_hand, 'preflop')
        assert canonicalize_text('r96bb', replacements) == 'r96bb'
        assert canonicalize_text('r960', replacements) == 'r960'
        assert canonicalize_text('r96.5', replacements) == 'r96.5'
        assert canonicalize_text('x96', replacements) == 'x96'

    def test_no_target(self):
        parsed = parse_hand_history(VOLUNTARY_SHOW_HH, 'nobody')
        assert normalize_units({'preflop': 'r18'}, parsed).preflop == 'r18'

    def test_none_fields(self, straddle_hand):
        assert normalize_units(None, straddle_hand).model_dump() == NoteFields().model_dump()


class TestSanitize:

    def test_artifacts_removed(self):
        assert sanitize_artifacts("r16bb (16 96bb) vs3c tclass_set / / x") == "r16bb / x"

    def test_separators_tidied(self):
        assert sanitize_artifacts(" / b75 //  x / ") == "b75 / x"
        assert sanitize_artifacts(None) == ""

    def test_strip_showed(self):
        assert strip_showed_token("x showed the nuts") == "x the nuts"
        assert strip_showed_token("Show down") == "down"
        assert strip_showed_token("showdown") == "showdown"


class TestMerge:

    def test_synthesized_streets_replace_dictation(self, straddle_hand):
        result = merge({'preflop': 'r96', 'flop': 'cb252', 'presupposition': 'tight reg'}, straddle_hand)
        assert result.preflop.startswith('5c straddle SB_86761294 r16bb')
        assert result.flop.startswith('SB_86761294 cb75')
        assert result.presupposition == 'tight reg'

    def test_mandatory_showdown_appends_token_once(self, straddle_hand):
        result = merge({'river': 'he showed'}, straddle_hand)
        assert result.river.endswith(' / CO xb Ks6c5s5h4d_2p sd')
        assert result.river.count('sd') == 1
        assert 'showed' not in result.river

    def test_merge_is_idempotent(self, straddle_hand):
        once = merge({'river': 'x', 'presupposition': 'p'}, straddle_hand)
        assert merge(once, straddle_hand).model_dump() == once.model_dump()

    def test_token_in_presupposition_does_not_block_river(self, straddle_hand):
        result = merge({'presupposition': 'went to sd'}, straddle_hand)
        assert result.river.endswith(' / CO xb Ks6c5s5h4d_2p sd')
        assert result.presupposition == 'went to sd'

    def test_existing_presupposition_token_not_duplicated(self):
        parsed = parse_hand_history(RUN_TWICE_SHOWDOWN_HH, '11111111')
        result = merge({'presupposition': 'went to sd'}, parsed)
        assert result.river == ''
        assert result.presupposition == 'went to sd'

    def test_showdown_token_lands_in_presupposition_without_river(self):
        parsed = parse_hand_history(RUN_TWICE_SHOWDOWN_HH, '11111111')
        assert parsed.showdown.mandatory
        result = merge({'river': 'showed', 'presupposition': 'loose'}, parsed)
        assert result.river == ''
        assert result.presupposition == 'loose sd'

    def test_voluntary_show_keeps_dictation(self):
        parsed = parse_hand_history(VOLUNTARY_SHOW_HH, '22222222')
        assert not parsed.showdown.mandatory
        result = merge({'river': 'villain showed air'}, parsed)
        assert result.river == 'villain showed air'
        assert 'sd' not in result.river

    def test_dictation_kept_where_nothing_to_synthesize(self, allin_hand):
        result = merge({'turn': 'ran it twice'}, allin_hand)
        assert result.turn == 'ran it twice'
        assert result.preflop == 'BB_12121116 r31bb KhJs9s8c7c / SB r100bb AhAcKd9d4h'
