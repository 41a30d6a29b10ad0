"""
Tests for the command line entry point.
"""

import json
import sys

import pytest
from hhnotes.__main__ import build_records, load_notes, main
from hand_samples import RAISE_MULTIPLE_HH, STRADDLE_SHOWDOWN_HH


def _run(monkeypatch, *args):
    monkeypatch.setattr(sys, 'argv', ['hhnotes', *args])
    main()


class TestCli:

    def setup_method(self):
        self.text = STRADDLE_SHOWDOWN_HH + "\n\n" + RAISE_MULTIPLE_HH + "\n"

    def test_writes_one_record_per_hand(self, tmp_path, monkeypatch):
        source = tmp_path / "hands.txt"
        source.write_text(self.text, encoding="utf-8")
        output = tmp_path / "notes.jsonl"

        _run(monkeypatch, '-i', str(source), '-p', 'ThatWas 86761294', '-o', str(output))

        records = [json.loads(line) for line in output.read_text(encoding="utf-8").splitlines()]
        assert [r['hand_id'] for r in records] == ['1423128345', '721173495']
        assert records[0]['position'] == 'SB'
        assert records[0]['showdown_mandatory'] is True
        assert records[0]['notes']['turn'].endswith('[z] / CO xb Ks6c5s5h4d_2p_oe')
        assert records[1]['position'] == 'BB'

    def test_merges_dictated_notes(self, tmp_path, monkeypatch):
        source = tmp_path / "hand.txt"
        source.write_text(STRADDLE_SHOWDOWN_HH, encoding="utf-8")
        notes = tmp_path / "notes.json"
        notes.write_text(json.dumps({'presupposition': 'reg', 'river': 'showed'}), encoding="utf-8")
        output = tmp_path / "out.jsonl"

        _run(monkeypatch, '--input', str(source), '--opponent', '86761294',
             '--notes', str(notes), '--output', str(output))

        record = json.loads(output.read_text(encoding="utf-8"))
        assert record['notes']['presupposition'] == 'reg'
        assert record['notes']['river'].endswith(' sd')

    def test_stdout_output(self, tmp_path, monkeypatch, capsys):
        source = tmp_path / "hand.txt"
        source.write_text(RAISE_MULTIPLE_HH, encoding="utf-8")

        _run(monkeypatch, '-i', str(source), '-p', '86761294')

        out = capsys.readouterr().out.strip().splitlines()
        assert len(out) == 1
        assert json.loads(out[0])['target_player'] == '86761294'

    def test_missing_input_exits(self, tmp_path, monkeypatch):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, '-i', str(tmp_path / "missing.txt"), '-p', 'x')
        assert exc.value.code == 1

    def test_bad_notes_file_exits(self, tmp_path, monkeypatch):
        source = tmp_path / "hand.txt"
        source.write_text(RAISE_MULTIPLE_HH, encoding="utf-8")
        notes = tmp_path / "notes.json"
        notes.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, '-i', str(source), '-p', 'x', '-n', str(notes))
        assert exc.value.code == 1


class TestHelpers:

    def test_load_notes_ignores_unknown_keys(self, tmp_path):
        path = tmp_path / "notes.json"
        path.write_text(json.dumps({'flop': 'cb252', 'mood': 'tilted', 'turn': None}), encoding="utf-8")
        fields = load_notes(str(path))
        assert fields.flop == 'cb252'
        assert fields.turn == ''

    def test_build_records_without_target(self):
        records = list(build_records(RAISE_MULTIPLE_HH, 'nobody'))
        assert len(records) == 1
        assert records[0]['target_player'] == ''
        assert records[0]['position'] == ''
        assert set(records[0]['notes'].values()) == {''}
