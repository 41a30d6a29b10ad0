"""
Tests for YAML configuration loading and validation.
"""

import pytest
import yaml
from hhnotes.config import (
    CONFIG_ENV,
    ConfigError,
    NotesConfig,
    get_config,
    load_config,
    save_config,
)


class TestLoadConfig:

    def test_packaged_defaults(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV, raising=False)
        cfg = load_config()
        assert cfg.positions.fallback_count == 6
        assert cfg.positions.labels_by_count[6] == ['BTN', 'SB', 'BB', 'UTG', 'HJ', 'CO']
        assert cfg.notes.showdown_token == 'sd'
        assert 'cb' in cfg.canonicalize.action_prefixes

    def test_packaged_file_matches_model_defaults(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV, raising=False)
        assert load_config().model_dump() == NotesConfig().model_dump()

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("notes:\n  showdown_token: SD\n", encoding="utf-8")
        cfg = load_config(path)
        assert cfg.notes.showdown_token == 'SD'
        assert cfg.notes.omit_preflop_folds is True
        assert cfg.positions.labels_by_count[2] == ['BTN', 'BB']

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")
        assert load_config(path).model_dump() == NotesConfig().model_dump()

    def test_env_override(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yml"
        path.write_text("positions:\n  fallback_count: 9\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV, str(path))
        assert load_config().positions.fallback_count == 9

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_yaml_rejected(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("notes: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_too_many_labels_rejected(self, tmp_path):
        path = tmp_path / "labels.yml"
        path.write_text("positions:\n  labels_by_count:\n    2: [BTN, SB, BB]\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_config(tmp_path / "missing.yml")

    def test_save_round_trip(self, tmp_path):
        cfg = NotesConfig()
        cfg.notes.showdown_token = 'showdown'
        path = tmp_path / "saved.yml"
        save_config(cfg, path)
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert raw['notes']['showdown_token'] == 'showdown'
        assert load_config(path).notes.showdown_token == 'showdown'

    def test_get_config_is_cached(self):
        assert get_config() is get_config()
