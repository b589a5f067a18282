"""Tests for ComposerConfig and its persistence."""

import json

import pytest

from proposalkit.config import ComposerConfig, load_config, save_config


class TestComposerConfig:
    def test_defaults(self):
        config = ComposerConfig()
        assert config.authority_reset_mode == "identity"
        assert config.program_governance_allow_list == frozenset({"base64"})
        assert config.require_title is True
        assert config.can_choose_who_vote is False

    def test_invalid_reset_mode(self):
        with pytest.raises(ValueError, match="authority_reset_mode"):
            ComposerConfig(authority_reset_mode="sometimes")

    def test_allow_list_normalized(self):
        config = ComposerConfig(program_governance_allow_list=frozenset({" Base64 ", "GRANT"}))
        assert config.program_governance_allow_list == frozenset({"base64", "grant"})

    def test_from_dict_ignores_unknown_keys(self):
        config = ComposerConfig.from_dict({
            "authority_reset_mode": "address",
            "symbol": "MNGO",
            "theme": "dark",
        })
        assert config.authority_reset_mode == "address"
        assert config.symbol == "MNGO"

    def test_from_dict_rejects_string_allow_list(self):
        with pytest.raises(ValueError, match="list"):
            ComposerConfig.from_dict({"program_governance_allow_list": "base64"})

    def test_from_dict_rejects_string_booleans(self):
        with pytest.raises(ValueError, match="require_title must be true or false"):
            ComposerConfig.from_dict({"require_title": "false"})
        with pytest.raises(ValueError, match="can_choose_who_vote"):
            ComposerConfig.from_dict({"can_choose_who_vote": 1})

    def test_to_dict_round_trip(self):
        config = ComposerConfig(symbol="MNGO", cluster="devnet", can_choose_who_vote=True)
        assert ComposerConfig.from_dict(config.to_dict()) == config


class TestLoadSave:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path) == ComposerConfig()

    def test_save_then_load(self, tmp_path):
        base = tmp_path / "nested"
        path = save_config(base, ComposerConfig(require_title=False))
        assert path == base / "config.json"
        assert json.loads(path.read_text())["require_title"] is False
        assert load_config(base).require_title is False

    def test_invalid_json(self, tmp_path):
        (tmp_path / "config.json").write_text("{not json")
        with pytest.raises(ValueError):
            load_config(tmp_path)
