"""Tests for configuration management."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from repofit.config import (
    EngineConfig,
    TokenProfile,
    find_project_root,
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from repofit.exceptions import ConfigError


class TestConfig:
    def test_default_config(self):
        config = EngineConfig()
        assert config.tokens.safety_margin == 0.10
        assert config.tokens.ratio_for("default") == 4.0
        assert config.selection.max_sections == 15
        assert config.selection.min_query_length == 5
        assert config.priority.manifest_boost == 20.0
        assert config.scoring.path_weight == 3.0

    def test_ratio_lookup(self):
        profile = TokenProfile()
        assert profile.ratio_for("gemini-1.5-pro") == 3.75
        assert profile.ratio_for("unknown-model") == 4.0
        assert profile.ratio_for(None) == 4.0

    def test_frozen(self):
        config = EngineConfig()
        with pytest.raises(ValidationError):
            config.selection.max_sections = 3

    def test_save_and_load(self, tmp_path: Path):
        config = set_config_value(EngineConfig(), "selection.max_sections", 4)
        config = set_config_value(config, "tokens.ratios.my-model", 2.5)

        save_config(tmp_path, config)
        loaded = load_config(tmp_path)

        assert loaded.selection.max_sections == 4
        assert loaded.tokens.ratio_for("my-model") == 2.5
        assert loaded == config

    def test_load_missing(self, tmp_path: Path):
        assert load_config(tmp_path) == EngineConfig()
        assert load_config(None) == EngineConfig()

    def test_load_invalid(self, tmp_path: Path):
        (tmp_path / ".repofit").mkdir()
        (tmp_path / ".repofit" / "config.json").write_text("{not json")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_load_invalid_values(self, tmp_path: Path):
        (tmp_path / ".repofit").mkdir()
        (tmp_path / ".repofit" / "config.json").write_text('{"tokens": {"safety_margin": -1}}')
        with pytest.raises(ConfigError, match="Invalid config file"):
            load_config(tmp_path)

    def test_find_project_root(self, tmp_path: Path):
        # No .repofit dir - should return None
        assert find_project_root(tmp_path) is None

        (tmp_path / ".repofit").mkdir()
        assert find_project_root(tmp_path) == tmp_path.resolve()

        # Should find from subdirectory
        sub = tmp_path / "src" / "module"
        sub.mkdir(parents=True)
        assert find_project_root(sub) == tmp_path.resolve()

    def test_set_config_value(self):
        config = EngineConfig()
        updated = set_config_value(config, "scoring.path_weight", 4.5)
        assert updated.scoring.path_weight == 4.5
        assert config.scoring.path_weight == 3.0

    def test_set_config_nested_list(self):
        updated = set_config_value(EngineConfig(), "priority.manifest_suffixes", ["BUILD"])
        assert updated.priority.manifest_suffixes == ["BUILD"]

    def test_set_config_invalid_key(self):
        config = EngineConfig()
        with pytest.raises(KeyError):
            set_config_value(config, "nonexistent.key", "value")
        with pytest.raises(KeyError):
            set_config_value(config, "selection.no_such_field", 1)

    def test_set_config_invalid_value(self):
        with pytest.raises(ValidationError):
            set_config_value(EngineConfig(), "tokens.ratios.default", 0)

    def test_save_writes_only_overrides(self, tmp_path: Path):
        config = set_config_value(EngineConfig(), "selection.max_sections", 4)
        path = save_config(tmp_path, config)
        assert path == tmp_path / ".repofit" / "config.json"

        saved = json.loads(path.read_text())
        assert saved["selection"] == {"max_sections": 4}

    def test_load_non_object(self, tmp_path: Path):
        (tmp_path / ".repofit").mkdir()
        (tmp_path / ".repofit" / "config.json").write_text("[1, 2]")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_get_config_value(self):
        config = EngineConfig()
        assert get_config_value(config, "scoring.path_weight") == 3.0
        assert get_config_value(config, "tokens.ratios.gemini-2.5-pro") == 3.5
        assert get_config_value(config, "selection")["max_sections"] == 15

    @pytest.mark.parametrize(
        "key", ["nope", "scoring.nope", "tokens.ratios.no-model", "scoring.path_weight.x"]
    )
    def test_get_config_value_unknown(self, key: str):
        with pytest.raises(KeyError):
            get_config_value(EngineConfig(), key)

    def test_set_nested_too_deep(self):
        with pytest.raises(KeyError):
            set_config_value(EngineConfig(), "tokens.ratios.a.b", 1.0)
