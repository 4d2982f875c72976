"""Tests for simstation.config — configuration loading and validation."""

from __future__ import annotations

import json

import pytest

from simstation.commands import ToolPaths
from simstation.config import (
    DEFAULT_CONFIG,
    _sanitize_json_text,
    load_config,
    tool_paths_from_config,
    validate_config,
)


# ------------------------------------------------------------------
# DEFAULT_CONFIG
# ------------------------------------------------------------------

class TestDefaultConfig:
    """DEFAULT_CONFIG contains all expected keys with correct types."""

    EXPECTED_KEYS = {
        'debug',
        'xcrun_path',
        'open_path',
        'bash_path',
        'simulator_app',
        'refresh_on_create',
    }

    def test_contains_all_expected_keys(self):
        assert set(DEFAULT_CONFIG.keys()) == self.EXPECTED_KEYS

    def test_defaults_match_tool_paths(self):
        assert tool_paths_from_config(DEFAULT_CONFIG) == ToolPaths()


# ------------------------------------------------------------------
# validate_config
# ------------------------------------------------------------------

class TestValidateConfig:
    """validate_config normalises input and rejects invalid values."""

    def test_valid_data_passes(self):
        result = validate_config({
            'debug': True,
            'xcrun_path': '/opt/xcode/usr/bin/xcrun',
            'open_path': '/usr/bin/open',
            'bash_path': '/bin/zsh',
            'simulator_app': 'Simulator',
            'refresh_on_create': False,
        })
        assert result['debug'] is True
        assert result['xcrun_path'] == '/opt/xcode/usr/bin/xcrun'
        assert result['refresh_on_create'] is False

    def test_invalid_debug_type(self):
        with pytest.raises(ValueError, match="debug"):
            validate_config({'debug': 'yes'})

    def test_invalid_refresh_on_create_type(self):
        with pytest.raises(ValueError, match="refresh_on_create"):
            validate_config({'refresh_on_create': 1})

    def test_relative_tool_path_rejected(self):
        with pytest.raises(ValueError, match="xcrun_path"):
            validate_config({'xcrun_path': 'xcrun'})

    def test_empty_tool_path_rejected(self):
        with pytest.raises(ValueError, match="open_path"):
            validate_config({'open_path': ''})

    def test_home_relative_path_expanded(self, monkeypatch, tmp_path):
        monkeypatch.setenv('HOME', str(tmp_path))
        result = validate_config({'bash_path': '~/bin/bash'})
        assert result['bash_path'] == str(tmp_path / 'bin' / 'bash')

    def test_blank_simulator_app_rejected(self):
        with pytest.raises(ValueError, match="simulator_app"):
            validate_config({'simulator_app': '   '})

    def test_simulator_app_is_stripped(self):
        assert validate_config({'simulator_app': ' Simulator '})['simulator_app'] == 'Simulator'

    def test_none_returns_defaults(self):
        result = validate_config(None)
        assert result == DEFAULT_CONFIG

    def test_empty_dict_returns_defaults(self):
        result = validate_config({})
        assert result == DEFAULT_CONFIG


# ------------------------------------------------------------------
# _sanitize_json_text
# ------------------------------------------------------------------

class TestSanitizeJsonText:
    """_sanitize_json_text strips comments and trailing commas."""

    def test_removes_hash_comments(self):
        text = '{\n  # this is a comment\n  "a": 1\n}'
        data = json.loads(_sanitize_json_text(text))
        assert data == {"a": 1}

    def test_removes_slash_comments(self):
        text = '{\n  "a": 1 // inline comment\n}'
        result = _sanitize_json_text(text)
        assert "//" not in result
        assert json.loads(result) == {"a": 1}

    def test_removes_trailing_commas(self):
        text = '{\n  "a": 1,\n  "b": 2,\n}'
        assert json.loads(_sanitize_json_text(text)) == {"a": 1, "b": 2}

    def test_keeps_url_like_values(self):
        text = '{\n  "a": "file://tmp/x"\n}'
        assert json.loads(_sanitize_json_text(text)) == {"a": "file://tmp/x"}


# ------------------------------------------------------------------
# load_config
# ------------------------------------------------------------------

class TestLoadConfig:
    """load_config reads JSON files and merges with defaults."""

    def test_nonexistent_file_returns_defaults(self, tmp_path):
        result = load_config(config_path=str(tmp_path / "nope.json"))
        assert result == DEFAULT_CONFIG

    def test_loads_real_json_file(self, tmp_path):
        cfg_file = tmp_path / "config.json"
        cfg_file.write_text(json.dumps({"debug": True, "simulator_app": "Simulator Beta"}))
        result = load_config(config_path=str(cfg_file))
        assert result['debug'] is True
        assert result['simulator_app'] == "Simulator Beta"
        # Other keys remain default
        assert result['xcrun_path'] == DEFAULT_CONFIG['xcrun_path']

    def test_loads_config_with_comments(self, tmp_path):
        cfg_file = tmp_path / "config.json"
        cfg_file.write_text('{\n  # a comment\n  "refresh_on_create": false,\n}')
        result = load_config(config_path=str(cfg_file))
        assert result['refresh_on_create'] is False

    def test_invalid_file_falls_back_to_defaults(self, tmp_path):
        cfg_file = tmp_path / "config.json"
        cfg_file.write_text(json.dumps({"xcrun_path": "relative/xcrun"}))
        assert load_config(config_path=str(cfg_file)) == DEFAULT_CONFIG

    def test_non_object_json_ignored(self, tmp_path):
        cfg_file = tmp_path / "config.json"
        cfg_file.write_text("[1, 2, 3]")
        assert load_config(config_path=str(cfg_file)) == DEFAULT_CONFIG

    def test_unknown_keys_not_merged(self, tmp_path):
        cfg_file = tmp_path / "config.json"
        cfg_file.write_text(json.dumps({"theme": "dark"}))
        assert 'theme' not in load_config(config_path=str(cfg_file))
