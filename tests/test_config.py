"""Tests for configuration loading and precedence."""

from __future__ import annotations

from pathlib import Path

import pytest

from proplint.config import (
    CONFIG_FILENAME,
    DEFAULT_MARKER,
    CheckConfig,
    ConfigError,
    load_config,
)


def _write(tmpdir: Path, name: str, content: str) -> Path:
    p = tmpdir / name
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content)
    return p


class TestCheckConfig:
    def test_defaults(self):
        config = CheckConfig()
        assert config.marker == DEFAULT_MARKER
        assert config.frontend == "auto"
        assert config.main_file_only is True
        assert "*.ast.json" in config.patterns

    @pytest.mark.parametrize("marker", ["", "   ", "[[]]"])
    def test_blank_marker_rejected(self, marker):
        with pytest.raises(ValueError):
            CheckConfig(marker=marker)


class TestLoadConfig:
    def test_no_files(self, tmp_path):
        assert load_config(tmp_path) == CheckConfig()

    def test_pyproject_section(self, tmp_path):
        _write(tmp_path, "pyproject.toml", '[tool.proplint]\nmarker = "may_throw"\n')
        assert load_config(tmp_path).marker == "may_throw"

    def test_pyproject_without_section(self, tmp_path):
        _write(tmp_path, "pyproject.toml", '[project]\nname = "x"\n')
        assert load_config(tmp_path) == CheckConfig()

    def test_broken_pyproject_ignored(self, tmp_path):
        _write(tmp_path, "pyproject.toml", "[tool.proplint\n")
        assert load_config(tmp_path) == CheckConfig()

    def test_yaml_overrides_pyproject(self, tmp_path):
        _write(tmp_path, "pyproject.toml", '[tool.proplint]\nmarker = "from_toml"\nmain_file_only = false\n')
        _write(tmp_path, CONFIG_FILENAME, "marker: from_yaml\n")
        config = load_config(tmp_path)
        assert config.marker == "from_yaml"
        assert config.main_file_only is False

    def test_explicit_file_overrides_local(self, tmp_path):
        _write(tmp_path, CONFIG_FILENAME, "marker: local\n")
        explicit = _write(tmp_path, "other.yaml", "marker: explicit\nfrontend: clang\n")
        config = load_config(tmp_path, config_file=explicit)
        assert config.marker == "explicit"
        assert config.frontend == "clang"

    def test_overrides_win_and_none_ignored(self, tmp_path):
        _write(tmp_path, CONFIG_FILENAME, "marker: local\nfrontend: native\n")
        config = load_config(tmp_path, overrides={"marker": "cli", "frontend": None})
        assert config.marker == "cli"
        assert config.frontend == "native"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path, config_file=tmp_path / "nope.yaml")

    def test_non_mapping_yaml(self, tmp_path):
        _write(tmp_path, CONFIG_FILENAME, "- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(tmp_path)

    def test_malformed_yaml(self, tmp_path):
        _write(tmp_path, CONFIG_FILENAME, "marker: [oops\n")
        with pytest.raises(ConfigError, match="cannot read"):
            load_config(tmp_path)

    def test_invalid_value(self, tmp_path):
        _write(tmp_path, CONFIG_FILENAME, "frontend: gcc\n")
        with pytest.raises(ConfigError, match="invalid configuration"):
            load_config(tmp_path)

    def test_empty_yaml(self, tmp_path):
        _write(tmp_path, CONFIG_FILENAME, "")
        assert load_config(tmp_path) == CheckConfig()
