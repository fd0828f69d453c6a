from __future__ import annotations

from pathlib import Path

import pytest

from pkg.toolcache import ConfigError, RunnerEnvironment, ToolSpec, bin_layout_for, load_tool_spec
from pkg.toolcache.layout import NPM_BIN_LAYOUT

REPO_ROOT = Path(__file__).parent.parent


def _write_config(tmp_path: Path, content: str) -> Path:
    p = tmp_path / "tool.yml"
    p.write_text(content)
    return p


class TestLoadToolSpec:
    def test_packaged_defaults(self):
        spec = load_tool_spec(REPO_ROOT / "defaults" / "tool.yml")
        assert spec == ToolSpec(name="firebase-tools", package="firebase-tools", bin_layout="npm")

    def test_package_defaults_to_name(self, tmp_path):
        spec = load_tool_spec(_write_config(tmp_path, "tool:\n  name: netlify-cli\n"))
        assert spec.package == "netlify-cli"
        assert spec.bin_layout == "npm"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="missing config file"):
            load_tool_spec(tmp_path / "absent.yml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_tool_spec(_write_config(tmp_path, "tool: [unclosed\n"))

    def test_missing_tool_key(self, tmp_path):
        with pytest.raises(ConfigError, match="config.tool: missing"):
            load_tool_spec(_write_config(tmp_path, "other: 1\n"))

    def test_blank_name(self, tmp_path):
        with pytest.raises(ConfigError, match="tool.name: must be non-empty"):
            load_tool_spec(_write_config(tmp_path, "tool:\n  name: '  '\n"))

    def test_non_string_package(self, tmp_path):
        with pytest.raises(ConfigError, match="tool.package: expected string"):
            load_tool_spec(_write_config(tmp_path, "tool:\n  name: x\n  package: 3\n"))


class TestRunnerEnvironment:
    def test_from_runner_variables(self, tmp_path):
        env = RunnerEnvironment.from_env(
            {
                "RUNNER_TEMP": str(tmp_path / "temp"),
                "RUNNER_TOOL_CACHE": str(tmp_path / "cache"),
                "GITHUB_PATH": str(tmp_path / "path"),
                "GITHUB_OUTPUT": str(tmp_path / "out"),
                "RUNNER_DEBUG": "1",
            }
        )
        assert env.temp_dir == tmp_path / "temp"
        assert env.tool_cache_dir == tmp_path / "cache"
        assert env.path_file == tmp_path / "path"
        assert env.output_file == tmp_path / "out"
        assert env.debug is True

    def test_fallbacks_outside_a_runner(self, monkeypatch, tmp_path):
        monkeypatch.setattr("pkg.toolcache.config.tempfile.gettempdir", lambda: str(tmp_path))
        env = RunnerEnvironment.from_env({})
        assert env.temp_dir == tmp_path
        assert env.tool_cache_dir == tmp_path / "tool-cache"
        assert env.path_file is None
        assert env.output_file is None
        assert env.debug is False


class TestBinLayout:
    def test_npm_layout(self, tmp_path):
        assert bin_layout_for("npm").bin_dir(tmp_path) == tmp_path / "node_modules" / ".bin"
        assert bin_layout_for(" NPM ") is NPM_BIN_LAYOUT

    def test_unknown_layout(self):
        with pytest.raises(ConfigError, match="unknown bin layout"):
            bin_layout_for("cargo")
