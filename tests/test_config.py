"""Tests for YAML config loading and override precedence."""

import logging
from types import SimpleNamespace

import pytest

from tagbump.cli_config import apply_cli_overrides
from tagbump.config import apply_config, apply_env_overrides, find_config_file, ignore_rules_for, load_config
from tagbump.constants import Constants


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run with an empty cwd and home so no real config is picked up."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    monkeypatch.delenv(Constants.ENV_CONFIG, raising=False)
    return SimpleNamespace(home=home, work=work)


class TestFindConfigFile:
    """Lookup order for the config file."""

    def test_none(self, isolated):
        """Test no file is found in an empty cwd and home."""
        assert find_config_file() is None

    def test_explicit_wins(self, isolated, monkeypatch):
        """Test an explicit path beats TAGBUMP_CONFIG."""
        monkeypatch.setenv(Constants.ENV_CONFIG, "/from/env.yml")
        assert find_config_file("/explicit.yml") == "/explicit.yml"

    def test_env(self, isolated, monkeypatch):
        """Test TAGBUMP_CONFIG is used when no path is given."""
        monkeypatch.setenv(Constants.ENV_CONFIG, "/from/env.yml")
        assert find_config_file() == "/from/env.yml"

    def test_cwd(self, isolated):
        """Test tagbump.yml in the working directory is found."""
        path = isolated.work / "tagbump.yml"
        path.write_text("retry: {}\n")
        assert find_config_file() == str(path)

    def test_home(self, isolated):
        """Test ~/.config/tagbump/tagbump.yaml is found."""
        config_dir = isolated.home / ".config" / "tagbump"
        config_dir.mkdir(parents=True)
        path = config_dir / "tagbump.yaml"
        path.write_text("retry: {}\n")
        assert find_config_file() == str(path)


class TestLoadConfig:
    """Reading and tolerating bad files."""

    def test_loads_mapping(self, tmp_path):
        """Test a YAML mapping is returned as loaded."""
        path = tmp_path / "c.yml"
        path.write_text("registry:\n  read_timeout: 30\n")
        assert load_config(str(path)) == {"registry": {"read_timeout": 30}}

    def test_missing_explicit_file(self, tmp_path, caplog):
        """Test a missing explicit file warns and yields an empty config."""
        with caplog.at_level(logging.WARNING):
            assert load_config(str(tmp_path / "nope.yml")) == {}
        assert "Config file not found" in caplog.text

    def test_malformed(self, tmp_path, caplog):
        """Test malformed YAML is logged and yields an empty config."""
        path = tmp_path / "bad.yml"
        path.write_text("registry: [unclosed\n")
        with caplog.at_level(logging.ERROR):
            assert load_config(str(path)) == {}
        assert "Failed to load config" in caplog.text

    def test_non_mapping(self, tmp_path):
        """Test a top-level list is ignored."""
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        assert load_config(str(path)) == {}

    def test_no_file(self, isolated):
        """Test no config file yields an empty config."""
        assert load_config() == {}


class TestApplyConfig:
    """Settings copied onto Constants."""

    def test_known_settings(self):
        """Test every recognized setting is coerced onto Constants."""
        apply_config(
            {
                "registry": {"default": "mirror.example.com", "read_timeout": "25", "page_size": 50},
                "retry": {"max_attempts": 5, "base_delay": 0, "max_delay": 2},
                "resolution": {"canonical_tags": ["stable", "latest"], "prerelease_keywords": "exp"},
            }
        )
        assert Constants.DEFAULT_REGISTRY == "mirror.example.com"
        assert Constants.READ_TIMEOUT == 25.0
        assert Constants.TAGS_PAGE_SIZE == 50
        assert Constants.HTTP_RETRY_MAX == 5
        assert Constants.HTTP_RETRY_BASE_DELAY_SEC == 0.0
        assert Constants.HTTP_RETRY_MAX_DELAY_SEC == 2.0
        assert Constants.CANONICAL_TAGS == ["stable", "latest"]
        assert Constants.PRERELEASE_KEYWORDS == ["exp"]

    def test_invalid_value_skipped(self, caplog):
        """Test an uncoercible value is logged and skipped."""
        before = Constants.READ_TIMEOUT
        with caplog.at_level(logging.WARNING):
            apply_config({"registry": {"read_timeout": "soon"}})
        assert Constants.READ_TIMEOUT == before
        assert "registry.read_timeout" in caplog.text

    def test_namespaces_merged(self):
        """Test namespace rules are merged with the built-in ones."""
        apply_config({"registry": {"namespaces": {"reg.example.com": "team"}}})
        assert Constants.REPOSITORY_NAMESPACES["reg.example.com"] == "team"
        assert Constants.REPOSITORY_NAMESPACES["docker.io"] == "library"

    def test_unknown_sections_ignored(self):
        """Test unknown and malformed sections leave Constants alone."""
        before = dict(vars(Constants))
        apply_config({"unrelated": {"x": 1}, "registry": "not-a-mapping"})
        assert Constants.DEFAULT_REGISTRY == before["DEFAULT_REGISTRY"]


class TestOverrides:
    """Environment and CLI precedence."""

    def test_env(self, monkeypatch):
        """Test environment overrides are applied."""
        monkeypatch.setenv(Constants.ENV_READ_TIMEOUT, "42")
        monkeypatch.setenv(Constants.ENV_RETRY_MAX, "7")
        monkeypatch.setenv(Constants.ENV_DEFAULT_REGISTRY, "docker.io")
        apply_env_overrides()
        assert Constants.READ_TIMEOUT == 42.0
        assert Constants.HTTP_RETRY_MAX == 7
        assert Constants.DEFAULT_REGISTRY == "docker.io"

    def test_cli_beats_env(self, monkeypatch):
        """Test CLI flags override environment values."""
        monkeypatch.setenv(Constants.ENV_READ_TIMEOUT, "42")
        apply_env_overrides()
        apply_cli_overrides(SimpleNamespace(READ_TIMEOUT=5.0, RETRY_MAX=2))
        assert Constants.READ_TIMEOUT == 5.0
        assert Constants.HTTP_RETRY_MAX == 2

    def test_cli_rejects_zero_retries(self):
        """Test a retry count below one is ignored."""
        before = Constants.HTTP_RETRY_MAX
        apply_cli_overrides(SimpleNamespace(READ_TIMEOUT=None, RETRY_MAX=0))
        assert Constants.HTTP_RETRY_MAX == before


class TestIgnoreRulesFor:
    """Per-dependency ignore lists from config."""

    def test_list(self):
        """Test a list of specifiers is returned as is."""
        assert ignore_rules_for({"ignore": {"nginx": [">=2", "==1.1.*"]}}, "nginx") == [">=2", "==1.1.*"]

    def test_string(self):
        """Test a single specifier string becomes a one-item list."""
        assert ignore_rules_for({"ignore": {"nginx": ">=2"}}, "nginx") == [">=2"]

    def test_absent(self):
        """Test no rules for an unlisted dependency."""
        assert ignore_rules_for({}, "nginx") == []
        assert ignore_rules_for({"ignore": {"redis": ">=7"}}, "nginx") == []
