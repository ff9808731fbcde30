"""Tests for configuration loading."""

import pytest

from shipready_core.config import Config, load_config
from shipready_core.errors import ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("GITHUB_TOKEN", "GITHUB_SERVER", "GITHUB_API_URL", "JIRA_SERVER", "JIRA_TOKEN"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config.github_server == "https://github.com"
    assert config.config_repo == "config"
    assert config.config_path == "apps/{service}/config.json"
    assert config.ready_field == "customfield_19899"
    assert config.ready_value == "Go"
    assert config.max_results == 100
    assert config.max_workers is None
    assert config.default_target == "master"
    assert config.projects == {}


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".shipready.yml"
    cfg.write_text("config_owner: platform\nready_value: Ready\nmax_workers: 8\n")
    config = load_config(config_path=str(cfg))
    assert config.config_owner == "platform"
    assert config.ready_value == "Ready"
    assert config.max_workers == 8


def test_extra_projects_loaded(tmp_path):
    cfg = tmp_path / ".shipready.yml"
    cfg.write_text("projects:\n  baz-api: BAZ\n")
    config = load_config(config_path=str(cfg))
    assert config.projects == {"baz-api": "BAZ"}


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".shipready.yml"
    cfg.write_text("default_target: main\n")
    config = load_config(config_path=str(cfg), cli_overrides={"default_target": "release"})
    assert config.default_target == "release"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".shipready.yml"
    cfg.write_text("default_target: main\n")
    config = load_config(config_path=str(cfg), cli_overrides={"default_target": None})
    assert config.default_target == "main"


def test_env_vars_loaded(monkeypatch, tmp_path):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    monkeypatch.setenv("GITHUB_SERVER", "https://github.example.com")
    monkeypatch.setenv("JIRA_SERVER", "https://jira.example.com")
    monkeypatch.setenv("JIRA_TOKEN", "jira-token")
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config.github_token == "gh-token"
    assert config.github_server == "https://github.example.com"
    assert config.jira_server == "https://jira.example.com"
    assert config.jira_token == "jira-token"


def test_env_server_wins_over_file(monkeypatch, tmp_path):
    cfg = tmp_path / ".shipready.yml"
    cfg.write_text("jira_server: https://jira.file\n")
    monkeypatch.setenv("JIRA_SERVER", "https://jira.env")
    assert load_config(config_path=str(cfg)).jira_server == "https://jira.env"


def test_unknown_key_rejected(tmp_path):
    cfg = tmp_path / ".shipready.yml"
    cfg.write_text("jira_sever: typo\n")
    with pytest.raises(ConfigError, match="jira_sever"):
        load_config(config_path=str(cfg))


def test_non_mapping_file_rejected(tmp_path):
    cfg = tmp_path / ".shipready.yml"
    cfg.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_config(config_path=str(cfg))


@pytest.mark.parametrize("value", [0, -1, "many"])
def test_invalid_max_workers_rejected(tmp_path, value):
    cfg = tmp_path / ".shipready.yml"
    cfg.write_text(f"max_workers: {value}\n")
    with pytest.raises(ConfigError, match="max_workers"):
        load_config(config_path=str(cfg))


def test_projects_dict_is_not_shared_reference(tmp_path):
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a.projects["x"] = "X"
    assert config_b.projects == {}


class TestApiUrl:
    def test_github_dot_com(self):
        assert Config().api_url == "https://api.github.com"

    def test_enterprise_server(self):
        assert Config(github_server="https://github.example.com/").api_url == "https://github.example.com/api/v3"

    def test_explicit_api_url(self):
        config = Config(github_server="https://github.example.com", github_api_url="https://api.example.com/")
        assert config.api_url == "https://api.example.com"


class TestRequire:
    def test_passes_when_present(self):
        Config(github_token="t", jira_server="j").require("github_token", "jira_server")

    def test_names_missing_keys(self):
        with pytest.raises(ConfigError, match="jira_token, config_owner"):
            Config(github_token="t").require("github_token", "jira_token", "config_owner")
