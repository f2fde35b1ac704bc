"""Tests for configuration layering and PR validation."""

import pytest

from suggestion_patcher.config import Config, ConfigError

_ENV_KEYS = ("PR", "BOT", "GITHUB_REPOSITORY", "GITHUB_TOKEN", "GH_TOKEN",
             "GITHUB_API_URL", "REQUEST_TIMEOUT", "LOG_DIR", "REPORT_FILE")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


def test_defaults():
    cfg = Config()
    assert cfg.PR is None
    assert cfg.BOT == "coderabbitai[bot]"
    assert cfg.GITHUB_API_URL == "https://api.github.com"
    assert cfg.REQUEST_TIMEOUT == 30
    assert cfg.REPORT_FILE == ""


def test_env_overrides_yaml(monkeypatch):
    monkeypatch.setenv("BOT", "env-bot")
    cfg = Config({"bot": "yaml-bot", "pr": 7})
    assert cfg.BOT == "env-bot"
    assert cfg.PR == "7"


def test_gh_token_fallback(monkeypatch):
    monkeypatch.setenv("GH_TOKEN", "abc")
    assert Config().GITHUB_TOKEN == "abc"


def test_load_finds_yaml_in_cwd(tmp_path):
    (tmp_path / ".suggestion_patcher.yaml").write_text(
        "pr: 42\nbot: reviewer-bot\nrepo: octo/widgets\n", encoding="utf-8")
    cfg = Config.load()
    assert cfg.require_pr() == 42
    assert cfg.BOT == "reviewer-bot"
    assert cfg.REPO == "octo/widgets"


def test_load_explicit_path(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("request_timeout: 5\n", encoding="utf-8")
    assert Config.load(str(path)).REQUEST_TIMEOUT == 5.0


def test_invalid_yaml_falls_back_to_defaults(tmp_path):
    (tmp_path / ".suggestion_patcher.yaml").write_text(
        "pr: [unclosed\n", encoding="utf-8")
    assert Config.load().PR is None


def test_invalid_timeout_from_env(monkeypatch):
    monkeypatch.setenv("REQUEST_TIMEOUT", "abc")
    with pytest.raises(ConfigError, match="REQUEST_TIMEOUT: 'abc'"):
        Config()


def test_invalid_timeout_from_yaml(tmp_path):
    (tmp_path / ".suggestion_patcher.yaml").write_text(
        "request_timeout: soon\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="request_timeout"):
        Config.load()


def test_timeout_env_beats_invalid_yaml(monkeypatch):
    monkeypatch.setenv("REQUEST_TIMEOUT", "12")
    assert Config({"request_timeout": [1, 2]}).REQUEST_TIMEOUT == 12.0


def test_override_ignores_none():
    cfg = Config({"bot": "yaml-bot"}).override(bot=None, pr="12")
    assert cfg.BOT == "yaml-bot"
    assert cfg.require_pr() == 12


def test_override_unknown_key():
    with pytest.raises(ConfigError):
        Config().override(colour="blue")


class TestRequirePr:
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing(self, value):
        cfg = Config()
        cfg.PR = value
        with pytest.raises(ConfigError, match="not set"):
            cfg.require_pr()

    @pytest.mark.parametrize("value", ["abc", "1.5", "0", "-3"])
    def test_invalid(self, value):
        cfg = Config()
        cfg.PR = value
        with pytest.raises(ConfigError):
            cfg.require_pr()

    def test_hash_prefix_and_env(self, monkeypatch):
        monkeypatch.setenv("PR", "#123")
        assert Config().require_pr() == 123
