import importlib.util
from pathlib import Path

import pytest

from jwt_graphql.env import ClientConfig, config_from_env

_ENV_VARS = (
    "JWT_GRAPHQL_DOMAIN",
    "JWT_GRAPHQL_ACCESS_TOKEN",
    "JWT_GRAPHQL_TIMEOUT_SECONDS",
    "JWT_GRAPHQL_VERIFY_SSL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_config_from_env_missing_returns_none(monkeypatch):
    assert config_from_env() is None
    monkeypatch.setenv("JWT_GRAPHQL_DOMAIN", "example.com")
    assert config_from_env() is None


def test_config_from_env_defaults(monkeypatch):
    monkeypatch.setenv("JWT_GRAPHQL_DOMAIN", " example.com ")
    monkeypatch.setenv("JWT_GRAPHQL_ACCESS_TOKEN", "access-123")
    config = config_from_env()
    assert config == ClientConfig(domain="example.com", access_token="access-123")
    assert config.timeout_seconds == 15.0
    assert config.verify_ssl is True


def test_config_from_env_overrides(monkeypatch):
    monkeypatch.setenv("JWT_GRAPHQL_DOMAIN", "example.com")
    monkeypatch.setenv("JWT_GRAPHQL_ACCESS_TOKEN", "access-123")
    monkeypatch.setenv("JWT_GRAPHQL_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("JWT_GRAPHQL_VERIFY_SSL", "false")
    config = config_from_env()
    assert config.timeout_seconds == 2.5
    assert config.verify_ssl is False


@pytest.mark.parametrize(
    "name, value",
    [
        ("JWT_GRAPHQL_TIMEOUT_SECONDS", "soon"),
        ("JWT_GRAPHQL_TIMEOUT_SECONDS", "0"),
        ("JWT_GRAPHQL_VERIFY_SSL", "maybe"),
    ],
)
def test_config_from_env_rejects_malformed_values(monkeypatch, name, value):
    monkeypatch.setenv("JWT_GRAPHQL_DOMAIN", "example.com")
    monkeypatch.setenv("JWT_GRAPHQL_ACCESS_TOKEN", "access-123")
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        config_from_env()


def _load_run_query_tool():
    path = Path(__file__).resolve().parents[2] / "tools" / "run_query.py"
    spec = importlib.util.spec_from_file_location("run_query_tool", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_run_query_tool_requires_configuration(capsys):
    tool = _load_run_query_tool()
    assert tool.main(["query { ok }"]) == 2
    assert "JWT_GRAPHQL_DOMAIN" in capsys.readouterr().err


def test_run_query_tool_rejects_bad_variables(monkeypatch, capsys):
    monkeypatch.setenv("JWT_GRAPHQL_DOMAIN", "example.com")
    monkeypatch.setenv("JWT_GRAPHQL_ACCESS_TOKEN", "access-123")
    tool = _load_run_query_tool()
    assert tool.main(["query { ok }", "--variables", "[1, 2]"]) == 2
    assert "JSON object" in capsys.readouterr().err
