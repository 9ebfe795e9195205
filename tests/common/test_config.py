from __future__ import annotations

import logging

import pytest

from clusterapply.common.logging import configure_logging
from clusterapply.config import (
    ConfigurationError,
    MissingConfigurationError,
    env_flag,
    get_cluster_config,
    get_inventory_config,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR"])

    assert "MISSING_VAR" in str(exc.value)


def test_require_env_vars_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_vars(["EXAMPLE_VAR"])


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("TRUE", True), (" yes ", True), ("0", False), ("off", False), ("", False)],
)
def test_env_flag_parses_booleans(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool  # noqa: FBT001
) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", raw)

    assert env_flag("EXAMPLE_FLAG") is expected


def test_env_flag_default_and_invalid(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXAMPLE_FLAG", raising=False)
    assert env_flag("EXAMPLE_FLAG", default=True) is True

    monkeypatch.setenv("EXAMPLE_FLAG", "maybe")
    with pytest.raises(ConfigurationError, match="EXAMPLE_FLAG"):
        env_flag("EXAMPLE_FLAG")


def test_inventory_config_reads_dry_run(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CLUSTERAPPLY_DRY_RUN", raising=False)
    assert not get_inventory_config().dry_run

    monkeypatch.setenv("CLUSTERAPPLY_DRY_RUN", "true")
    assert get_inventory_config().dry_run


def test_cluster_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLUSTERAPPLY_SERVER", "https://cluster.test:6443/")
    monkeypatch.setenv("CLUSTERAPPLY_TOKEN", "secret")
    monkeypatch.setenv("CLUSTERAPPLY_INSECURE", "1")
    monkeypatch.delenv("CLUSTERAPPLY_NAMESPACE", raising=False)

    config = get_cluster_config()

    assert config.server == "https://cluster.test:6443"
    assert config.auth_headers() == {"Authorization": "Bearer secret"}
    assert not config.verify_tls
    assert config.default_namespace == "default"


def test_cluster_config_requires_server(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CLUSTERAPPLY_SERVER", raising=False)

    with pytest.raises(MissingConfigurationError, match="CLUSTERAPPLY_SERVER"):
        get_cluster_config()


def test_cluster_config_without_token_sends_no_auth(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLUSTERAPPLY_SERVER", "https://cluster.test")
    monkeypatch.delenv("CLUSTERAPPLY_TOKEN", raising=False)

    assert get_cluster_config().auth_headers() == {}


def test_configure_logging_force_sets_level() -> None:
    root = logging.getLogger()
    previous_level = root.level
    previous_handlers = list(root.handlers)
    try:
        configure_logging(level=logging.DEBUG, force=True)
        assert root.level == logging.DEBUG
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in previous_handlers:
            root.addHandler(handler)
        root.setLevel(previous_level)
