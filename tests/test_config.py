"""Tests for loading the client configuration."""

from datetime import timedelta
import os
from pathlib import Path
from unittest.mock import patch

import pytest
import voluptuous as vol

from growatt_portal import ALTERNATE_URL, DEFAULT_URL, GrowattConfig, GrowattPortal
from growatt_portal.const import (
    ENV_AUTO_RELOGIN,
    ENV_BASE_URL,
    ENV_PASSWORD,
    ENV_SESSION_DURATION,
    ENV_USERNAME,
)

ALL_KEYS = (
    ENV_USERNAME,
    ENV_PASSWORD,
    ENV_BASE_URL,
    ENV_SESSION_DURATION,
    ENV_AUTO_RELOGIN,
)


def test_from_env_mapping() -> None:
    """Test that every variable is taken over as provided."""
    config = GrowattConfig.from_env(
        {
            ENV_USERNAME: "test_username",
            ENV_PASSWORD: "test_password",
            ENV_BASE_URL: "https://openapi.growatt.com",
            ENV_SESSION_DURATION: "45",
        }
    )

    assert config.username == "test_username"
    assert config.password == "test_password"
    assert config.base_url == "https://openapi.growatt.com"
    assert config.session_duration == timedelta(minutes=45)
    assert config.auto_relogin is True


def test_from_env_defaults() -> None:
    """Test the defaults when nothing is set."""
    config = GrowattConfig.from_env({})

    assert config == GrowattConfig()
    assert config.base_url == DEFAULT_URL
    assert config.session_duration == timedelta(minutes=30)


def test_repeated_loads_are_independent() -> None:
    """Test that one load does not leak into the next."""
    first = GrowattConfig.from_env({ENV_USERNAME: "a", ENV_SESSION_DURATION: "5"})
    second = GrowattConfig.from_env({})

    assert first.username == "a"
    assert second.username is None
    assert second.session_duration == timedelta(minutes=30)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("alternate", ALTERNATE_URL),
        ("DEFAULT", DEFAULT_URL),
        (" https://example.test/ ", "https://example.test"),
    ],
)
def test_base_url_values(value: str, expected: str) -> None:
    """Test preset names and URL normalization."""
    assert GrowattConfig.from_env({ENV_BASE_URL: value}).base_url == expected


def test_invalid_base_url() -> None:
    """Test that a value that is neither preset nor URL is rejected."""
    with pytest.raises(vol.Invalid):
        GrowattConfig.from_env({ENV_BASE_URL: "not a url"})


@pytest.mark.parametrize("value", ["abc", "0", "-5", ""])
def test_invalid_session_duration_is_ignored(value: str) -> None:
    """Test that unusable durations fall back to the default."""
    config = GrowattConfig.from_env({ENV_SESSION_DURATION: value})
    assert config.session_duration == timedelta(minutes=30)


@pytest.mark.parametrize(("value", "expected"), [("false", False), ("1", True)])
def test_auto_relogin(value: str, expected: bool) -> None:
    """Test parsing the auto relogin switch."""
    config = GrowattConfig.from_env({ENV_AUTO_RELOGIN: value})
    assert config.auto_relogin is expected


def test_repr_hides_password() -> None:
    """Test that the password is not part of the repr."""
    config = GrowattConfig(username="user", password="secret")
    assert "secret" not in repr(config)


def test_from_process_environment(tmp_path: Path) -> None:
    """Test reading os.environ, with process variables winning over .env."""
    env_file = tmp_path / ".env"
    env_file.write_text(
        f"{ENV_USERNAME}=from_file\n{ENV_PASSWORD}=file_password\n",
        encoding="utf-8",
    )

    with patch.dict(os.environ):
        for key in ALL_KEYS:
            os.environ.pop(key, None)
        os.environ[ENV_USERNAME] = "from_process"

        config = GrowattConfig.from_env(dotenv_path=env_file)

    assert config.username == "from_process"
    assert config.password == "file_password"


def test_client_from_config() -> None:
    """Test that a configured client holds credentials but is not logged in."""
    config = GrowattConfig(
        username="user",
        password="pw",
        base_url=ALTERNATE_URL,
        session_duration=timedelta(minutes=10),
    )

    client = GrowattPortal.from_config(config)

    assert client.base_url == ALTERNATE_URL
    assert client.state.duration == timedelta(minutes=10)
    assert client.credentials.username == "user"
    assert client.is_logged_in is False


def test_client_from_config_without_auto_relogin() -> None:
    """Test that credentials are not kept when auto relogin is off."""
    config = GrowattConfig(username="user", password="pw", auto_relogin=False)

    client = GrowattPortal.from_config(config)

    assert client.credentials is None
    assert client.auto_relogin is False


def test_client_from_env() -> None:
    """Test building a client straight from the environment."""
    with patch(
        "growatt_portal.config.GrowattConfig.from_env",
        return_value=GrowattConfig(username="env_user", password="pw"),
    ):
        client = GrowattPortal.from_env()

    assert client.credentials.username == "env_user"
