"""Configuration of the Growatt portal client from the environment."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
import logging
import os
from typing import Any

from dotenv import load_dotenv
import voluptuous as vol

from .const import (
    DEFAULT_SESSION_DURATION,
    DEFAULT_URL,
    ENV_AUTO_RELOGIN,
    ENV_BASE_URL,
    ENV_PASSWORD,
    ENV_SESSION_DURATION,
    ENV_USERNAME,
    SERVER_URLS,
)

_LOGGER = logging.getLogger(__name__)


def base_url(value: Any) -> str:
    """Resolve a preset name or validate a URL."""
    value = vol.All(str, vol.Strip, vol.Length(min=1))(value)
    if value.lower() in SERVER_URLS:
        return SERVER_URLS[value.lower()]
    return vol.Url()(value).rstrip("/")


def session_minutes(value: Any) -> int | None:
    """Parse a positive number of minutes, ignoring anything else."""
    try:
        return vol.All(vol.Coerce(int), vol.Range(min=1))(value)
    except vol.Invalid:
        _LOGGER.warning("Ignoring invalid %s value: %r", ENV_SESSION_DURATION, value)
        return None


ENV_SCHEMA = vol.Schema(
    {
        vol.Optional(ENV_USERNAME): str,
        vol.Optional(ENV_PASSWORD): str,
        vol.Optional(ENV_BASE_URL, default=DEFAULT_URL): base_url,
        vol.Optional(ENV_SESSION_DURATION): session_minutes,
        vol.Optional(ENV_AUTO_RELOGIN, default=True): vol.Boolean(),
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True)
class GrowattConfig:
    """Settings needed to build a portal client."""

    username: str | None = None
    password: str | None = None
    base_url: str = DEFAULT_URL
    session_duration: timedelta = DEFAULT_SESSION_DURATION
    auto_relogin: bool = True

    def __repr__(self) -> str:
        return (
            f"GrowattConfig(username={self.username!r}, base_url={self.base_url!r}, "
            f"session_duration={self.session_duration!r}, "
            f"auto_relogin={self.auto_relogin!r})"
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> GrowattConfig:
        """
        Build a configuration from GROWATT_* variables.

        Raises:
            voluptuous.Invalid: If GROWATT_BASE_URL or GROWATT_AUTO_RELOGIN
                cannot be parsed.

        """
        data = ENV_SCHEMA(dict(values))
        minutes = data.get(ENV_SESSION_DURATION)
        return cls(
            username=data.get(ENV_USERNAME),
            password=data.get(ENV_PASSWORD),
            base_url=data[ENV_BASE_URL],
            session_duration=(
                timedelta(minutes=minutes)
                if minutes is not None
                else DEFAULT_SESSION_DURATION
            ),
            auto_relogin=data[ENV_AUTO_RELOGIN],
        )

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        dotenv_path: str | os.PathLike[str] | None = None,
    ) -> GrowattConfig:
        """
        Load the configuration from the environment.

        When no mapping is given, a ``.env`` file is loaded into the process
        environment first (existing variables win) and ``os.environ`` is read.

        Args:
            environ (Mapping, optional): Variables to read instead of the
                process environment.
            dotenv_path (PathLike, optional): Location of the ``.env`` file.

        """
        if environ is None:
            load_dotenv(dotenv_path, override=False)
            environ = os.environ
        config = cls.from_mapping(environ)
        _LOGGER.debug("Loaded %r", config)
        return config
