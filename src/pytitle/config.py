"""Client configuration for pytitle."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pytitle._constants import (
    BASE_URL,
    DEFAULT_FAKE_DELAY,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TAP_DELAY,
)
from pytitle.exceptions import TitleConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, kind: type[int] | type[float]) -> int | float:
    try:
        return kind(value)
    except ValueError as exc:
        raise TitleConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class TitleConfig:
    """Runtime configuration.

    Parameters
    ----------
    base_url : str
        Base URL of the title service.  ``next_title.json`` is resolved
        against it.
    request_timeout : float
        Total timeout in seconds for a single title fetch.
    database_path : str or None
        SQLite file holding the cached title.  ``None`` keeps the title
        in memory only.
    tap_delay : float
        Seconds a tap waits before the taps label is updated.
    skip_network : bool
        Install :class:`~pytitle.interceptors.SkipNetworkInterceptor` so
        titles are faked locally instead of fetched over HTTP.
    fake_delay : float
        Latency, in seconds, of each faked response.
    fake_error_rate : float
        Probability (0-1) that a faked response fails.
    fake_seed : int or None
        Seed for the fake response generator.  Set it for reproducible
        runs.
    """

    base_url: str = BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    database_path: str | None = None
    tap_delay: float = DEFAULT_TAP_DELAY
    skip_network: bool = True
    fake_delay: float = DEFAULT_FAKE_DELAY
    fake_error_rate: float = 0.0
    fake_seed: int | None = None

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise TitleConfigError("request_timeout must be positive")
        if self.tap_delay < 0 or self.fake_delay < 0:
            raise TitleConfigError("delays must not be negative")
        if not 0.0 <= self.fake_error_rate <= 1.0:
            raise TitleConfigError("fake_error_rate must be between 0 and 1")

    @classmethod
    def from_env(cls, **overrides: Any) -> TitleConfig:
        """Create configuration from environment variables.

        Reads optional ``PYTITLE_*`` variables.  Explicit keyword
        arguments override environment values.

        Raises
        ------
        TitleConfigError
            If a numeric variable cannot be parsed or a value is out of
            range.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}
        base_url = env.get("PYTITLE_BASE_URL")
        if base_url is not None:
            config_kwargs["base_url"] = base_url

        database_path = env.get("PYTITLE_DATABASE_PATH")
        if database_path:
            config_kwargs["database_path"] = database_path

        _ENV_FLOAT_MAP = {
            "PYTITLE_REQUEST_TIMEOUT": "request_timeout",
            "PYTITLE_TAP_DELAY": "tap_delay",
            "PYTITLE_FAKE_DELAY": "fake_delay",
            "PYTITLE_FAKE_ERROR_RATE": "fake_error_rate",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, float)

        seed_env = env.get("PYTITLE_FAKE_SEED")
        if seed_env is not None and "fake_seed" not in overrides:
            config_kwargs["fake_seed"] = _env_number("PYTITLE_FAKE_SEED", seed_env, int)

        if "skip_network" not in overrides:
            config_kwargs["skip_network"] = _env_bool(env.get("PYTITLE_SKIP_NETWORK"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
