"""Runtime configuration for the release notifier."""

import os
from dataclasses import dataclass
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

DEFAULTS: dict[str, Any] = {
    "cron_interval": "0 * * * *",
    "labymod_version": "4.2.47",
    "watched_mods": "",
    "discord_content": "",
    "discord_webhook": "",
    "timezone": "Europe/Berlin",
    "cache_dir": ".cache",
    "request_timeout": "10",
    "api_base_url": "https://flintmc.net/api/client-store",
    "log_level": "INFO",
}


class ConfigError(ValueError):
    """Raised when a configuration value cannot be interpreted."""


@dataclass(frozen=True)
class Settings:
    """Settings shared by every component of a running notifier."""

    cron: str
    labymod_version: str
    watched_mods: tuple[str, ...]
    webhook_url: str
    webhook_content: str
    timezone: str
    cache_dir: str
    request_timeout: float
    api_base_url: str
    log_level: str


def parse_watched_mods(value: Any) -> tuple[str, ...]:
    """
    Normalize the watched modification list.

    A comma separated string is split as-is, so an empty string yields a
    single empty entry. Lists coming from a YAML file are taken item by item.
    """
    if isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        items = str(value or "").split(",")
    return tuple(item.lower() for item in items)


def load_file_config(path: str) -> dict[str, Any]:
    """Load a YAML config file whose keys are lower-cased variable names."""
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return {str(key).lower(): value for key, value in data.items()}


def load_settings(
    environ: Mapping[str, str] | None = None,
    use_dotenv: bool = True,
) -> Settings:
    """
    Build settings from defaults, an optional YAML file and the environment.

    Args:
        environ: Variables to read instead of ``os.environ``
        use_dotenv: Load a ``.env`` file into the process environment first

    Returns:
        Frozen settings object

    Raises:
        ConfigError: If a value has the wrong type
    """
    if environ is None:
        if use_dotenv:
            load_dotenv()
        environ = os.environ

    values = dict(DEFAULTS)
    config_file = environ.get("CONFIG_FILE")
    if config_file:
        values.update(load_file_config(config_file))

    for key in DEFAULTS:
        env_value = environ.get(key.upper())
        # Empty variables fall back like `process.env.X || default`
        if env_value:
            values[key] = env_value

    try:
        timeout = float(values["request_timeout"])
    except (TypeError, ValueError):
        raise ConfigError(f"REQUEST_TIMEOUT must be a number, got {values['request_timeout']!r}")
    if timeout <= 0:
        raise ConfigError("REQUEST_TIMEOUT must be positive")

    return Settings(
        cron=str(values["cron_interval"]),
        labymod_version=str(values["labymod_version"]),
        watched_mods=parse_watched_mods(values["watched_mods"]),
        webhook_url=str(values["discord_webhook"] or ""),
        webhook_content=str(values["discord_content"] or ""),
        timezone=str(values["timezone"]),
        cache_dir=str(values["cache_dir"]),
        request_timeout=timeout,
        api_base_url=str(values["api_base_url"]).rstrip("/"),
        log_level=str(values["log_level"]).upper(),
    )
