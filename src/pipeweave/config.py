"""Application configuration.

Two layers:

- ``AppConfig`` is a frozen dataclass of runtime options (host, port,
  environment). IDE-autocompletable, no string-key lookups.
- ``Settings`` is the read-only application settings map (e.g.
  ``HelloMessage``) loaded once at startup from TOML files and handed to
  the container setup step.
"""

import logging
import tomllib
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pipeweave.errors import ConfigurationError

logger = logging.getLogger("pipeweave.config")

ENV_DEVELOPMENT = "development"
ENV_PRODUCTION = "production"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(environment="development", port=3000)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Runtime environment; "development" turns on debug error pages
    environment: str = ENV_PRODUCTION

    # Settings files (global.toml, <environment>.toml, local.toml)
    config_dir: str | Path | None = None

    # Logging
    log_level: str = "info"

    @property
    def debug(self) -> bool:
        """True when running in the development environment."""
        return self.environment == ENV_DEVELOPMENT


class Settings(Mapping[str, Any]):
    """Read-only application settings.

    Wraps a merged dict in a ``MappingProxyType`` so nothing can mutate it
    after load. Missing keys raise ``ConfigurationError`` via ``require()``.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: Mapping[str, Any] = MappingProxyType(dict(data or {}))

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Settings({dict(self._data)!r})"

    def require(self, key: str) -> Any:
        """Return the value for *key* or raise ``ConfigurationError``."""
        try:
            return self._data[key]
        except KeyError:
            msg = f"Missing required setting {key!r}."
            raise ConfigurationError(msg) from None


def _merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into a copy of *base*."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = _merge(current, value)
        else:
            merged[key] = value
    return merged


def settings_files(config_dir: str | Path, environment: str | None) -> list[Path]:
    """Return the candidate settings files in load order."""
    root = Path(config_dir)
    names = ["global.toml"]
    if environment:
        names.append(f"{environment}.toml")
    names.append("local.toml")
    return [root / name for name in names]


def load_settings(config_dir: str | Path, environment: str | None = None) -> Settings:
    """Load and merge settings files from *config_dir*.

    Files are read in order ``global.toml``, ``<environment>.toml``,
    ``local.toml``; later files override earlier ones and tables are merged
    recursively. Missing files are skipped.

    Raises:
        ConfigurationError: If *config_dir* does not exist or a file is not
            valid TOML.
    """
    root = Path(config_dir)
    if not root.is_dir():
        msg = f"Config directory {str(root)!r} does not exist."
        raise ConfigurationError(msg)

    data: dict[str, Any] = {}
    for path in settings_files(root, environment):
        if not path.is_file():
            continue
        try:
            with path.open("rb") as fh:
                loaded = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid settings file {str(path)!r}: {exc}"
            raise ConfigurationError(msg) from exc
        logger.debug("Loaded settings from %s", path)
        data = _merge(data, loaded)

    return Settings(data)
