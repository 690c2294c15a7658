from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ConfigurationError

DEFAULT_HOST = "webservices.amazon.com"
DEFAULT_PATH = "/onca/xml"
DEFAULT_SEARCH = "All"
DEFAULT_TIMEOUT = 10.0

REQUIRED_ENV_VARS = {
    "AMAZONIAN_ACCESS_KEY",
    "AMAZONIAN_SECRET_KEY",
}

OPTIONAL_ENV_VARS = {
    "AMAZONIAN_HOST",
    "AMAZONIAN_PATH",
    "AMAZONIAN_DEFAULT_SEARCH",
    "AMAZONIAN_CACHE_LAST",
    "AMAZONIAN_DEBUG",
    "AMAZONIAN_TIMEOUT",
}

_ENV_ALIASES = {
    "AMAZONIAN_ACCESS_KEY": ("AMAZONIAN_ACCESS_KEY", "AWS_ACCESS_KEY_ID", "AWS_ACCESS_KEY"),
    "AMAZONIAN_SECRET_KEY": ("AMAZONIAN_SECRET_KEY", "AWS_SECRET_ACCESS_KEY", "AWS_SECRET_KEY"),
}

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Configuration:
    """Connection settings for the Product Advertising API."""

    host: str = DEFAULT_HOST
    path: str = DEFAULT_PATH
    key: str = field(default="", repr=False)
    secret: str = field(default="", repr=False)
    default_search: str = DEFAULT_SEARCH
    cache_last: bool = True
    debug: bool = False
    timeout: float = DEFAULT_TIMEOUT

    def setup(self, **options: Any) -> "Configuration":
        """Update options in place; unknown option names are rejected."""

        known = {f.name for f in fields(self)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration option(s): {', '.join(unknown)}")
        for name, value in options.items():
            setattr(self, name, value)
        return self

    @property
    def has_credentials(self) -> bool:
        return bool(self.key and self.key.strip() and self.secret and self.secret.strip())


def _parse_dotenv_value(raw: str) -> str:
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    # Unquoted values may carry a trailing " # comment".
    return value.split(" #", 1)[0].rstrip()


def _load_dotenv(path: Path) -> Dict[str, str]:
    """Read ``KEY=value`` lines; ``export`` prefixes and comments are ignored."""

    if not path.exists():
        return {}
    env: Dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        name, raw = line.split("=", 1)
        env[name.strip()] = _parse_dotenv_value(raw)
    return env


def _collect_env_values(source: Dict[str, str], destination: Dict[str, str]) -> None:
    for name in REQUIRED_ENV_VARS | OPTIONAL_ENV_VARS:
        if destination.get(name):
            continue
        for alias in _ENV_ALIASES.get(name, (name,)):
            value = source.get(alias)
            if value:
                destination[name] = value
                break


def _to_bool(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def load_configuration(env_path: str | Path = ".env") -> Optional[Configuration]:
    env: Dict[str, str] = {}
    _collect_env_values(dict(os.environ), env)
    missing = {key for key in REQUIRED_ENV_VARS if not env.get(key)}
    if missing:
        _collect_env_values(_load_dotenv(Path(env_path)), env)
        missing = {key for key in REQUIRED_ENV_VARS if not env.get(key)}
        if missing:
            return None

    timeout = DEFAULT_TIMEOUT
    if env.get("AMAZONIAN_TIMEOUT"):
        try:
            timeout = float(env["AMAZONIAN_TIMEOUT"])
        except ValueError:
            timeout = DEFAULT_TIMEOUT

    return Configuration(
        host=env.get("AMAZONIAN_HOST") or DEFAULT_HOST,
        path=env.get("AMAZONIAN_PATH") or DEFAULT_PATH,
        key=env["AMAZONIAN_ACCESS_KEY"],
        secret=env["AMAZONIAN_SECRET_KEY"],
        default_search=env.get("AMAZONIAN_DEFAULT_SEARCH") or DEFAULT_SEARCH,
        cache_last=_to_bool(env.get("AMAZONIAN_CACHE_LAST"), True),
        debug=_to_bool(env.get("AMAZONIAN_DEBUG"), False),
        timeout=timeout,
    )
