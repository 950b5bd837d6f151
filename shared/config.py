"""
Classicrypt Configuration
==========================

Dataclass settings loaded from an optional TOML file with two tables,
``[global]`` and ``[classicrypt]``. Every value has a default, so the lab
runs with no file at all. A few environment variables override the file:

    CLASSICRYPT_DATA_DIR    -> classicrypt.data_dir
    CLASSICRYPT_WORDLIST    -> classicrypt.wordlist
    CLASSICRYPT_LOG_LEVEL   -> global.log_level

References:
    - Wiggins, A. (2011). The Twelve-Factor App, III. Config.
      https://12factor.net/config
    - TOML v1.0.0. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_DEFAULT_CONFIG_PATH = _PROJECT_ROOT / "config.toml"
_BUNDLED_WORDLIST = _PROJECT_ROOT / "classicrypt" / "data" / "dict_small.txt"

# (table, key) per environment variable
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "CLASSICRYPT_DATA_DIR": ("classicrypt", "data_dir"),
    "CLASSICRYPT_WORDLIST": ("classicrypt", "wordlist"),
    "CLASSICRYPT_LOG_LEVEL": ("global", "log_level"),
}


@dataclass(slots=True)
class GlobalConfig:
    """``[global]``: logging."""

    log_level: str = "WARNING"
    log_file: Optional[str] = None
    log_json: bool = False
    debug: bool = False


@dataclass(slots=True)
class ClassicryptConfig:
    """``[classicrypt]``: storage, wordlist, PBKDF2 and attack limits.

    ``users_file`` and ``results_file`` are relative to ``data_dir``.
    Without ``wordlist`` the bundled ``dict_small.txt`` is used.

    Reference:
        NIST SP 800-132 (2010). Recommendation for Password-Based Key
        Derivation.
    """

    data_dir: str = "data"
    users_file: str = "users.json"
    results_file: str = "results.csv"
    wordlist: Optional[str] = None

    pbkdf2_iterations: int = 200_000
    pbkdf2_keylen: int = 64
    pbkdf2_digest: str = "sha512"
    salt_bytes: int = 16

    password_space_limit: int = 10_000
    candidate_preview: int = 10

    @property
    def users_path(self) -> Path:
        return Path(self.data_dir) / self.users_file

    @property
    def results_path(self) -> Path:
        return Path(self.data_dir) / self.results_file

    @property
    def wordlist_path(self) -> Path:
        return Path(self.wordlist) if self.wordlist else _BUNDLED_WORDLIST


def _section(kind: type, values: Mapping[str, Any]) -> Any:
    # unknown keys are dropped
    known = {f.name for f in fields(kind)}
    return kind(**{k: v for k, v in values.items() if k in known})


@dataclass(slots=True)
class LabConfig:
    """Top-level configuration.

    Usage::

        config = LabConfig.load("lab.toml")
        config.classicrypt.users_path
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    classicrypt: ClassicryptConfig = field(default_factory=ClassicryptConfig)

    @classmethod
    def load(
        cls, path: str | Path | None = None, env: Optional[Mapping[str, str]] = None
    ) -> LabConfig:
        """Read *path* (or ``config.toml`` at the project root) and apply
        environment overrides from *env* (default ``os.environ``).

        Raises:
            FileNotFoundError: If an explicit *path* does not exist. A
                missing default file just means defaults.
        """
        source = Path(path) if path is not None else _DEFAULT_CONFIG_PATH
        raw: dict[str, dict[str, Any]] = {"global": {}, "classicrypt": {}}

        if source.is_file():
            with source.open("rb") as fh:
                parsed = tomllib.load(fh)
            for table in raw:
                raw[table].update(parsed.get(table, {}))
        elif path is not None:
            raise FileNotFoundError(f"Configuration file not found: {source}")

        env = os.environ if env is None else env
        for var, (table, key) in _ENV_OVERRIDES.items():
            if env.get(var):
                raw[table][key] = env[var]

        return cls(
            global_settings=_section(GlobalConfig, raw["global"]),
            classicrypt=_section(ClassicryptConfig, raw["classicrypt"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_cached: Optional[LabConfig] = None


def get_config(path: str | Path | None = None) -> LabConfig:
    """Process-wide configuration, reloaded when *path* is given."""
    global _cached
    if _cached is None or path is not None:
        _cached = LabConfig.load(path)
    return _cached
