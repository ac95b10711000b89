"""
vcompiler Environment
=====================

Environment variable access for compiler defaults.

Recognized variables:
    VCOMPILER_ENV        "production" turns off dev-mode diagnostics
    VCOMPILER_LOG_LEVEL  level name for the compiler loggers

A ``.env`` file is only read when ``load_env()`` is called.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional, Union


class Env:
    """
    Environment variable manager.

    Reads variables from the process environment, falling back to values
    loaded from a ``.env`` file.

    Example:
        env = Env().load()
        dev = env.bool("VCOMPILER_DEV", default=True)
    """

    def __init__(
        self,
        env_file: Optional[Union[str, Path]] = None,
        override: bool = False,
    ):
        """
        Args:
            env_file: Path to .env file
            override: Override existing environment variables
        """
        self._env_file = Path(env_file) if env_file else None
        self._override = override
        self._cache: Dict[str, str] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, env_file: Optional[Union[str, Path]] = None) -> "Env":
        """
        Load variables from a ``.env`` file.

        Without an explicit path, the current directory is searched.
        A missing file is not an error.

        Returns:
            Self for chaining
        """
        path = Path(env_file) if env_file else self._env_file
        if path is None:
            candidate = Path.cwd() / ".env"
            path = candidate if candidate.exists() else None

        if path is not None and path.exists():
            self._load_file(path)

        self._loaded = True
        return self

    def _load_file(self, path: Path) -> None:
        for line in path.read_text().splitlines():
            line = line.strip()

            if not line or line.startswith("#"):
                continue
            if line.startswith("export "):
                line = line[7:]
            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]

            self._cache[key] = value
            if self._override or key not in os.environ:
                os.environ[key] = value

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a raw value."""
        return os.getenv(key, self._cache.get(key, default))

    def str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get string value."""
        return self.get(key, default)

    def bool(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        """Get boolean value; unrecognized text falls back to the default."""
        value = self.get(key)

        if value is None:
            return default

        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on", "enabled"):
            return True
        if lowered in ("false", "0", "no", "off", "disabled", ""):
            return False

        return default

    def __contains__(self, key: str) -> bool:
        return key in os.environ or key in self._cache


# Global instance; reads the process environment until load_env() is called
_env: Env = Env()


def load_env(env_file: Optional[Union[str, Path]] = None) -> Env:
    """
    Load a ``.env`` file into the global instance.

    Nothing is read from disk on import: an application opts in by calling
    this before compiling.

    Args:
        env_file: Path to the file, ``./.env`` when omitted

    Returns:
        The global instance
    """
    return _env.load(env_file)


def env(key: str, default: Optional[str] = None) -> Optional[str]:
    """
    Get environment variable from the global instance.

    Args:
        key: Variable name
        default: Default value

    Returns:
        Variable value
    """
    return _env.get(key, default)


def is_dev_mode() -> bool:
    """True unless ``VCOMPILER_ENV`` is ``production``."""
    return (env("VCOMPILER_ENV", "development") or "").lower() != "production"
