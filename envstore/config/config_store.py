"""
Configuration Store
===================

Nested configuration tree with dot-notation access, seeded from an env file
and typed defaults.

Environment resolution order (first hit wins):
1. Override table: variables set for the current execution context
2. OS environment variables
3. Variables parsed from the env file
4. Caller default

The tree is built once, on first access, and kept for the life of the store.
Lookups never raise; a broken path returns the caller's default.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import find_dotenv

from .defaults import ConfigTree, build_default_config
from .dotenv_parser import DotEnv, PathLike

logger = logging.getLogger(__name__)

FOUND = "found"
MISSING = "missing"
NOT_A_MAP = "not_a_map"


@dataclass(frozen=True)
class PathLookup:
    """Outcome of walking a dotted path through the tree."""
    found: bool
    value: Any = None
    missing_segment: Optional[str] = None
    reason: str = FOUND


def walk_path(tree: Mapping[str, Any], dotted_key: str) -> PathLookup:
    """Walk ``dotted_key`` through nested mappings."""
    value: Any = tree

    for segment in dotted_key.split('.'):
        if not isinstance(value, Mapping):
            return PathLookup(found=False, missing_segment=segment, reason=NOT_A_MAP)
        if segment not in value:
            return PathLookup(found=False, missing_segment=segment, reason=MISSING)
        value = value[segment]

    return PathLookup(found=True, value=value)


class ConfigStore:
    """
    Explicit configuration object.

    Construct one at startup and pass it to consumers. All accessors trigger
    a one-time initialization; later ``init()`` calls are no-ops.
    """

    def __init__(self,
                 env_file: PathLike = '.env',
                 root_path: Optional[PathLike] = None,
                 overrides: Optional[Mapping[str, str]] = None):
        """
        Initialize the store without loading anything.

        Args:
            env_file: Env file name or path, relative to ``root_path``
            root_path: Base directory; located with ``find_dotenv`` if omitted
            overrides: Initial override table
        """
        self.env_file = Path(env_file)
        self.root_path = Path(root_path) if root_path is not None else self._detect_root_path()
        self.overrides: Dict[str, str] = dict(overrides or {})

        self.env: Optional[DotEnv] = None
        self._config: ConfigTree = {}
        self._initialized = False
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    def _detect_root_path(self) -> Path:
        """Directory of the nearest env file above the CWD, else the CWD."""
        if self.env_file.is_absolute():
            return self.env_file.parent

        found = find_dotenv(str(self.env_file), usecwd=True)
        if found:
            # strip the env_file's own components, e.g. "config/.env"
            return Path(found).parents[len(self.env_file.parts) - 1]
        return Path.cwd()

    @property
    def env_path(self) -> Path:
        if self.env_file.is_absolute():
            return self.env_file
        return self.root_path / self.env_file

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ------------------------------------------------------------------
    def init(self) -> 'ConfigStore':
        """
        Load the env file (if present) and build the default sections.

        Raises:
            UnreadableError: If the env file exists but cannot be read
        """
        with self._lock:
            if self._initialized:
                return self

            env_path = self.env_path
            if env_path.exists():
                env = DotEnv(env_path)
                env.load()
                self.env = env
            else:
                logger.info(f"No env file at {env_path}, using environment and defaults")

            self._config = build_default_config(self.resolve_env, self.root_path)
            self._initialized = True

            logger.debug(f"Configuration initialized with sections: {list(self._config.keys())}")
            return self

    def _ensure_initialized(self):
        if not self._initialized:
            self.init()

    # ------------------------------------------------------------------
    def set_override(self, key: str, value: str):
        """Set a variable in the override table."""
        with self._lock:
            self.overrides[key] = value

    def resolve_env(self, key: str, default: Any = None) -> Any:
        """Resolve an environment variable through the override table,
        the OS environment, the env file and finally ``default``."""
        if key in self.overrides:
            return self.overrides[key]

        value = os.environ.get(key)
        if value is not None:
            return value

        if self.env is not None:
            return self.env.get(key, default)

        return default

    # ------------------------------------------------------------------
    def lookup(self, key: str) -> PathLookup:
        """Walk a dotted key, reporting why it failed if it did."""
        self._ensure_initialized()
        with self._lock:
            return walk_path(self._config, key)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dotted key.

        Args:
            key: Dotted path, e.g. ``database.connections.mysql.host``
            default: Returned when any segment is missing or not a mapping

        Returns:
            The stored value or ``default``
        """
        result = self.lookup(key)
        return result.value if result.found else default

    def has(self, key: str) -> bool:
        return self.lookup(key).found

    def set(self, key: str, value: Any):
        """
        Set a configuration value by dotted key (runtime only).

        Intermediate nodes are created as needed; any non-mapping node found
        on the way is replaced by an empty mapping.
        """
        self._ensure_initialized()

        keys = key.split('.')
        with self._lock:
            current = self._config
            for segment in keys[:-1]:
                if not isinstance(current.get(segment), dict):
                    current[segment] = {}
                current = current[segment]
            current[keys[-1]] = value

        logger.debug(f"Config set: {key}")

    def all(self) -> ConfigTree:
        """Return the live configuration tree (not a copy)."""
        self._ensure_initialized()
        return self._config

    def connection(self, name: Optional[str] = None) -> Dict[str, Any]:
        """
        Get a database connection profile.

        Args:
            name: Connection name, ``database.default`` if omitted

        Returns:
            Profile dict, empty if the connection is not configured
        """
        if name is None:
            name = self.get('database.default')
        if not isinstance(name, str):
            return {}

        profile = self.get(f'database.connections.{name}', {})
        return profile if isinstance(profile, dict) else {}

    def __repr__(self) -> str:
        return f"ConfigStore(env_path={str(self.env_path)!r}, initialized={self._initialized})"


# ----------------------------------------------------------------------
# Process-wide accessor
# ----------------------------------------------------------------------

_store: Optional[ConfigStore] = None
_store_lock = threading.Lock()


def get_store(env_file: PathLike = '.env',
              root_path: Optional[PathLike] = None) -> ConfigStore:
    """
    Return the process-wide store, creating and initializing it once.

    Arguments are only used by the first call.
    """
    global _store
    with _store_lock:
        if _store is None:
            _store = ConfigStore(env_file=env_file, root_path=root_path).init()
        return _store


def reset_store():
    """Drop the process-wide store."""
    global _store
    with _store_lock:
        _store = None


def config(key: str, default: Any = None) -> Any:
    """Shortcut for ``get_store().get(key, default)``."""
    return get_store().get(key, default)


def env(key: str, default: Any = None) -> Any:
    """Shortcut for ``get_store().resolve_env(key, default)``."""
    return get_store().resolve_env(key, default)


__all__ = [
    "ConfigStore",
    "PathLookup",
    "walk_path",
    "get_store",
    "reset_store",
    "config",
    "env",
]
