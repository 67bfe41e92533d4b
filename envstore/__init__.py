"""
envstore - Env File Configuration
=================================

Loads ``.env`` files into a layered, dot-addressable configuration store.

Modules:
- config: Env-file parser, configuration store and env-file generator
- utils: Logging setup
- cli: Command-line interface
"""

__version__ = "1.0.0"

from .config import (
    ConfigStore,
    DotEnv,
    EnvFileGenerator,
    NotFoundError,
    UnreadableError,
    env,
    get_store,
)
from .utils.logger import setup_logging

__all__ = [
    "ConfigStore",
    "DotEnv",
    "EnvFileGenerator",
    "NotFoundError",
    "UnreadableError",
    "env",
    "get_store",
    "setup_logging",
]
