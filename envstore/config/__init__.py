"""Configuration package.

Env-file parsing, the dotted-key ConfigStore and the env-file generator.
"""
from .errors import DotEnvError, NotFoundError, UnreadableError  # noqa: F401
from .dotenv_parser import DotEnv, ParseWarning, load_env_file  # noqa: F401
from .config_store import ConfigStore, PathLookup, get_store, reset_store, config, env  # noqa: F401
from .env_generator import EnvFileGenerator, GenerationResult  # noqa: F401
