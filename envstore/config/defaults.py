"""
Default Configuration Sections
==============================

Typed defaults for the sections every store carries:
1. app: application name, environment, debug flag, URL, timezone
2. database: default connection name plus mysql and sqlite profiles
3. cache: default store plus file and redis profiles
4. logging: default channel plus a single-file channel

Each field is resolved through the store's env resolver with a hardcoded
fallback, so ``.env`` values and OS variables replace the defaults.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

# str | bool | int | None | nested mapping
ConfigValue = Union[str, bool, int, None, Dict[str, Any]]
ConfigTree = Dict[str, ConfigValue]

Resolver = Callable[[str, Any], Any]


@dataclass
class AppSettings:
    """Application section."""
    name: str = "My Application"
    env: str = "production"
    debug: bool = False
    url: str = "http://localhost"
    timezone: str = "UTC"

    @classmethod
    def from_env(cls, resolve: Resolver) -> 'AppSettings':
        return cls(
            name=resolve('APP_NAME', cls.name),
            env=resolve('APP_ENV', cls.env),
            debug=resolve('APP_DEBUG', 'false') == 'true',
            url=resolve('APP_URL', cls.url),
            timezone=resolve('APP_TIMEZONE', cls.timezone),
        )


@dataclass
class MySQLConnection:
    """MySQL connection profile."""
    driver: str = "mysql"
    host: str = "localhost"
    port: str = "3306"
    database: str = "test"
    username: str = "root"
    password: str = ""
    charset: str = "utf8mb4"
    collation: str = "utf8mb4_unicode_ci"
    prefix: str = ""

    @classmethod
    def from_env(cls, resolve: Resolver) -> 'MySQLConnection':
        return cls(
            host=resolve('DB_HOST', cls.host),
            port=resolve('DB_PORT', cls.port),
            database=resolve('DB_DATABASE', cls.database),
            username=resolve('DB_USERNAME', cls.username),
            password=resolve('DB_PASSWORD', cls.password),
            charset=resolve('DB_CHARSET', cls.charset),
            collation=resolve('DB_COLLATION', cls.collation),
            prefix=resolve('DB_PREFIX', cls.prefix),
        )


@dataclass
class SQLiteConnection:
    """SQLite connection profile."""
    database: str
    driver: str = "sqlite"

    @classmethod
    def from_env(cls, resolve: Resolver, root_path: Path) -> 'SQLiteConnection':
        return cls(database=resolve('DB_DATABASE', str(root_path / 'database.sqlite')))


@dataclass
class DatabaseSettings:
    """Database section."""
    default: str = "mysql"
    connections: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls, resolve: Resolver, root_path: Path) -> 'DatabaseSettings':
        return cls(
            default=resolve('DB_CONNECTION', cls.default),
            connections={
                'mysql': asdict(MySQLConnection.from_env(resolve)),
                'sqlite': asdict(SQLiteConnection.from_env(resolve, root_path)),
            },
        )


@dataclass
class RedisStore:
    """Redis cache profile."""
    driver: str = "redis"
    host: str = "127.0.0.1"
    port: Union[int, str] = 6379
    password: Optional[str] = None


@dataclass
class CacheSettings:
    """Cache section."""
    default: str = "file"
    stores: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls, resolve: Resolver, root_path: Path) -> 'CacheSettings':
        redis = RedisStore(
            host=resolve('REDIS_HOST', RedisStore.host),
            port=resolve('REDIS_PORT', RedisStore.port),
            password=resolve('REDIS_PASSWORD', None),
        )
        return cls(
            default=resolve('CACHE_DRIVER', cls.default),
            stores={
                'file': {'driver': 'file', 'path': str(root_path / 'cache')},
                'redis': asdict(redis),
            },
        )


@dataclass
class LogChannel:
    """Single-file log channel."""
    path: str
    level: str = "debug"
    driver: str = "single"
    max_file_size: str = "10MB"
    backup_count: int = 5


@dataclass
class LoggingSettings:
    """Logging section."""
    default: str = "single"
    channels: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls, resolve: Resolver, root_path: Path) -> 'LoggingSettings':
        single = LogChannel(
            path=str(root_path / 'logs' / 'app.log'),
            level=resolve('LOG_LEVEL', LogChannel.level),
        )
        return cls(
            default=resolve('LOG_CHANNEL', cls.default),
            channels={'single': asdict(single)},
        )


def build_default_config(resolve: Resolver, root_path: Path) -> ConfigTree:
    """
    Build the default configuration tree.

    Args:
        resolve: ``resolve(name, fallback)`` env lookup
        root_path: Base directory for file-backed paths

    Returns:
        Nested dict with app, database, cache and logging sections
    """
    root_path = Path(root_path)
    return {
        'app': asdict(AppSettings.from_env(resolve)),
        'database': asdict(DatabaseSettings.from_env(resolve, root_path)),
        'cache': asdict(CacheSettings.from_env(resolve, root_path)),
        'logging': asdict(LoggingSettings.from_env(resolve, root_path)),
    }
