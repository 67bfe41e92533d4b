"""
Configuration Errors
====================

Exceptions raised while loading ``.env`` files. Lookups never raise; only a
missing or unreadable source aborts configuration.
"""


class DotEnvError(Exception):
    """Base class for env-file loading failures."""

    def __init__(self, path, message: str):
        self.path = str(path)
        super().__init__(message)


class NotFoundError(DotEnvError, FileNotFoundError):
    """The env file does not exist."""

    def __init__(self, path):
        super().__init__(path, f"{path} does not exist")


class UnreadableError(DotEnvError, PermissionError):
    """The env file exists but cannot be opened for reading."""

    def __init__(self, path, reason: str = ""):
        message = f"{path} file is not readable"
        if reason:
            message += f": {reason}"
        super().__init__(path, message)
