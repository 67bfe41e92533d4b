#!/usr/bin/env python3
"""
Env File Generator

Writes ``.env`` files from a fixed set of fields. Filenames are restricted to
``.env`` or ``.env.<suffix>`` inside the target directory, and values are
escaped and double-quoted so the parser reads them back as written.

Problems such as a bad filename or an unwritable directory are reported in
the returned ``GenerationResult`` rather than raised.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

FILENAME_PATTERN = re.compile(r'\.env(\.[\w-]+)?')

DEFAULT_FIELDS: Dict[str, str] = {
    'APP_NAME': 'MyApp',
    'APP_ENV': 'local',
    'APP_DEBUG': 'true',
    'APP_URL': 'http://localhost',
    'DB_CONNECTION': 'mysql',
    'DB_HOST': 'localhost',
    'DB_PORT': '3306',
    'DB_DATABASE': 'test',
    'DB_USERNAME': 'root',
    'DB_PASSWORD': '123456',
    'DB_CHARSET': 'utf8mb4',
    'DB_COLLATION': 'utf8mb4_unicode_ci',
    'DB_PREFIX': '',
}

SUGGESTED_FILENAMES = ['.env', '.env.local', '.env.testing', '.env.staging', '.env.production']

_ESCAPES = {
    '\n': '\\n',
    '\r': '\\r',
    '"': '\\"',
    '\\': '\\\\',
}


@dataclass
class GenerationResult:
    """Outcome of a generate-and-save request."""
    ok: bool
    message: str
    path: Optional[Path] = None
    preview: str = ""


def validate_filename(filename: str) -> Optional[str]:
    """
    Check a target filename.

    Returns:
        An error message, or None if the name is acceptable
    """
    if not filename:
        return "Filename is empty"

    if '/' in filename or '\\' in filename or '..' in filename:
        return "Filename must not contain path segments"

    if not FILENAME_PATTERN.fullmatch(filename):
        return "Invalid filename, only names like .env or .env.production are allowed"

    return None


def escape_value(value: str) -> str:
    """Backslash-escape newline, carriage return, double quote and backslash."""
    return ''.join(_ESCAPES.get(char, char) for char in value)


class EnvFileGenerator:
    """Generates env files from the field set."""

    def __init__(self, fields: Optional[Mapping[str, str]] = None):
        self.fields: Dict[str, str] = dict(fields if fields is not None else DEFAULT_FIELDS)

    def resolve_values(self, values: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Merge submitted values over field defaults; unknown keys are dropped."""
        values = values or {}
        resolved = {}
        for key, default in self.fields.items():
            value = values.get(key)
            resolved[key] = default if value is None else str(value)
        return resolved

    def render(self, values: Optional[Mapping[str, str]] = None) -> str:
        """Render env file content, one ``KEY="value"`` line per field."""
        lines = [
            f'{key}="{escape_value(value)}"'
            for key, value in self.resolve_values(values).items()
        ]
        return '\n'.join(lines)

    def save(self,
             values: Optional[Mapping[str, str]] = None,
             filename: str = '.env',
             directory: Optional[os.PathLike] = None,
             backup: bool = False) -> GenerationResult:
        """
        Render and write an env file.

        Args:
            values: Field values, defaults fill the gaps
            filename: Target name, ``.env`` or ``.env.<suffix>``
            directory: Target directory, CWD if omitted
            backup: Rename an existing file to ``<name>.backup`` first

        Returns:
            GenerationResult describing what happened
        """
        error = validate_filename(filename)
        if error:
            logger.warning(f"Rejected env filename {filename!r}: {error}")
            return GenerationResult(ok=False, message=error)

        target_dir = Path(directory) if directory is not None else Path.cwd()
        if not target_dir.is_dir() or not os.access(target_dir, os.W_OK):
            message = f"Directory {target_dir} is not writable, check permissions"
            logger.warning(message)
            return GenerationResult(ok=False, message=message)

        content = self.render(values)
        config_path = target_dir / filename

        try:
            if backup and config_path.exists():
                backup_path = config_path.with_name(config_path.name + '.backup')
                config_path.replace(backup_path)
                logger.info(f"Backed up existing env file to {backup_path}")

            config_path.write_text(content, encoding='utf-8')
        except OSError as e:
            message = f"Failed to write {config_path}: {e}"
            logger.error(message)
            return GenerationResult(ok=False, message=message)

        logger.info(f"Env file saved to {config_path}")
        return GenerationResult(
            ok=True,
            message=f"File saved as {filename}",
            path=config_path,
            preview=content,
        )
