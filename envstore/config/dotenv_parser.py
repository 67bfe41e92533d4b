"""
Env File Parser
===============

Parses flat ``KEY=VALUE`` files into a ``str -> str`` mapping.

Rules, applied line by line:
1. Blank and whitespace-only lines are dropped; lines end at ``\\n`` only
2. Lines whose trimmed text starts with ``#`` are comments
3. Lines without ``=`` are skipped (recorded as warnings, never raised)
4. Name and value are split on the first ``=`` and trimmed
5. One layer of matching single or double quotes is removed
6. The literal sequences ``\\n`` and ``\\r`` become real newline and
   carriage-return characters, quoted or not

Later definitions of the same name overwrite earlier ones.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .errors import NotFoundError, UnreadableError

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class ParseWarning:
    """A line that was skipped because it could not be parsed."""
    line_number: int
    line: str
    reason: str

    def __str__(self) -> str:
        return f"line {self.line_number}: {self.reason} ({self.line!r})"


def parse_value(raw: str) -> str:
    """Trim, unquote and unescape a raw value."""
    value = raw.strip()

    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        value = value[1:-1]

    return value.replace('\\n', '\n').replace('\\r', '\r')


def parse_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Parse a single line.

    Returns:
        ``(name, value)`` or None for comments and lines without ``=``
    """
    if line.strip().startswith('#'):
        return None

    if '=' not in line:
        return None

    name, raw_value = line.split('=', 1)
    return name.strip(), parse_value(raw_value)


class DotEnv:
    """Loads variables from a single env file."""

    def __init__(self, path: PathLike):
        self.path = Path(path)
        if not self.path.exists():
            logger.error(f"Env file not found: {self.path}")
            raise NotFoundError(self.path)

        self.variables: Dict[str, str] = {}
        self.warnings: List[ParseWarning] = []
        self.loaded = False

    def iter_lines(self) -> Iterator[Tuple[int, str]]:
        """Yield ``(line_number, line)`` for each non-empty line."""
        try:
            handle = self.path.open('r', encoding='utf-8', newline='\n')
        except OSError as e:
            logger.error(f"Failed to open env file {self.path}: {e}")
            raise UnreadableError(self.path, e.strerror or str(e)) from e

        with handle:
            try:
                for number, line in enumerate(handle, start=1):
                    line = line.rstrip('\r\n')
                    if line:
                        yield number, line
            except UnicodeDecodeError as e:
                logger.error(f"Env file {self.path} is not valid UTF-8: {e}")
                raise UnreadableError(self.path, str(e)) from e

    def load(self) -> Dict[str, str]:
        """
        Parse the file into ``self.variables``.

        Returns:
            The parsed variables

        Raises:
            UnreadableError: If the file cannot be opened or is not UTF-8
        """
        variables: Dict[str, str] = {}
        warnings: List[ParseWarning] = []

        for number, line in self.iter_lines():
            stripped = line.strip()
            if not stripped or stripped.startswith('#'):
                continue

            parsed = parse_line(line)
            if parsed is None:
                warnings.append(ParseWarning(number, line, "missing '='"))
                logger.debug(f"Skipping malformed line {number} in {self.path}")
                continue

            name, value = parsed
            variables[name] = value

        self.variables = variables
        self.warnings = warnings
        self.loaded = True

        logger.info(f"Loaded {len(variables)} variables from {self.path}")
        if warnings:
            logger.warning(f"Skipped {len(warnings)} malformed lines in {self.path}")

        return variables

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)

    def all(self) -> Dict[str, str]:
        return dict(self.variables)

    def export(self, override: bool = False) -> List[str]:
        """
        Copy the parsed variables into ``os.environ``.

        Variables already present in the OS environment are left alone
        unless ``override`` is set.

        Returns:
            Names that were written
        """
        exported = []
        for name, value in self.variables.items():
            if not override and name in os.environ:
                continue
            os.environ[name] = value
            exported.append(name)

        logger.debug(f"Exported {len(exported)} variables to the OS environment")
        return exported

    def __contains__(self, key: str) -> bool:
        return key in self.variables

    def __len__(self) -> int:
        return len(self.variables)


def load_env_file(path: PathLike) -> Dict[str, str]:
    """Convenience wrapper: parse ``path`` and return its variables."""
    return DotEnv(path).load()


__all__ = ["DotEnv", "ParseWarning", "parse_line", "parse_value", "load_env_file"]
