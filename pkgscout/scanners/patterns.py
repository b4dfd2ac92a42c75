"""
PkgScout Content Patterns

A pattern tests file content and returns the first matching substring.
Regular expressions are the default engine; ``LiteralPattern`` is a
plain substring search for fixed indicators.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Union

from pkgscout.core.errors import ConfigError


class Pattern(ABC):
    """Content matcher used by the IoC scanner."""

    source: str

    @abstractmethod
    def search(self, content: str) -> Optional[str]:
        """Return the first matched substring, or None."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source!r})"


class RegexPattern(Pattern):
    def __init__(self, source: str) -> None:
        self.source = source
        try:
            self._regex = re.compile(source)
        except re.error as exc:
            raise ConfigError(f"Invalid IoC pattern {source!r}: {exc}") from exc

    def search(self, content: str) -> Optional[str]:
        match = self._regex.search(content)
        return match.group(0) if match else None


class LiteralPattern(Pattern):
    def __init__(self, source: str) -> None:
        self.source = source

    def search(self, content: str) -> Optional[str]:
        return self.source if self.source in content else None


def compile_patterns(patterns: Iterable[Union[str, Pattern]]) -> List[Pattern]:
    """
    Turn pattern sources into matchers.

    Strings are compiled as regular expressions; Pattern instances are
    kept as they are. Raises ConfigError on the first invalid regex, so
    no partial set is ever returned.
    """
    compiled: List[Pattern] = []
    for pattern in patterns:
        if isinstance(pattern, Pattern):
            compiled.append(pattern)
        elif isinstance(pattern, str):
            compiled.append(RegexPattern(pattern))
        else:
            raise ConfigError(f"Unsupported IoC pattern: {pattern!r}")
    return compiled
