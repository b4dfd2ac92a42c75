"""
PkgScout Tree Walker

Shared traversal for the discoverer, dependency reader and IoC scanner.

A walk tolerates per-entry failures: an unreadable directory or file is
skipped and the walk continues with its siblings. The only error that
escapes is a root that cannot be opened at all. Callers that want to see
what was skipped pass an ``on_skip`` hook.
"""

from __future__ import annotations

import os
from typing import Callable, Iterator, Optional

SkipHandler = Callable[[str, Exception], None]

DEPENDENCY_STORE = "node_modules"
MANIFEST_FILENAME = "package.json"


class TreeWalker:
    """
    Base class for the filesystem walkers.
    Subclasses decide which directories to prune and which files to read.
    """

    def __init__(self, on_skip: Optional[SkipHandler] = None) -> None:
        self.on_skip = on_skip

    def _skipped(self, path: str, error: Exception) -> None:
        if self.on_skip is not None:
            self.on_skip(path, error)

    @staticmethod
    def _open_root(root: str) -> bool:
        """
        Make sure ``root`` can be traversed; raise OSError if not.

        Returns True for a directory and False for a plain file.
        """
        os.stat(root)
        if not os.path.isdir(root):
            return False
        with os.scandir(root):
            pass
        return True

    def _walk(self, root: str) -> Iterator[tuple[str, list[str], list[str]]]:
        """
        Depth-first, top-down ``os.walk`` with sorted siblings.

        Callers may prune by editing the yielded directory list in place.
        Symlinked directories are never descended.
        """

        def onerror(error: OSError) -> None:
            self._skipped(error.filename or root, error)

        for dirpath, dirnames, filenames in os.walk(root, onerror=onerror):
            dirnames.sort()
            filenames.sort()
            yield dirpath, dirnames, filenames
