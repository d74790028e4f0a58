"""Variant discovery — scan a target project's variants directory.

A variant source file is ``<name>.js`` directly inside the variants
directory; ``*.test.js``-style files are ignored. The filesystem is reached
through a DirectoryLister so discovery can run against an in-memory tree.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

VARIANT_SUFFIX = ".js"


class DirectoryLister(Protocol):
    def list_files(self, directory: Path) -> list[str]:
        """File names (not paths) directly inside ``directory``. May raise OSError."""
        ...

    def exists(self, path: Path) -> bool:
        ...


class FilesystemLister:
    """DirectoryLister backed by the real filesystem."""

    def list_files(self, directory: Path) -> list[str]:
        return sorted(p.name for p in Path(directory).iterdir() if p.is_file())

    def exists(self, path: Path) -> bool:
        return Path(path).is_file()


def variant_name_from_file(filename: str) -> Optional[str]:
    """``fries.js`` → ``fries``; anything that is not a variant source → None."""
    if not filename.endswith(VARIANT_SUFFIX) or ".test." in filename:
        return None
    name = filename[: -len(VARIANT_SUFFIX)]
    return name or None


def scan_variants(lister: DirectoryLister, directory: Path) -> list[str]:
    """Variant names found in ``directory``, in listing order.

    Raises:
        OSError: directory missing or unreadable
    """
    names = []
    for filename in lister.list_files(directory):
        name = variant_name_from_file(filename)
        if name is not None:
            names.append(name)
    return names


class DiscoveryCache:
    """Remembers when a scan last ran; a scan inside ``ttl_seconds`` is skipped."""

    def __init__(self, ttl_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._last_scan: Optional[float] = None
        self.names: list[str] = []

    def is_fresh(self) -> bool:
        if self._last_scan is None:
            return False
        return (self._clock() - self._last_scan) <= self.ttl_seconds

    def store(self, names: list[str]) -> None:
        self.names = list(names)
        self._last_scan = self._clock()

    def invalidate(self) -> None:
        self._last_scan = None
        self.names = []
