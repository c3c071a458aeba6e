"""Polling monitor that reports when files in a directory have been modified."""

from __future__ import annotations

import os
from pathlib import Path


class ChangeMonitor:
    """Watches the files of a directory and reports newer modification times."""

    def __init__(self, path: str | os.PathLike, recursive: bool = False):
        self.path = Path(path)
        if not self.path.is_dir():
            raise FileNotFoundError(f"not a directory: {self.path}")
        self.recursive = recursive
        self._timestamps = self._scan()

    def _scan(self) -> dict[str, int]:
        entries = self.path.rglob("*") if self.recursive else self.path.iterdir()
        stamps: dict[str, int] = {}
        for entry in entries:
            try:
                if entry.is_file():
                    stamps[entry.relative_to(self.path).as_posix()] = entry.stat().st_mtime_ns
            except FileNotFoundError:
                continue
        return stamps

    def update(self) -> bool:
        """Return True if any file was written since the previous check."""
        current = self._scan()
        modified = any(
            stamp > self._timestamps.get(name, 0) for name, stamp in current.items()
        )
        self._timestamps = current
        return modified