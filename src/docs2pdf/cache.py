from __future__ import annotations
import logging
import os
import pathlib
import tempfile
import time
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote, unquote

from filelock import FileLock

log = logging.getLogger(__name__)

REFRESHED_AT = "_refreshed_at"


def _encode(text: str) -> str:
    return quote(text, safe="")


class CacheStore:
    """Flat ``key=value`` store with one freshness clock for the whole file.

    Keys and values are percent-encoded, so ``=`` and newlines survive a round
    trip. The clock lives in the reserved ``_refreshed_at`` entry. It is bumped
    by :meth:`touch` and by :meth:`set` unless ``touch=False`` is passed.
    """

    def __init__(self, path: str | os.PathLike, lock_timeout: float = 10.0) -> None:
        self.path = pathlib.Path(path)
        self._lock = FileLock(str(self.path) + ".lock", timeout=lock_timeout)

    def exists(self) -> bool:
        return self.path.is_file()

    def _read_lines(self) -> List[Tuple[str, str]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        out = []
        for line in raw.splitlines():
            if "=" not in line:
                continue
            k, v = line.split("=", 1)
            out.append((unquote(k), unquote(v)))
        return out

    def _entries(self) -> Dict[str, str]:
        entries: Dict[str, str] = {}
        for k, v in self._read_lines():
            entries[k] = v  # last occurrence wins
        return entries

    def _write_lines(self, lines: List[Tuple[str, str]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp", delete=False
        ) as fh:
            for k, v in lines:
                fh.write(f"{_encode(k)}={_encode(v)}\n")
            tmp = fh.name
        os.replace(tmp, self.path)

    def get(self, key: str) -> str:
        return self._entries().get(key, "")

    def set(self, key: str, value: str, touch: bool = True) -> None:
        """Store ``value``; with ``touch=False`` the freshness clock is left where it was.

        A store created without touching gets a zero clock, so it reads as stale.
        """
        with self._lock:
            old = self._read_lines()
            stamp = dict(old).get(REFRESHED_AT, "0")
            if touch:
                stamp = f"{time.time():.3f}"
            lines = [(k, v) for k, v in old if k not in (key, REFRESHED_AT)]
            lines.append((key, value))
            lines.append((REFRESHED_AT, stamp))
            self._write_lines(lines)
        log.debug("cache %s: %s updated", self.path, key)

    def touch(self) -> None:
        with self._lock:
            lines = [(k, v) for k, v in self._read_lines() if k != REFRESHED_AT]
            lines.append((REFRESHED_AT, f"{time.time():.3f}"))
            self._write_lines(lines)

    def age(self) -> Optional[float]:
        """Seconds since the store was last refreshed, ``None`` when there is no store."""
        if not self.exists():
            return None
        stamp = self.get(REFRESHED_AT)
        try:
            refreshed = float(stamp)
        except ValueError:
            # stores written without the reserved entry fall back to mtime
            refreshed = self.path.stat().st_mtime
        return max(0.0, time.time() - refreshed)

    def clear(self) -> bool:
        with self._lock:
            if not self.exists():
                return False
            self.path.unlink()
        log.info("Removed cache store %s", self.path)
        return True
