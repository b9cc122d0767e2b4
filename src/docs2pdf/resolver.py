from __future__ import annotations
import logging
from datetime import date
from typing import Callable, List, Optional, Protocol, Tuple

import requests

from .cache import CacheStore
from .errors import ResolutionFailure
from .models import ResolvedVersion

log = logging.getLogger(__name__)

TAG_KEY = "latest_version"
DATE_KEY = "last_push_date"


class VersionSource(Protocol):
    def latest_release_tag(self) -> Tuple[Optional[str], int]: ...
    def most_recent_commit_date(self) -> date: ...


class VersionResolver:
    """Resolve the latest tag and last-update date, preferring the cache.

    Both keys share the store's single freshness window, which is read once
    per :meth:`resolve` call so the tag refresh cannot make the date look
    fresh. When a refresh fails and a cached value exists, the stale value is
    served, the key is recorded in :attr:`fallbacks` and the store is left
    stale.
    """

    def __init__(self, cache: CacheStore, source: VersionSource, cache_duration: int = 3600) -> None:
        self.cache = cache
        self.source = source
        self.cache_duration = cache_duration
        self.fallbacks: List[str] = []

    def is_stale(self) -> bool:
        age = self.cache.age()
        if age is None:
            log.debug("Cache store %s does not exist", self.cache.path)
            return True
        log.debug("Cache store age %.0fs (window %ss)", age, self.cache_duration)
        return age > self.cache_duration

    def resolve(self) -> ResolvedVersion:
        self.fallbacks = []
        stale = self.is_stale()
        tag = self._resolve_key(TAG_KEY, stale, self._fetch_tag)
        when = self._resolve_key(DATE_KEY, stale, self._fetch_date)
        # the clock only advances once every stale key was refreshed, so a fallback is retried next run
        if stale and not self.fallbacks:
            self.cache.touch()
        try:
            last_update = date.fromisoformat(when)
        except ValueError as exc:
            raise ResolutionFailure(f"Cached {DATE_KEY} is not an ISO date: {when!r}") from exc
        return ResolvedVersion(tag=tag, last_update=last_update)

    def _resolve_key(self, key: str, stale: bool, fetch: Callable[[], str]) -> str:
        cached = self.cache.get(key)
        if cached and not stale:
            log.debug("Using cached %s=%s", key, cached)
            return cached
        try:
            value = fetch()
        except (requests.RequestException, RuntimeError, ValueError, KeyError, TypeError, AttributeError) as exc:
            if not cached:
                raise ResolutionFailure(f"Could not resolve {key} and nothing is cached: {exc}") from exc
            log.warning("Refreshing %s failed (%s); falling back to stale cached value %s", key, exc, cached)
            self.fallbacks.append(key)
            return cached
        self.cache.set(key, value, touch=False)
        log.debug("Cache updated with new %s=%s", key, value)
        return value

    def _fetch_tag(self) -> str:
        tag, status = self.source.latest_release_tag()
        if status != 200 or not tag:
            raise RuntimeError(f"latest release lookup returned HTTP {status}")
        return tag

    def _fetch_date(self) -> str:
        return self.source.most_recent_commit_date().isoformat()
