from __future__ import annotations
import logging
from datetime import date, datetime, timezone
from typing import Optional, Tuple
import requests
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

log = logging.getLogger(__name__)


class GitHubClient:
    """Version source backed by the GitHub REST API"""

    def __init__(self, api_url: str, timeout: int = 30, token: str = "") -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/vnd.github+json"})
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    @retry(
        reraise=True,
        stop=stop_after_attempt(4),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
    )
    def _get(self, path: str, **params) -> requests.Response:
        url = f"{self.api_url}/{path.lstrip('/')}"
        resp = self._session.get(url, params=params or None, timeout=self.timeout)
        log.debug("GET %s -> %s", url, resp.status_code)
        return resp

    def latest_release_tag(self) -> Tuple[Optional[str], int]:
        resp = self._get("releases/latest")
        if resp.status_code != 200:
            log.warning("Latest release lookup failed with HTTP %s", resp.status_code)
            return None, resp.status_code
        payload = resp.json()
        if not isinstance(payload, dict):
            raise RuntimeError(f"Latest release payload is a {type(payload).__name__}, expected an object")
        tag = payload.get("tag_name")
        if not tag:
            raise RuntimeError("Latest release payload has no tag_name")
        return str(tag), resp.status_code

    def most_recent_commit_date(self) -> date:
        resp = self._get("commits", per_page=1)
        try:
            resp.raise_for_status()
        except requests.HTTPError:
            log.warning("Commit lookup failed with HTTP %s", resp.status_code)
            raise
        commits = resp.json()
        if not isinstance(commits, list):
            raise RuntimeError(f"Commit payload is a {type(commits).__name__}, expected a list")
        if not commits:
            raise RuntimeError("Repository has no commits")
        commit = commits[0].get("commit") if isinstance(commits[0], dict) else None
        if not isinstance(commit, dict):
            raise RuntimeError("Commit payload has no commit object")
        stamp = (commit.get("author") or commit.get("committer") or {}).get("date")
        if not stamp:
            raise RuntimeError("Commit payload has no date")
        when = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
        return when.astimezone(timezone.utc).date()

    def has_path(self, path: str) -> bool:
        return self._get(f"contents/{path.strip('/')}").status_code == 200
