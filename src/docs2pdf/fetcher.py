from __future__ import annotations
import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Iterable, List, Protocol

import requests

from .errors import FetchFailure

log = logging.getLogger(__name__)


class DocumentFetcher(Protocol):
    def materialize(self, remote_location: str, target_dir: Path) -> None: ...


class GitSparseFetcher:
    """Shallow, sparse checkout of only the docs subtree of a repository.

    The subtree is checked out into a scratch directory next to the target
    and renamed into place once it holds nothing but documents, so the target
    either exists complete or not at all.
    """

    def __init__(
        self,
        docs_path: str = "docs",
        suffixes: Iterable[str] = (".md", ".mdx"),
        client=None,
        timeout: int = 600,
    ) -> None:
        self.docs_path = docs_path.strip("/")
        self.suffixes = tuple(s.lower() for s in suffixes)
        self.client = client
        self.timeout = timeout

    def _git(self, *args: str, cwd: Path) -> None:
        cmd = ["git", *args]
        log.debug("Running %s in %s", " ".join(cmd), cwd)
        subprocess.run(cmd, cwd=str(cwd), check=True, capture_output=True, text=True, timeout=self.timeout)

    def _check_remote(self) -> None:
        if self.client is None:
            return
        try:
            found = self.client.has_path(self.docs_path)
        except requests.RequestException as exc:
            raise FetchFailure(f"Could not reach the remote repository: {exc}") from exc
        if not found:
            raise FetchFailure(f"The '{self.docs_path}' folder does not exist in the remote repository")
        log.info("The '%s' folder exists in the remote repository", self.docs_path)

    def _prune(self, root: Path) -> int:
        """Drop git metadata and non-document files; returns how many documents remain."""
        for git_dir in [p for p in root.rglob(".git") if p.is_dir()]:
            if git_dir.exists():  # may sit inside one removed earlier
                shutil.rmtree(git_dir)
        kept = 0
        for path in [p for p in root.rglob("*") if p.is_file() or p.is_symlink()]:
            if path.suffix.lower() in self.suffixes and not path.is_symlink():
                kept += 1
            else:
                path.unlink()
        dirs: List[Path] = sorted((p for p in root.rglob("*") if p.is_dir()), key=lambda p: len(p.parts), reverse=True)
        for d in dirs:
            if not any(d.iterdir()):
                d.rmdir()
        return kept

    def materialize(self, remote_location: str, target_dir: Path) -> None:
        target = Path(target_dir)
        if target.exists():
            raise FetchFailure(f"{target} already exists")
        self._check_remote()
        target.parent.mkdir(parents=True, exist_ok=True)
        scratch = Path(tempfile.mkdtemp(prefix=".clone-", dir=str(target.parent)))
        try:
            checkout = scratch / "repo"
            self._git("clone", "--depth", "1", "--filter=blob:none", "--sparse", remote_location, str(checkout), cwd=scratch)
            self._git("sparse-checkout", "init", cwd=checkout)
            self._git("sparse-checkout", "set", self.docs_path, cwd=checkout)
            subtree = checkout / self.docs_path
            if not subtree.is_dir():
                raise FetchFailure(f"Checkout of {remote_location} has no '{self.docs_path}' folder")
            kept = self._prune(subtree)
            if not kept:
                raise FetchFailure(f"No {', '.join(self.suffixes)} files under '{self.docs_path}' in {remote_location}")
            os.replace(subtree, target)
            log.info("Fetched %s documents into %s", kept, target)
        except subprocess.CalledProcessError as exc:
            raise FetchFailure(f"git {exc.cmd[1] if len(exc.cmd) > 1 else ''} failed: {(exc.stderr or '').strip()}") from exc
        except subprocess.TimeoutExpired as exc:
            raise FetchFailure(f"git timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise FetchFailure(f"Fetching docs into {target} failed: {exc}") from exc
        finally:
            shutil.rmtree(scratch, ignore_errors=True)
