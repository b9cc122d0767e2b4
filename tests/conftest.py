from __future__ import annotations

import time
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from docs2pdf.cache import REFRESHED_AT, CacheStore
from docs2pdf.config import DocsConfig
from docs2pdf.errors import RenderFailure
from docs2pdf.merge import MarkdownMerger
from docs2pdf.models import OverwritePolicy
from docs2pdf.pipeline import Pipeline
from docs2pdf.resolver import VersionResolver


class FakeVersionSource:
    def __init__(
        self,
        tag: str = "v13.4.2",
        status: int = 200,
        when: date = date(2023, 5, 12),
        date_error: Optional[Exception] = None,
    ) -> None:
        self.tag = tag
        self.status = status
        self.when = when
        self.date_error = date_error
        self.calls: List[str] = []

    def latest_release_tag(self):
        self.calls.append("tag")
        return (self.tag if self.status == 200 else None), self.status

    def most_recent_commit_date(self) -> date:
        self.calls.append("date")
        if self.date_error is not None:
            raise self.date_error
        return self.when


class FakeFetcher:
    def __init__(self, files: Optional[Dict[str, str]] = None, error: Optional[Exception] = None) -> None:
        self.files = files or {"index.md": "# Index\n", "guide/intro.md": "## Intro\n"}
        self.error = error
        self.calls: List[Path] = []

    def materialize(self, remote_location: str, target_dir: Path) -> None:
        self.calls.append(Path(target_dir))
        if self.error is not None:
            raise self.error
        for rel, text in self.files.items():
            path = Path(target_dir) / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")


class FakeRenderer:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: List[Path] = []

    def render(self, merged_path: Path, output_path: Path) -> None:
        self.calls.append(Path(merged_path))
        if self.fail:
            raise RenderFailure("renderer exploded")
        Path(output_path).write_bytes(b"%PDF-fake\n" + Path(merged_path).read_bytes())


def write_store(path: Path, entries: Dict[str, str], age: float) -> None:
    """Write a cache store whose refresh clock reads ``age`` seconds ago."""
    lines = [f"{k}={v}" for k, v in entries.items()]
    lines.append(f"{REFRESHED_AT}={time.time() - age:.3f}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


@pytest.fixture()
def cfg(tmp_path: Path) -> DocsConfig:
    return DocsConfig(cache_file=str(tmp_path / ".store.cache"), work_dir=str(tmp_path / "work"))


@pytest.fixture()
def source() -> FakeVersionSource:
    return FakeVersionSource()


@pytest.fixture()
def make_pipeline():
    def _make(
        cfg: DocsConfig,
        source: FakeVersionSource,
        fetcher: Optional[FakeFetcher] = None,
        renderer: Optional[FakeRenderer] = None,
        policy: OverwritePolicy = OverwritePolicy.PROMPT,
        confirm=None,
    ) -> Pipeline:
        resolver = VersionResolver(CacheStore(cfg.cache_file), source, cfg.cache_duration)
        return Pipeline(
            cfg,
            resolver,
            fetcher or FakeFetcher(),
            MarkdownMerger(cfg.doc_suffixes),
            renderer or FakeRenderer(),
            policy=policy,
            confirm=confirm,
        )

    return _make
