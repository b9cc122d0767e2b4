from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Tuple

from filelock import FileLock, Timeout

from .actions.core import RenderDocs
from .cache import CacheStore
from .config import DocsConfig
from .errors import ConcurrentRunError, ResolutionFailure
from .fetcher import DocumentFetcher, GitSparseFetcher
from .gates import Confirm, FetchGate, StageGate
from .github_client import GitHubClient
from .merge import MarkdownMerger
from .models import OverwritePolicy, PipelineResult, ResolvedVersion
from .naming import ArtifactPaths, artifact_id
from .orchestrator import Context, Orchestrator
from .render import PdfRenderer, Renderer
from .resolver import VersionResolver

log = logging.getLogger(__name__)

RUN_LOCK_NAME = ".docs2pdf.lock"


class Pipeline:
    """Resolve -> fetch -> merge -> render, one artifact per run."""

    def __init__(
        self,
        cfg: DocsConfig,
        resolver: VersionResolver,
        fetcher: DocumentFetcher,
        merger: MarkdownMerger,
        renderer: Renderer,
        policy: OverwritePolicy = OverwritePolicy.PROMPT,
        confirm: Optional[Confirm] = None,
    ) -> None:
        self.cfg = cfg
        self.resolver = resolver
        self.fetcher = fetcher
        self.merger = merger
        self.renderer = renderer
        self.stage_gate = StageGate(policy, confirm)
        self.fetch_gate = FetchGate(policy, confirm)

    @staticmethod
    def from_config(
        cfg: DocsConfig,
        policy: OverwritePolicy = OverwritePolicy.PROMPT,
        confirm: Optional[Confirm] = None,
    ) -> "Pipeline":
        client = GitHubClient(cfg.api_url, timeout=cfg.request_timeout, token=cfg.github_token)
        resolver = VersionResolver(CacheStore(cfg.cache_file), client, cfg.cache_duration)
        fetcher = GitSparseFetcher(cfg.docs_path, cfg.doc_suffixes, client=client, timeout=cfg.git_timeout)
        return Pipeline(
            cfg,
            resolver,
            fetcher,
            MarkdownMerger(cfg.doc_suffixes),
            PdfRenderer(cfg.page_size),
            policy=policy,
            confirm=confirm,
        )

    def resolve(self) -> Tuple[ResolvedVersion, str, ArtifactPaths]:
        version = self.resolver.resolve()
        try:
            ident = artifact_id(self.cfg.source_name, version.tag, version.last_update)
        except ValueError as exc:
            raise ResolutionFailure(f"Cannot build an artifact name: {exc}") from exc
        return version, ident, ArtifactPaths.for_id(self.cfg.work_dir, ident)

    def context(self, version: ResolvedVersion, ident: str, paths: ArtifactPaths) -> Context:
        return Context(
            cfg=self.cfg,
            version=version,
            ident=ident,
            paths=paths,
            fetcher=self.fetcher,
            merger=self.merger,
            renderer=self.renderer,
            stage_gate=self.stage_gate,
            fetch_gate=self.fetch_gate,
        )

    def run(self, resolved: Optional[Tuple[ResolvedVersion, str, ArtifactPaths]] = None) -> PipelineResult:
        version, ident, paths = resolved or self.resolve()
        work = Path(self.cfg.work_dir)
        work.mkdir(parents=True, exist_ok=True)
        lock = FileLock(str(work / RUN_LOCK_NAME), timeout=0)
        try:
            lock.acquire()
        except Timeout as exc:
            raise ConcurrentRunError(f"Another run is already using {work}") from exc
        try:
            orch = Orchestrator(self.context(version, ident, paths))
            orch.ensure(RenderDocs())
        finally:
            lock.release()
        return PipelineResult(
            version=version,
            identifier=ident,
            paths=paths,
            outcomes=orch.outcomes,
            fallbacks=list(self.resolver.fallbacks),
        )
