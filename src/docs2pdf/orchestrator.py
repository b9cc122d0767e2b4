from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Protocol, Set

from .config import DocsConfig
from .gates import FetchGate, StageGate
from .models import ResolvedVersion, StageOutcome
from .naming import ArtifactPaths

log = logging.getLogger(__name__)


class Action(Protocol):
    name: str
    def artifact(self, ctx: "Context") -> Path: ...
    def requires(self, ctx: "Context") -> List["Action"]: ...
    def should_run(self, ctx: "Context") -> bool: ...  # consults the stage's gate
    def run(self, ctx: "Context") -> None: ...


@dataclass
class Context:
    cfg: DocsConfig
    version: ResolvedVersion
    ident: str
    paths: ArtifactPaths
    fetcher: Any
    merger: Any
    renderer: Any
    stage_gate: StageGate
    fetch_gate: FetchGate


class Orchestrator:
    def __init__(self, ctx: Context):
        self.ctx = ctx
        self.outcomes: List[StageOutcome] = []
        self._seen: Set[Path] = set()

    def ensure(self, action: Action) -> None:
        # Resolve dependencies first
        for dep in action.requires(self.ctx):
            self.ensure(dep)
        key = action.artifact(self.ctx)
        if key in self._seen:
            return
        self._seen.add(key)
        if not action.should_run(self.ctx):
            log.info("Skipping %s; reusing %s", action.name, key)
            self.outcomes.append(StageOutcome(action.name, key, ran=False))
            return
        log.info("Running %s -> %s", action.name, key)
        action.run(self.ctx)
        self.outcomes.append(StageOutcome(action.name, key, ran=True))
