from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List
from ..models import FetchState, GateDecision
from ..orchestrator import Action, Context


@dataclass
class EnsureDocsFetched(Action):
    name: str = "fetch"

    def artifact(self, ctx: Context) -> Path:
        return ctx.paths.docs_dir

    def requires(self, ctx: Context) -> List[Action]:
        return []

    def should_run(self, ctx: Context) -> bool:
        state = ctx.fetch_gate.evaluate(ctx.paths.docs_dir, ctx.paths.merged)
        return state is not FetchState.CONTINUE

    def run(self, ctx: Context) -> None:
        ctx.fetcher.materialize(ctx.cfg.repo_url, ctx.paths.docs_dir)


@dataclass
class MergeDocs(Action):
    name: str = "merge"

    def artifact(self, ctx: Context) -> Path:
        return ctx.paths.merged

    def requires(self, ctx: Context) -> List[Action]:
        return [EnsureDocsFetched()]

    def should_run(self, ctx: Context) -> bool:
        return ctx.stage_gate.evaluate(ctx.paths.merged) is not GateDecision.SKIP

    def run(self, ctx: Context) -> None:
        ctx.merger.merge(ctx.paths.docs_dir, ctx.paths.merged)


@dataclass
class RenderDocs(Action):
    name: str = "render"

    def artifact(self, ctx: Context) -> Path:
        return ctx.paths.rendered

    def requires(self, ctx: Context) -> List[Action]:
        return [MergeDocs()]

    def should_run(self, ctx: Context) -> bool:
        return ctx.stage_gate.evaluate(ctx.paths.rendered) is not GateDecision.SKIP

    def run(self, ctx: Context) -> None:
        ctx.renderer.render(ctx.paths.merged, ctx.paths.rendered)
