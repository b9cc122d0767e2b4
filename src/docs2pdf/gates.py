from __future__ import annotations
import logging
import shutil
from pathlib import Path
from typing import Callable, Optional

import typer

from .errors import StageExists
from .models import FetchState, GateDecision, OverwritePolicy

log = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


def remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


class _PolicyGate:
    def __init__(self, policy: OverwritePolicy = OverwritePolicy.PROMPT, confirm: Optional[Confirm] = None) -> None:
        self.policy = OverwritePolicy(policy)
        self.confirm = confirm or typer.confirm

    def _wants_redo(self, path: Path, question: str) -> bool:
        if self.policy is OverwritePolicy.FAIL:
            raise StageExists(path)
        if self.policy is OverwritePolicy.REDO:
            return True
        if self.policy is OverwritePolicy.SKIP:
            return False
        return bool(self.confirm(question))


class StageGate(_PolicyGate):
    """Turn "the output is already there" into an explicit redo-or-skip decision."""

    def evaluate(self, path: Path) -> GateDecision:
        path = Path(path)
        if not path.exists():
            return GateDecision.ABSENT
        if self._wants_redo(path, f"{path} already exists. Do you want to redo this stage?"):
            remove_path(path)
            log.info("Removed %s to redo the stage", path)
            return GateDecision.REDO
        return GateDecision.SKIP


class FetchGate(_PolicyGate):
    """Fetch-stage gate; deleting the docs folder also drops the merged file built from it."""

    def evaluate(self, docs_dir: Path, merged: Path) -> FetchState:
        docs_dir, merged = Path(docs_dir), Path(merged)
        if not docs_dir.exists():
            log.info("Docs folder %s does not exist", docs_dir)
            return FetchState.NOT_EXIST
        question = f"A folder with the same name already exists: {docs_dir}. Remove it and start with a new clone?"
        if self._wants_redo(docs_dir, question):
            remove_path(docs_dir)
            remove_path(merged)
            log.info("Docs folder %s removed", docs_dir)
            return FetchState.DELETED
        return FetchState.CONTINUE
