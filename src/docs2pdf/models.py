from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import List

from .naming import ArtifactPaths


@dataclass(frozen=True)
class ResolvedVersion:
    tag: str
    last_update: date


class GateDecision(str, Enum):
    ABSENT = "absent"
    REDO = "redo"
    SKIP = "skip"


class FetchState(str, Enum):
    NOT_EXIST = "not-exist"
    DELETED = "deleted"
    CONTINUE = "continue"


class OverwritePolicy(str, Enum):
    PROMPT = "prompt"
    REDO = "redo"
    SKIP = "skip"
    FAIL = "fail"


@dataclass
class StageOutcome:
    stage: str
    artifact: Path
    ran: bool


@dataclass
class PipelineResult:
    version: ResolvedVersion
    identifier: str
    paths: ArtifactPaths
    outcomes: List[StageOutcome] = field(default_factory=list)
    fallbacks: List[str] = field(default_factory=list)
