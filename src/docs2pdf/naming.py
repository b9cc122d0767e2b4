from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Union

SEPARATOR = "--"
_FORBIDDEN = {"/", "\\", "\0"}  # covers os.sep and os.altsep on every platform


def _check_part(label: str, value: str) -> str:
    if not value:
        raise ValueError(f"{label} must not be empty")
    if value in (".", ".."):
        raise ValueError(f"{label} must not be {value!r}")
    bad = [c for c in _FORBIDDEN if c in value]
    if bad:
        raise ValueError(f"{label} {value!r} contains a path separator")
    # keeps the "--" joiner unambiguous
    if SEPARATOR in value or value.startswith("-") or value.endswith("-"):
        raise ValueError(f"{label} {value!r} must not contain '--' or start/end with '-'")
    return value


def artifact_id(source: str, tag: str, last_update: Union[date, str]) -> str:
    """Deterministic identifier shared by every artifact of one docs version.

    >>> artifact_id("next-js", "v13.4.2", date(2023, 5, 12))
    'next-js--v13.4.2--2023-05-12'
    """
    when = last_update.isoformat() if isinstance(last_update, date) else str(last_update)
    parts = [
        _check_part("source", source),
        _check_part("tag", tag),
        _check_part("last_update", when),
    ]
    return SEPARATOR.join(parts)


@dataclass(frozen=True)
class ArtifactPaths:
    docs_dir: Path
    merged: Path
    rendered: Path

    @staticmethod
    def for_id(work_dir: Union[str, Path], ident: str) -> "ArtifactPaths":
        root = Path(work_dir)
        return ArtifactPaths(
            docs_dir=root / ident,
            merged=root / f"{ident}.md",
            rendered=root / f"{ident}.pdf",
        )
