from __future__ import annotations
import os, pathlib, logging, tempfile
from typing import Iterable, List

from .errors import MergeFailure

log = logging.getLogger(__name__)


def write_text_atomic(path: pathlib.Path, text: str) -> pathlib.Path:
    """Write ``text`` next to ``path`` and rename it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp", delete=False
    ) as fh:
        fh.write(text)
        tmp = fh.name
    try:
        os.replace(tmp, path)
    except OSError:
        pathlib.Path(tmp).unlink(missing_ok=True)
        raise
    return path


class MarkdownMerger:
    def __init__(self, suffixes: Iterable[str] = (".md", ".mdx")) -> None:
        self.suffixes = tuple(s.lower() for s in suffixes)

    def collect(self, docs_dir: pathlib.Path) -> List[pathlib.Path]:
        files = [p for p in docs_dir.rglob("*") if p.is_file() and p.suffix.lower() in self.suffixes]
        return sorted(files, key=lambda p: p.relative_to(docs_dir).as_posix())

    def merge(self, docs_dir: pathlib.Path, output: pathlib.Path) -> int:
        docs_dir = pathlib.Path(docs_dir)
        if not docs_dir.is_dir():
            raise MergeFailure(f"Docs folder {docs_dir} does not exist")
        files = self.collect(docs_dir)
        if not files:
            raise MergeFailure(f"No {', '.join(self.suffixes)} files under {docs_dir}")
        chunks = []
        for path in files:
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise MergeFailure(f"Could not read {path}: {exc}") from exc
            chunks.append(content.rstrip("\n") + "\n\n")
        write_text_atomic(pathlib.Path(output), "".join(chunks))
        log.info("Merged %s files into %s", len(files), output)
        return len(files)
