from __future__ import annotations
import html
import logging
import os
import pathlib
from typing import Protocol

import markdown

from .errors import RenderFailure

log = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = ["extra", "toc", "sane_lists"]

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
@page {{ size: {page_size}; margin: 18mm 15mm; }}
body {{ font-family: sans-serif; font-size: 11pt; line-height: 1.45; }}
pre, code {{ font-family: monospace; font-size: 9pt; }}
pre {{ white-space: pre-wrap; background: #f6f8fa; padding: 6pt; }}
table {{ border-collapse: collapse; }}
td, th {{ border: 1px solid #ccc; padding: 2pt 4pt; }}
</style>
</head>
<body>
{body}
</body>
</html>
"""


class Renderer(Protocol):
    def render(self, merged_path: pathlib.Path, output_path: pathlib.Path) -> None: ...


def markdown_to_html(text: str, title: str = "", page_size: str = "A4") -> str:
    body = markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)
    return HTML_TEMPLATE.format(title=html.escape(title), page_size=page_size, body=body)


class PdfRenderer:
    """Markdown -> HTML -> paginated PDF via weasyprint."""

    def __init__(self, page_size: str = "A4") -> None:
        self.page_size = page_size

    def render(self, merged_path: pathlib.Path, output_path: pathlib.Path) -> None:
        merged_path, output_path = pathlib.Path(merged_path), pathlib.Path(output_path)
        tmp = output_path.with_name(f".{output_path.name}.tmp-{os.getpid()}")
        try:
            from weasyprint import HTML

            text = merged_path.read_text(encoding="utf-8")
            doc = markdown_to_html(text, title=merged_path.stem, page_size=self.page_size)
            HTML(string=doc, base_url=str(merged_path.parent)).write_pdf(str(tmp))
            os.replace(tmp, output_path)
        except Exception as exc:
            tmp.unlink(missing_ok=True)
            raise RenderFailure(f"Converting {merged_path} to PDF failed: {exc}") from exc
        log.info("Markdown converted to PDF and saved to %s", output_path)
