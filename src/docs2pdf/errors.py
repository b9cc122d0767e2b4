from __future__ import annotations


class Docs2PdfError(RuntimeError):
    """Base class for every fatal pipeline error."""


class ResolutionFailure(Docs2PdfError):
    """No cached value and the version source could not be reached."""


class FetchFailure(Docs2PdfError):
    pass


class MergeFailure(Docs2PdfError):
    pass


class RenderFailure(Docs2PdfError):
    pass


class StageExists(Docs2PdfError):
    """Raised by the ``fail`` overwrite policy when an artifact is already on disk."""

    def __init__(self, path) -> None:
        super().__init__(f"{path} already exists (overwrite policy is 'fail')")
        self.path = path


class ConcurrentRunError(Docs2PdfError):
    pass
