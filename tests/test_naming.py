import itertools
import os
from datetime import date
from pathlib import Path

import pytest

from docs2pdf.naming import ArtifactPaths, artifact_id


def test_identifier_format():
    assert artifact_id("next-js", "v13.4.2", date(2023, 5, 12)) == "next-js--v13.4.2--2023-05-12"


def test_identifier_is_deterministic():
    a = artifact_id("next-js", "v13.4.2", date(2023, 5, 12))
    b = artifact_id("next-js", "v13.4.2", "2023-05-12")
    assert a == b


def test_identifier_is_injective_over_distinct_inputs():
    sources = ["next-js", "next", "js", "a-b"]
    tags = ["v13.4.2", "v13.4.2-canary.1", "js", "next", "b"]
    dates = [date(2023, 5, 12), date(2023, 5, 13), date(2024, 1, 1)]
    triples = list(itertools.product(sources, tags, dates))
    ids = {artifact_id(*t) for t in triples}
    assert len(ids) == len(triples)


@pytest.mark.parametrize("bad", ["", ".", "..", "a/b", "a\\b", "a\0b", "a--b", "-a", "a-"])
def test_unsafe_components_are_rejected(bad):
    with pytest.raises(ValueError):
        artifact_id("next-js", bad, date(2023, 5, 12))
    with pytest.raises(ValueError):
        artifact_id(bad, "v1", date(2023, 5, 12))


def test_artifact_paths_share_identifier(tmp_path):
    paths = ArtifactPaths.for_id(tmp_path, "next-js--v1--2023-05-12")
    assert paths.docs_dir == Path(tmp_path) / "next-js--v1--2023-05-12"
    assert paths.merged.name == "next-js--v1--2023-05-12.md"
    assert paths.rendered.name == "next-js--v1--2023-05-12.pdf"
    assert paths.merged.parent == paths.docs_dir.parent


@pytest.mark.parametrize("sep", [s for s in (os.sep, os.altsep, "/", "\\") if s])
def test_platform_separators_are_rejected(sep):
    with pytest.raises(ValueError, match="path separator"):
        artifact_id("next-js", f"v1{sep}x", date(2023, 5, 12))
