import pytest

from docs2pdf.errors import MergeFailure
from docs2pdf.merge import MarkdownMerger, write_text_atomic


@pytest.fixture()
def docs(tmp_path):
    root = tmp_path / "docs"
    files = {
        "b.md": "B\n",
        "a/z.md": "A-Z\n\n\n",
        "a/b.mdx": "A-B",
        "a/image.png": "not markdown",
        "notes.txt": "skip me",
    }
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


def test_merge_sorts_by_path_and_separates_with_blank_line(docs, tmp_path):
    out = tmp_path / "merged.md"
    count = MarkdownMerger().merge(docs, out)
    assert count == 3
    assert out.read_text(encoding="utf-8") == "A-B\n\nA-Z\n\nB\n\n"


def test_merge_is_byte_identical_when_repeated(docs, tmp_path):
    first, second = tmp_path / "one.md", tmp_path / "two.md"
    MarkdownMerger().merge(docs, first)
    MarkdownMerger().merge(docs, second)
    assert first.read_bytes() == second.read_bytes()


def test_merge_honours_suffixes(docs, tmp_path):
    out = tmp_path / "merged.md"
    assert MarkdownMerger([".md"]).merge(docs, out) == 2
    assert "A-B" not in out.read_text(encoding="utf-8")


def test_merge_without_documents_fails(tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()
    with pytest.raises(MergeFailure):
        MarkdownMerger().merge(empty, tmp_path / "out.md")
    with pytest.raises(MergeFailure):
        MarkdownMerger().merge(tmp_path / "missing", tmp_path / "out.md")
    assert not (tmp_path / "out.md").exists()


def test_atomic_write_leaves_no_temp_files(tmp_path):
    target = tmp_path / "out.md"
    write_text_atomic(target, "one")
    write_text_atomic(target, "two")
    assert target.read_text(encoding="utf-8") == "two"
    assert [p.name for p in tmp_path.iterdir()] == ["out.md"]
