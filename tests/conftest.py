"""Shared pytest fixtures for build-docs tests."""

import pytest

from builddocs.extractors import extract_comments
from builddocs.linker import link
from helpers import CREATED, LIB_SOURCE, MEMBER_SOURCE, MODIFIED, block


@pytest.fixture
def extract():
    """
    Extract RawComments from content as if read from ``path``.

    Example:
        def test_one(extract):
            comments = extract("a.ts", "/** @access public */")
            assert comments[0].tags["access"][0].description == "public"
    """

    def _extract(path: str, content: str):
        return extract_comments(path, content, CREATED, MODIFIED)

    return _extract


@pytest.fixture
def make_raw(extract):
    """
    Factory for a single RawComment built from tag lines.

    Example:
        def test_tags(make_raw):
            raw = make_raw("@namespace {Foo}", path="src/foo.ts")
    """

    def _make(*lines: str, path: str = "src/a.ts"):
        comments = extract(path, block(*lines))
        assert len(comments) == 1
        return comments[0]

    return _make


@pytest.fixture
def lib_result(extract):
    """Linked result for a.ts (namespace + module) and b.ts (member of the module)."""
    raw = extract("src/a.ts", LIB_SOURCE) + extract("src/b.ts", MEMBER_SOURCE)
    return link(raw)


@pytest.fixture
def source_tree(tmp_path):
    """
    A small source tree on disk.

    Layout:
        src/a.ts                  namespace Lib, module Lib.Core
        src/b.ts                  member of module:Lib.Core
        src/node_modules/dep.js   ignored by default
        README.md                 not a source file
    """
    src = tmp_path / "src"
    (src / "node_modules").mkdir(parents=True)
    (src / "a.ts").write_text(LIB_SOURCE)
    (src / "b.ts").write_text(MEMBER_SOURCE)
    (src / "node_modules" / "dep.js").write_text(block("@namespace {Dep}"))
    (tmp_path / "README.md").write_text("# readme\n")
    return tmp_path
