"""Tests for the element tree builder."""

from datetime import datetime, timezone

import pytest

from builddocs.elements import ERROR_VALUE, ElementTreeBuilder, build_elements
from builddocs.errors import ElementTreeError
from builddocs.linker import link
from builddocs.models import Association, FileDetails, ProcessedComment
from helpers import LIB_SOURCE, MEMBER_SOURCE, block, walk


def _kinds(nodes):
    return [n.kind for n in nodes]


def _comment(id_, namespace=None, children=()):
    now = datetime(2023, 7, 12, tzinfo=timezone.utc)
    return ProcessedComment(
        id=id_,
        is_root_item=namespace is not None,
        file_details=FileDetails("a.ts", "src/a.ts", now, now),
        namespaces=[namespace] if namespace else [],
        children=[Association(id=c, kind=None, association="module") for c in children],
    )


class TestForest:
    def test_one_root_per_root_item(self, lib_result):
        forest = build_elements(lib_result)
        assert len(forest) == 1
        root = forest[0]
        assert root.kind == "root-item"
        assert root.attributes.group == "Lib"
        assert root.source_id == lib_result.processed[0].id
        assert root.parent_id is None

    def test_no_root_items(self, make_raw):
        assert build_elements(link([make_raw("@module Lonely")])) == []

    def test_every_node_is_materialized(self, lib_result):
        forest = build_elements(lib_result)
        nodes = list(walk(forest))
        assert len(nodes) > 10
        assert all(isinstance(node.children, list) for node in nodes)

    def test_parent_ids_point_up(self, lib_result):
        for node in walk(build_elements(lib_result)):
            for child in node.children:
                assert child.parent_id == node.id


class TestSkeleton:
    def test_root_children(self, lib_result):
        root = build_elements(lib_result)[0]
        nav, container = root.children
        assert _kinds(root.children) == ["nav-link", "container"]
        assert nav.attributes.role == "nav-header-link"
        assert nav.attributes.value == "Lib"
        assert nav.attributes.sub_group == "Lib.Core"
        assert container.attributes.dom_id == "container-lib"
        assert _kinds(container.children) == ["tab-strip", "content-wrapper"]

    def test_nav_links_cover_every_root(self, extract):
        raw = extract("a.ts", LIB_SOURCE) + extract("c.ts", block("@namespace {Other}"))
        forest = build_elements(link(raw))
        for root in forest:
            nav = root.children[0]
            assert [n.attributes.group for n in nav.children] == ["Lib", "Other"]
            assert all(n.kind == "nav-sublink" for n in nav.children)

    def test_tabs_pair_with_panels(self, lib_result):
        container = build_elements(lib_result)[0].children[1]
        tab_strip, wrapper = container.children
        member = lib_result.processed[1]

        assert [t.attributes.value for t in tab_strip.children] == ["Overview", "greet"]
        assert [t.source_id for t in tab_strip.children] == [lib_result.processed[0].id, member.id]
        assert [t.attributes.dom_id for t in tab_strip.children] == [
            p.attributes.dom_id for p in wrapper.children
        ]
        assert all(p.kind == "content" for p in wrapper.children)

    def test_panel_fields(self, lib_result):
        panel = build_elements(lib_result)[0].children[1].children[1].children[1]
        fields = {(f.attributes.sub_group, f.attributes.value) for f in panel.children}
        assert ("summary", "Greets someone.") in fields
        assert ("param", "name (string) - the name") in fields
        assert ("type", "(function) - greet") in fields
        assert ("parent", "module: Lib.Core") in fields

    def test_overview_panel_has_no_nested_panels(self, lib_result):
        overview = build_elements(lib_result)[0].children[1].children[1].children[0]
        assert set(_kinds(overview.children)) == {"field"}


class TestDomIds:
    def _dom_ids_by_kind(self, forest):
        ids = {}
        for node in walk(forest):
            if node.attributes.dom_id is not None:
                ids.setdefault(node.kind, []).append(node.attributes.dom_id)
        return ids

    def test_shared_namespace_gets_distinct_ids(self, extract):
        raw = extract("a.ts", block("@namespace {Foo}")) + extract("b.ts", block("@namespace {Foo}"))
        forest = build_elements(link(raw))

        containers = [root.children[1].attributes.dom_id for root in forest]
        assert containers == ["container-foo", "container-foo-2"]

    def test_ids_unique_within_each_kind(self, extract):
        """Tabs and panels share ids pairwise, but no two nodes of one kind do."""
        raw = (
            extract("a.ts", LIB_SOURCE)
            + extract("b.ts", MEMBER_SOURCE)
            + extract("c.ts", block("@namespace {Lib}", "@summary Again."))
            + extract("d.ts", block("@namespace {lib-core}"))
            + extract("e.ts", block("@namespace {Lib.Core}"))
        )
        forest = build_elements(link(raw))
        for kind, ids in self._dom_ids_by_kind(forest).items():
            assert len(ids) == len(set(ids)), kind

    def test_nav_link_targets_its_container(self, lib_result):
        root = build_elements(lib_result)[0]
        nav, container = root.children
        assert nav.attributes.dom_id.replace("nav-", "container-", 1) == container.attributes.dom_id


class TestNesting:
    def test_grandchildren_become_nested_panels(self, extract):
        raw = (
            extract("a.ts", LIB_SOURCE)
            + extract("b.ts", block("@memberof module:Lib.Core", "@module Lib.Core.Parts"))
            + extract("c.ts", block("@memberof module:Lib.Core.Parts", "@summary A part."))
        )
        forest = build_elements(link(raw))
        wrapper = forest[0].children[1].children[1]
        module_panel = wrapper.children[1]
        nested = [n for n in module_panel.children if n.kind == "content"]
        assert len(nested) == 1
        assert ("summary", "A part.") in {
            (f.attributes.sub_group, f.attributes.value) for f in nested[0].children
        }

    def test_cycles_terminate(self):
        """Mutual child edges are expanded once per path."""
        processed = [
            _comment("root", namespace="Loop", children=["a"]),
            _comment("a", children=["b"]),
            _comment("b", children=["a"]),
        ]
        forest = ElementTreeBuilder(processed).build()
        panels = [n for n in walk(forest) if n.kind == "content"]
        assert [p.source_id for p in panels] == ["root", "a", "b"]

    def test_unknown_child_ids_are_skipped(self):
        processed = [_comment("root", namespace="Gone", children=["missing"])]
        tab_strip = ElementTreeBuilder(processed).build()[0].children[1].children[0]
        assert [t.attributes.value for t in tab_strip.children] == ["Overview"]


class TestFailures:
    def test_failing_node_gets_placeholder(self, lib_result, monkeypatch):
        def explode(self, node):
            raise RuntimeError("boom")

        monkeypatch.setattr(ElementTreeBuilder, "_fields", explode)
        forest = build_elements(lib_result)

        panels = [n for n in walk(forest) if n.kind == "content"]
        assert len(panels) == 2
        for panel in panels:
            assert _kinds(panel.children) == ["error"]
            assert panel.children[0].attributes.value == ERROR_VALUE
            assert panel.children[0].children == []
        # Siblings of the failing nodes still build
        assert any(n.kind == "tab" for n in walk(forest))

    def test_root_flag_without_namespace_is_skipped(self):
        processed = [_comment("root", namespace="Kept"), _comment("bare")]
        processed[1].is_root_item = True

        forest = ElementTreeBuilder(processed).build()
        assert [root.source_id for root in forest] == ["root"]

    def test_none_input_raises(self):
        with pytest.raises(ElementTreeError):
            build_elements(None)
        with pytest.raises(ElementTreeError):
            ElementTreeBuilder(None)


def test_builds_from_raw_sources(extract):
    raw = extract("src/a.ts", LIB_SOURCE) + extract("src/b.ts", MEMBER_SOURCE)
    first = build_elements(link(raw))
    second = build_elements(link(raw))
    assert _kinds(walk(first)) == _kinds(walk(second))
