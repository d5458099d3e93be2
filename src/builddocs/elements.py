"""Element tree builder: processed comment graph -> renderer-agnostic nodes.

Building happens in two phases. Phase 1 creates one `root-item` skeleton
per root item; every node carries a ChildrenSpec saying what its children
are. Phase 2 (`materialize`) walks the forest and resolves each spec
exactly once into concrete child nodes, recursing into them.
"""

from __future__ import annotations

import logging
import re
import uuid

from .errors import ElementTreeError
from .models import (
    ChildrenSpec,
    ElementAttributes,
    ElementNode,
    Expand,
    File,
    LinkResult,
    Module,
    Namespace,
    ProcessedComment,
)

log = logging.getLogger(__name__)

ERROR_VALUE = "This element could not be rendered."


def _slugify(name: str) -> str:
    """Convert a namespace or module name to a DOM-safe id fragment."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "item"


def _describe(type_: str | None, name: str | None, description: str | None) -> str:
    head = name or ""
    if type_:
        head = f"{head} ({type_})" if head else f"({type_})"
    if description:
        return f"{head} - {description}" if head else description
    return head


class ElementTreeBuilder:
    """Builds and materializes the element forest for one run.

    Example:
        forest = ElementTreeBuilder(result.processed, result.files).build()
        for root in forest:
            print(root.attributes.group, len(root.children))
    """

    def __init__(
        self,
        processed: list[ProcessedComment],
        files: list[File] | None = None,
        namespaces: list[Namespace] | None = None,
        modules: list[Module] | None = None,
    ):
        if processed is None or not isinstance(processed, (list, tuple)):
            raise ElementTreeError(f"Expected a list of processed comments, got {type(processed).__name__}")
        self.processed = list(processed)
        self.files = list(files or [])
        self.namespaces = list(namespaces or [])
        self.modules = list(modules or [])
        self._by_id = {item.id: item for item in self.processed}
        self._files_by_path = {f.file_path: f for f in self.files}
        self._module_declarers = {m.description: m.id for m in self.modules}
        self._slugs = self._root_slugs()

    def root_items(self) -> list[ProcessedComment]:
        # A root flag without a namespace has nothing to group under
        return [item for item in self.processed if item.is_root_item and item.namespaces]

    def _root_slugs(self) -> dict[str, str]:
        """Root id -> dom id fragment, unique across the forest.

        Roots sharing a namespace (or names that slug alike) get a numeric
        suffix in input order: ``foo``, ``foo-2``, ``foo-3``.
        """
        slugs: dict[str, str] = {}
        taken: set[str] = set()
        for root in self.root_items():
            base = _slugify(root.namespaces[0])
            slug, n = base, 1
            while slug in taken:
                n += 1
                slug = f"{base}-{n}"
            taken.add(slug)
            slugs[root.id] = slug
        return slugs

    def build(self) -> list[ElementNode]:
        """Construct one root node per root item and materialize the whole forest."""
        forest = [
            self._node(
                "root-item",
                None,
                role="root-item",
                value=item.title,
                group=item.namespaces[0],
                sub_group=item.modules[0] if item.modules else None,
                dom_id=f"root-{self._slugs[item.id]}",
                source_id=item.id,
                spec=ChildrenSpec(Expand.ROOT_ITEM, item.id, item.namespaces[0]),
            )
            for item in self.root_items()
        ]
        for node in forest:
            self.materialize(node)
        return forest

    def materialize(self, node: ElementNode) -> None:
        """Resolve ``node``'s children, then recurse into them."""
        if node.children is None:
            node.children = self._resolve(node)
        for child in node.children:
            self.materialize(child)

    # ------------------------------------------------------------------

    def _node(
        self,
        kind: str,
        parent_id: str | None,
        *,
        role: str,
        value: str | None = None,
        group: str | None = None,
        sub_group: str | None = None,
        dom_id: str | None = None,
        source_id: str | None = None,
        spec: ChildrenSpec | None = None,
    ) -> ElementNode:
        return ElementNode(
            id=str(uuid.uuid4()),
            parent_id=parent_id,
            kind=kind,
            attributes=ElementAttributes(
                value=value, role=role, group=group, sub_group=sub_group, dom_id=dom_id
            ),
            source_id=source_id,
            spec=spec or ChildrenSpec(),
        )

    def _resolve(self, node: ElementNode) -> list[ElementNode]:
        resolvers = {
            Expand.NONE: lambda n: [],
            Expand.ROOT_ITEM: self._root_children,
            Expand.NAV_LINKS: self._nav_links,
            Expand.CONTAINER: self._container_children,
            Expand.TABS: self._tabs,
            Expand.PANELS: self._panels,
            Expand.FIELDS: self._fields,
        }
        try:
            return resolvers[node.spec.expand](node)
        except Exception:
            log.exception(f"Failed to build children for {node.kind} element {node.id}")
            placeholder = self._node(
                "error", node.id, role="error", value=ERROR_VALUE, group=node.attributes.group
            )
            placeholder.children = []
            return [placeholder]

    def _root_children(self, node: ElementNode) -> list[ElementNode]:
        item = self._by_id[node.spec.source_id]
        namespace = node.spec.namespace
        slug = self._slugs[item.id]
        module = item.modules[0] if item.modules else None
        return [
            self._node(
                "nav-link",
                node.id,
                role="nav-header-link",
                value=namespace,
                group=namespace,
                sub_group=module,
                dom_id=f"nav-{slug}",
                source_id=item.id,
                spec=ChildrenSpec(Expand.NAV_LINKS, item.id, namespace),
            ),
            self._node(
                "container",
                node.id,
                role="container",
                group=namespace,
                dom_id=f"container-{slug}",
                source_id=item.id,
                spec=ChildrenSpec(Expand.CONTAINER, item.id, namespace),
            ),
        ]

    def _nav_links(self, node: ElementNode) -> list[ElementNode]:
        # Roots repeating a namespace link to whichever comment declared it first
        declarers = {ns.description: ns.id for ns in self.namespaces}
        links = []
        for root in self.root_items():
            group = root.namespaces[0]
            module = root.modules[0] if root.modules else None
            links.append(
                self._node(
                    "nav-sublink",
                    node.id,
                    role="nav-header-sublink",
                    value=module or group,
                    group=group,
                    sub_group=module,
                    dom_id=f"{node.attributes.dom_id}--{self._slugs[root.id]}",
                    source_id=declarers.get(group, root.id),
                )
            )
        return links

    def _container_children(self, node: ElementNode) -> list[ElementNode]:
        namespace = node.spec.namespace
        slug = self._slugs[node.spec.source_id]
        return [
            self._node(
                "tab-strip",
                node.id,
                role="tab-strip-nav",
                group=namespace,
                dom_id=f"tab-strip-{slug}",
                source_id=node.spec.source_id,
                spec=ChildrenSpec(Expand.TABS, node.spec.source_id, namespace),
            ),
            self._node(
                "content-wrapper",
                node.id,
                role="content-wrapper",
                group=namespace,
                dom_id=f"content-{slug}",
                source_id=node.spec.source_id,
                spec=ChildrenSpec(Expand.PANELS, node.spec.source_id, namespace),
            ),
        ]

    def _tab_entries(self, root_id: str) -> list[tuple[ProcessedComment, str, str]]:
        """(comment, label, dom id) for the overview tab and each linked child."""
        root = self._by_id[root_id]
        slug = self._slugs[root_id]
        entries = [(root, "Overview", f"{slug}-overview")]
        for index, child in enumerate(self._linked_children(root), start=1):
            entries.append((child, child.title, f"{slug}-tab-{index}"))
        return entries

    def _linked_children(self, item: ProcessedComment) -> list[ProcessedComment]:
        """Child comments of ``item`` in edge order, once each; unknown ids skipped."""
        seen: set[str] = set()
        children = []
        for edge in item.children:
            child = self._by_id.get(edge.id)
            if child is None or child.id in seen:
                continue
            seen.add(child.id)
            children.append(child)
        return children

    def _tabs(self, node: ElementNode) -> list[ElementNode]:
        namespace = node.spec.namespace
        return [
            self._node(
                "tab",
                node.id,
                role="tab-strip-nav-link",
                value=label,
                group=namespace,
                sub_group="overview" if item.id == node.spec.source_id else item.kind,
                dom_id=dom_id,
                source_id=item.id,
            )
            for item, label, dom_id in self._tab_entries(node.spec.source_id)
        ]

    def _panels(self, node: ElementNode) -> list[ElementNode]:
        namespace = node.spec.namespace
        root_id = node.spec.source_id
        return [
            self._node(
                "content",
                node.id,
                role="content",
                group=namespace,
                sub_group="overview" if item.id == root_id else item.kind,
                dom_id=dom_id,
                source_id=item.id,
                spec=ChildrenSpec(Expand.FIELDS, item.id, namespace, path=(root_id, item.id)),
            )
            for item, _, dom_id in self._tab_entries(root_id)
        ]

    def _fields(self, node: ElementNode) -> list[ElementNode]:
        item = self._by_id[node.spec.source_id]
        namespace = node.spec.namespace
        children = [
            self._node(
                "field", node.id, role="content-field", value=value, group=namespace, sub_group=name
            )
            for name, value in self._field_values(item)
        ]

        # The overview panel leaves children to their own tabs
        path = node.spec.path
        if path and item.id == path[0]:
            return children

        for index, child in enumerate(self._linked_children(item), start=1):
            if child.id in path:
                continue
            children.append(
                self._node(
                    "content",
                    node.id,
                    role="content",
                    group=namespace,
                    sub_group=child.kind,
                    dom_id=f"{node.attributes.dom_id}-{index}",
                    source_id=child.id,
                    spec=ChildrenSpec(Expand.FIELDS, child.id, namespace, path=path + (child.id,)),
                )
            )
        return children

    def _field_values(self, item: ProcessedComment) -> list[tuple[str, str]]:
        fields: list[tuple[str, str]] = [("title", item.title)]
        if item.type:
            fields.append(("type", _describe(item.type.kind, None, item.type.description)))
        for name in ("summary", "description", "access", "version", "since", "author", "license"):
            value = getattr(item, name)
            if value:
                fields.append((name, value))
        if item.text:
            fields.append(("text", item.text))
        for name in item.modules:
            declarer = self._module_declarers.get(name, item.id)
            fields.append(("module", name if declarer == item.id else f"{name} (declared elsewhere)"))

        file = self._files_by_path.get(item.file_details.file_path)
        fields.append(("file", file.description if file else item.file_details.file_path))

        fields.extend(("param", _describe(p.type, p.name, p.description)) for p in item.props)
        fields.extend(("argument", _describe(a.type, a.name, a.description)) for a in item.arguments)
        fields.extend(
            ("requires", _describe(r.type, r.name, None if r.name == r.description else r.description))
            for r in item.requires
        )
        if item.returns:
            fields.append(("returns", _describe(item.returns.type, None, item.returns.description)))
        if item.throws:
            fields.append(("throws", _describe(item.throws.type, None, item.throws.description)))
        for name in ("changelog", "example", "see", "todo", "bug"):
            fields.extend((name, value) for value in getattr(item, name))
        fields.extend(("parent", f"{p.association}: {p.description}") for p in item.parent)
        return fields


def build_elements(result: LinkResult) -> list[ElementNode]:
    """Build the materialized element forest for a link result."""
    if result is None:
        raise ElementTreeError("Expected a link result, got None")
    return ElementTreeBuilder(result.processed, result.files, result.namespaces, result.modules).build()
