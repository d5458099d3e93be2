"""Two-pass linker: raw comments -> processed comment graph.

Pass 1 normalizes every RawComment and registers declared namespaces,
modules and files. Pass 2 resolves `@memberof` references and file
membership against those registries and records parent/child edges.
Registries are created per call, so separate runs never share state.
"""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from .errors import LinkError
from .models import (
    Association,
    File,
    FileDetails,
    LinkResult,
    MemberOf,
    Module,
    Namespace,
    ProcessedComment,
    RawComment,
    TagValue,
    TypeInfo,
)
from .tags import (
    all_values,
    classify_requirement,
    first_value,
    parse_return,
    tokenize_tag_value,
)

log = logging.getLogger(__name__)

T = TypeVar("T")


class Registry(Generic[T]):
    """First-seen-wins lookup table keyed by an exact, case-sensitive string."""

    def __init__(self) -> None:
        self._entries: dict[str, T] = {}

    def register(self, key: str, entry: T) -> bool:
        """Store ``entry`` unless ``key`` is already taken. Returns True if stored."""
        if key in self._entries:
            return False
        self._entries[key] = entry
        return True

    def get(self, key: str) -> T | None:
        return self._entries.get(key)

    def __len__(self) -> int:
        return len(self._entries)

    def values(self) -> list[T]:
        return list(self._entries.values())


def _strip_braces(value: str) -> str:
    value = value.strip()
    if value.startswith("{"):
        value = value[1:]
    if value.endswith("}"):
        value = value[:-1]
    return value.strip()


def _parse_type(raw: RawComment) -> TypeInfo | None:
    """`@type {kind} description`, falling back to `@file description`."""
    type_value = first_value(raw.tags, "type")
    if type_value:
        kind, _, description = type_value.partition("}")
        return TypeInfo(kind=kind.replace("{", "").strip(), description=description.strip())

    file_value = first_value(raw.tags, "file")
    if file_value:
        return TypeInfo(kind="file", description=file_value)

    return None


def _parse_values(raw: RawComment, tag: str) -> list[TagValue]:
    values = []
    for value in all_values(raw.tags, tag):
        type_, name, description = tokenize_tag_value(value)
        values.append(TagValue(id=raw.id, type=type_, name=name, description=description))
    return values


def _parse_member_of(value: str) -> MemberOf:
    kind, sep, description = value.partition(":")
    if not sep:
        return MemberOf(kind="", description=value.strip())
    return MemberOf(kind=kind.strip(), description=description.strip())


def _add_edge(edges: list[Association], edge: Association) -> None:
    if edge not in edges:
        edges.append(edge)


class CommentLinker:
    """Builds the processed comment graph, with fresh registries per run.

    Example:
        result = CommentLinker().link(raw_comments)
        for item in result.processed:
            print(item.id, [p.association for p in item.parent])
    """

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.namespaces: Registry[Namespace] = Registry()
        self.modules: Registry[Module] = Registry()
        # Keyed by file path: many files share descriptions like "index.ts"
        self.files: Registry[File] = Registry()

    def link(self, raw_comments: list[RawComment]) -> LinkResult:
        """Run both passes over ``raw_comments`` in input order.

        Raises:
            LinkError: If ``raw_comments`` is not a list of RawComment records.
        """
        if raw_comments is None or not isinstance(raw_comments, (list, tuple)):
            raise LinkError(f"Expected a list of raw comments, got {type(raw_comments).__name__}")
        for raw in raw_comments:
            if not isinstance(raw, RawComment):
                raise LinkError(f"Expected RawComment, got {type(raw).__name__}")

        # Every run resolves against its own declarers only
        self._reset()

        processed = [self._process(raw) for raw in raw_comments]
        by_id = {item.id: item for item in processed}

        for item in processed:
            self._link_members(item, by_id)
        for item in processed:
            self._link_file(item, by_id)

        log.debug(
            f"Linked {len(processed)} comments: {len(self.namespaces)} namespaces, "
            f"{len(self.modules)} modules, {len(self.files)} files"
        )

        return LinkResult(
            processed=processed,
            namespaces=self.namespaces.values(),
            modules=self.modules.values(),
            files=self.files.values(),
        )

    # ------------------------------------------------------------------
    # Pass 1

    def _process(self, raw: RawComment) -> ProcessedComment:
        tags = raw.tags
        item = ProcessedComment(
            id=raw.id,
            is_root_item=bool(first_value(tags, "namespace")),
            file_details=FileDetails(
                file_name=raw.file_name,
                file_path=raw.file_path,
                created_date=raw.created_date,
                modified_date=raw.modified_date,
            ),
            type=_parse_type(raw),
            access=first_value(tags, "access"),
            summary=first_value(tags, "summary"),
            description=first_value(tags, "description"),
            version=first_value(tags, "version"),
            author=first_value(tags, "author"),
            license=first_value(tags, "license"),
            since=first_value(tags, "since"),
            text=raw.text,
            props=_parse_values(raw, "param"),
            arguments=_parse_values(raw, "argument"),
            requires=[classify_requirement(raw.id, v) for v in all_values(tags, "requires")],
            returns=parse_return(first_value(tags, "returns") or first_value(tags, "return")),
            throws=parse_return(first_value(tags, "throws")),
            changelog=all_values(tags, "changelog"),
            todo=all_values(tags, "todo"),
            bug=all_values(tags, "bug"),
            example=all_values(tags, "example"),
            see=all_values(tags, "see"),
            member_of=[_parse_member_of(v) for v in all_values(tags, "memberof")],
        )

        for value in all_values(tags, "namespace"):
            name = _strip_braces(value)
            item.namespaces.append(name)
            self.namespaces.register(name, Namespace(id=item.id, description=name))

        for value in all_values(tags, "module"):
            item.modules.append(value)
            self.modules.register(value, Module(id=item.id, description=value))

        if item.type and item.type.kind == "file" and item.type.description:
            self.files.register(
                raw.file_path,
                File(id=item.id, description=item.type.description, file_path=raw.file_path),
            )

        return item

    # ------------------------------------------------------------------
    # Pass 2

    def _link_members(self, item: ProcessedComment, by_id: dict[str, ProcessedComment]) -> None:
        for member in item.member_of:
            if member.kind == "namespace":
                target = self.namespaces.get(member.description)
            elif member.kind == "module":
                target = self.modules.get(member.description)
            else:
                target = None

            if target is None:
                log.debug(f"No match for @memberof {member.kind}:{member.description} ({item.id})")
                continue

            self._connect(item, target.id, member.kind, target.description, by_id)

    def _link_file(self, item: ProcessedComment, by_id: dict[str, ProcessedComment]) -> None:
        # Root items are namespace scoped, never file scoped
        if item.is_root_item:
            return
        file = self.files.get(item.file_details.file_path)
        if file is None:
            return
        self._connect(item, file.id, "file", file.description, by_id)

    def _connect(
        self,
        item: ProcessedComment,
        parent_id: str,
        association: str,
        description: str,
        by_id: dict[str, ProcessedComment],
    ) -> None:
        """Record ``item`` as a child of the comment that declared ``parent_id``."""
        if parent_id == item.id:
            return

        _add_edge(
            item.parent,
            Association(id=parent_id, kind=item.kind, association=association, description=description),
        )

        declarer = by_id.get(parent_id)
        if declarer is not None:
            _add_edge(
                declarer.children,
                Association(id=item.id, kind=item.kind, association=association, description=description),
            )


def link(raw_comments: list[RawComment]) -> LinkResult:
    """Link raw comments with a fresh set of registries."""
    return CommentLinker().link(raw_comments)
