"""Data models for comment extraction, linking and element trees."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

# tag name -> occurrences in source order
TagTable = dict[str, list["TagOccurrence"]]


@dataclass(frozen=True)
class TagOccurrence:
    """One `@tag value` line within a comment block."""

    line: str  # The stripped source line the tag was found on
    tag_name: str  # "param", "memberof", ... (case preserved)
    description: str  # Everything after the tag name, trimmed


@dataclass
class ParsedComment:
    """Result of parsing a single comment block."""

    tags: TagTable = field(default_factory=dict)
    text: str = ""  # Free text from lines without a tag
    ok: bool = True  # False when the block could not be parsed


@dataclass(frozen=True)
class SourceFile:
    """A candidate file handed over by the scanner."""

    path: str
    content: str
    created_date: datetime
    modified_date: datetime


@dataclass
class RawComment:
    """One extracted comment block with its file identity."""

    id: str
    file_name: str
    file_path: str
    tags: TagTable
    created_date: datetime
    modified_date: datetime
    text: str = ""


@dataclass
class TypeInfo:
    kind: str  # Between `{}` of @type, or "file"
    description: str


@dataclass
class TagValue:
    """A tokenized @param / @argument value."""

    id: str  # Id of the comment the value belongs to
    type: str | None
    name: str | None
    description: str | None


@dataclass
class Requirement:
    """A classified @requires value."""

    id: str
    type: str | None  # "node-module" | "module" | "unknown"
    name: str | None
    description: str | None


@dataclass
class ReturnInfo:
    type: str | None
    description: str | None


@dataclass
class MemberOf:
    kind: str  # Text before ":" ("namespace", "module"), "" if absent
    description: str


@dataclass
class Association:
    """A parent or child edge between processed comments."""

    id: str
    kind: str | None  # type.kind of the comment that owns the member side
    association: str  # "namespace" | "module" | "file"
    description: str | None = None


@dataclass
class FileDetails:
    file_name: str
    file_path: str
    created_date: datetime
    modified_date: datetime


@dataclass
class ProcessedComment:
    """Normalized, queryable form of a RawComment."""

    id: str
    is_root_item: bool
    file_details: FileDetails
    type: TypeInfo | None = None
    access: str | None = None
    summary: str | None = None
    description: str | None = None
    version: str | None = None
    author: str | None = None
    license: str | None = None
    since: str | None = None
    text: str = ""
    props: list[TagValue] = field(default_factory=list)
    arguments: list[TagValue] = field(default_factory=list)
    requires: list[Requirement] = field(default_factory=list)
    returns: ReturnInfo | None = None
    throws: ReturnInfo | None = None
    changelog: list[str] = field(default_factory=list)
    todo: list[str] = field(default_factory=list)
    bug: list[str] = field(default_factory=list)
    example: list[str] = field(default_factory=list)
    see: list[str] = field(default_factory=list)
    namespaces: list[str] = field(default_factory=list)
    modules: list[str] = field(default_factory=list)
    member_of: list[MemberOf] = field(default_factory=list)
    parent: list[Association] = field(default_factory=list)
    children: list[Association] = field(default_factory=list)

    @property
    def kind(self) -> str | None:
        return self.type.kind if self.type else None

    @property
    def title(self) -> str:
        """Best human-readable label for the comment."""
        if self.namespaces:
            return self.namespaces[0]
        if self.modules:
            return self.modules[0]
        if self.type and self.type.description:
            return self.type.description
        return self.summary or self.file_details.file_name


@dataclass
class Namespace:
    id: str  # Id of the comment that declared it first
    description: str


@dataclass
class Module:
    id: str
    description: str


@dataclass
class File:
    id: str
    description: str
    file_path: str


@dataclass
class LinkResult:
    """Output of the two-pass linker."""

    processed: list[ProcessedComment]
    namespaces: list[Namespace]
    modules: list[Module]
    files: list[File]

    def get(self, comment_id: str) -> ProcessedComment | None:
        for item in self.processed:
            if item.id == comment_id:
                return item
        return None


class Expand(str, Enum):
    """Which children a node resolves to during materialization."""

    NONE = "none"
    ROOT_ITEM = "root-item"
    NAV_LINKS = "nav-links"
    CONTAINER = "container"
    TABS = "tabs"
    PANELS = "panels"
    FIELDS = "fields"


@dataclass(frozen=True)
class ChildrenSpec:
    """Declarative description of a node's children."""

    expand: Expand = Expand.NONE
    source_id: str | None = None  # Processed comment the children come from
    namespace: str | None = None  # Group of the owning root item
    path: tuple[str, ...] = ()  # Comment ids already expanded above this node


@dataclass
class ElementAttributes:
    value: str | None = None
    role: str | None = None
    group: str | None = None
    sub_group: str | None = None
    dom_id: str | None = None


@dataclass
class ElementNode:
    """Renderer-agnostic UI node."""

    id: str
    parent_id: str | None
    kind: str  # "root-item", "nav-link", "container", "tab-strip", "tab", "content", "field", ...
    attributes: ElementAttributes
    source_id: str | None = None
    spec: ChildrenSpec = field(default_factory=ChildrenSpec)
    children: list[ElementNode] | None = None  # None until materialized

    @property
    def materialized(self) -> bool:
        return self.children is not None


@dataclass
class ValidationResult:
    """Results from documentation validation."""

    errors: list[str] = field(default_factory=list)  # Build fails if non-empty
    warnings: list[str] = field(default_factory=list)  # Printed but allowed


@dataclass
class BuildResult:
    """Everything one pipeline run produced."""

    sources: list[SourceFile]
    raw_comments: list[RawComment]
    linked: LinkResult
    validation: ValidationResult
    coverage: dict[str, float]
    elements: list[ElementNode]
