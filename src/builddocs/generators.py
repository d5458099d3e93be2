"""Output generators: HTML, Markdown and JSON."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from html import escape
from typing import Any

from .config import HtmlOptions
from .models import ElementNode, LinkResult, ProcessedComment

log = logging.getLogger(__name__)

# Element kind -> HTML tag
_TAGS = {
    "nav-link": "li",
    "nav-sublink": "span",
    "container": "section",
    "tab-strip": "nav",
    "tab": "button",
    "content-wrapper": "div",
    "content": "article",
    "field": "p",
    "error": "div",
}

_ERROR_DOCUMENT = (
    '<!DOCTYPE html><html lang="en"><head><title>ERROR</title></head>'
    "<body><h1>ERROR</h1><p>{error}</p></body></html>"
)

# Toggles containers from the header nav and panels from each tab strip
_SCRIPT = """
document.addEventListener('DOMContentLoaded', () => {
  document.querySelectorAll("[data-role='nav-header-link']").forEach(link => {
    link.addEventListener('click', () => {
      const target = link.dataset.id.replace(/^nav-/, 'container-');
      document.querySelectorAll("[data-role='container']").forEach(container => {
        container.hidden = container.dataset.id !== target;
      });
    });
  });
  document.querySelectorAll("[data-role='tab-strip-nav-link']").forEach(tab => {
    tab.addEventListener('click', () => {
      const container = tab.closest("[data-role='container']");
      container.querySelectorAll("[data-role='content-wrapper'] > [data-role='content']").forEach(panel => {
        panel.hidden = panel.dataset.id !== tab.dataset.id;
      });
    });
  });
});
""".strip()


def _slugify(name: str) -> str:
    """Convert a name to a markdown anchor slug."""
    # GitHub-style: lowercase, drop dots, spaces to hyphens
    return name.lower().replace(".", "").replace(" ", "-")


def _attributes(node: ElementNode, hidden: bool) -> str:
    attrs = node.attributes
    pairs = [
        ("id", node.id),
        ("data-role", attrs.role),
        ("data-group", attrs.group),
        ("data-sub-group", attrs.sub_group),
        ("data-id", attrs.dom_id),
    ]
    if node.kind != "field" and attrs.value is not None:
        pairs.append(("data-value", attrs.value))
    parts = [f'{name}="{escape(value)}"' for name, value in pairs if value is not None]
    if hidden:
        parts.append("hidden")
    return " ".join(parts)


def _render_node(node: ElementNode, lines: list[str], depth: int, hidden: bool = False) -> None:
    tag = _TAGS.get(node.kind, "div")
    if node.kind == "field" and node.attributes.sub_group == "example":
        tag = "pre"
    indent = "  " * depth
    children = node.children or []

    if node.kind in ("field", "tab", "nav-sublink", "error") and not children:
        text = escape(node.attributes.value or "")
        lines.append(f"{indent}<{tag} {_attributes(node, hidden)}>{text}</{tag}>")
        return

    lines.append(f"{indent}<{tag} {_attributes(node, hidden)}>")
    if node.kind == "nav-link" and node.attributes.value:
        lines.append(f'{indent}  <a role="button">{escape(node.attributes.value)}</a>')

    for index, child in enumerate(children):
        # Only the first panel of a content wrapper starts visible
        child_hidden = node.kind == "content-wrapper" and index > 0
        _render_node(child, lines, depth + 1, hidden=child_hidden)
    lines.append(f"{indent}</{tag}>")


def _children_of_kind(forest: list[ElementNode], kind: str) -> list[ElementNode]:
    return [child for root in forest for child in (root.children or []) if child.kind == kind]


def generate_html(
    forest: list[ElementNode],
    title: str = "Documentation",
    html_options: HtmlOptions | None = None,
) -> str:
    """Render a materialized element forest into a single HTML document.

    Navigation links go into the header, containers into <main>. Any
    failure produces a fixed error document instead of raising.
    """
    html_options = html_options or HtmlOptions()
    try:
        lines = [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            f"  <title>{escape(title)}</title>",
        ]
        lines.extend(f"  <meta {meta} />" for meta in html_options.meta)
        lines.extend(f'  <script src="{escape(src)}"></script>' for src in html_options.scripts)
        lines.extend(f'  <link rel="stylesheet" href="{escape(href)}" />' for href in html_options.styles)
        lines.extend(
            [
                "</head>",
                f'<body class="{escape(" ".join(html_options.body_classes))}">',
                '<header data-role="header">',
                f"  <h1>{escape(title)}</h1>",
                '  <ul data-role="nav-header">',
            ]
        )

        for node in _children_of_kind(forest, "nav-link"):
            _render_node(node, lines, 2)
        lines.extend(["  </ul>", "</header>", '<main data-role="main">'])

        for index, node in enumerate(_children_of_kind(forest, "container")):
            _render_node(node, lines, 1, hidden=index > 0)

        lines.extend(["</main>", f"<script>\n{_SCRIPT}\n</script>", "</body>", "</html>", ""])
        return "\n".join(lines)
    except Exception as e:
        log.exception("Failed to render HTML")
        return _ERROR_DOCUMENT.format(error=escape(f"{e.__class__.__name__}: {e}"))


def _comment_section(item: ProcessedComment) -> list[str]:
    lines = [f"### {item.title}", ""]

    if item.type:
        lines.append(f"*{item.type.kind}*" + (f" `{item.type.description}`" if item.type.description else ""))
        lines.append("")

    for text in (item.summary, item.description, item.text):
        if text:
            lines.append(text)
            lines.append("")

    for label, values in (("Parameters", item.props), ("Arguments", item.arguments)):
        if values:
            lines.append(f"**{label}:**")
            for v in values:
                type_ = f" `{v.type}`" if v.type else ""
                desc = f": {v.description}" if v.description else ""
                lines.append(f"- `{v.name or '?'}`{type_}{desc}")
            lines.append("")

    if item.returns:
        type_ = f"`{item.returns.type}` " if item.returns.type else ""
        lines.append(f"**Returns:** {type_}{item.returns.description or ''}".rstrip())
        lines.append("")

    if item.requires:
        lines.append("**Requires:**")
        for r in item.requires:
            lines.append(f"- {r.type}: {r.name or r.description}")
        lines.append("")

    if item.example:
        lines.append("**Example:**")
        lines.append("```")
        lines.extend(item.example)
        lines.append("```")
        lines.append("")

    lines.append(f"*Source: {item.file_details.file_path}*")
    lines.append("")
    lines.append("---")
    lines.append("")
    return lines


def generate_markdown(result: LinkResult, title: str = "Documentation") -> str:
    """Generate a Markdown reference grouped by root item."""
    lines = [
        "<!-- AUTO-GENERATED. DO NOT EDIT. Run `build-docs` to regenerate. -->",
        "",
        f"# {title}",
        "",
    ]

    roots = [item for item in result.processed if item.is_root_item and item.namespaces]
    if not roots:
        lines.append("*No root items found. Add @namespace tags to comment blocks.*")
        lines.append("")

    rendered: set[str] = set()

    for root in roots:
        lines.extend([f"## {root.namespaces[0]}", ""])
        if root.summary:
            lines.extend([root.summary, ""])

        children = _linked_children(result, root)
        if children:
            lines.extend(["| Name | Kind | Summary |", "|------|------|---------|"])
            for child in children:
                desc = (child.summary or "").replace("|", "\\|")
                lines.append(f"| [`{child.title}`](#{_slugify(child.title)}) | {child.kind or ''} | {desc} |")
            lines.append("")

        # Root, then its descendants depth first; each comment appears once
        stack = [root]
        while stack:
            item = stack.pop()
            if item.id in rendered:
                continue
            rendered.add(item.id)
            lines.extend(_comment_section(item))
            stack.extend(reversed(_linked_children(result, item)))

    others = [item for item in result.processed if item.id not in rendered]
    if others:
        lines.extend(["## Other", ""])
        for item in others:
            lines.extend(_comment_section(item))

    return "\n".join(lines)


def _linked_children(result: LinkResult, item: ProcessedComment) -> list[ProcessedComment]:
    children = []
    seen: set[str] = set()
    for edge in item.children:
        child = result.get(edge.id)
        if child is None or child.id in seen:
            continue
        seen.add(child.id)
        children.append(child)
    return children


def _default(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, tuple):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def generate_json(obj: Any) -> str:
    """Serialize records (dataclasses, datetimes) as indented JSON."""
    return json.dumps(obj, default=_default, indent=2)
