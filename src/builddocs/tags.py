"""Tag parsing for JSDoc-style comment blocks.

A block is read line by line. Lines carrying an `@tag value` become
TagOccurrence entries; `* text` lines feed the free-text description;
everything else (delimiters, blank lines, bare tags) is dropped.
"""

from __future__ import annotations

import logging
import re

from .models import ParsedComment, Requirement, ReturnInfo, TagOccurrence, TagTable

log = logging.getLogger(__name__)

TAG_PATTERN = re.compile(r"@(\w+)\s+(.+)")
TEXT_PATTERN = re.compile(r"\*\s+(.+)")

# {type} | [name] | `code` | bare word
TOKEN_PATTERN = re.compile(r"(\{[^}]*\}|\[[^\]]*\]|`[^`]*`|[^ ]+)")

NODE_DOCS_URL = "https://nodejs.org/api"


def parse_comment(comment: str) -> ParsedComment:
    """Parse one comment block into a tag table and free text.

    Tags are appended, never overwritten, so repeated tags keep source order.
    A block that cannot be parsed yields an empty result with ``ok=False``
    instead of raising, so one bad block never stops a scan.
    """
    tags: TagTable = {}
    text = ""
    try:
        for line in comment.split("\n"):
            line = line.rstrip()
            if line.endswith("*/"):
                line = line[:-2].rstrip()
            tag_match = TAG_PATTERN.search(line)
            if tag_match:
                name = tag_match.group(1)
                tags.setdefault(name, []).append(
                    TagOccurrence(
                        line=line.strip(),
                        tag_name=name,
                        description=tag_match.group(2).strip(),
                    )
                )
                continue

            text_match = TEXT_PATTERN.search(line)
            if text_match and not text_match.group(1).startswith("@"):
                text += text_match.group(1) + "\n"
    except (AttributeError, TypeError) as e:
        log.warning(f"Could not parse comment block: {e.__class__.__name__}: {e}")
        return ParsedComment(ok=False)

    return ParsedComment(tags=tags, text=text.strip())


def first_value(tags: TagTable, name: str) -> str | None:
    """Description of the first occurrence of a tag, or None."""
    occurrences = tags.get(name)
    if not occurrences:
        return None
    return occurrences[0].description or None


def all_values(tags: TagTable, name: str) -> list[str]:
    return [t.description for t in tags.get(name, [])]


def _strip_group(token: str, open_char: str, close_char: str) -> str:
    if token.startswith(open_char) and token.endswith(close_char):
        return token[1:-1].strip()
    return token


def _description_from(tokens: list[str]) -> str | None:
    description = " ".join(tokens).strip()
    if description.startswith("-"):
        description = description[1:].strip()
    return description or None


def tokenize_tag_value(value: str) -> tuple[str | None, str | None, str | None]:
    """Split a tag value into (type, name, description).

    Grammar: ``{type}? ([name] | name)? -? description?``. The type slot only
    takes a ``{...}`` group; a lone ``-`` ends the name slot.

    Example:
        >>> tokenize_tag_value("{string} [name] - the name")
        ('string', 'name', 'the name')
    """
    tokens = TOKEN_PATTERN.findall(value or "")

    type_ = None
    if tokens and tokens[0].startswith("{"):
        type_ = _strip_group(tokens.pop(0), "{", "}") or None

    name = None
    if tokens and tokens[0] != "-":
        name = _strip_group(tokens.pop(0), "[", "]") or None

    return type_, name, _description_from(tokens)


def parse_return(value: str | None) -> ReturnInfo | None:
    """Parse an @returns / @throws value: ``{type}? -? description``."""
    if value is None:
        return None
    tokens = TOKEN_PATTERN.findall(value)
    type_ = None
    if tokens and tokens[0].startswith("{"):
        type_ = _strip_group(tokens.pop(0), "{", "}") or None
    return ReturnInfo(type=type_, description=_description_from(tokens))


def classify_requirement(comment_id: str, value: str) -> Requirement:
    """Classify an @requires value as node-module, custom module or unknown."""
    if NODE_DOCS_URL in value:
        # {@link https://nodejs.org/api/fs.html | fs}
        _, _, after_pipe = value.partition(" | ")
        name = after_pipe.replace("}", "").strip() or None
        _, _, after_link = value.partition("{@link ")
        url = after_link.split(" | ")[0].strip() or None
        return Requirement(id=comment_id, type="node-module", name=name, description=url)

    prefix, sep, rest = value.partition(":")
    if sep and "module" in prefix:
        rest = rest.strip() or None
        return Requirement(id=comment_id, type=prefix.strip(), name=rest, description=rest)

    return Requirement(id=comment_id, type="unknown", name=None, description=value or None)
