"""build-docs - reference sites from JSDoc-style comment blocks.

Pipeline:
- scanner.collect_source_files: candidate files under a target path
- extractors.extract_comments: comment blocks -> RawComment records
- linker.link: two-pass graph of namespaces, modules, files and members
- elements.build_elements: materialized element forest for renderers
"""

from builddocs.elements import ElementTreeBuilder, build_elements
from builddocs.errors import BuildDocsError, ConfigError, ElementTreeError, LinkError
from builddocs.extractors import JSDOC_PATTERN, extract_comments, extract_from_sources
from builddocs.linker import CommentLinker, Registry, link
from builddocs.tags import parse_comment, tokenize_tag_value

__all__ = [
    "BuildDocsError",
    "CommentLinker",
    "ConfigError",
    "ElementTreeBuilder",
    "ElementTreeError",
    "JSDOC_PATTERN",
    "LinkError",
    "Registry",
    "build_elements",
    "extract_comments",
    "extract_from_sources",
    "link",
    "parse_comment",
    "tokenize_tag_value",
]
