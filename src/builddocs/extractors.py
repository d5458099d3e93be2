"""Comment block extraction from source file content."""

from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime
from pathlib import PurePath

from .models import RawComment, SourceFile
from .tags import parse_comment

log = logging.getLogger(__name__)

# /** ... */ up to the first closing delimiter, across lines
JSDOC_PATTERN = re.compile(r"/\*\*.*?\*/", re.DOTALL)


def _new_id() -> str:
    return str(uuid.uuid4())


def extract_comments(
    file_path: str,
    content: str,
    created_date: datetime,
    modified_date: datetime,
    pattern: re.Pattern[str] = JSDOC_PATTERN,
) -> list[RawComment]:
    """Extract every comment block matching ``pattern`` from file content.

    Each match is parsed into a tag table and wrapped in a RawComment with a
    fresh id. A file without matches returns an empty list. Blocks that fail
    to parse are skipped.

    Args:
        file_path: Path the content was read from (kept for linking by file)
        content: Full file content
        created_date: File creation timestamp
        modified_date: File modification timestamp
        pattern: Block delimiter pattern; swap it to support other comment styles

    Returns:
        RawComment records in source order
    """
    file_name = PurePath(file_path).name
    comments: list[RawComment] = []

    for match in pattern.finditer(content):
        parsed = parse_comment(match.group(0))
        if not parsed.ok:
            log.warning(f"Skipping unparsable comment block in {file_path} at offset {match.start()}")
            continue

        comments.append(
            RawComment(
                id=_new_id(),
                file_name=file_name,
                file_path=file_path,
                tags=parsed.tags,
                text=parsed.text,
                created_date=created_date,
                modified_date=modified_date,
            )
        )

    log.debug(f"{file_path}: {len(comments)} comment blocks")
    return comments


def extract_from_sources(
    sources: list[SourceFile],
    pattern: re.Pattern[str] = JSDOC_PATTERN,
) -> list[RawComment]:
    """Extract comments from every source file, preserving file order."""
    results: list[RawComment] = []
    for source in sources:
        results.extend(
            extract_comments(
                source.path,
                source.content,
                source.created_date,
                source.modified_date,
                pattern=pattern,
            )
        )
    return results
