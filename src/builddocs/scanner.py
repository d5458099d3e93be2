"""Source tree enumeration: directory walking and file filtering."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from .errors import BuildDocsError
from .models import SourceFile

log = logging.getLogger(__name__)


def should_ignore(path: Path, ignore_paths: list[str]) -> bool:
    """True if any ignore fragment appears in the path."""
    text = path.as_posix()
    return any(fragment and fragment in text for fragment in ignore_paths)


def is_file_type(path: Path, file_types: list[str]) -> bool:
    """True if the extension (without the dot) is one of ``file_types``."""
    return path.suffix[1:] in file_types


def _timestamps(path: Path) -> tuple[datetime, datetime]:
    stats = path.stat()
    created = getattr(stats, "st_birthtime", stats.st_ctime)
    return (
        datetime.fromtimestamp(created, tz=timezone.utc),
        datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc),
    )


def collect_source_files(
    target_path: str | Path,
    ignore_paths: list[str] | None = None,
    file_types: list[str] | None = None,
) -> list[SourceFile]:
    """Walk ``target_path`` and read every matching file.

    Args:
        target_path: Directory (or single file) to scan
        ignore_paths: Path fragments; any path containing one is skipped
        file_types: Extensions without the dot, e.g. ["ts", "js"]

    Returns:
        SourceFile records in sorted path order

    Raises:
        BuildDocsError: If target_path does not exist
    """
    root = Path(target_path)
    if not root.exists():
        raise BuildDocsError(f"Target path does not exist: {root}", path=str(root))

    ignore_paths = ignore_paths or []
    file_types = file_types or []

    candidates = [root] if root.is_file() else sorted(root.rglob("*"))
    sources: list[SourceFile] = []

    for path in candidates:
        # Match ignore fragments below the target only
        relative = path.relative_to(root) if path != root else Path(path.name)
        if not path.is_file() or should_ignore(relative, ignore_paths):
            continue
        if not is_file_type(path, file_types):
            continue
        try:
            content = path.read_text(encoding="utf-8")
            created, modified = _timestamps(path)
        except (OSError, UnicodeDecodeError) as e:
            log.warning(f"Skipping {path}: {e.__class__.__name__}: {e}")
            continue
        sources.append(
            SourceFile(path=path.as_posix(), content=content, created_date=created, modified_date=modified)
        )

    log.info(f"Found {len(sources)} source files under {root}")
    return sources
