"""Documentation validation and quality checks."""

from __future__ import annotations

from .models import LinkResult, ValidationResult


def validate_comments(result: LinkResult, strict: bool = False) -> ValidationResult:
    """Validate a link result.

    Checks:
    1. Every @memberof reference resolves to a declared namespace or module
    2. Every @memberof value carries a kind prefix (namespace: / module:)
    3. Root items have a @summary

    Args:
        result: Output of the linker
        strict: If True, these misses are errors instead of warnings

    Returns:
        ValidationResult with errors and warnings
    """
    validation = ValidationResult()
    namespaces = {ns.description for ns in result.namespaces}
    modules = {m.description for m in result.modules}

    def report(msg: str) -> None:
        if strict:
            validation.errors.append(msg)
        else:
            validation.warnings.append(msg)

    for item in result.processed:
        where = f"{item.file_details.file_path} ({item.title})"

        for member in item.member_of:
            if not member.kind:
                report(f"{where}: @memberof {member.description} has no namespace:/module: prefix")
            elif member.kind == "namespace" and member.description not in namespaces:
                report(f"{where}: @memberof namespace:{member.description} matches no @namespace")
            elif member.kind == "module" and member.description not in modules:
                report(f"{where}: @memberof module:{member.description} matches no @module")

        if item.is_root_item and not item.summary:
            report(f"{where}: root item missing @summary")

    return validation


def compute_coverage(result: LinkResult) -> dict[str, float]:
    """Compute documentation coverage.

    Returns:
        Dict with 'documented' (share of comments with a summary or
        description) and 'linked' (share of non-root comments with a parent),
        each 0.0 - 1.0
    """
    total = len(result.processed)
    documented = sum(1 for item in result.processed if item.summary or item.description)

    members = [item for item in result.processed if not item.is_root_item]
    linked = sum(1 for item in members if item.parent)

    return {
        "documented": documented / total if total > 0 else 1.0,
        "linked": linked / len(members) if members else 1.0,
    }
