"""Sample sources and builders shared by the build-docs tests."""

from datetime import datetime, timezone

CREATED = datetime(2023, 7, 12, tzinfo=timezone.utc)
MODIFIED = datetime(2023, 7, 13, tzinfo=timezone.utc)

LIB_SOURCE = """
/**
 * Core library entry.
 * @namespace {Lib}
 * @module Lib.Core
 * @summary Core library.
 */
export const core = {}
"""

MEMBER_SOURCE = """
/**
 * @memberof module:Lib.Core
 * @type {function} greet
 * @summary Greets someone.
 * @param {string} name - the name
 */
export function greet(name) {}
"""


def block(*lines: str) -> str:
    """Build a /** ... */ block from tag lines."""
    body = "\n".join(f" * {line}" for line in lines)
    return f"/**\n{body}\n */"


def walk(nodes):
    """Yield every element node in a forest, depth first."""
    for node in nodes:
        yield node
        yield from walk(node.children or [])
