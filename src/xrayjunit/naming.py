"""Qualified names for items in a collection tree."""

from typing import Any

SEPARATOR = "->"

_MISSING = object()


def get_parent_name(node: Any, separator: str | None = None) -> str | None:
    """Resolve the folder path that contains ``node``.

    Ancestors are joined root-first, each contributing its name or, failing
    that, its id. The collection itself (the ancestor without a parent) is not
    part of the path.

    Args:
        node: Item or folder exposing a ``parent`` attribute.
        separator: Token placed between path entries. Defaults to ``->``.

    Returns:
        The joined path, ``""`` for a top-level item, or None when the node is
        empty or does not support parent traversal.
    """
    if not node:
        return None
    parent = getattr(node, "parent", _MISSING)
    if parent is _MISSING:
        return None

    chain: list[str] = []
    while parent is not None:
        grandparent = getattr(parent, "parent", None)
        if grandparent is None:
            break
        label = getattr(parent, "name", None) or getattr(parent, "id", None)
        chain.append(str(label) if label is not None else "")
        parent = grandparent

    chain.reverse()
    return (separator if isinstance(separator, str) else SEPARATOR).join(chain)
