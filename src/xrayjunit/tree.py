"""Lookup helpers for Postman collection trees.

Nodes may be raw JSON mappings (``{"item": [...]}``), SDK-like objects whose
children live in ``items.members``, or the dataclasses in
:mod:`xrayjunit.models`. All of them are read through :func:`get_field`.
"""

from collections.abc import Mapping
from typing import Any


def get_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping key or an attribute, whichever exists."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        value = obj.get(name, default)
    else:
        value = getattr(obj, name, default)
    return default if value is None else value


def get_members(container: Any) -> list[Any]:
    """Return the entries of a plain list or of a ``members`` container."""
    if container is None:
        return []
    if isinstance(container, (list, tuple)):
        return list(container)
    members = get_field(container, "members")
    if isinstance(members, (list, tuple)):
        return list(members)
    return []


def get_children(node: Any) -> list[Any]:
    """Return the child nodes of a collection, folder or item."""
    children = get_field(node, "item")
    if isinstance(children, (list, tuple)) and children:
        return list(children)
    return get_members(get_field(node, "items"))


def find_item_by_id(root: Any, item_id: str | None) -> Any:
    """Find a node by id, depth-first, children in array order.

    Args:
        root: Collection, folder or item to search from.
        item_id: Identifier to look for.

    Returns:
        The first matching node, or None if the tree holds no such id.
    """
    if not root or item_id is None:
        return None

    stack = [root]
    while stack:
        node = stack.pop()
        if get_field(node, "id") == item_id:
            return node
        # Reverse so the first child is visited first.
        stack.extend(reversed(get_children(node)))
    return None
