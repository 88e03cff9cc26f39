"""Nested error tree built from parsed property paths."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Union

ROOT_KEY = "_root"


@dataclass
class Leaf:
    """Messages attached to the terminal segment of a path."""

    messages: list[str] = field(default_factory=list)


@dataclass
class Branch:
    """One nesting level keyed by segment.

    ``messages`` holds errors targeting this node itself while deeper errors
    live under ``children``. It is rendered under the ``_root`` key.
    """

    children: dict[str, ErrorNode] = field(default_factory=dict)
    messages: list[str] = field(default_factory=list)


ErrorNode = Union[Leaf, Branch]


def insert_message(tree: Branch, segments: Sequence[str], message: str) -> None:
    """Add ``message`` at ``segments`` below ``tree``, mutating it in place.

    A leaf reached on the way down is promoted to a branch that keeps its
    messages, and a branch reached at the terminal segment collects the
    message as its own. Neither arrival order loses data.
    """
    if not segments:
        tree.messages.append(message)
        return

    node = tree
    for segment in segments[:-1]:
        child = node.children.get(segment)
        if child is None:
            child = Branch()
            node.children[segment] = child
        elif isinstance(child, Leaf):
            child = Branch(messages=child.messages)
            node.children[segment] = child
        node = child

    terminal = segments[-1]
    # `a._root` addresses the same slot that renders as `a: {_root: [...]}`.
    if terminal == ROOT_KEY:
        node.messages.append(message)
        return

    existing = node.children.get(terminal)
    if existing is None:
        node.children[terminal] = Leaf(messages=[message])
    else:
        # Leaf or branch: both keep direct messages in arrival order.
        existing.messages.append(message)


def build_error_tree(entries: Iterable[tuple[Sequence[str], str]]) -> Branch:
    """Fold ``(segments, message)`` pairs into a fresh tree."""
    tree = Branch()
    for segments, message in entries:
        insert_message(tree, segments, message)
    return tree


def render_error_tree(node: ErrorNode) -> Any:
    """Render a node as plain lists and dicts."""
    if isinstance(node, Leaf):
        return list(node.messages)

    rendered: dict[str, Any] = {}
    if node.messages:
        rendered[ROOT_KEY] = list(node.messages)

    for segment, child in node.children.items():
        value = render_error_tree(child)
        if segment == ROOT_KEY and ROOT_KEY in rendered:
            # A real `_root` object segment next to direct messages; fold them together.
            own = rendered.pop(ROOT_KEY)
            value = {ROOT_KEY: own + value.pop(ROOT_KEY, []), **value}
        rendered[segment] = value
    return rendered
