"""File tree models.

A scanned repository is described as an ordered sequence of root ``FileNode``
entries. Paths are relative, ``/``-separated and unique across the tree; a
node's parent path is its own path up to the last ``/``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field, model_validator

from utils import parent_path

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

NodeType = Literal["file", "dir"]


class TreeError(ValueError):
    """Raised when a file tree breaks its structural contract."""


class FileNode(BaseModel):
    """A single file or directory produced by the tree scanner."""

    name: str
    path: str = Field(description="Relative, forward-slash separated, unique path")
    type: NodeType
    children: list[FileNode] = Field(default_factory=list)

    @model_validator(mode="after")
    def _files_have_no_children(self) -> FileNode:
        if self.type == "file" and self.children:
            msg = f"file node {self.path!r} cannot have children"
            raise ValueError(msg)
        return self


def iter_tree(
    tree: Sequence[FileNode],
) -> Iterator[tuple[FileNode, str | None]]:
    """Yield ``(node, parent_path)`` pairs depth-first in scanner order.

    Uses an explicit stack so that deeply nested trees do not hit the
    interpreter recursion limit.
    """
    stack: list[tuple[FileNode, str | None]] = [
        (node, None) for node in reversed(tree)
    ]
    while stack:
        node, parent = stack.pop()
        yield node, parent
        stack.extend((child, node.path) for child in reversed(node.children))


def _check_relative(path: str) -> None:
    if path.startswith("/") or "\\" in path:
        msg = f"path must be relative and /-separated: {path!r}"
        raise TreeError(msg)
    if any(part in {"", ".", ".."} for part in path.split("/")):
        msg = f"path has an empty or dot segment: {path!r}"
        raise TreeError(msg)


def validate_tree(tree: Sequence[FileNode] | None) -> None:
    """Check path uniqueness and ancestry encoding for a whole tree.

    Raises:
        TreeError: If the tree is None, a path is absolute or has an empty
            or dot segment, a path repeats, or a child path does not
            extend its parent's path.
    """
    if tree is None:
        msg = "file tree is required"
        raise TreeError(msg)

    seen: set[str] = set()
    for node, parent in iter_tree(tree):
        _check_relative(node.path)
        if node.path in seen:
            msg = f"duplicate path in file tree: {node.path!r}"
            raise TreeError(msg)
        seen.add(node.path)

        if parent is not None and parent_path(node.path) != parent:
            msg = f"path {node.path!r} is not a child of {parent!r}"
            raise TreeError(msg)


__all__ = ["FileNode", "NodeType", "TreeError", "iter_tree", "validate_tree"]
