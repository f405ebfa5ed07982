"""Canonical file tree model for scanned repositories."""

from tree.models import FileNode, NodeType, TreeError, iter_tree, validate_tree

__all__ = ["FileNode", "NodeType", "TreeError", "iter_tree", "validate_tree"]
