"""Source parsing helpers for repograph."""

from parse.imports import extract_import_specifiers, resolve_import

__all__ = ["extract_import_specifiers", "resolve_import"]
