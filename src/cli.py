"""Command-line interface for repograph."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from artifacts.write import generate_all_artifacts, scan_config_for
from context.serializer import serialize_graph
from contract.validation import validate_artifacts
from graph.assemble import assemble_sync
from rules.config import ConfigError, load_config
from scan.files import scan_file_tree
from verify.verify import verify_determinism


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Repository root (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="repograph")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser("generate", help="Generate artifacts")
    _add_common_paths(generate_parser)
    generate_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for generated artifacts (default: config output dir)",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate artifacts")
    _add_common_paths(validate_parser)
    validate_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Verify determinism of artifacts"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    context_parser = subparsers.add_parser(
        "context", help="Print the graph as annotated text for chat context"
    )
    _add_common_paths(context_parser)
    context_parser.add_argument(
        "--max-nodes",
        type=int,
        default=None,
        help="Truncate after this many nodes (default: config context.max_nodes)",
    )
    context_parser.add_argument(
        "--with-deps",
        action="store_true",
        help="Merge relative-import edges before computing coupling",
    )

    return parser


def _resolve_output_dir(out_dir: str | None) -> Path | None:
    if out_dir is None:
        return None
    return Path(out_dir).expanduser().resolve()


def _resolve_artifacts_dir(root: Path, artifacts_dir: str | None) -> Path:
    if artifacts_dir is None:
        config = load_config(root)
        return (root / config.output_dir).resolve()
    return Path(artifacts_dir).expanduser().resolve()


def _handle_generate(root: Path, out_dir: str | None) -> int:
    generate_all_artifacts(root=root, out_dir=_resolve_output_dir(out_dir))
    return 0


def _handle_validate(root: Path, artifacts_dir: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    result = validate_artifacts(resolved_artifacts_dir)
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _handle_verify(root: Path, artifacts_dir: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    try:
        result = verify_determinism(root=root, artifacts_dir=resolved_artifacts_dir)
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"artifacts-dir: {resolved_artifacts_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return 1
    return 0


def _handle_context(root: Path, max_nodes: int | None, with_deps: bool) -> int:
    config = load_config(root)
    tree = scan_file_tree(root, config=scan_config_for(root, config))
    graph = assemble_sync(
        root,
        tree,
        config.guardrails,
        include_dependencies=with_deps or config.include_dependencies,
        config=config,
    )
    limit = max_nodes if max_nodes is not None else config.context.max_nodes
    sys.stdout.write(serialize_graph(graph, max_nodes=limit))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "generate":
            return _handle_generate(root, args.out_dir)

        if args.command == "validate":
            return _handle_validate(root, args.artifacts_dir)

        if args.command == "verify":
            return _handle_verify(root, args.artifacts_dir)

        if args.command == "context":
            return _handle_context(root, args.max_nodes, args.with_deps)
    except ConfigError as exc:
        sys.stderr.write(f"config error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
