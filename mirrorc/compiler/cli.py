"""CLI entry point and argument parsing."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from mirrorc.internals.version import print_banner


def print_mirror(identity: str) -> int:
    """Describe a foreign type by identity.

    Returns:
        0 on success, 2 when the type cannot be described.
    """
    from mirrorc.mirror import ShapeDiscoveryError, mirror_of

    try:
        metadata = mirror_of(identity)
    except ShapeDiscoveryError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    print(f"Type: {metadata.identity}")
    print(f"Arity: {metadata.arity}")
    for label, ty in zip(metadata.labels, metadata.types):
        print(f"  {label}: {ty}")
    return 0


def describe_unit(unit) -> None:
    print(f"Unit: {unit.name}")
    if unit.mirrors:
        print(f"Types ({len(unit.mirrors)}):")
        for name, metadata in unit.mirrors.items():
            kind = "struct" if name in unit.records else "foreign"
            print(f"  {kind} {name} = {metadata.describe()}")
    if unit.destructures:
        print(f"Let sites ({len(unit.destructures)}):")
        for name, site in unit.destructures.items():
            print(f"  let {name} = {site.pattern}")
    if unit.cases:
        print(f"Match sites ({len(unit.cases)}):")
        for name, case in unit.cases.items():
            print(f"  match {name}:")
            for arm in case.arms:
                print(f"    {arm.pattern} -> {arm.label}")


def main(argv: list[str] | None = None) -> int:
    """Main compiler entry point."""
    ap = argparse.ArgumentParser(prog="mirrorc", description="Structural product type compiler")

    ap.add_argument("source", nargs='?', help="Path to source file (.mrc)")
    ap.add_argument("--version", action="store_true", help="Show version and exit")
    ap.add_argument("--dump-parse", action="store_true", help="Print raw Lark tree")
    ap.add_argument("--dump-ast", action="store_true", help="Print AST")
    ap.add_argument("--describe", action="store_true",
                    help="Print the descriptors and pattern sites of the compiled unit")
    ap.add_argument("--mirror", metavar="IDENTITY",
                    help="Describe a Python class given as 'module:Qual.Name' and exit")
    ap.add_argument("--no-color", action="store_true", help="Disable colored diagnostics")
    ap.add_argument("-v", "--verbose", action="count", default=0,
                    help="Log progress to stderr (-vv for debug output)")
    args = ap.parse_args(argv)

    from mirrorc.internals.config import get_log_level
    from mirrorc.internals.logging import configure_logging, verbosity_to_level
    configure_logging(verbosity_to_level(args.verbose, get_log_level()))

    if args.version:
        print_banner()
        return 0

    if args.mirror:
        return print_mirror(args.mirror)

    if not args.source:
        print("error: source file required (unless using --mirror)", file=sys.stderr)
        return 2

    from mirrorc.compiler.pipeline import compile_program, resolve_source_path
    from mirrorc.internals.parse_errors import handle_parse_exception
    from mirrorc.internals.parser import parse_to_ast
    from mirrorc.internals.report import Reporter

    src_path: Path = resolve_source_path(args.source)

    try:
        src = src_path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"error: cannot read {src_path}: {e}", file=sys.stderr)
        return 2

    reporter = Reporter(source=src, filename=str(src_path))
    use_color = False if args.no_color else None

    try:
        ast, tree = parse_to_ast(src, unit_name=src_path.stem)
    except Exception as exc:
        if handle_parse_exception(exc, reporter):
            reporter.print(use_color=use_color)
            return 2
        raise

    if args.dump_parse:
        print(tree.pretty())
    if args.dump_ast:
        print(ast)
        print()

    unit = compile_program(ast, reporter)
    reporter.print(use_color=use_color)
    if unit is None:
        return 2

    if args.describe:
        describe_unit(unit)
    return 1 if reporter.has_warnings else 0


if __name__ == "__main__":
    raise SystemExit(main())
