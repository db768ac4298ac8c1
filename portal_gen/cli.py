# portal_gen/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .backends.registry import BACKENDS, RenderConfig, get_backend
from .constants import BACKEND_DEFAULT, MODULE_NAME_DEFAULT, PORTAL_NAME_DEFAULT
from .io import build_diagram, load_document
from .purescript_fmt import assert_ps_ident, assert_ps_module_name
from .validate import validate_document
from .writer import write_source, write_stream


def _module_name(value: str) -> str:
    try:
        return assert_ps_module_name(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _portal_name(value: str) -> str:
    try:
        return assert_ps_ident(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portal-gen",
        description="Generate a permission-gated portal from a YAML use case diagram.",
    )
    parser.add_argument(
        "--model",
        type=Path,
        action="append",
        required=True,
        help=(
            "Path to a YAML use case diagram. Repeat to merge several files "
            "(lists concatenate in the given order)."
        ),
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output file for the generated module (default: stdout)",
    )
    parser.add_argument(
        "--module-name",
        type=_module_name,
        default=MODULE_NAME_DEFAULT,
        help="Name of the generated module",
    )
    parser.add_argument(
        "--portal-name",
        type=_portal_name,
        default=PORTAL_NAME_DEFAULT,
        help="Name of the generated portal value",
    )
    parser.add_argument(
        "--backend",
        type=str,
        choices=tuple(spec.backend_id for spec in BACKENDS),
        default=BACKEND_DEFAULT,
        help="Target language backend",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help=(
            "Fail generation on validation warnings (e.g., duplicate associations, "
            "repeated titles). Errors always fail."
        ),
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entrypoint."""
    args = _build_parser().parse_args(argv)

    try:
        document = load_document(*args.model)
    except (OSError, TypeError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(2)

    errors, warnings = validate_document(document)
    for warning in warnings:
        print(f"warning: {warning}", file=sys.stderr)

    if errors or (args.strict and warnings):
        for error in errors:
            print(f"error: {error}", file=sys.stderr)
        raise SystemExit(2)

    diagram = build_diagram(document).diagram
    backend = get_backend(args.backend)
    cfg = RenderConfig(module_name=args.module_name, portal_name=args.portal_name)

    try:
        if args.out is None:
            write_stream(sys.stdout, backend, diagram, cfg)
        else:
            write_source(args.out, backend, diagram, cfg)
    except OSError as e:
        print(f"error: failed to write generated source: {e}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
