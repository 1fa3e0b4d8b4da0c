"""Run a single operation from the command line."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
import sys
from typing import Any

from structgen.config import ConfigFileError, resolve_config
from structgen.core.exceptions import StructGenError
from structgen.executor import OperationExecutor
from structgen.operations import OPERATIONS, list_operations

# ruff: noqa: T201


def parse_inputs(pairs: list[str]) -> dict[str, Any]:
    """Parse ``key=value`` pairs.

    ``key=@path`` reads the value from a file; JSON arrays and objects are
    decoded.

    Raises:
        ValueError: On a pair without ``=`` or an unreadable file.
    """
    inputs: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {pair!r}")
        if value.startswith("@"):
            try:
                inputs[key] = Path(value[1:]).read_text(encoding="utf-8")
            except OSError as e:
                raise ValueError(f"Cannot read {key} from {value[1:]}: {e}") from e
            continue
        if value.lstrip().startswith(("[", "{")):
            try:
                inputs[key] = json.loads(value)
                continue
            except json.JSONDecodeError:
                pass  # Keep the raw text
        inputs[key] = value
    return inputs


def _describe_operations() -> str:
    lines = []
    for name in list_operations():
        op = OPERATIONS[name]
        optional = [f"[{k}]" for k in op.optional_inputs]
        lines.append(f"  {name:<20} {' '.join([*op.required_inputs, *optional])}")
        if op.description:
            lines.append(f"  {'':<20} {op.description}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="python -m structgen",
        description="Run a structured-generation operation and print its JSON result",
        epilog="operations:\n" + _describe_operations(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("operation", choices=list_operations(), metavar="operation")
    parser.add_argument("inputs", nargs="*", metavar="key=value")
    parser.add_argument("--profile", help="Configuration profile to use")
    parser.add_argument("--provider", help="Override the configured provider")
    parser.add_argument("--model", help="Override the configured model")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        inputs = parse_inputs(args.inputs)
    except ValueError as e:
        parser.error(str(e))

    overrides = {
        k: v for k, v in (("provider", args.provider), ("model", args.model)) if v
    }
    try:
        config = resolve_config(overrides or None, profile=args.profile).to_frozen()
        result = asyncio.run(OperationExecutor(config).execute(args.operation, inputs))
    except (StructGenError, ConfigFileError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if result.degraded:
        print(
            f"warning: degraded result, defaults used for: {', '.join(result.failed_stages)}",
            file=sys.stderr,
        )
    print(json.dumps(result.data, ensure_ascii=False, indent=2))
    return 0
