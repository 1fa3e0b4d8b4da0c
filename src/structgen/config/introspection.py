"""Inspect the effective configuration from the command line."""

import argparse
import json
import sys
from typing import Any

from structgen.core.exceptions import ConfigurationError

from .api import resolve_config
from .audit import generate_telemetry_summary
from .file_loader import ConfigFileError
from .providers import build_provider_config
from .types import ResolvedConfig

# ruff: noqa: T201


def get_config_info(*, profile: str | None = None) -> dict[str, Any]:
    """Structured configuration summary, safe to print or serialize."""
    try:
        resolved = resolve_config(profile=profile)
    except (ValueError, ConfigFileError) as e:
        return {
            "status": "invalid",
            "error": str(e),
            "config": None,
            "sources": {},
            "warnings": [],
        }

    config = resolved._asdict()
    config.pop("origin")
    config["api_key"] = "[SET]" if resolved.api_key else "[NOT SET]"
    return {
        "status": "valid",
        "config": config,
        "sources": dict(resolved.origin),
        "origin_counts": generate_telemetry_summary(resolved.origin),
        "warnings": get_config_warnings(resolved),
    }


def get_config_warnings(resolved: ResolvedConfig) -> list[str]:
    """Non-fatal problems that will surface at call time."""
    try:
        build_provider_config(resolved.to_frozen())
    except ConfigurationError as e:
        return [str(e)]
    return []


def print_config_debug(*, profile: str | None = None, show_sources: bool = True) -> int:
    """Print the effective configuration; return a process exit code."""
    try:
        resolved = resolve_config(profile=profile)
    except (ValueError, ConfigFileError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    print("=== Effective Configuration ===")
    print(resolved.audit() if show_sources else repr(resolved.to_frozen()))

    warnings = get_config_warnings(resolved)
    if warnings:
        print("\n=== Warnings ===")
        for warning in warnings:
            print(f"  - {warning}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for configuration introspection."""
    parser = argparse.ArgumentParser(
        description="Inspect structgen configuration",
        prog="python -m structgen.config",
    )
    parser.add_argument("--profile", help="Configuration profile to use")
    parser.add_argument(
        "--no-sources", action="store_true", help="Hide where each value came from"
    )
    parser.add_argument("--json", action="store_true", help="Emit JSON")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit 0 when configuration is usable for a call, 1 otherwise",
    )
    args = parser.parse_args(argv)

    if args.check:
        info = get_config_info(profile=args.profile)
        return 0 if info["status"] == "valid" and not info["warnings"] else 1

    if args.json:
        print(json.dumps(get_config_info(profile=args.profile), indent=2))
        return 0

    return print_config_debug(profile=args.profile, show_sources=not args.no_sources)
