from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from deprecation_gate import dates, gate
from deprecation_gate.config import GateSettings, load_config, resolve_config_path
from deprecation_gate.errors import DeprecationGateError

PREFIX = "[deprecation-gate]"
DEBUG_ENV = "DEPRECATION_GATE_DEBUG"
_TRUTHY = ("1", "true", "yes", "on", "debug")


def _show_tracebacks() -> bool:
    return os.environ.get(DEBUG_ENV, "").strip().lower() in _TRUTHY


def _single_line(exc: BaseException) -> str:
    lines = [line.strip() for line in str(exc).splitlines()]
    return " ".join(line for line in lines if line) or type(exc).__name__


def excepthook(exc_type: type[BaseException], exc: BaseException, tb) -> None:
    """Print an uncaught gate error as one ERROR line; defer everything else."""
    if issubclass(exc_type, DeprecationGateError) and not _show_tracebacks():
        print(f"{PREFIX} ERROR: {_single_line(exc)}", file=sys.stderr)
        return
    sys.__excepthook__(exc_type, exc, tb)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="deprecation-gate",
        description="Check deprecated classes, methods and fields against the expected list.",
    )
    parser.add_argument(
        "--config",
        help="Path to deprecations.json (defaults to $DEPRECATION_GATE_CONFIG or config/deprecations.json).",
    )
    parser.add_argument(
        "--classes",
        action="append",
        default=[],
        help="Class directory, .class file or jar to scan (repeatable).",
    )
    parser.add_argument("--now", help="Reference date YYYY-MM-DD (defaults to today).")
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print every deprecated entity found and exit.",
    )
    return parser.parse_args(argv)


def _load_settings(args: argparse.Namespace) -> GateSettings:
    config_path = resolve_config_path(args.config)
    # listing works without a registry
    if args.list and not args.config and not config_path.exists():
        return GateSettings()
    return load_config(config_path)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = _load_settings(args)
        now = dates.parse_date(args.now) if args.now else None
    except DeprecationGateError as exc:
        print(f"{PREFIX} ERROR: {exc}", file=sys.stderr)
        return 2
    extra = [Path(raw).expanduser() for raw in args.classes]

    if args.list:
        result = gate.list_deprecations(settings, extra_classes=extra)
        if not result.ok:
            print(f"{PREFIX} ERROR: {result.output}", file=sys.stderr)
        elif result.output:
            print(result.output)
        return result.returncode

    result = gate.run_deprecation_gate(settings, now=now, extra_classes=extra)
    if result.ok:
        print(f"{PREFIX} {result.output}")
    elif result.returncode == 1:
        print(f"{PREFIX} BLOCK: {result.output}", file=sys.stderr)
    else:
        print(f"{PREFIX} ERROR: {result.output}", file=sys.stderr)
    return result.returncode


def run() -> int:
    sys.excepthook = excepthook
    return main()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(run())
