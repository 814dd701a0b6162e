#!/usr/bin/env python3
"""
Scanner station console.

Reads one scan per line from stdin (a barcode scanner in keyboard mode
types the serial and a newline) and applies it in the current mode.

Commands:
    :mode <receive|issue>   switch scan mode
    :recipient <name>       set the recipient for issues
    :undo <serial>          undo the last movement of a material
    :find <text>            list materials matching text
    :quit                   exit

Usage:
    python3 scripts/scan_console.py --mode issue --recipient "Meier"
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TextIO

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from materials_config import get_active_config  # noqa: E402
from materials_config.bridges import build_materials_service  # noqa: E402
from materials_kernel.domain.results import OperationResult, ScanMode  # noqa: E402
from materials_kernel.exceptions import (  # noqa: E402
    AuditLogError,
    MaterialError,
    MaterialsKernelError,
    PersistenceError,
    ScanError,
)
from materials_kernel.logging_config import get_logger  # noqa: E402
from materials_kernel.services.materials_service import MaterialsService  # noqa: E402

logger = get_logger("scripts.scan_console")


@dataclass
class StationState:
    """Mode and recipient currently selected at the station."""

    mode: ScanMode = ScanMode.RECEIVE
    recipient: str = ""


def _describe(result: OperationResult) -> str:
    if result.success:
        name = result.display_name or "(unnamed)"
        return f"OK  {name}  {result.message}".rstrip()
    return f"!!  {result.message}"


def handle_line(service: MaterialsService, state: StationState, line: str) -> str | None:
    """Apply one input line; returns the text to print, or None to quit."""
    line = line.strip()
    if not line:
        return ""
    if not line.startswith(":"):
        return _describe(service.process_scan(line, state.mode, state.recipient))

    command, _, argument = line[1:].partition(" ")
    argument = argument.strip()
    if command == "quit":
        return None
    if command == "mode":
        state.mode = ScanMode.parse(argument)
        return f"mode: {state.mode.value}"
    if command == "recipient":
        state.recipient = argument
        return f"recipient: {argument or '(none)'}"
    if command == "undo":
        return _describe(service.undo_by_serial(argument))
    if command == "find":
        rows = service.filtered_view(argument, active=True)
        return "\n".join(
            f"{m.serial_number or '-':<20} {m.designation or '-':<30} {m.position or '-'}"
            for m in rows
        ) or "(no matches)"
    return f"unknown command: {command}"


def run(service: MaterialsService, state: StationState, stdin: TextIO, stdout: TextIO) -> int:
    for raw in stdin:
        try:
            output = handle_line(service, state, raw)
        except ScanError as exc:
            # operator typo, e.g. an unknown mode label
            output = f"!!  {exc}"
        except (MaterialError, AuditLogError, PersistenceError) as exc:
            logger.error("console_command_failed", extra={"line": raw.strip()}, exc_info=True)
            output = f"!!  [{exc.code}] {exc}"
        if output is None:
            break
        if output:
            print(output, file=stdout, flush=True)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Scanner station console")
    parser.add_argument("--config", type=Path, default=None, help="settings YAML file")
    parser.add_argument("--database-url", default=None, help="override database_url")
    parser.add_argument("--mode", default="receive", help="initial scan mode")
    parser.add_argument("--recipient", default="", help="initial recipient name")
    args = parser.parse_args(argv)

    try:
        settings = get_active_config(args.config)
        if args.database_url:
            settings = replace(settings, database_url=args.database_url)
        service = build_materials_service(settings)
        state = StationState(ScanMode.parse(args.mode), args.recipient)
    except MaterialsKernelError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    return run(service, state, sys.stdin, sys.stdout)


if __name__ == "__main__":
    sys.exit(main())
