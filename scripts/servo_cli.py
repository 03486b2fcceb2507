#!/usr/bin/env python3
"""
Servo CLI — Apply a channel configuration to a Pololu Maestro.

Reads a YAML config file, applies each channel's range, speed,
acceleration and home target, and optionally reports positions or sweeps
each configured servo through its range.  Every channel is parked and
the port closed on exit.

Usage:
    python scripts/servo_cli.py                            # apply default config
    python scripts/servo_cli.py --config path/to/cfg.yaml  # custom config
    python scripts/servo_cli.py --port /dev/ttyACM0        # override port
    python scripts/servo_cli.py --status                   # positions + error word
    python scripts/servo_cli.py --sweep                    # min → max → home per channel
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from maestro_uart import MaestroError, MaestroUART
from maestro_uart.servo_config import ApplyReport, ServoConfig, apply_all, load_config

# ---------------------------------------------------------------------------
# Default config location (relative to this script)
# ---------------------------------------------------------------------------

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "config" / "servo_config.yaml"
SWEEP_PAUSE_S = 1.0

# ---------------------------------------------------------------------------
# Terminal helpers
# ---------------------------------------------------------------------------


class C:
    """ANSI color codes (no-op on non-TTY)."""

    if sys.stdout.isatty():
        BOLD = "\033[1m"
        DIM = "\033[2m"
        GREEN = "\033[32m"
        YELLOW = "\033[33m"
        RED = "\033[31m"
        RESET = "\033[0m"
    else:
        BOLD = DIM = GREEN = YELLOW = RED = RESET = ""


def ok(text: str) -> None:
    print(f"  {C.GREEN}✓{C.RESET} {text}")


def fail(text: str) -> None:
    print(f"  {C.RED}✗{C.RESET} {text}")


def warn(text: str) -> None:
    print(f"  {C.YELLOW}⚠{C.RESET} {text}")


def info(text: str) -> None:
    print(f"  {C.DIM}{text}{C.RESET}")


def banner(text: str) -> None:
    print(f"\n{C.BOLD}{'═' * 60}")
    print(f"  {text}")
    print(f"{'═' * 60}{C.RESET}")


# ---------------------------------------------------------------------------
# Report display
# ---------------------------------------------------------------------------


def print_report(report: ApplyReport, heading: str) -> None:
    """Print a formatted report of channel results."""
    banner(heading)
    for r in report.results:
        if r.success:
            ok(r.message)
        else:
            fail(r.message)
    print()
    status = f"{C.GREEN}ALL OK{C.RESET}" if report.all_ok else f"{C.RED}FAILURES DETECTED{C.RESET}"
    print(f"  {report.summary}  —  {status}")


def print_config_summary(config: ServoConfig) -> None:
    """Print a summary of the loaded config."""
    timeout = "none" if config.timeout is None else f"{config.timeout}s"
    print(f"  Port:    {config.port} @ {config.baudrate} baud (timeout {timeout})")
    print("  Channels:")
    for ch in config.channels:
        home = "-" if ch.home is None else str(ch.home)
        print(
            f"    CH{ch.channel:<2d} {ch.name:12s} range ({ch.min_position:5d}, {ch.max_position:5d})"
            f"  speed {ch.speed:3d}  accel {ch.acceleration:3d}  home {home}"
        )


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


def print_status(maestro: MaestroUART, config: ServoConfig) -> bool:
    """Print each configured channel's position and the error word."""
    banner("Device Status")
    healthy = True
    for ch in config.channels:
        if ch.channel >= len(maestro.channels):
            continue
        try:
            position = maestro.channels[ch.channel].get_position()
            print(f"  CH{ch.channel:<2d} {ch.name:12s} position = {position}")
        except MaestroError as exc:
            fail(f"CH{ch.channel}: query failed — {exc}")
            healthy = False

    try:
        error = maestro.get_error()
    except MaestroError as exc:
        fail(f"Error query failed — {exc}")
        return False
    if error:
        warn(f"Device error word: 0x{error & 0xFFFF:04X}")
        healthy = False
    else:
        ok("No device errors")
    return healthy


def sweep(maestro: MaestroUART, config: ServoConfig) -> None:
    """Drive each configured channel to min, max, then home."""
    banner("Sweep")
    for ch in config.channels:
        if ch.channel >= len(maestro.channels):
            continue
        channel = maestro.channels[ch.channel]
        stops = [ch.min_position, ch.max_position, ch.home]
        for target in (t for t in stops if t):
            channel.set_target(target)
            info(f"CH{ch.channel} → {channel.get_target()}")
            time.sleep(SWEEP_PAUSE_S)


def run(config: ServoConfig, status: bool, do_sweep: bool) -> int:
    """Apply *config* and run the requested actions. Returns exit code."""
    banner("Maestro Servo Configuration")
    print_config_summary(config)

    print()
    try:
        maestro = MaestroUART(config.port, baudrate=config.baudrate, timeout=config.timeout)
    except MaestroError as exc:
        fail(f"Cannot connect: {exc}")
        return 1
    ok(f"Connected to {config.port}")

    exit_code = 0
    aborted = False
    try:
        with maestro:
            report = apply_all(maestro, config)
            print_report(report, "Apply Results")
            if not report.all_ok:
                exit_code = 1

            if do_sweep:
                sweep(maestro, config)
            if status and not print_status(maestro, config):
                exit_code = 1
    except KeyboardInterrupt:
        print(f"\n\n  {C.YELLOW}Interrupted!{C.RESET}")
    except MaestroError as exc:
        fail(f"Aborted: {exc}")
        exit_code = 1
        aborted = True

    if not aborted and not maestro.is_open:
        info("All channels parked. Disconnected.")
    return exit_code


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Apply servo channel settings to a Pololu Maestro from a YAML config.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Path to YAML config file (default: {DEFAULT_CONFIG.name})",
    )
    parser.add_argument("--port", help="Override the serial port from the config")
    parser.add_argument(
        "--status",
        action="store_true",
        help="Print channel positions and the device error word after applying",
    )
    parser.add_argument(
        "--sweep",
        action="store_true",
        help="Move each configured channel to min, max and home",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log serial traffic")
    return parser


def main() -> int:
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except (FileNotFoundError, MaestroError) as exc:
        print(f"{C.RED}✗{C.RESET} Config error: {exc}", file=sys.stderr)
        return 1

    if args.port:
        config = replace(config, port=args.port)

    return run(config, status=args.status, do_sweep=args.sweep)


if __name__ == "__main__":
    sys.exit(main())
