#!/usr/bin/env python3
"""
waitfor CLI — block until files, hosts, URLs or timers say go.

Usage:
    waitfor -e build/done.flag                    Wait for a file to appear
    waitfor --quiet-for data.json:10s -i 1s       Wait until data.json stops changing
    waitfor -t db:5432 --timeout 2m               Wait for a port, give up after 2 minutes
    waitfor --any -g 200,http://svc/health -e x   Either condition is enough

Condition flags can be repeated and are combined in the order given: AND by
default, OR with --any. Left operands are always checked first.
"""

import argparse
import sys
from typing import List, Optional, Tuple

from rich.console import Console

from waitfor import __version__
from waitfor.conditions import (
    Condition,
    Elapsed,
    Exists,
    FileSize,
    HttpGet,
    TcpHost,
    Update,
    UpdateSince,
    both,
    either,
)
from waitfor.core.config import WaitforConfig
from waitfor.core.driver import wait
from waitfor.core.events import CONDITION_MET, POLL_ATTEMPT, EventBus
from waitfor.core.logs import setup_logging
from waitfor.formats import as_seconds, parse_duration, parse_http_get, validate_tcp

console = Console(stderr=True)

EXIT_OK = 0
EXIT_INTERRUPTED = 130


class _ConditionAction(argparse.Action):
    """Collect condition flags in command-line order as (kind, value) pairs."""

    def __call__(self, parser, namespace, values, option_string=None):
        items = list(getattr(namespace, self.dest, None) or [])
        items.append((self.const, values))
        setattr(namespace, self.dest, items)


# ─── Building conditions ─────────────────────────────────────────

def _duration(text: str) -> float:
    d = parse_duration(text)
    if d is None:
        raise ValueError(f"invalid duration '{text}' (expected e.g. 90, 10s, 3h10m)")
    return as_seconds(d)


def _path_and_duration(text: str) -> Tuple[str, float]:
    path, sep, dur = text.rpartition(":")
    if not sep or not path:
        raise ValueError(f"expected PATH:DURATION, got '{text}'")
    return path, _duration(dur)


def _tcp_host(text: str) -> str:
    if not validate_tcp(text):
        raise ValueError(f"invalid host '{text}' (expected host:port)")
    return text


def build_condition(kind: str, value: str, config: WaitforConfig) -> Condition:
    """Turn one CLI flag into a primitive condition. Raises ValueError on bad input."""
    if kind == "exists":
        return Exists(value)
    if kind == "not_exists":
        return Exists(value).negate()
    if kind == "updated":
        return Update(value)
    if kind == "not_updated":
        return Update(value).negate()
    if kind == "updated_within":
        path, trigger = _path_and_duration(value)
        return UpdateSince(path, trigger)
    if kind == "quiet_for":
        path, trigger = _path_and_duration(value)
        return UpdateSince(path, trigger).negate()
    if kind == "size_changed":
        return FileSize(value)
    if kind == "size_stable":
        return FileSize(value).negate()
    if kind in ("tcp", "no_tcp"):
        cond = TcpHost(_tcp_host(value), timeout=config.tcp.connect_timeout_seconds)
        return cond.negate() if kind == "no_tcp" else cond
    if kind in ("http", "not_http"):
        status, url = parse_http_get(value)
        cond = HttpGet(url, status, timeout=config.http.timeout_seconds)
        return cond.negate() if kind == "not_http" else cond
    if kind == "elapsed":
        return Elapsed.after(_duration(value))
    raise ValueError(f"unknown condition kind '{kind}'")


def build_tree(
    specs: List[Tuple[str, str]],
    config: WaitforConfig,
    any_of: bool = False,
    timeout: Optional[float] = None,
):
    """Fold the flags left to right into one evaluable node.

    A timeout is OR-ed onto the whole thing so the wait is bounded.
    Returns None when nothing was requested.
    """
    combine = either if any_of else both
    node = None
    for kind, value in specs:
        cond = build_condition(kind, value, config)
        node = cond if node is None else combine(node, cond)

    if timeout is not None:
        deadline = Elapsed.after(timeout)
        node = deadline if node is None else either(node, deadline)
    return node


def _show_progress(bus: EventBus):
    def on_attempt(attempt: int, met: bool, elapsed: float):
        status = "[green]met[/]" if met else "[yellow]waiting[/]"
        console.print(f"[dim]#{attempt}[/] {status} [dim]({elapsed * 1000:.0f} ms)[/]")

    def on_met(attempt: int):
        console.print(f"✅ [bold green]done[/] after {attempt} check(s)")

    bus.on(POLL_ATTEMPT, on_attempt)
    bus.on(CONDITION_MET, on_met)


# ─── Main ────────────────────────────────────────────────────────

def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="waitfor",
        description="⏳ waitfor — block until a condition is met",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Durations: digits with d/h/m/s units, e.g. 90, 10s, 1h30m.",
    )

    def cond(*flags, kind: str, metavar: str, help: str):
        parser.add_argument(
            *flags, dest="conditions", action=_ConditionAction,
            const=kind, metavar=metavar, help=help,
        )

    cond("-e", "--exists", kind="exists", metavar="PATH", help="PATH exists")
    cond("--not-exists", kind="not_exists", metavar="PATH", help="PATH does not exist")
    cond("-u", "--updated", kind="updated", metavar="PATH", help="PATH's mtime changes")
    cond("--not-updated", kind="not_updated", metavar="PATH",
         help="PATH's mtime is the same on two consecutive checks")
    cond("--updated-within", kind="updated_within", metavar="PATH:DURATION",
         help="PATH was modified less than DURATION ago")
    cond("--quiet-for", kind="quiet_for", metavar="PATH:DURATION",
         help="PATH has not been modified for at least DURATION")
    cond("-s", "--size-changed", kind="size_changed", metavar="PATH", help="PATH's size changes")
    cond("--size-stable", kind="size_stable", metavar="PATH",
         help="PATH's size is the same on two consecutive checks")
    cond("-t", "--tcp", kind="tcp", metavar="HOST:PORT", help="a TCP connection succeeds")
    cond("--no-tcp", kind="no_tcp", metavar="HOST:PORT", help="a TCP connection fails")
    cond("-g", "--http", kind="http", metavar="[STATUS,]URL",
         help="GET URL returns STATUS (default 200)")
    cond("--not-http", kind="not_http", metavar="[STATUS,]URL",
         help="GET URL returns anything but STATUS")
    cond("--elapsed", kind="elapsed", metavar="DURATION", help="DURATION has passed")

    parser.add_argument("--any", action="store_true", help="Combine conditions with OR instead of AND")
    parser.add_argument("--timeout", metavar="DURATION", help="Stop waiting after DURATION regardless")
    parser.add_argument("-i", "--interval", metavar="DURATION", help="Time between checks (default from config, 1s)")
    parser.add_argument("-c", "--config", metavar="PATH", help="Path to waitfor.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print every check")
    parser.add_argument("--no-color", action="store_true", help="Disable colors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)

    if args.no_color:
        console.no_color = True

    try:
        config = WaitforConfig.load(args.config)
    except (ValueError, OSError) as e:
        parser.error(str(e))
    setup_logging(config)

    try:
        interval = _duration(args.interval) if args.interval else config.poll.interval_seconds
        timeout = _duration(args.timeout) if args.timeout else None
        node = build_tree(args.conditions or [], config, any_of=args.any, timeout=timeout)
    except ValueError as e:
        parser.error(str(e))

    if node is None:
        parser.error("no conditions given")

    bus = EventBus()
    if args.verbose:
        console.print(f"⏳ waiting for [bold]{node.describe()}[/] every {interval:g}s", highlight=False)
        _show_progress(bus)

    try:
        wait(node, interval, bus=bus)
    except KeyboardInterrupt:
        console.print("[red]interrupted[/]")
        return EXIT_INTERRUPTED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
