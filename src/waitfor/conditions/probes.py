"""
Probes — the raw observations conditions are built on.

Filesystem metadata, TCP connect attempts and HTTP GET status codes. Every
probe reports failure as a value (``None`` / ``False``) instead of raising,
so conditions can map "can't observe" onto their own fallback truth value.
"""

import asyncio
import logging
import os
import socket
from typing import Optional

import aiohttp

logger = logging.getLogger("waitfor.probes")

DEFAULT_HTTP_TIMEOUT = 10.0


# ─── Filesystem ──────────────────────────────────────────────

def path_exists(path: str) -> bool:
    return os.path.exists(path)


def modified_time(path: str) -> Optional[int]:
    """Last-modified time in nanoseconds since the epoch, or None."""
    try:
        return os.stat(path).st_mtime_ns
    except (OSError, ValueError) as e:
        logger.debug(f"stat failed for {path}: {e}")
        return None


def file_size(path: str) -> Optional[int]:
    """Size in bytes, or None when the file can't be stat'ed."""
    try:
        return os.stat(path).st_size
    except (OSError, ValueError) as e:
        logger.debug(f"stat failed for {path}: {e}")
        return None


# ─── Network ─────────────────────────────────────────────────

def split_host(host: str):
    """Split ``host:port`` on the last colon. Returns (hostname, port) or None."""
    hostname, sep, port = host.rpartition(":")
    if not sep or not (port.isascii() and port.isdigit()):
        return None
    # [::1]:80 → ::1
    if hostname.startswith("[") and hostname.endswith("]"):
        hostname = hostname[1:-1]
    return hostname, int(port)


def tcp_connect(host: str, timeout: Optional[float] = None) -> bool:
    """Attempt one TCP connection to ``host:port``; True if it was accepted."""
    target = split_host(host)
    if target is None:
        logger.debug(f"TCP probe: malformed host '{host}'")
        return False
    # ValueError covers a NUL in the hostname and IDNA labels over 63 chars
    try:
        with socket.create_connection(target, timeout=timeout):
            return True
    except (OSError, OverflowError, ValueError) as e:
        logger.debug(f"TCP probe {host} failed: {e}")
        return False


async def _fetch_status(url: str, timeout: float) -> int:
    async with aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=timeout),
    ) as session:
        async with session.get(url) as resp:
            return resp.status


def http_status(url: str, timeout: float = DEFAULT_HTTP_TIMEOUT) -> Optional[int]:
    """GET ``url`` and return the response status, or None if no response arrived.

    Runs the request on a private event loop so callers stay synchronous.
    """
    try:
        return asyncio.run(_fetch_status(url, timeout))
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.debug(f"HTTP probe {url} failed: {e!r}")
        return None
