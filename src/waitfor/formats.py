"""
Format Helpers — decode human-readable CLI text into condition arguments.

All helpers are pure: bad input yields ``None`` (or ``False``) and the
caller decides whether to fall back or abort.
"""

from datetime import timedelta
from typing import Optional, Tuple, Union

from yarl import URL

DEFAULT_HTTP_STATUS = 200

_UNIT_SECONDS = {
    "d": 86400,
    "h": 3600,
    "m": 60,
    "s": 1,
}


def as_seconds(value: Union[float, int, timedelta]) -> float:
    """Accept either a number of seconds or a timedelta."""
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


def parse_duration(text: str) -> Optional[timedelta]:
    """Parse a compact duration such as ``"3h10m"`` or ``"90"``.

    Each unit letter consumes the digits accumulated before it. Trailing
    digits without a unit count as seconds. Any other character aborts.

        >>> parse_duration("3h10m")
        datetime.timedelta(seconds=11400)
    """
    total = 0
    acc = 0
    for ch in text:
        if "0" <= ch <= "9":
            acc = acc * 10 + (ord(ch) - ord("0"))
        elif ch in _UNIT_SECONDS:
            total += acc * _UNIT_SECONDS[ch]
            acc = 0
        else:
            return None
    total += acc
    try:
        return timedelta(seconds=total)
    except OverflowError:
        return None


def parse_http_get(arg: str) -> Tuple[int, str]:
    """Split ``"404,https://host/path"`` into ``(404, normalized_url)``.

    Without a ``DDD,`` prefix the expected status is 200. The URL is
    normalized with yarl; when that fails (or the URL is relative) the raw
    text is returned unchanged.
    """
    status = DEFAULT_HTTP_STATUS
    url_text = arg
    if len(arg) > 4 and _is_ascii_digits(arg[:3]) and arg[3] == ",":
        status = int(arg[:3])
        url_text = arg[4:]

    normalized = _normalize_url(url_text)
    return status, normalized if normalized is not None else url_text


def _normalize_url(text: str) -> Optional[str]:
    try:
        url = URL(text)
    except (ValueError, TypeError):
        return None
    if not url.is_absolute():
        return None
    return str(url)


def validate_tcp(host: str) -> bool:
    """Check that ``host`` looks like ``hostname:port`` with a u16 port.

    The last colon is taken as the delimiter, so bracketed IPv6 literals
    (``[::1]:80``) pass.
    """
    _, sep, port = host.rpartition(":")
    if not sep:
        return False
    if not _is_ascii_digits(port):
        return False
    return int(port) <= 0xFFFF


def _is_ascii_digits(text: str) -> bool:
    return bool(text) and all("0" <= ch <= "9" for ch in text)
