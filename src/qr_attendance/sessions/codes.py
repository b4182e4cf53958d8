"""Session code format: ``<PREFIX>_<windowIndex>_<epochMillis>``.

Both numeric segments are non-negative base-10 integers. The default prefix
``ATTENDANCE_QR`` itself contains the delimiter, so only the prefix as a
whole is compared and the remainder must split into exactly two segments.
"""
from __future__ import annotations

from ..core.constants import DEFAULT_CODE_WINDOW_MS, SESSION_CODE_DELIMITER, SESSION_CODE_PREFIX
from ..core.exceptions import ExpiredCodeError, MalformedCodeError
from .model import SessionCode


def window_index(now_ms: int, window_ms: int) -> int:
    # A zero-length window has a single index.
    if window_ms <= 0:
        return 0
    return now_ms // window_ms


def generate(now_ms: int, window_ms: int = DEFAULT_CODE_WINDOW_MS, *, prefix: str = SESSION_CODE_PREFIX) -> SessionCode:
    index = window_index(now_ms, window_ms)
    value = SESSION_CODE_DELIMITER.join((prefix, str(index), str(now_ms)))
    return SessionCode(value=value, window_index=index, generated_at_ms=now_ms, validity_window_ms=window_ms)


def parse_code(
    code: str,
    window_ms: int = DEFAULT_CODE_WINDOW_MS,
    *,
    prefix: str = SESSION_CODE_PREFIX,
) -> SessionCode:
    if not isinstance(code, str):
        raise MalformedCodeError("Session code must be a string")

    head = prefix + SESSION_CODE_DELIMITER
    if not code.startswith(head):
        raise MalformedCodeError("Session code has the wrong prefix")

    segments = code[len(head):].split(SESSION_CODE_DELIMITER)
    if len(segments) != 2:
        raise MalformedCodeError("Session code must have a window index and a timestamp")
    if not all(s.isascii() and s.isdigit() for s in segments):
        raise MalformedCodeError("Session code segments must be integers")

    index, generated_at = (int(s) for s in segments)
    return SessionCode(value=code, window_index=index, generated_at_ms=generated_at, validity_window_ms=window_ms)


def check_code(
    code: str,
    now_ms: int,
    window_ms: int = DEFAULT_CODE_WINDOW_MS,
    *,
    prefix: str = SESSION_CODE_PREFIX,
) -> SessionCode:
    """Parse ``code`` and require it to be fresh at ``now_ms``."""

    parsed = parse_code(code, window_ms, prefix=prefix)
    if abs(now_ms - parsed.generated_at_ms) > window_ms:
        raise ExpiredCodeError("Session code has expired")
    return parsed


def is_valid(
    code: str,
    now_ms: int,
    window_ms: int = DEFAULT_CODE_WINDOW_MS,
    *,
    prefix: str = SESSION_CODE_PREFIX,
) -> bool:
    try:
        check_code(code, now_ms, window_ms, prefix=prefix)
    except (MalformedCodeError, ExpiredCodeError):
        return False
    return True
