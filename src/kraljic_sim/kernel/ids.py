"""
Session identifier generation

Session IDs are time-ordered UUID-shaped strings (UUIDv7 layout): the first
48 bits are the Unix time in milliseconds, so sessions created later sort
after earlier ones even when the creation timestamps tie.
"""

import secrets
import time
from typing import Protocol


class IdFactory(Protocol):
    """Protocol for ID generation strategies"""

    def generate(self) -> str:
        """Generate a new unique ID"""
        ...


def generate_session_id(timestamp_ms: int | None = None) -> str:
    """
    Generate a UUIDv7-style session identifier

    Args:
        timestamp_ms: Millisecond timestamp to embed (defaults to now)

    Returns:
        36-character hyphenated identifier, e.g. "01908e9a-3b87-7abc-8def-0123456789ab"
    """
    ms = int(time.time() * 1000) if timestamp_ms is None else timestamp_ms
    value = (ms & 0xFFFFFFFFFFFF) << 80
    value |= 0x7 << 76  # version 7
    value |= secrets.randbits(12) << 64
    value |= 0b10 << 62  # RFC 4122 variant
    value |= secrets.randbits(62)

    hex_str = f"{value:032x}"
    return (
        f"{hex_str[0:8]}-{hex_str[8:12]}-{hex_str[12:16]}-"
        f"{hex_str[16:20]}-{hex_str[20:32]}"
    )


class SessionIdFactory:
    """Default ID factory for new participant sessions"""

    def generate(self) -> str:
        return generate_session_id()


default_id_factory = SessionIdFactory()
