"""Short, human-shareable identifiers for reports and members."""

import re
import secrets
from datetime import datetime, timezone

BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"

REFERENCE_ID_PATTERN = re.compile(r"^SB-[0-9A-Z]{5}-[0-9A-Z]{5}$")
MEMBER_ID_PATTERN = re.compile(r"^SB\d{4}[0-9A-Z]{6}$")

_system_random = secrets.SystemRandom()


def to_base36(n: int) -> str:
    if n < 0:
        raise ValueError("to_base36 expects a non-negative integer")
    if n == 0:
        return "0"
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(BASE36[rem])
    return "".join(reversed(digits))


def random_base36(length: int, rng=None) -> str:
    rng = rng or _system_random
    return "".join(rng.choice(BASE36) for _ in range(length))


def new_reference_id(now: datetime = None, rng=None) -> str:
    """
    SB-<last 5 base36 chars of the ms timestamp>-<5 random base36 chars>, uppercased.
    """
    now = now or datetime.now(timezone.utc)
    millis = int(now.timestamp() * 1000)
    ts = to_base36(millis)[-5:].rjust(5, "0")
    return f"SB-{ts}-{random_base36(5, rng)}".upper()


def new_member_id(now: datetime = None, rng=None) -> str:
    """SB<year><6 random uppercase base36 chars>"""
    now = now or datetime.now(timezone.utc)
    return f"SB{now.year:04d}{random_base36(6, rng).upper()}"
