"""Invite token strings: <church id prefix>-<base36 ms timestamp>-<random base36>."""

import secrets
import string
import time
from typing import Optional

BASE36_ALPHABET = string.digits + string.ascii_lowercase
RANDOM_PART_LENGTH = 13


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_invite_token(church_id: str, now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(RANDOM_PART_LENGTH))
    return f"{church_id[:8]}-{to_base36(now_ms)}-{suffix}"
