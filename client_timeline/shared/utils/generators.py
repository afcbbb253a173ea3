"""Identifiers for lines and events."""
from cuid2 import cuid_wrapper

TEMP_ID_PREFIX = "temp-"

_next_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Permanent id, assigned by the store"""
    return _next_cuid()


def generate_temp_id() -> str:
    """Client-side id for an event that hasn't been persisted yet"""
    return f"{TEMP_ID_PREFIX}{generate_cuid()}"


def is_temp_id(value: str) -> bool:
    return value.startswith(TEMP_ID_PREFIX)
