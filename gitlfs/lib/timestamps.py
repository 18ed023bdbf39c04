"""Timestamp utilities."""

import time


def unix_seconds() -> int:
    """
    Current Unix time in whole seconds.

    Returns:
        int: Seconds since the epoch (e.g., 1760601600)
    """
    return int(time.time())
