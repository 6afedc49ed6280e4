"""Time helpers shared by the domain models."""

import time


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)
