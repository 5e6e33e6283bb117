"""
VoteSlotCalculator - How many ranked positions to surface for a period.
"""

import math

SLOT_FACTOR = 1.15


def slot_count(n: int) -> int:
    """
    Return floor(sqrt(n) * 1.15) for a period with n entries.
    
    Raises:
        ValueError: If n is negative
    """
    if n < 0:
        raise ValueError(f"Entry count must not be negative: {n}")
    return int(math.sqrt(n) * SLOT_FACTOR)


def slot_positions(n: int) -> range:
    """Return the rank positions 0..slot_count(n)-1 for a period with n entries."""
    return range(slot_count(n))
