"""Unsigned 64-bit arithmetic helpers."""

_U64_MAX = 2**64 - 1


def add(left: int, right: int) -> int:
    """Add two unsigned 64-bit integers, refusing to overflow."""
    for value in (left, right):
        if not 0 <= value <= _U64_MAX:
            raise ValueError(f"{value} is not an unsigned 64-bit integer")
    result = left + right
    if result > _U64_MAX:
        raise OverflowError("sum exceeds 64 bits")
    return result