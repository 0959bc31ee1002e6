#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Wire <-> integer conversion for the SRP6 math.

Keys, salts and verifiers travel as byte arrays that the client reads as
little-endian numbers. Converting goes through two steps: reverse the
buffer, then read it as an unsigned big-endian integer. The reverse
direction pads on the high-order side before reversing, so the zeros end
up at the tail of the wire buffer.
"""


def reverse(data: bytes) -> bytes:
    """Return a reversed copy of data."""
    return bytes(data[::-1])


def pad(width: int, data: bytes) -> bytes:
    """
    Left-pad data with zero bytes up to width.

    If data is already width bytes or longer it is returned unchanged;
    nothing is truncated.
    """
    if len(data) >= width:
        return bytes(data)
    return bytes(width - len(data)) + bytes(data)


def bytes_to_int(data: bytes) -> int:
    """Read a wire buffer as an unsigned integer (reverse, then big-endian)."""
    return int.from_bytes(reverse(data), "big")


def int_to_bytes(width: int, value: int) -> bytes:
    """
    Encode value as a wire buffer of at least width bytes.

    Values whose natural length exceeds width come back longer than width.
    """
    natural = value.to_bytes((value.bit_length() + 7) // 8, "big")
    return reverse(pad(width, natural))
