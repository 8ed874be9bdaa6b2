"""Byte-order helpers for font service protocol data."""

from __future__ import annotations

__all__ = [
    "BadLengthError",
    "swap16",
    "swap32",
    "swap_shorts",
    "swap_longs",
    "pad_to_32bit",
    "swap_auth",
]


class BadLengthError(ValueError):
    """A request's length does not agree with its contents."""

    def __init__(self, length: int) -> None:
        super().__init__(f"bad request length: {length}")
        self.length = length


def swap16(value: int) -> int:
    """Reverse the two low bytes of a 16-bit quantity."""
    return ((value & 0xFF) << 8) | ((value >> 8) & 0xFF)


def swap32(value: int) -> int:
    """Reverse the four low bytes of a 32-bit quantity."""
    return (
        ((value & 0xFF) << 24)
        | ((value & 0xFF00) << 8)
        | ((value & 0xFF0000) >> 8)
        | ((value >> 24) & 0xFF)
    )


def _swap_items(data: bytes | bytearray, count: int, width: int) -> bytes:
    if count < 0:
        raise ValueError("count must not be negative")
    needed = count * width
    if needed > len(data):
        raise ValueError(
            f"{count} items of {width} bytes need {needed} bytes, got {len(data)}"
        )
    buf = bytearray(data)
    for start in range(0, needed, width):
        buf[start:start + width] = buf[start:start + width][::-1]
    return bytes(buf)


def swap_shorts(data: bytes | bytearray, count: int) -> bytes:
    """Swap the first ``count`` 16-bit items of ``data``; the rest is kept."""
    return _swap_items(data, count, 2)


def swap_longs(data: bytes | bytearray, count: int) -> bytes:
    """Swap the first ``count`` 32-bit items of ``data``; the rest is kept."""
    return _swap_items(data, count, 4)


def pad_to_32bit(n: int) -> int:
    """Round ``n`` up to the next multiple of four."""
    return (n + 3) & ~3


def _matches_traditional_layout(buf: bytearray, num: int, length: int) -> bool:
    # Big-endian lengths, strings unpadded, only the total padded.
    offset = 0
    for _ in range(num):
        if offset > length - 4 or offset + 4 > len(buf):
            return False
        namelen = int.from_bytes(buf[offset:offset + 2], "big")
        datalen = int.from_bytes(buf[offset + 2:offset + 4], "big")
        offset += 4 + namelen + datalen
    return pad_to_32bit(offset) == length


def _normalise_swapped_layout(buf: bytearray, num: int, length: int) -> bool:
    # Little-endian lengths, each string padded; lengths rewritten big-endian.
    offset = 0
    for _ in range(num):
        if offset > length - 4 or offset + 4 > len(buf):
            return False
        namelen = int.from_bytes(buf[offset:offset + 2], "little")
        buf[offset:offset + 2] = buf[offset:offset + 2][::-1]
        datalen = int.from_bytes(buf[offset + 2:offset + 4], "little")
        buf[offset + 2:offset + 4] = buf[offset + 2:offset + 4][::-1]
        offset += 4 + pad_to_32bit(namelen) + pad_to_32bit(datalen)
    return offset == length


def swap_auth(data: bytes | bytearray, num: int, length: int) -> bytes:
    """Bring authorization data from a byte-swapped client into big-endian form.

    Data already laid out the traditional way (big-endian lengths, only the
    total padded) is returned unchanged. Otherwise the string lengths are
    taken as little-endian with each string padded, and are swapped. If
    neither reading accounts for exactly ``length`` bytes, BadLengthError
    is raised.
    """
    if num == 0:
        return bytes(data)
    buf = bytearray(data)
    if _matches_traditional_layout(buf, num, length):
        return bytes(buf)
    if _normalise_swapped_layout(buf, num, length):
        return bytes(buf)
    raise BadLengthError(length)