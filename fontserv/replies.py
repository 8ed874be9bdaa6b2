"""Byte-swapping of replies, errors and setup data for byte-swapped clients.

Replies are given as mappings of field name to value in the server's
order; each function returns a new dict with the multi-byte fields put
into the opposite byte order. Raw blocks of protocol data are given as
bytes and returned as bytes.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping
from typing import Any

from .byteswap import swap16, swap32, swap_longs, swap_shorts

__all__ = [
    "swap_generic_reply",
    "swap_query_extension_reply",
    "swap_list_catalogues_reply",
    "swap_create_ac_reply",
    "swap_get_event_mask_reply",
    "swap_list_fonts_reply",
    "swap_list_fonts_with_xinfo_reply",
    "swap_open_bitmap_font_reply",
    "swap_query_xinfo_reply",
    "swap_query_x_extents_reply",
    "swap_query_x_bitmaps_reply",
    "swap_error_event",
    "swap_conn_setup",
    "swap_connection_info",
    "swap_prop_info",
    "swap_extents",
    "copy_swap16",
    "copy_swap32",
    "GENERIC_REPLY_SIZE",
    "CONN_SETUP_SIZE",
    "PROP_INFO_SIZE",
    "PROP_OFFSET_SIZE",
    "XCHARINFO_SIZE",
]

GENERIC_REPLY_SIZE = 8
CONN_SETUP_SIZE = 12
PROP_INFO_SIZE = 8
PROP_OFFSET_SIZE = 20
XCHARINFO_SIZE = 12

_HEADER_SHORTS = ("sequenceNumber",)
_HEADER_LONGS = ("length",)

_BOUNDS_PARTS = ("left", "right", "width", "ascent", "descent", "attributes")
_XINFO_SHORTS = (
    *(f"font_header_min_bounds_{part}" for part in _BOUNDS_PARTS),
    *(f"font_header_max_bounds_{part}" for part in _BOUNDS_PARTS),
    "font_header_font_ascent",
    "font_header_font_descent",
)
_XINFO_LONGS = ("font_header_flags",)


def _swapped(
    fields: Mapping[str, Any],
    shorts: Iterable[str] = (),
    longs: Iterable[str] = (),
) -> dict[str, Any]:
    result = dict(fields)
    for name in shorts:
        result[name] = swap16(result[name])
    for name in longs:
        result[name] = swap32(result[name])
    return result


def _reply(
    reply: Mapping[str, Any],
    shorts: Iterable[str] = (),
    longs: Iterable[str] = (),
) -> dict[str, Any]:
    return _swapped(
        reply,
        shorts=(*_HEADER_SHORTS, *shorts),
        longs=(*_HEADER_LONGS, *longs),
    )


def swap_generic_reply(reply: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a reply with only the common header fields.

    Used for ListExtensions, GetCatalogues and GetResolution replies.
    """
    return _reply(reply)


def swap_query_extension_reply(reply: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a QueryExtension reply."""
    return _reply(reply, shorts=("major_version", "minor_version"))


def swap_list_catalogues_reply(reply: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a ListCatalogues reply."""
    return _reply(reply, longs=("num_replies", "num_catalogues"))


def swap_create_ac_reply(reply: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a CreateAC reply."""
    return _reply(reply, shorts=("status",))


def swap_get_event_mask_reply(reply: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a GetEventMask reply."""
    return _reply(reply, longs=("event_mask",))


def swap_list_fonts_reply(reply: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a ListFonts reply."""
    return _reply(reply, longs=("following", "nFonts"))


def swap_list_fonts_with_xinfo_reply(
    reply: Mapping[str, Any], size: int
) -> dict[str, Any]:
    """Swap a ListFontsWithXInfo reply of ``size`` bytes.

    The last reply of a series is no larger than a generic reply and
    carries only the header; the others also carry the font information.
    """
    if size > GENERIC_REPLY_SIZE:
        return _reply(
            reply,
            shorts=_XINFO_SHORTS,
            longs=("nReplies", *_XINFO_LONGS),
        )
    return _reply(reply)


def swap_open_bitmap_font_reply(reply: Mapping[str, Any]) -> dict[str, Any]:
    """Swap an OpenBitmapFont reply."""
    return _reply(reply, longs=("otherid",))


def swap_query_xinfo_reply(reply: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a QueryXInfo reply."""
    return _reply(reply, shorts=_XINFO_SHORTS, longs=_XINFO_LONGS)


def swap_query_x_extents_reply(reply: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a QueryXExtents8 or QueryXExtents16 reply."""
    return _reply(reply, longs=("num_extents",))


def swap_query_x_bitmaps_reply(reply: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a QueryXBitmaps8 or QueryXBitmaps16 reply."""
    return _reply(reply, longs=("replies_hint", "num_chars", "nbytes"))


def swap_error_event(error: Mapping[str, Any]) -> dict[str, Any]:
    """Return a swapped copy of an error; the original is left alone."""
    return _reply(error, longs=("timestamp",))


def swap_conn_setup(setup: Mapping[str, Any]) -> dict[str, Any]:
    """Swap the connection setup block sent in answer to a client prefix."""
    return _swapped(
        setup,
        shorts=(
            "status",
            "major_version",
            "minor_version",
            "alternate_len",
            "auth_len",
        ),
    )


def swap_connection_info(info: bytes | bytearray) -> bytes:
    """Swap the packed connection-accept block.

    The 12-byte header (length, max_request_len, vendor_len,
    release_number) is swapped field by field; the vendor string after
    it is copied unchanged.
    """
    if len(info) < CONN_SETUP_SIZE:
        raise ValueError(
            f"connection info needs {CONN_SETUP_SIZE} bytes, got {len(info)}"
        )
    header = bytes(info[:CONN_SETUP_SIZE])
    swapped = (
        header[0:4][::-1]
        + header[4:6][::-1]
        + header[6:8][::-1]
        + header[8:12][::-1]
    )
    return swapped + bytes(info[CONN_SETUP_SIZE:])


def swap_prop_info(data: bytes | bytearray) -> bytes:
    """Swap a packed property-info block given in the server's byte order.

    The header's two counts and the four 32-bit fields of each property
    offset are swapped; the type bytes and the string data are kept.
    """
    if len(data) < PROP_INFO_SIZE:
        raise ValueError(
            f"property info needs {PROP_INFO_SIZE} bytes, got {len(data)}"
        )
    num_offsets = int.from_bytes(bytes(data[0:4]), sys.byteorder)
    end = PROP_INFO_SIZE + num_offsets * PROP_OFFSET_SIZE
    if end > len(data):
        raise ValueError(
            f"{num_offsets} property offsets need {end} bytes, got {len(data)}"
        )
    buf = bytearray(data)
    buf[0:PROP_INFO_SIZE] = swap_longs(buf[0:PROP_INFO_SIZE], 2)
    for start in range(PROP_INFO_SIZE, end, PROP_OFFSET_SIZE):
        buf[start:start + 16] = swap_longs(buf[start:start + 16], 4)
    return bytes(buf)


def swap_extents(data: bytes | bytearray, num: int) -> bytes:
    """Swap ``num`` packed character-info records."""
    return swap_shorts(data, num * (XCHARINFO_SIZE // 2))


def copy_swap16(data: bytes | bytearray) -> bytes:
    """Return a copy of ``data`` with each 16-bit item swapped.

    A trailing odd byte is not part of any item and is dropped.
    """
    count = len(data) // 2
    return swap_shorts(bytes(data[:count * 2]), count)


def copy_swap32(data: bytes | bytearray) -> bytes:
    """Return a copy of ``data`` with each 32-bit item swapped.

    Trailing bytes that do not fill a whole item are dropped.
    """
    count = len(data) // 4
    return swap_longs(bytes(data[:count * 4]), count)