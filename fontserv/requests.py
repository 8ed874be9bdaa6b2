"""Byte-swapping of requests from clients of the opposite byte order."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .byteswap import BadLengthError, swap16, swap32, swap_auth, swap_shorts

__all__ = [
    "swap_simple_request",
    "swap_resource_request",
    "swap_create_ac",
    "swap_set_resolution",
    "swap_query_extension",
    "swap_list_request",
    "swap_open_bitmap_font",
    "swap_query_x_extents",
    "swap_query_x_bitmaps",
    "swap_conn_client_prefix",
]

CREATE_AC_REQUEST_SIZE = 8
RESOLUTION_SIZE = 6


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


def swap_simple_request(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a request whose only multi-byte field is ``length``."""
    return _swapped(fields, shorts=("length",))


def swap_resource_request(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a request carrying ``length`` and a resource ``id``."""
    return _swapped(fields, shorts=("length",), longs=("id",))


def swap_create_ac(
    fields: Mapping[str, Any], auth_data: bytes | bytearray
) -> tuple[dict[str, Any], bytes]:
    """Swap a CreateAC request and normalise its authorization data."""
    result = _swapped(fields, shorts=("length",), longs=("acid",))
    length = (result["length"] << 2) - CREATE_AC_REQUEST_SIZE
    return result, swap_auth(auth_data, result["num_auths"], length)


def swap_set_resolution(
    fields: Mapping[str, Any], resolutions: bytes | bytearray
) -> tuple[dict[str, Any], bytes]:
    """Swap a SetResolution request and the 16-bit items that follow it."""
    result = _swapped(fields, shorts=("length", "num_resolutions"))
    count = result["num_resolutions"]
    if result["length"] - 1 != count * RESOLUTION_SIZE:
        raise BadLengthError(result["length"])
    return result, swap_shorts(resolutions, count)


def swap_query_extension(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a QueryExtension request."""
    return _swapped(fields, shorts=("length",))


def swap_list_request(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a ListCatalogues, ListFonts or ListFontsWithXInfo request."""
    return _swapped(fields, shorts=("length", "nbytes"), longs=("maxNames",))


def swap_open_bitmap_font(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Swap an OpenBitmapFont request."""
    return _swapped(
        fields,
        shorts=("length",),
        longs=("fid", "format_hint", "format_mask"),
    )


def swap_query_x_extents(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a QueryXExtents8 or QueryXExtents16 request."""
    return _swapped(fields, shorts=("length",), longs=("fid", "num_ranges"))


def swap_query_x_bitmaps(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Swap a QueryXBitmaps8 or QueryXBitmaps16 request."""
    return _swapped(
        fields, shorts=("length",), longs=("fid", "format", "num_ranges")
    )


def swap_conn_client_prefix(
    fields: Mapping[str, Any], auth_data: bytes | bytearray
) -> tuple[dict[str, Any], bytes]:
    """Swap a connection prefix and normalise its authorization data."""
    result = _swapped(
        fields, shorts=("major_version", "minor_version", "auth_len")
    )
    return result, swap_auth(auth_data, result["num_auths"], result["auth_len"])