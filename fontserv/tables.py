"""Request-code tables mapping each request to its swapping routines."""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum, IntFlag
from typing import Any

from . import replies, requests

__all__ = [
    "RequestCode",
    "DispatchException",
    "request_swapper",
    "reply_swapper",
    "NUM_PROC_VECTORS",
    "NUM_EVENT_VECTORS",
]

NUM_PROC_VECTORS = 25
NUM_EVENT_VECTORS = 8


class RequestCode(IntEnum):
    """Major opcodes of the font service protocol."""

    NOOP = 0
    LIST_EXTENSIONS = 1
    QUERY_EXTENSION = 2
    LIST_CATALOGUES = 3
    SET_CATALOGUES = 4
    GET_CATALOGUES = 5
    SET_EVENT_MASK = 6
    GET_EVENT_MASK = 7
    CREATE_AC = 8
    FREE_AC = 9
    SET_AUTHORIZATION = 10
    SET_RESOLUTION = 11
    GET_RESOLUTION = 12
    LIST_FONTS = 13
    LIST_FONTS_WITH_XINFO = 14
    OPEN_BITMAP_FONT = 15
    QUERY_XINFO = 16
    QUERY_XEXTENTS8 = 17
    QUERY_XEXTENTS16 = 18
    QUERY_XBITMAPS8 = 19
    QUERY_XBITMAPS16 = 20
    CLOSE_FONT = 21


class DispatchException(IntFlag):
    """Reasons for the dispatch loop to stop what it is doing."""

    RESET = 0x1
    TERMINATE = 0x2
    RECONFIG = 0x4
    FLUSH = 0x8


_REQUEST_SWAPPERS: dict[int, Callable[..., Any]] = {
    RequestCode.NOOP: requests.swap_simple_request,
    RequestCode.LIST_EXTENSIONS: requests.swap_simple_request,
    RequestCode.QUERY_EXTENSION: requests.swap_query_extension,
    RequestCode.LIST_CATALOGUES: requests.swap_list_request,
    RequestCode.SET_CATALOGUES: requests.swap_simple_request,
    RequestCode.GET_CATALOGUES: requests.swap_simple_request,
    RequestCode.SET_EVENT_MASK: requests.swap_resource_request,
    RequestCode.GET_EVENT_MASK: requests.swap_simple_request,
    RequestCode.CREATE_AC: requests.swap_create_ac,
    RequestCode.FREE_AC: requests.swap_resource_request,
    RequestCode.SET_AUTHORIZATION: requests.swap_resource_request,
    RequestCode.SET_RESOLUTION: requests.swap_set_resolution,
    RequestCode.GET_RESOLUTION: requests.swap_simple_request,
    RequestCode.LIST_FONTS: requests.swap_list_request,
    RequestCode.LIST_FONTS_WITH_XINFO: requests.swap_list_request,
    RequestCode.OPEN_BITMAP_FONT: requests.swap_open_bitmap_font,
    RequestCode.QUERY_XINFO: requests.swap_resource_request,
    RequestCode.QUERY_XEXTENTS8: requests.swap_query_x_extents,
    RequestCode.QUERY_XEXTENTS16: requests.swap_query_x_extents,
    RequestCode.QUERY_XBITMAPS8: requests.swap_query_x_bitmaps,
    RequestCode.QUERY_XBITMAPS16: requests.swap_query_x_bitmaps,
    RequestCode.CLOSE_FONT: requests.swap_resource_request,
}

_REPLY_SWAPPERS: dict[int, Callable[..., Any]] = {
    RequestCode.LIST_EXTENSIONS: replies.swap_generic_reply,
    RequestCode.QUERY_EXTENSION: replies.swap_query_extension_reply,
    RequestCode.LIST_CATALOGUES: replies.swap_list_catalogues_reply,
    RequestCode.GET_CATALOGUES: replies.swap_generic_reply,
    RequestCode.GET_EVENT_MASK: replies.swap_get_event_mask_reply,
    RequestCode.CREATE_AC: replies.swap_create_ac_reply,
    RequestCode.GET_RESOLUTION: replies.swap_generic_reply,
    RequestCode.LIST_FONTS: replies.swap_list_fonts_reply,
    RequestCode.LIST_FONTS_WITH_XINFO: replies.swap_list_fonts_with_xinfo_reply,
    RequestCode.OPEN_BITMAP_FONT: replies.swap_open_bitmap_font_reply,
    RequestCode.QUERY_XINFO: replies.swap_query_xinfo_reply,
    RequestCode.QUERY_XEXTENTS8: replies.swap_query_x_extents_reply,
    RequestCode.QUERY_XEXTENTS16: replies.swap_query_x_extents_reply,
    RequestCode.QUERY_XBITMAPS8: replies.swap_query_x_bitmaps_reply,
    RequestCode.QUERY_XBITMAPS16: replies.swap_query_x_bitmaps_reply,
}


def request_swapper(code: int) -> Callable[..., Any]:
    """Return the routine that swaps a request with major opcode ``code``.

    Raises LookupError for an opcode that has no request.
    """
    try:
        return _REQUEST_SWAPPERS[int(code)]
    except KeyError:
        raise LookupError(f"no request with opcode {int(code)}") from None


def reply_swapper(code: int) -> Callable[..., Any]:
    """Return the routine that swaps the reply to request ``code``.

    Raises LookupError for requests whose replies are not swapped.
    """
    try:
        return _REPLY_SWAPPERS[int(code)]
    except KeyError:
        raise LookupError(
            f"reply swapping not implemented for reply type {int(code)}"
        ) from None