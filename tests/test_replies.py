import struct
import sys

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fontserv.byteswap import swap16, swap32
from fontserv.replies import (
    CONN_SETUP_SIZE,
    GENERIC_REPLY_SIZE,
    PROP_INFO_SIZE,
    PROP_OFFSET_SIZE,
    XCHARINFO_SIZE,
    copy_swap16,
    copy_swap32,
    swap_conn_setup,
    swap_connection_info,
    swap_create_ac_reply,
    swap_error_event,
    swap_extents,
    swap_generic_reply,
    swap_get_event_mask_reply,
    swap_list_catalogues_reply,
    swap_list_fonts_reply,
    swap_list_fonts_with_xinfo_reply,
    swap_open_bitmap_font_reply,
    swap_prop_info,
    swap_query_extension_reply,
    swap_query_x_bitmaps_reply,
    swap_query_x_extents_reply,
    swap_query_xinfo_reply,
)

u16 = st.integers(min_value=0, max_value=0xFFFF)
u32 = st.integers(min_value=0, max_value=0xFFFFFFFF)

BOUNDS = ("left", "right", "width", "ascent", "descent", "attributes")
XINFO_SHORTS = [
    *(f"font_header_min_bounds_{p}" for p in BOUNDS),
    *(f"font_header_max_bounds_{p}" for p in BOUNDS),
    "font_header_font_ascent",
    "font_header_font_descent",
]


def header(seq=0x0102, length=0x01020304):
    return {"type": 1, "data1": 7, "sequenceNumber": seq, "length": length}


def xinfo_reply():
    reply = header()
    reply["font_header_flags"] = 0x00000003
    reply["font_header_draw_direction"] = 0
    for offset, name in enumerate(XINFO_SHORTS):
        reply[name] = 0x0100 + offset
    return reply


def test_generic_reply_pinned_values():
    result = swap_generic_reply(header())
    assert result["sequenceNumber"] == 0x0201
    assert result["length"] == 0x04030201
    assert result["type"] == 1 and result["data1"] == 7


def test_generic_reply_leaves_input_untouched():
    original = header()
    swap_generic_reply(original)
    assert original == header()


@given(u16, u32)
def test_generic_reply_round_trip(seq, length):
    reply = header(seq, length)
    assert swap_generic_reply(swap_generic_reply(reply)) == reply


def test_query_extension_reply():
    reply = {**header(), "major_version": 2, "minor_version": 0x0300}
    result = swap_query_extension_reply(reply)
    assert result["major_version"] == swap16(2)
    assert result["minor_version"] == swap16(0x0300)
    assert result["length"] == swap32(reply["length"])


def test_list_catalogues_reply():
    reply = {**header(), "num_replies": 5, "num_catalogues": 9}
    result = swap_list_catalogues_reply(reply)
    assert result["num_replies"] == swap32(5)
    assert result["num_catalogues"] == swap32(9)


def test_create_ac_reply():
    reply = {**header(), "auth_index": 1, "status": 0x0001}
    result = swap_create_ac_reply(reply)
    assert result["status"] == swap16(1)
    assert result["auth_index"] == 1


def test_get_event_mask_reply():
    reply = {**header(), "event_mask": 0x00FF00FF}
    result = swap_get_event_mask_reply(reply)
    assert result["event_mask"] == swap32(0x00FF00FF)
    assert swap_get_event_mask_reply(result) == reply


def test_list_fonts_reply():
    reply = {**header(), "following": 3, "nFonts": 40}
    result = swap_list_fonts_reply(reply)
    assert result["following"] == swap32(3)
    assert result["nFonts"] == swap32(40)


def test_list_fonts_with_xinfo_reply_full():
    reply = {**xinfo_reply(), "nReplies": 4}
    result = swap_list_fonts_with_xinfo_reply(reply, GENERIC_REPLY_SIZE + 1)
    assert result["nReplies"] == swap32(4)
    assert result["font_header_flags"] == swap32(3)
    for name in XINFO_SHORTS:
        assert result[name] == swap16(reply[name])
    assert result["font_header_draw_direction"] == 0


def test_list_fonts_with_xinfo_reply_last_in_series():
    reply = header()
    result = swap_list_fonts_with_xinfo_reply(reply, GENERIC_REPLY_SIZE)
    assert result == swap_generic_reply(reply)


def test_list_fonts_with_xinfo_round_trip():
    reply = {**xinfo_reply(), "nReplies": 4}
    once = swap_list_fonts_with_xinfo_reply(reply, 100)
    assert swap_list_fonts_with_xinfo_reply(once, 100) == reply


def test_open_bitmap_font_reply():
    reply = {**header(), "otherid_valid": 1, "otherid": 0x20000001, "cachable": 1}
    result = swap_open_bitmap_font_reply(reply)
    assert result["otherid"] == swap32(0x20000001)
    assert result["cachable"] == 1


def test_query_xinfo_reply():
    reply = xinfo_reply()
    result = swap_query_xinfo_reply(reply)
    for name in XINFO_SHORTS:
        assert result[name] == swap16(reply[name])
    assert swap_query_xinfo_reply(result) == reply


def test_query_x_extents_reply():
    reply = {**header(), "num_extents": 256}
    assert swap_query_x_extents_reply(reply)["num_extents"] == swap32(256)


def test_query_x_bitmaps_reply():
    reply = {**header(), "replies_hint": 1, "num_chars": 2, "nbytes": 3}
    result = swap_query_x_bitmaps_reply(reply)
    assert (result["replies_hint"], result["num_chars"], result["nbytes"]) == (
        swap32(1),
        swap32(2),
        swap32(3),
    )


def test_error_event_is_copy():
    error = {**header(), "request": 3, "timestamp": 0x11223344}
    result = swap_error_event(error)
    assert result["timestamp"] == swap32(0x11223344)
    assert error["timestamp"] == 0x11223344
    assert swap_error_event(result) == error


def test_conn_setup():
    setup = {
        "status": 0,
        "major_version": 2,
        "minor_version": 0,
        "num_alternates": 3,
        "auth_index": 1,
        "alternate_len": 5,
        "auth_len": 6,
    }
    result = swap_conn_setup(setup)
    assert result["major_version"] == swap16(2)
    assert result["alternate_len"] == swap16(5)
    assert result["auth_len"] == swap16(6)
    assert result["num_alternates"] == 3 and result["auth_index"] == 1


def make_conn_info(order):
    vendor = b"X.Org Foundation"
    fmt = "<IHHI" if order == "little" else ">IHHI"
    head = struct.pack(fmt, (12 + len(vendor) + 3) >> 2, 8192, len(vendor), 7000)
    return head + vendor


def test_connection_info_swaps_header_only():
    info = make_conn_info("little")
    result = swap_connection_info(info)
    assert result == make_conn_info("big")
    assert result[CONN_SETUP_SIZE:] == b"X.Org Foundation"


def test_connection_info_too_short():
    with pytest.raises(ValueError):
        swap_connection_info(b"\x00" * (CONN_SETUP_SIZE - 1))


def make_prop_info(order):
    fmt = "<" if order == "little" else ">"
    strings = b"FOUNDRYmisc"
    parts = [struct.pack(fmt + "II", 2, len(strings))]
    parts.append(struct.pack(fmt + "IIIIB3x", 0, 7, 7, 4, 0))
    parts.append(struct.pack(fmt + "IIIIB3x", 7, 4, 0, 0, 1))
    return b"".join(parts) + strings


def test_prop_info_swaps_counts_and_offsets():
    other = "big" if sys.byteorder == "little" else "little"
    data = make_prop_info(sys.byteorder)
    assert swap_prop_info(data) == make_prop_info(other)


def test_prop_info_keeps_type_and_strings():
    data = make_prop_info(sys.byteorder)
    result = swap_prop_info(data)
    end = PROP_INFO_SIZE + 2 * PROP_OFFSET_SIZE
    assert result[end:] == data[end:]
    assert result[PROP_INFO_SIZE + PROP_OFFSET_SIZE + 16] == 1


def test_prop_info_truncated():
    data = make_prop_info(sys.byteorder)
    with pytest.raises(ValueError):
        swap_prop_info(data[: PROP_INFO_SIZE + PROP_OFFSET_SIZE])
    with pytest.raises(ValueError):
        swap_prop_info(b"\x00" * 4)


def test_extents_swap_each_short():
    data = struct.pack("<6h6h", 1, 2, 3, 4, 5, 6, -1, -2, -3, -4, -5, -6)
    result = swap_extents(data, 2)
    assert struct.unpack(">6h6h", result) == (
        1, 2, 3, 4, 5, 6, -1, -2, -3, -4, -5, -6,
    )


def test_extents_too_short():
    with pytest.raises(ValueError):
        swap_extents(b"\x00" * XCHARINFO_SIZE, 2)


def test_copy_swap16_pinned():
    assert copy_swap16(b"\x01\x02\x03\x04") == b"\x02\x01\x04\x03"


def test_copy_swap32_pinned():
    assert copy_swap32(b"\x01\x02\x03\x04") == b"\x04\x03\x02\x01"


def test_copy_swap_drops_partial_items():
    assert copy_swap16(b"\x01\x02\x03") == b"\x02\x01"
    assert copy_swap32(b"\x01\x02\x03\x04\x05") == b"\x04\x03\x02\x01"


@given(st.binary(max_size=64))
def test_copy_swap_round_trips(data):
    even = data[: len(data) // 2 * 2]
    whole = data[: len(data) // 4 * 4]
    assert copy_swap16(copy_swap16(data)) == even
    assert copy_swap32(copy_swap32(data)) == whole


@given(st.lists(u32, max_size=16))
def test_copy_swap32_matches_opposite_order(values):
    little = struct.pack(f"<{len(values)}I", *values)
    big = struct.pack(f">{len(values)}I", *values)
    assert copy_swap32(little) == big