# fontserv

Building blocks for a font service protocol server. The package is pure
Python and has no third-party dependencies.

## Modules

### `fontserv.byteswap`

- `swap16(value)` and `swap32(value)` reverse the bytes of a 16-bit or a
  32-bit integer.
- `swap_shorts(data, count)` and `swap_longs(data, count)` return a copy of
  a buffer in which the first `count` 16-bit or 32-bit items are swapped.
  The rest of the buffer is copied unchanged. A `count` that is negative or
  larger than the buffer raises `ValueError`.
- `pad_to_32bit(n)` rounds `n` up to a multiple of four.
- `swap_auth(data, num, length)` normalises the authorization block sent by
  a byte-swapped client and returns it with big-endian string lengths:
  - A block already in the traditional layout (big-endian lengths, strings
    unpadded, only the total padded) is returned as it is.
  - Otherwise the lengths are read as little-endian with every string
    padded, and then swapped.
  - If neither reading accounts for exactly `length` bytes, it raises
    `BadLengthError`, a `ValueError` whose `length` attribute holds the
    length that failed.

### `fontserv.requests`

These functions swap the fixed fields of requests from clients whose byte
order differs from the server's. Each takes a mapping of field names and
returns a new dict: `swap_simple_request`, `swap_resource_request`,
`swap_query_extension`, `swap_list_request` (ListCatalogues, ListFonts,
ListFontsWithXInfo), `swap_open_bitmap_font`, `swap_query_x_extents` and
`swap_query_x_bitmaps`.

Three functions also take the data that follows the fixed fields and
return a `(fields, data)` tuple:

- `swap_create_ac(fields, auth_data)`
- `swap_conn_client_prefix(fields, auth_data)`
- `swap_set_resolution(fields, resolutions)`, which raises `BadLengthError`
  when the request length does not match the number of resolutions.

### `fontserv.resources`

`ResourceManager` keeps one hashed resource table per client, for client
indices 0 to 127. Each table doubles its bucket count as it fills.

- `init_client(cid)` gives a client a fresh, empty table.
- `add_resource(cid, rid, rtype, value)` stores a value.
- `lookup(cid, rid, rtype)` returns the stored value, or `None` if there is
  none.
- `free_resource(cid, rid, skip_type)` removes every resource with that ID.
  It raises `ResourceError` if there was none.
- `free_client_resources(cid)` releases all of one client's resources, and
  `free_all()` does so for every client.
- `register_delete(rtype, func)` sets a callback that is called as
  `func(value, rid)` whenever a resource of that type is released.
- `fake_client_id(cid)` hands out server-made IDs, which have `SERVER_BIT`
  set. When a range runs out it looks for a free one. If no range is left,
  the client is added to `marked_clients`, or `ResourceError` is raised for
  client 0.

The module also provides:

- the `ResourceType` enum (`NONE`, `FONT`, `AUTHCONT`);
- the `AuthContext` and `ClientFont` records;
- the helpers `client_bits(rid)` and `client_id(rid)`.

### `fontserv.replies`

These functions swap outgoing data for byte-swapped clients.

Reply dicts:

- `swap_generic_reply`
- `swap_query_extension_reply`
- `swap_list_catalogues_reply`
- `swap_create_ac_reply`
- `swap_get_event_mask_reply`
- `swap_list_fonts_reply`
- `swap_list_fonts_with_xinfo_reply(reply, size)`, which swaps only the
  header when `size` is 8 bytes or less
- `swap_open_bitmap_font_reply`
- `swap_query_xinfo_reply`
- `swap_query_x_extents_reply`
- `swap_query_x_bitmaps_reply`

Error events and setup dicts:

- `swap_error_event`
- `swap_conn_setup`

Packed bytes:

- `swap_connection_info`
- `swap_prop_info`
- `swap_extents(data, num)`
- `copy_swap16` and `copy_swap32`, which drop trailing bytes that do not
  make up a whole item.

### `fontserv.tables`

- `RequestCode` enumerates the protocol's major opcodes, 0 to 21.
- `DispatchException` holds the flags `RESET`, `TERMINATE`, `RECONFIG` and
  `FLUSH`.
- `request_swapper(code)` returns the request-swapping function for an
  opcode.
- `reply_swapper(code)` returns the reply-swapping function. Both raise
  `LookupError` for an opcode that has no such function.

### `fontserv.server`

- `ConnectionInfo` is the connection-accept block: vendor string, release
  number and maximum request length. Its `to_bytes()` packs the block in
  native byte order, padded to four bytes.
- `build_connection_info(...)` packs a block, and
  `parse_connection_info(data)` reads one back. Malformed data raises
  `ValueError`.
- `vendor_release(major, minor, patch)` computes a release number.
  `VENDOR_RELEASE` is the default release number and `VENDOR_STRING` the
  default vendor string.
- `Client` holds one client's state. Its `prepare_reply(code, reply, size=None)`
  returns the reply swapped when the client is byte-swapped.

## Example

```python
from fontserv.byteswap import swap16, swap32
from fontserv.resources import ResourceManager, ResourceType
from fontserv.server import build_connection_info, parse_connection_info

assert swap16(0x1234) == 0x3412
assert swap32(0x12345678) == 0x78563412

manager = ResourceManager()
manager.init_client(0)
rid = manager.fake_client_id(0)
manager.add_resource(0, rid, ResourceType.FONT, "a font")
assert manager.lookup(0, rid, ResourceType.FONT) == "a font"
manager.free_resource(0, rid, ResourceType.NONE)

block = build_connection_info("Example Vendor", 7000, 8192)
info = parse_connection_info(block)
assert info.vendor == "Example Vendor"
```

## What it does not do

This is a library of protocol pieces, not a running font server. It:

- has no command to start;
- does not listen on a port or accept connections;
- has no dispatch loop;
- does not read a configuration file;
- does not open, render or list fonts.

Requests and replies are handled as dicts of already-decoded fields. The
package swaps their byte order but does not read them from a socket or
write them to one.

## Running the tests

```
pip install -e ".[test]"
pytest
```