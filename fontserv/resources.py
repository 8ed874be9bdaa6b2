"""Per-client resource tables for the font server.

A resource ID is a 32-bit quantity. Bits 22-28 name the owning client
and the low 22 bits are chosen by that client. Bit 29 is reserved for
IDs that the server makes up on a client's behalf, so they can never
clash with one the client creates itself.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

__all__ = [
    "ResourceType",
    "ResourceError",
    "AuthContext",
    "ClientFont",
    "ResourceManager",
    "client_bits",
    "client_id",
    "MAXCLIENTS",
    "CLIENTOFFSET",
    "RESOURCE_ID_MASK",
    "SERVER_BIT",
    "RC_VANILLA",
    "RC_CACHED",
    "RC_LASTPREDEF",
    "RC_ANY",
    "INVALID",
    "BAD_RESOURCE",
]

MAXCLIENTS = 128

RC_VANILLA = 0
RC_CACHED = 1 << 31
RC_LASTPREDEF = RC_CACHED
RC_ANY = 0xFFFFFFFF

CLIENTOFFSET = 22
RESOURCE_ID_MASK = 0x3FFFFF
_CLIENT_BITS_MASK = 0x1FC00000
SERVER_BIT = 0x20000000

INVALID = 0
BAD_RESOURCE = 0xE0000000

_TYPE_MASK = RC_LASTPREDEF - 1
_INIT_BUCKETS = 64
_INIT_HASH_SIZE = 6
_MAX_HASH_SIZE = 11

DeleteFunc = Callable[[Any, int], Any]


class ResourceType(IntEnum):
    """Predefined resource types."""

    NONE = 0
    FONT = 1
    AUTHCONT = 2


class ResourceError(RuntimeError):
    """The resource tables were used in a way that cannot be honoured."""


@dataclass
class AuthContext:
    """An authorization context created by a client."""

    authname: str | bytes
    authdata: str | bytes
    acid: int


@dataclass
class ClientFont:
    """A client's handle on an opened font."""

    font: Any
    client_index: int


def client_bits(rid: int) -> int:
    """Return the client-number bits of a resource ID, left in place."""
    return rid & _CLIENT_BITS_MASK


def client_id(rid: int) -> int:
    """Return the number of the client that owns a resource ID."""
    return client_bits(rid) >> CLIENTOFFSET


@dataclass
class _Resource:
    rid: int
    rtype: int
    value: Any


@dataclass
class _ClientTable:
    buckets: list[list[_Resource]] = field(
        default_factory=lambda: [[] for _ in range(_INIT_BUCKETS)]
    )
    hashsize: int = _INIT_HASH_SIZE
    elements: int = 0
    fake_id: int = SERVER_BIT
    end_fake_id: int = (SERVER_BIT | RESOURCE_ID_MASK) + 1
    expect_id: int = 0

    def hash(self, rid: int) -> int:
        rid &= RESOURCE_ID_MASK
        size = self.hashsize
        if size == 6:
            return 0x03F & (rid ^ (rid >> 6) ^ (rid >> 12))
        if size == 7:
            return 0x07F & (rid ^ (rid >> 7) ^ (rid >> 13))
        if size == 8:
            return 0x0FF & (rid ^ (rid >> 8) ^ (rid >> 16))
        if size == 9:
            return 0x1FF & (rid ^ (rid >> 9))
        if size == 10:
            return 0x3FF & (rid ^ (rid >> 10))
        return 0x7FF & (rid ^ (rid >> 11))

    def bucket(self, rid: int) -> list[_Resource]:
        return self.buckets[self.hash(rid)]

    def has_id(self, rid: int) -> bool:
        return any(res.rid == rid for res in self.bucket(rid))

    def rebuild(self) -> None:
        # Keep each chain in its existing order so that resources are
        # still released in the reverse of the order they were added.
        old = self.buckets
        self.hashsize += 1
        self.buckets = [[] for _ in range(2 * len(old))]
        for chain in old:
            for res in chain:
                self.bucket(res.rid).append(res)


class ResourceManager:
    """Hash tables of resources, one per client."""

    def __init__(self) -> None:
        self._tables: dict[int, _ClientTable] = {}
        # Types with no registered function need nothing done on release.
        self._delete_funcs: dict[int, DeleteFunc] = {}
        self.marked_clients: set[int] = set()

    def register_delete(self, rtype: int, func: DeleteFunc) -> None:
        """Set the function called with ``(value, rid)`` when a resource of ``rtype`` goes."""
        self._delete_funcs[rtype & _TYPE_MASK] = func

    def _delete(self, res: _Resource) -> None:
        func = self._delete_funcs.get(res.rtype & _TYPE_MASK)
        if func is not None:
            func(res.value, res.rid)

    @staticmethod
    def _check_cid(cid: int) -> None:
        if not 0 <= cid < MAXCLIENTS:
            raise ResourceError(f"client index {cid} out of range")

    def _table(self, cid: int) -> _ClientTable:
        self._check_cid(cid)
        table = self._tables.get(cid)
        if table is None:
            raise ResourceError(f"client {cid} not in use")
        return table

    def init_client(self, cid: int) -> None:
        """Give a client a fresh, empty resource table."""
        self._check_cid(cid)
        self._tables[cid] = _ClientTable()

    def add_resource(self, cid: int, rid: int, rtype: int, value: Any) -> None:
        """Record ``value`` under ``rid`` and ``rtype`` for client ``cid``."""
        table = self._table(cid)
        if (
            table.elements >= 4 * len(table.buckets)
            and table.hashsize < _MAX_HASH_SIZE
        ):
            table.rebuild()
        table.bucket(rid).insert(0, _Resource(rid, rtype, value))
        table.elements += 1
        if not rid & SERVER_BIT and rid >= table.expect_id:
            table.expect_id = rid + 1

    def free_resource(self, cid: int, rid: int, skip_type: int) -> None:
        """Remove every resource with ID ``rid``.

        The delete function is called for each, except those whose type
        equals ``skip_type``. Raises ResourceError if none was found.
        """
        self._check_cid(cid)
        found = False
        while (table := self._tables.get(cid)) is not None:
            chain = table.bucket(rid)
            res = next((r for r in chain if r.rid == rid), None)
            if res is None:
                break
            chain.remove(res)
            table.elements -= 1
            found = True
            if res.rtype != skip_type:
                self._delete(res)
        if not found:
            raise ResourceError(f"freeing resource id={rid:X} which isn't there")

    def free_client_resources(self, cid: int) -> None:
        """Release all of a client's resources and retire its table."""
        self._check_cid(cid)
        table = self._tables.get(cid)
        if table is None:
            return
        # Chains stay valid while emptying, as delete functions may look
        # up other resources of the same client.
        for chain in table.buckets:
            while chain:
                res = chain.pop(0)
                table.elements -= 1
                self._delete(res)
        del self._tables[cid]

    def free_all(self) -> None:
        """Release the resources of every client in use."""
        for cid in sorted(self._tables):
            self.free_client_resources(cid)

    def lookup(self, cid: int, rid: int, rtype: int) -> Any:
        """Return the value stored with this ID and type, or None."""
        self._check_cid(cid)
        table = self._tables.get(cid)
        if table is None:
            return None
        for res in table.bucket(rid):
            if res.rid == rid and res.rtype == rtype:
                return res.value
        return None

    def _available_id(
        self, table: _ClientTable, first: int, last: int, good: int
    ) -> int:
        if first <= good <= last:
            return good
        for candidate in range(first, last + 1):
            if not table.has_id(candidate):
                return candidate
        return 0

    def fake_client_id(self, cid: int) -> int:
        """Return the next server-made ID for client ``cid``.

        When the current range is used up, a fresh range clear of the
        client's existing resources is found. If there is none, the
        client is added to ``marked_clients`` and a reserve range is
        used; for the server itself this raises ResourceError.
        """
        table = self._table(cid)
        rid = table.fake_id
        table.fake_id += 1
        if rid != table.end_fake_id:
            return rid

        low = (cid << CLIENTOFFSET) | SERVER_BIT
        high = low | RESOURCE_ID_MASK
        good = 0
        for chain in list(table.buckets):
            for res in list(chain):
                if res.rid < low or res.rid > high:
                    continue
                if res.rid - low >= high - res.rid:
                    good = self._available_id(table, low, res.rid - 1, good)
                    if good:
                        high = res.rid - 1
                    else:
                        low = res.rid + 1
                else:
                    good = self._available_id(table, res.rid + 1, high, good)
                    if not good:
                        high = res.rid - 1
                    else:
                        low = res.rid + 1
        if low > high:
            if not cid:
                raise ResourceError("fake_client_id: server internal ids exhausted")
            self.marked_clients.add(cid)
            low = (cid << CLIENTOFFSET) | (SERVER_BIT * 3)
            high = low | RESOURCE_ID_MASK
        table.fake_id = low + 1
        table.end_fake_id = high + 1
        return low