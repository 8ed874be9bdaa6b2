"""Server-wide settings, per-client state and the connection-accept block."""

from __future__ import annotations

import struct
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .resources import MAXCLIENTS, AuthContext
from .tables import RequestCode, reply_swapper

__all__ = [
    "Client",
    "ConnectionInfo",
    "vendor_release",
    "build_connection_info",
    "parse_connection_info",
    "VENDOR_STRING",
    "VENDOR_RELEASE",
    "DEFAULT_FS_PORT",
    "MAX_REQUEST_SIZE",
    "CLIENT_TIMEOUT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_CLIENT_LIMIT",
    "SERVER_CLIENT",
    "MINCLIENT",
    "MAXCLIENTS",
    "CLIENT_ALIVE",
    "CLIENT_GONE",
    "CLIENT_AGED",
    "CLIENT_TIMED_OUT",
    "CONN_SETUP_ACCEPT_SIZE",
]

SERVER_CLIENT = 0
MINCLIENT = 1

CLIENT_ALIVE = 0
CLIENT_GONE = 1
CLIENT_AGED = 2
CLIENT_TIMED_OUT = 4

# Seconds; a client silent for twice this long is dropped.
CLIENT_TIMEOUT = 600
DEFAULT_TIMEOUT = 60
DEFAULT_CLIENT_LIMIT = 20

DEFAULT_FS_PORT = 7100
MAX_REQUEST_SIZE = 8192

CONN_SETUP_ACCEPT_SIZE = 12
_ACCEPT_FORMAT = "=IHHI"

_PACKAGE_VERSION = (1, 2, 2)


def vendor_release(major: int, minor: int, patch: int) -> int:
    """Combine a version triple into the release number sent to clients."""
    return major * 10000000 + minor * 100000 + patch * 1000


VENDOR_STRING = "X.Org Foundation"
VENDOR_RELEASE = vendor_release(*_PACKAGE_VERSION)


def _pad4(n: int) -> int:
    return (n + 3) & ~3


@dataclass(frozen=True)
class ConnectionInfo:
    """The block sent to a client whose connection has been accepted."""

    vendor: str = VENDOR_STRING
    release_number: int = VENDOR_RELEASE
    max_request_len: int = MAX_REQUEST_SIZE

    @property
    def vendor_bytes(self) -> bytes:
        return self.vendor.encode("latin-1")

    @property
    def length(self) -> int:
        """Length of the whole block in 4-byte units."""
        return (CONN_SETUP_ACCEPT_SIZE + len(self.vendor_bytes) + 3) >> 2

    def to_bytes(self) -> bytes:
        """Pack the block in the server's byte order, padded to 4 bytes."""
        vendor = self.vendor_bytes
        if len(vendor) > 0xFFFF:
            raise ValueError("vendor string too long")
        if not 0 <= self.max_request_len <= 0xFFFF:
            raise ValueError("max_request_len does not fit 16 bits")
        if not 0 <= self.release_number <= 0xFFFFFFFF:
            raise ValueError("release_number does not fit 32 bits")
        header = struct.pack(
            _ACCEPT_FORMAT,
            self.length,
            self.max_request_len,
            len(vendor),
            self.release_number,
        )
        padding = b"\0" * (_pad4(len(vendor)) - len(vendor))
        return header + vendor + padding


def build_connection_info(
    vendor: str = VENDOR_STRING,
    release_number: int = VENDOR_RELEASE,
    max_request_len: int = MAX_REQUEST_SIZE,
) -> bytes:
    """Return the packed connection-accept block."""
    return ConnectionInfo(vendor, release_number, max_request_len).to_bytes()


def parse_connection_info(data: bytes | bytearray) -> ConnectionInfo:
    """Read a connection-accept block packed in the server's byte order."""
    if len(data) < CONN_SETUP_ACCEPT_SIZE:
        raise ValueError(
            f"connection info needs {CONN_SETUP_ACCEPT_SIZE} bytes, got {len(data)}"
        )
    length, max_request_len, vendor_len, release_number = struct.unpack(
        _ACCEPT_FORMAT, bytes(data[:CONN_SETUP_ACCEPT_SIZE])
    )
    end = CONN_SETUP_ACCEPT_SIZE + vendor_len
    if end > len(data):
        raise ValueError(f"vendor string needs {end} bytes, got {len(data)}")
    info = ConnectionInfo(
        vendor=bytes(data[CONN_SETUP_ACCEPT_SIZE:end]).decode("latin-1"),
        release_number=release_number,
        max_request_len=max_request_len,
    )
    if info.length != length:
        raise ValueError(
            f"length field says {length} units, contents need {info.length}"
        )
    return info


@dataclass
class Client:
    """State the server keeps for one connected client."""

    index: int
    swapped: bool = False
    sequence: int = 0
    client_gone: int = CLIENT_ALIVE
    no_client_exception: int = 0
    last_request_time: int = 0
    auth: AuthContext | None = None
    default_auth: AuthContext | None = None
    auth_generation: int = 0
    catalogues: list[str] = field(default_factory=list)
    eventmask: int = 0
    resolutions: list[tuple[int, int, int]] = field(default_factory=list)
    major_version: int = 0
    minor_version: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.index < MAXCLIENTS:
            raise ValueError(f"client index {self.index} out of range")

    @property
    def is_server(self) -> bool:
        return self.index == SERVER_CLIENT

    def prepare_reply(
        self,
        code: int,
        reply: Mapping[str, Any],
        size: int | None = None,
    ) -> dict[str, Any]:
        """Return ``reply`` in the byte order this client expects.

        For a byte-swapped client the reply routine for request ``code``
        is applied; LookupError is raised if that request has none.
        ``size`` is needed only for ListFontsWithXInfo replies.
        """
        if not self.swapped:
            return dict(reply)
        swapper = reply_swapper(code)
        if int(code) == RequestCode.LIST_FONTS_WITH_XINFO:
            if size is None:
                raise ValueError("size is needed for this reply")
            return swapper(reply, size)
        return swapper(reply)