"""Font service protocol primitives: byte swapping, resource tables, request and reply swapping, connection setup."""

__version__ = "1.2.2"

__all__ = ["byteswap", "requests", "resources", "replies", "tables", "server"]