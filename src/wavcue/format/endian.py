"""Little-endian integer codec for RIFF fields.

RIFF stores every multi-byte integer little-endian. Values are packed in
the host's native order and reversed when the host is big-endian, so the
on-disk bytes are the same on every machine.
"""

import struct
import sys
from functools import cache

# struct formats in native byte order, keyed by field width in bytes
_NATIVE_FORMATS = {2: "=H", 4: "=I"}


@cache
def is_host_little_endian() -> bool:
    """Return True if the running interpreter stores integers little-endian.

    Computed on first use and cached for the lifetime of the process.
    """
    return sys.byteorder == "little"


def encode_uint(value: int, width: int) -> bytes:
    """Encode an unsigned integer as ``width`` little-endian bytes.

    Args:
        value: The integer to encode. It is reduced modulo 2**(8 * width),
            matching fixed-width unsigned arithmetic.
        width: Field width in bytes (2 or 4).

    Returns:
        The little-endian byte representation.
    """
    fmt = _NATIVE_FORMATS[width]
    raw = struct.pack(fmt, value & ((1 << (8 * width)) - 1))
    if is_host_little_endian():
        return raw
    return raw[::-1]


def decode_uint(data: bytes) -> int:
    """Decode a 2- or 4-byte little-endian unsigned integer."""
    fmt = _NATIVE_FORMATS[len(data)]
    if not is_host_little_endian():
        data = bytes(reversed(data))
    return struct.unpack(fmt, data)[0]


def encode_u16(value: int) -> bytes:
    return encode_uint(value, 2)


def encode_u32(value: int) -> bytes:
    return encode_uint(value, 4)


def decode_u16(data: bytes) -> int:
    return decode_uint(data[:2])


def decode_u32(data: bytes) -> int:
    return decode_uint(data[:4])
