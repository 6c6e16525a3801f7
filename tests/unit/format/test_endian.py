"""Unit tests for the little-endian integer codec."""

import sys

from hypothesis import given
from hypothesis import strategies as st

from wavcue.format.endian import (
    decode_u16,
    decode_u32,
    decode_uint,
    encode_u16,
    encode_u32,
    encode_uint,
    is_host_little_endian,
)


class TestHostEndianness:
    """Tests for the cached host byte order check."""

    def test_matches_interpreter_byteorder(self) -> None:
        assert is_host_little_endian() == (sys.byteorder == "little")

    def test_result_is_cached(self) -> None:
        is_host_little_endian()
        hits = is_host_little_endian.cache_info().hits

        is_host_little_endian()

        assert is_host_little_endian.cache_info().hits == hits + 1


class TestEncode:
    """Tests for encoding fixed-width integers."""

    def test_u32_is_little_endian(self) -> None:
        assert encode_u32(0x12345678) == b"\x78\x56\x34\x12"

    def test_u16_is_little_endian(self) -> None:
        assert encode_u16(0xABCD) == b"\xcd\xab"

    def test_zero(self) -> None:
        assert encode_u32(0) == b"\x00\x00\x00\x00"
        assert encode_u16(0) == b"\x00\x00"

    def test_values_wrap_to_field_width(self) -> None:
        """Out-of-range values are reduced like unsigned C arithmetic."""
        assert encode_u16(0x10001) == b"\x01\x00"
        assert encode_u32(-1) == b"\xff\xff\xff\xff"

    def test_generic_width(self) -> None:
        assert encode_uint(0x0102, 2) == b"\x02\x01"
        assert encode_uint(0x01020304, 4) == b"\x04\x03\x02\x01"


class TestDecode:
    """Tests for decoding fixed-width integers."""

    def test_u32(self) -> None:
        assert decode_u32(b"\x78\x56\x34\x12") == 0x12345678

    def test_u16(self) -> None:
        assert decode_u16(b"\xcd\xab") == 0xABCD

    def test_decode_uses_leading_bytes(self) -> None:
        assert decode_u16(b"\x01\x00\xff\xff") == 1
        assert decode_u32(b"\x02\x00\x00\x00trailing") == 2

    def test_generic_width_from_length(self) -> None:
        assert decode_uint(b"\xff\xff") == 0xFFFF
        assert decode_uint(b"\xff\xff\xff\xff") == 0xFFFFFFFF

    @given(value=st.integers(min_value=0, max_value=0xFFFFFFFF))
    def test_u32_roundtrip(self, value: int) -> None:
        assert decode_u32(encode_u32(value)) == value

    @given(value=st.integers(min_value=0, max_value=0xFFFF))
    def test_u16_roundtrip(self, value: int) -> None:
        assert decode_u16(encode_u16(value)) == value

    @given(value=st.integers(min_value=0, max_value=0xFFFFFFFF))
    def test_u32_matches_int_to_bytes(self, value: int) -> None:
        assert encode_u32(value) == value.to_bytes(4, "little")
