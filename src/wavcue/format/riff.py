"""RIFF container primitives.

This module provides the FourCC identifiers, the error hierarchy, and the
codecs for the 8-byte chunk header and the 12-byte RIFF/WAVE file header.
"""

from dataclasses import dataclass
from typing import BinaryIO

from wavcue.format.endian import decode_u32, encode_u32

# FourCC identifiers
RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
FMT_ID = b"fmt "
DATA_ID = b"data"
CUE_ID = b"cue "
LIST_ID = b"LIST"
LABL_ID = b"labl"
ADTL_ID = b"adtl"

CHUNK_HEADER_SIZE = 8
FILE_HEADER_SIZE = 12


class RiffError(Exception):
    """Error reading or writing RIFF files."""


class OpenError(RiffError):
    """A source or target file could not be opened."""


class FormatError(RiffError):
    """The data is not a well-formed RIFF/WAVE structure."""


class EmptyFileError(RiffError):
    """The RIFF header declares no chunk data."""


class TruncationError(RiffError):
    """Declared sizes do not match the bytes actually present."""


def read_exact(f: BinaryIO, size: int, what: str = "chunk data") -> bytes:
    """Read exactly ``size`` bytes or raise TruncationError."""
    data = f.read(size)
    if len(data) < size:
        raise TruncationError(
            f"Unexpected end of file reading {what} (wanted {size} bytes, got {len(data)})"
        )
    return data


def padded_size(size: int) -> int:
    """Round a byte count up to the next even number."""
    return size + (size % 2)


@dataclass
class ChunkHeader:
    """The id + length prefix shared by every chunk."""

    chunk_id: bytes
    size: int
    """Payload length, excluding this header and any pad byte."""

    @classmethod
    def read(cls, f: BinaryIO) -> "ChunkHeader":
        """Read a RIFF chunk header (FourCC + size).

        Args:
            f: File handle positioned at the start of a chunk.

        Returns:
            The decoded header.

        Raises:
            TruncationError: If the header cannot be read.
        """
        header = f.read(CHUNK_HEADER_SIZE)
        if len(header) < CHUNK_HEADER_SIZE:
            raise TruncationError("Unexpected end of file reading chunk header")

        return cls(chunk_id=header[:4], size=decode_u32(header[4:8]))

    def to_bytes(self) -> bytes:
        return self.chunk_id + encode_u32(self.size)


@dataclass
class WaveHeader:
    """The 12-byte RIFF/WAVE file header."""

    riff_size: int = 4
    """Total file bytes minus 8: the form type plus every chunk."""

    @classmethod
    def read(cls, f: BinaryIO) -> "WaveHeader":
        """Read and validate the RIFF/WAVE file header.

        Raises:
            FormatError: If the file is too short or not a RIFF/WAVE file.
        """
        riff_header = f.read(FILE_HEADER_SIZE)
        if len(riff_header) < FILE_HEADER_SIZE:
            raise FormatError("File too small to be a valid WAV file")

        if riff_header[:4] != RIFF_ID:
            raise FormatError("Input file is not a RIFF file")

        if riff_header[8:12] != WAVE_ID:
            raise FormatError("Input file is not a WAVE file")

        return cls(riff_size=decode_u32(riff_header[4:8]))

    def to_bytes(self) -> bytes:
        return RIFF_ID + encode_u32(self.riff_size) + WAVE_ID
