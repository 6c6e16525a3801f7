"""Chunk payload variants and the chunk object codec.

Every chunk in a WAVE file decodes into a ``ChunkObject`` that owns exactly
one payload. The payload variant is picked from the chunk id by
``create_payload``:

    "fmt "  -> FormatChunk   (audio format descriptor)
    "cue "  -> CueChunk      (ordered cue points)
    "LIST"  -> ListChunk     (type tag + nested chunk objects)
    "labl"  -> LabelChunk    (text label bound to a cue point id)
    other   -> GeneralChunk  (opaque bytes, written back unchanged)

Each payload knows its id, its declared ``size`` and how to read itself from
a stream and encode itself back to bytes. ``ChunkObject`` adds the 8-byte
header and the pad byte that keeps odd-length payloads word aligned.
"""

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, ClassVar

from wavcue.format.endian import decode_u16, decode_u32, encode_u16, encode_u32
from wavcue.format.riff import (
    ADTL_ID,
    CHUNK_HEADER_SIZE,
    CUE_ID,
    DATA_ID,
    FMT_ID,
    LABL_ID,
    LIST_ID,
    ChunkHeader,
    FormatError,
    TruncationError,
    padded_size,
    read_exact,
)

logger = logging.getLogger(__name__)

# Size of the fixed PCM part of a fmt chunk
FMT_BASE_SIZE = 16


@dataclass
class GeneralChunk:
    """Any chunk without a dedicated variant, kept as raw bytes."""

    chunk_id: bytes
    data: bytes = b""

    @property
    def size(self) -> int:
        return len(self.data)

    def read(self, f: BinaryIO, size: int) -> None:
        self.data = read_exact(f, size, f"{self.chunk_id!r} chunk")

    def to_bytes(self) -> bytes:
        return self.data


@dataclass
class FormatChunk:
    """The ``fmt `` chunk describing how the sample data is encoded."""

    chunk_id: ClassVar[bytes] = FMT_ID

    compression_code: int = 0
    num_channels: int = 0
    sample_rate: int = 0
    avg_bytes_per_second: int = 0
    block_align: int = 0
    bits_per_sample: int = 0
    extra_data: bytes = b""
    """Format-specific bytes following the 16-byte PCM descriptor."""

    @property
    def size(self) -> int:
        return FMT_BASE_SIZE + len(self.extra_data)

    def read(self, f: BinaryIO, size: int) -> None:
        if size < FMT_BASE_SIZE:
            raise FormatError(f"fmt chunk too small ({size} bytes)")

        data = read_exact(f, size, "fmt chunk")
        self.compression_code = decode_u16(data[0:2])
        self.num_channels = decode_u16(data[2:4])
        self.sample_rate = decode_u32(data[4:8])
        self.avg_bytes_per_second = decode_u32(data[8:12])
        self.block_align = decode_u16(data[12:14])
        self.bits_per_sample = decode_u16(data[14:16])
        self.extra_data = data[FMT_BASE_SIZE:]

    def to_bytes(self) -> bytes:
        return b"".join(
            [
                encode_u16(self.compression_code),
                encode_u16(self.num_channels),
                encode_u32(self.sample_rate),
                encode_u32(self.avg_bytes_per_second),
                encode_u16(self.block_align),
                encode_u16(self.bits_per_sample),
                self.extra_data,
            ]
        )


@dataclass
class CuePoint:
    """A single marker in a cue chunk."""

    SIZE: ClassVar[int] = 24

    cue_point_id: int = 0
    play_order_position: int = 0
    data_chunk_id: bytes = DATA_ID
    chunk_start: int = 0
    block_start: int = 0
    frame_offset: int = 0
    """Sample frame the marker points at."""

    @classmethod
    def from_bytes(cls, data: bytes) -> "CuePoint":
        return cls(
            cue_point_id=decode_u32(data[0:4]),
            play_order_position=decode_u32(data[4:8]),
            data_chunk_id=data[8:12],
            chunk_start=decode_u32(data[12:16]),
            block_start=decode_u32(data[16:20]),
            frame_offset=decode_u32(data[20:24]),
        )

    def to_bytes(self) -> bytes:
        return b"".join(
            [
                encode_u32(self.cue_point_id),
                encode_u32(self.play_order_position),
                self.data_chunk_id,
                encode_u32(self.chunk_start),
                encode_u32(self.block_start),
                encode_u32(self.frame_offset),
            ]
        )


@dataclass
class CueChunk:
    """The ``cue `` chunk: a point count followed by fixed-size cue points."""

    chunk_id: ClassVar[bytes] = CUE_ID

    points: list[CuePoint] = field(default_factory=list)

    @property
    def size(self) -> int:
        return 4 + CuePoint.SIZE * len(self.points)

    def read(self, f: BinaryIO, size: int) -> None:
        if size < 4:
            raise FormatError(f"cue chunk too small ({size} bytes)")

        data = read_exact(f, size, "cue chunk")
        count = decode_u32(data[0:4])
        expected = 4 + CuePoint.SIZE * count
        if expected > size:
            raise FormatError(f"cue chunk declares {count} points but holds only {size} bytes")
        if expected < size:
            logger.warning("Dropping %d trailing bytes from cue chunk", size - expected)

        self.points = [
            CuePoint.from_bytes(data[offset : offset + CuePoint.SIZE])
            for offset in range(4, expected, CuePoint.SIZE)
        ]

    def to_bytes(self) -> bytes:
        return encode_u32(len(self.points)) + b"".join(p.to_bytes() for p in self.points)

    def find_point(self, frame_offset: int) -> CuePoint | None:
        """Return the point at ``frame_offset``, if any."""
        for point in self.points:
            if point.frame_offset == frame_offset:
                return point
        return None

    def add_point_if_absent(self, frame_offset: int) -> int:
        """Add a cue point at ``frame_offset`` unless one is already there.

        Args:
            frame_offset: Sample frame the new point refers to.

        Returns:
            The id of the existing point with that offset, or of the newly
            appended point (numbered ``len(points) + 1``).
        """
        existing = self.find_point(frame_offset)
        if existing is not None:
            return existing.cue_point_id

        point = CuePoint(cue_point_id=len(self.points) + 1, frame_offset=frame_offset)
        self.points.append(point)
        return point.cue_point_id


def _encode_label(label: str) -> bytes:
    return label.encode("utf-8", errors="surrogateescape")


@dataclass
class LabelChunk:
    """A ``labl`` entry of an ``adtl`` LIST: a NUL-terminated label for a cue point."""

    chunk_id: ClassVar[bytes] = LABL_ID

    cue_point_id: int = 0
    label: str = ""

    @property
    def size(self) -> int:
        return len(_encode_label(self.label)) + 5

    def read(self, f: BinaryIO, size: int) -> None:
        if size < 4:
            raise FormatError(f"labl chunk too small ({size} bytes)")

        data = read_exact(f, size, "labl chunk")
        self.cue_point_id = decode_u32(data[0:4])
        text = data[4:].split(b"\x00", 1)[0]
        self.label = text.decode("utf-8", errors="surrogateescape")

    def to_bytes(self) -> bytes:
        return encode_u32(self.cue_point_id) + _encode_label(self.label) + b"\x00"


@dataclass
class ListChunk:
    """A ``LIST`` chunk: a 4-byte list type followed by nested chunks."""

    chunk_id: ClassVar[bytes] = LIST_ID

    list_type: bytes = ADTL_ID
    chunks: list["ChunkObject"] = field(default_factory=list)

    @property
    def size(self) -> int:
        return 4 + sum(chunk.on_disk_size for chunk in self.chunks)

    def read(self, f: BinaryIO, size: int) -> None:
        if size < 4:
            raise FormatError(f"LIST chunk too small ({size} bytes)")

        self.list_type = read_exact(f, 4, "LIST type")
        self.chunks = []
        remaining = size - 4

        while remaining > 0:
            chunk, consumed = read_chunk(f)
            self.chunks.append(chunk)
            remaining -= consumed

        if remaining != 0:
            raise TruncationError(
                f"LIST {self.list_type!r} nested chunks overrun its declared size "
                f"by {-remaining} bytes"
            )

    def to_bytes(self) -> bytes:
        return self.list_type + b"".join(chunk.to_bytes() for chunk in self.chunks)

    def add(self, payload: "ChunkPayload") -> "ChunkObject":
        """Append a new nested chunk owning ``payload``."""
        chunk = ChunkObject(payload)
        self.chunks.append(chunk)
        return chunk

    def labels(self) -> list[LabelChunk]:
        """Return the ``labl`` entries of this list, in order."""
        return [chunk.payload for chunk in self.chunks if isinstance(chunk.payload, LabelChunk)]


ChunkPayload = GeneralChunk | FormatChunk | CueChunk | LabelChunk | ListChunk

_PAYLOAD_TYPES: dict[bytes, type[FormatChunk | CueChunk | LabelChunk | ListChunk]] = {
    CUE_ID: CueChunk,
    LABL_ID: LabelChunk,
    LIST_ID: ListChunk,
    FMT_ID: FormatChunk,
}


def create_payload(header: ChunkHeader) -> ChunkPayload:
    """Return an empty payload of the variant registered for ``header.chunk_id``.

    Unknown ids yield a ``GeneralChunk`` carrying that id.
    """
    payload_type = _PAYLOAD_TYPES.get(header.chunk_id)
    if payload_type is None:
        return GeneralChunk(chunk_id=header.chunk_id)
    return payload_type()


@dataclass
class ChunkObject:
    """A chunk on disk: header, owned payload and optional pad byte."""

    payload: ChunkPayload

    @property
    def chunk_id(self) -> bytes:
        return self.payload.chunk_id

    @property
    def on_disk_size(self) -> int:
        """Header plus payload, rounded up to an even byte count."""
        return padded_size(CHUNK_HEADER_SIZE + self.payload.size)

    def header(self) -> ChunkHeader:
        return ChunkHeader(chunk_id=self.payload.chunk_id, size=self.payload.size)

    def to_bytes(self) -> bytes:
        data = self.payload.to_bytes()
        if len(data) % 2:
            data += b"\x00"
        return self.header().to_bytes() + data


def read_chunk(f: BinaryIO) -> tuple[ChunkObject, int]:
    """Decode one chunk object from ``f``.

    Args:
        f: File handle positioned at the start of a chunk header.

    Returns:
        Tuple of (chunk, bytes consumed including header and pad byte).

    Raises:
        TruncationError: If the stream ends inside the chunk.
        FormatError: If the payload is structurally invalid.
    """
    header = ChunkHeader.read(f)
    payload = create_payload(header)
    payload.read(f, header.size)

    # Consumes one byte whatever it holds; a short read here means the
    # stream ended without the pad byte
    if header.size % 2:
        f.read(1)

    return ChunkObject(payload), padded_size(CHUNK_HEADER_SIZE + header.size)


def write_chunk(f: BinaryIO, chunk: ChunkObject) -> None:
    """Encode ``chunk`` (header, payload, pad byte) into ``f``."""
    f.write(chunk.to_bytes())
