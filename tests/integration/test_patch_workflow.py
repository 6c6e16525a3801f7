"""Integration tests for patching complete WAVE files on disk."""

import struct
from pathlib import Path

from wavcue.cli.commands import app
from wavcue.format import CueChunk, LabelChunk, ListChunk, WaveFile, patch_file


def make_chunk(chunk_id: bytes, payload: bytes) -> bytes:
    pad = b"\x00" if len(payload) % 2 else b""
    return chunk_id + struct.pack("<I", len(payload)) + payload + pad


def make_wav(*chunks: bytes) -> bytes:
    body = b"".join(chunks)
    return b"RIFF" + struct.pack("<I", 4 + len(body)) + b"WAVE" + body


def split_chunks(raw: bytes) -> dict[bytes, bytes]:
    """Map top-level chunk id to its raw bytes (header, payload and pad)."""
    chunks = {}
    pos = 12
    while pos < len(raw):
        chunk_id = raw[pos : pos + 4]
        size = struct.unpack("<I", raw[pos + 4 : pos + 8])[0]
        end = pos + 8 + size + size % 2
        chunks[chunk_id] = raw[pos:end]
        pos = end
    return chunks


# WAVE_FORMAT_EXTENSIBLE descriptor with 22 bytes of extension data
FMT_EXTENSIBLE = make_chunk(
    b"fmt ",
    struct.pack("<HHIIHH", 0xFFFE, 2, 48000, 288000, 6, 24)
    + struct.pack("<HHI", 22, 24, 3)
    + b"\x01\x00\x00\x00\x00\x00\x10\x00\x80\x00\x00\xaa\x00\x38\x9b\x71",
)
BEXT = make_chunk(b"bext", b"Broadcast description".ljust(257, b"\x00"))
INFO = make_chunk(
    b"LIST",
    b"INFO" + make_chunk(b"INAM", b"Session\x00") + make_chunk(b"ISFT", b"recorder 1.2\x00"),
)
DATA = make_chunk(b"data", bytes(range(256)) * 3 + b"\x01\x02\x03")
OLD_CUE = make_chunk(
    b"cue ",
    struct.pack("<I", 2)
    + struct.pack("<II4sIII", 1, 0, b"data", 0, 0, 0)
    + struct.pack("<II4sIII", 2, 0, b"data", 0, 0, 96000),
)
OLD_ADTL = make_chunk(
    b"LIST",
    b"adtl"
    + make_chunk(b"labl", struct.pack("<I", 1) + b"start\x00")
    + make_chunk(b"labl", struct.pack("<I", 2) + b"end\x00"),
)


class TestPatchWorkflow:
    """Load, patch and save a multi-chunk file."""

    def test_unrelated_chunks_are_byte_identical(self, tmp_path: Path) -> None:
        source = tmp_path / "session.wav"
        target = tmp_path / "session_marked.wav"
        source.write_bytes(make_wav(FMT_EXTENSIBLE, BEXT, DATA, OLD_CUE, OLD_ADTL))

        patch_file(source, target)

        raw = target.read_bytes()
        chunks = split_chunks(raw)
        assert list(chunks) == [b"fmt ", b"bext", b"data", b"cue ", b"LIST"]
        assert chunks[b"fmt "] == FMT_EXTENSIBLE
        assert chunks[b"bext"] == BEXT
        assert chunks[b"data"] == DATA
        assert struct.unpack("<I", raw[4:8])[0] == len(raw) - 8

    def test_markers_are_replaced(self, tmp_path: Path) -> None:
        source = tmp_path / "session.wav"
        target = tmp_path / "session_marked.wav"
        source.write_bytes(make_wav(FMT_EXTENSIBLE, DATA, OLD_CUE, OLD_ADTL))

        patch_file(source, target)

        wave = WaveFile.load(target)
        cue = wave.find_chunk(b"cue ")
        lst = wave.find_chunk(b"LIST")
        assert cue is not None and isinstance(cue.payload, CueChunk)
        assert lst is not None and isinstance(lst.payload, ListChunk)
        assert [(p.cue_point_id, p.frame_offset) for p in cue.payload.points] == [(1, 0)]
        assert lst.payload.labels() == [LabelChunk(cue_point_id=1, label="session")]

    def test_info_list_is_treated_as_the_label_list(self, tmp_path: Path) -> None:
        """The first LIST chunk is removed, whatever its list type."""
        source = tmp_path / "take.wav"
        target = tmp_path / "out.wav"
        source.write_bytes(make_wav(FMT_EXTENSIBLE, INFO, DATA))

        patch_file(source, target)

        chunks = split_chunks(target.read_bytes())
        assert list(chunks) == [b"fmt ", b"data", b"cue ", b"LIST"]
        assert chunks[b"LIST"][8:12] == b"adtl"

    def test_patching_twice_is_stable(self, tmp_path: Path) -> None:
        source = tmp_path / "loop.wav"
        once = tmp_path / "once.wav"
        twice = tmp_path / "loop2.wav"
        source.write_bytes(make_wav(FMT_EXTENSIBLE, DATA))

        patch_file(source, once, label="loop")
        patch_file(once, twice, label="loop")

        assert once.read_bytes() == twice.read_bytes()

    def test_cli_end_to_end(self, tmp_path: Path) -> None:
        source = tmp_path / "kick.wav"
        target = tmp_path / "kick_marked.wav"
        source.write_bytes(make_wav(FMT_EXTENSIBLE, BEXT, INFO, DATA, OLD_CUE))

        assert app([str(source), str(target), "--strict"]) == 0

        wave = WaveFile.load(target)
        assert wave.header.riff_size == wave.computed_riff_size
        lst = wave.find_chunk(b"LIST")
        assert lst is not None and isinstance(lst.payload, ListChunk)
        assert [label.label for label in lst.payload.labels()] == ["kick"]
