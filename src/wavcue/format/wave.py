"""WAVE container: load, save and cue/label patching.

A ``WaveFile`` holds the RIFF header and the ordered top-level chunks of a
WAVE file. The whole chunk tree is decoded into memory on load and encoded
back in the same order on save; chunks that are not touched by the patch
operations are written back byte for byte.
"""

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath
from typing import BinaryIO, cast

from wavcue.format.chunks import (
    ChunkObject,
    CueChunk,
    LabelChunk,
    ListChunk,
    read_chunk,
    write_chunk,
)
from wavcue.format.riff import (
    CUE_ID,
    LIST_ID,
    EmptyFileError,
    OpenError,
    TruncationError,
    WaveHeader,
)

logger = logging.getLogger(__name__)


@dataclass
class ChunkSummary:
    """One row of ``WaveFile.describe``."""

    chunk_id: str
    on_disk_size: int
    depth: int = 0
    detail: str = ""


@dataclass
class WaveFile:
    """An in-memory RIFF/WAVE file."""

    header: WaveHeader = field(default_factory=WaveHeader)
    chunks: list[ChunkObject] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path | str) -> "WaveFile":
        """Load a WAVE file and decode its complete chunk tree.

        Args:
            path: Path to the WAV file.

        Returns:
            The decoded file.

        Raises:
            OpenError: If the file cannot be opened.
            FormatError: If the file is not a RIFF/WAVE file.
            EmptyFileError: If the header declares no chunk data.
            TruncationError: If the file is shorter than its declared sizes.
        """
        path = Path(path)

        try:
            f = open(path, "rb")
        except OSError as e:
            raise OpenError(f"Can't open the specified file \"{path}\"") from e

        with f:
            logger.debug('Loading file "%s"...', path)
            return cls.read(f)

    @classmethod
    def read(cls, f: BinaryIO) -> "WaveFile":
        """Decode a WAVE file from an open binary stream.

        Chunks are decoded until the declared RIFF size is used up. Running
        out of stream first, or a chunk that overruns the declared size,
        raises TruncationError.
        """
        header = WaveHeader.read(f)

        remaining = header.riff_size - 4
        if remaining <= 0:
            raise EmptyFileError("Input file is an empty WAVE file")

        wave = cls(header=header)
        while remaining > 0:
            chunk, consumed = read_chunk(f)
            wave.chunks.append(chunk)
            remaining -= consumed
            logger.debug(
                'Found chunk "%s", size %d bytes',
                chunk.chunk_id.decode("latin-1"),
                chunk.on_disk_size,
            )

        if remaining < 0:
            raise TruncationError(
                f"Chunk \"{wave.chunks[-1].chunk_id.decode('latin-1')}\" overruns the declared "
                f"RIFF size by {-remaining} bytes"
            )

        computed = wave.computed_riff_size
        if computed != header.riff_size:
            logger.warning(
                "Declared RIFF size %d differs from decoded size %d; using decoded size",
                header.riff_size,
                computed,
            )
            wave.header.riff_size = computed

        return wave

    def save(self, path: Path | str) -> None:
        """Write the file to ``path``.

        The complete file image is encoded before the target is opened.

        Raises:
            OpenError: If the target cannot be opened for writing.
        """
        path = Path(path)
        data = self.to_bytes()

        try:
            f = open(path, "wb")
        except OSError as e:
            raise OpenError(f"Can't open the target file \"{path}\" for writing") from e

        with f:
            f.write(data)

    def write(self, f: BinaryIO) -> None:
        """Encode the header and every chunk, in order, into ``f``."""
        f.write(self.header.to_bytes())
        for chunk in self.chunks:
            write_chunk(f, chunk)

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.write(buffer)
        return buffer.getvalue()

    @property
    def computed_riff_size(self) -> int:
        """The RIFF size implied by the current chunks: form type plus every chunk."""
        return 4 + sum(chunk.on_disk_size for chunk in self.chunks)

    def find_chunk(self, chunk_id: bytes) -> ChunkObject | None:
        """Return the first top-level chunk with ``chunk_id``, if any."""
        for chunk in self.chunks:
            if chunk.chunk_id == chunk_id:
                return chunk
        return None

    def _remove_chunk(self, chunk_id: bytes) -> None:
        chunk = self.find_chunk(chunk_id)
        if chunk is not None:
            self.header.riff_size -= chunk.on_disk_size
            self.chunks.remove(chunk)

    def clear_markers_and_labels(self) -> None:
        """Remove the top-level ``cue `` and ``LIST`` chunks, if present."""
        self._remove_chunk(CUE_ID)
        self._remove_chunk(LIST_ID)

    def add_label(self, label: str, frame_offset: int) -> int:
        """Attach ``label`` to a cue point at ``frame_offset``.

        A ``cue `` and a ``LIST`` chunk are appended to the end of the file
        when they do not exist yet. An existing cue point with the same
        offset is reused.

        Args:
            label: Text of the label.
            frame_offset: Sample frame the cue point refers to.

        Returns:
            The id of the cue point the label is bound to.
        """
        old_size = 0

        cue_chunk = self.find_chunk(CUE_ID)
        if cue_chunk is None:
            cue_chunk = ChunkObject(CueChunk())
            self.chunks.append(cue_chunk)
        else:
            old_size += cue_chunk.on_disk_size
        cue_point_id = cast(CueChunk, cue_chunk.payload).add_point_if_absent(frame_offset)

        list_chunk = self.find_chunk(LIST_ID)
        if list_chunk is None:
            list_chunk = ChunkObject(ListChunk())
            self.chunks.append(list_chunk)
        else:
            old_size += list_chunk.on_disk_size
        labels = cast(ListChunk, list_chunk.payload)
        labels.add(LabelChunk(cue_point_id=cue_point_id, label=label))

        self.header.riff_size += cue_chunk.on_disk_size + list_chunk.on_disk_size - old_size
        return cue_point_id

    def describe(self) -> list[ChunkSummary]:
        """Summarise the chunk tree, depth first, for display."""
        rows: list[ChunkSummary] = []
        _describe_chunks(self.chunks, 0, rows)
        return rows


def _describe_chunks(chunks: list[ChunkObject], depth: int, rows: list[ChunkSummary]) -> None:
    for chunk in chunks:
        payload = chunk.payload
        detail = ""
        if isinstance(payload, CueChunk):
            detail = ", ".join(
                f"#{p.cue_point_id}@{p.frame_offset}" for p in payload.points
            )
        elif isinstance(payload, LabelChunk):
            detail = f"#{payload.cue_point_id} {payload.label!r}"
        elif isinstance(payload, ListChunk):
            detail = payload.list_type.decode("latin-1")

        rows.append(
            ChunkSummary(
                chunk_id=chunk.chunk_id.decode("latin-1"),
                on_disk_size=chunk.on_disk_size,
                depth=depth,
                detail=detail,
            )
        )
        if isinstance(payload, ListChunk):
            _describe_chunks(payload.chunks, depth + 1, rows)


def label_from_path(path: Path | str) -> str:
    """Return the file name of ``path`` without directory or extension.

    Both ``/`` and ``\\`` are treated as directory separators.
    """
    return PureWindowsPath(str(path)).stem


def patch_file(
    source: Path | str,
    target: Path | str,
    label: str | None = None,
    frame_offset: int = 0,
) -> WaveFile:
    """Replace the markers of ``source`` with a single labelled cue point.

    The target is only written once the source has loaded successfully.

    Args:
        source: WAV file to read.
        target: Path to write the patched file to.
        label: Label text. Defaults to the file name of ``source``.
        frame_offset: Sample frame of the cue point.

    Returns:
        The patched file.
    """
    wave = WaveFile.load(source)
    wave.clear_markers_and_labels()
    wave.add_label(label if label is not None else label_from_path(source), frame_offset)
    wave.save(target)
    return wave
