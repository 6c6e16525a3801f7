"""RIFF/WAVE chunk model.

This module reads WAVE files into a tree of chunk objects, lets callers
replace the cue markers and labels, and writes the file back out with every
other chunk unchanged.

Format Overview
---------------
A WAVE file is a RIFF container. Every chunk is an 8-byte header (FourCC id
plus little-endian payload length) followed by the payload and, when the
payload length is odd, one zero pad byte:

    +----------------------------------------+
    | RIFF Header ("WAVE")                   |
    +----------------------------------------+
    | fmt  chunk (audio format)              |
    +----------------------------------------+
    | data chunk (samples, opaque)           |
    +----------------------------------------+
    | cue  chunk (cue points)                |
    |   - id, frame offset, ...              |
    +----------------------------------------+
    | LIST chunk ("adtl")                    |
    |   - labl: cue point id + text          |
    +----------------------------------------+

Example Usage
-------------
>>> from wavcue.format import WaveFile
>>> wave = WaveFile.load("take1.wav")
>>> wave.clear_markers_and_labels()
>>> wave.add_label("take1", frame_offset=0)
1
>>> wave.save("take1_marked.wav")
"""

from wavcue.format.chunks import (
    ChunkObject,
    ChunkPayload,
    CueChunk,
    CuePoint,
    FormatChunk,
    GeneralChunk,
    LabelChunk,
    ListChunk,
    create_payload,
    read_chunk,
    write_chunk,
)
from wavcue.format.riff import (
    ChunkHeader,
    EmptyFileError,
    FormatError,
    OpenError,
    RiffError,
    TruncationError,
    WaveHeader,
)
from wavcue.format.wave import ChunkSummary, WaveFile, label_from_path, patch_file

__all__ = [
    # Chunk model
    "ChunkHeader",
    "ChunkObject",
    "ChunkPayload",
    "GeneralChunk",
    "FormatChunk",
    "CuePoint",
    "CueChunk",
    "LabelChunk",
    "ListChunk",
    "create_payload",
    "read_chunk",
    "write_chunk",
    # Container
    "WaveHeader",
    "WaveFile",
    "ChunkSummary",
    "label_from_path",
    "patch_file",
    # Errors
    "RiffError",
    "OpenError",
    "FormatError",
    "EmptyFileError",
    "TruncationError",
]
