"""wavcue - cue marker and label patching for WAVE files.

This package rewrites the cue points and labels of RIFF/WAVE files while
leaving every other chunk byte-identical.

Example Usage
-------------
>>> from wavcue import patch_file
>>> wave = patch_file("take1.wav", "take1_marked.wav")
>>> [label.label for label in wave.find_chunk(b"LIST").payload.labels()]
['take1']
"""

from wavcue.format import (
    EmptyFileError,
    FormatError,
    OpenError,
    RiffError,
    TruncationError,
    WaveFile,
    label_from_path,
    patch_file,
)

__all__ = [
    "WaveFile",
    "patch_file",
    "label_from_path",
    "RiffError",
    "OpenError",
    "FormatError",
    "EmptyFileError",
    "TruncationError",
]
