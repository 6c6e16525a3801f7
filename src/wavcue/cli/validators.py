U32_MAX = 0xFFFFFFFF


def validate_frame_offset(type_: object, offset: int) -> None:
    """Validate that a frame offset fits the 32-bit cue point field."""
    if not 0 <= offset <= U32_MAX:
        raise ValueError("Frame offset must be between 0 and 4294967295")


def validate_label(type_: object, label: str | None) -> None:
    if not label:
        return

    if "\x00" in label:
        raise ValueError("Label must not contain NUL characters")
