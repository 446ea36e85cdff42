"""Small text helpers shared by the reader screens."""

from __future__ import annotations

_KIB = 1024
_MIB = 1024 * 1024
_GIB = 1024 * 1024 * 1024

_ELLIPSIS = "..."


def format_file_size(num_bytes: int) -> str:
    """Render a byte count as a whole number of B, KB, MB or GB."""
    if num_bytes < 0:
        raise ValueError("file size cannot be negative")
    if num_bytes < _KIB:
        return f"{num_bytes}B"
    if num_bytes < _MIB:
        return f"{num_bytes // _KIB}KB"
    if num_bytes < _GIB:
        return f"{num_bytes // _MIB}MB"
    return f"{num_bytes // _GIB}GB"


def ellipsize(text: str, max_length: int, keep: int) -> str:
    """Return ``text`` unchanged if it fits in ``max_length`` characters.

    Longer text is cut to its first ``keep`` characters followed by "...".
    """
    if keep < 0:
        raise ValueError("keep must not be negative")
    if len(text) > max_length:
        return text[:keep] + _ELLIPSIS
    return text