from __future__ import annotations

from typing import List

from .errors import ConfigurationError


def validate_chunking(chunk_size: int, overlap: int) -> None:
    """Reject chunking parameters that would loop forever or make no sense."""
    if chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ConfigurationError(f"overlap must not be negative, got {overlap}")
    if overlap >= chunk_size:
        raise ConfigurationError(
            f"overlap ({overlap}) must be smaller than chunk_size ({chunk_size})"
        )


def chunk_text(text: str, chunk_size: int, overlap: int) -> List[str]:
    """
    Split text into overlapping character windows.

    Each window is ``chunk_size`` characters long (the last one may be
    shorter) and starts ``chunk_size - overlap`` characters after the
    previous one. Splitting stops as soon as a window reaches the end of the
    text, so no trailing window is fully contained in its predecessor. A
    plain "advance until the cursor passes the end" loop would emit such a
    window (18 characters, size 10, overlap 2 would give 3 chunks instead
    of 2) and break the chunk-count formula
    ``ceil((len(text) - overlap) / (chunk_size - overlap))``; keep the break.
    """
    validate_chunking(chunk_size, overlap)

    chunks: list[str] = []
    step = chunk_size - overlap
    length = len(text)

    for start in range(0, length, step):
        end = min(start + chunk_size, length)
        chunks.append(text[start:end])
        if end >= length:
            break

    return chunks


__all__ = ["chunk_text", "validate_chunking"]
