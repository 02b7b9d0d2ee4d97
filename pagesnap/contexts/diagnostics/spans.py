"""
Byte span to character span mapping.

Diagnostics measure positions in bytes of the UTF-8 encoded source, while reports
place labels by character. Offsets are resolved by walking character boundaries,
never by casting, so multi-byte characters are not split.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class CharIndex:
    """
    A character boundary: the byte offset it starts at and its character index.

    Adding two CharIndex values shifts one boundary by the other, translating a
    position measured in a suffix of the text back into the full text.
    """

    first_byte: int
    char_index: int

    def __add__(self, other: "CharIndex") -> "CharIndex":
        if not isinstance(other, CharIndex):
            return NotImplemented
        return CharIndex(
            first_byte=self.first_byte + other.first_byte,
            char_index=self.char_index + other.char_index,
        )


@dataclass(frozen=True)
class CharSpan:
    """(start, end) character offsets into a text."""

    start: int
    end: int

    def __iter__(self) -> Iterator[int]:
        return iter((self.start, self.end))


def char_boundaries(text: str) -> Iterator[CharIndex]:
    """Yield the boundary at which each character of text begins."""
    first_byte = 0
    for char_index, char in enumerate(text):
        yield CharIndex(first_byte=first_byte, char_index=char_index)
        first_byte += len(char.encode("utf-8"))


def byte_index_to_char_index(text: str, byte_index: int) -> Optional[CharIndex]:
    """
    First character boundary at or after byte_index.

    Returns None when no character starts at or after it, which includes any offset
    at or beyond the end of the text and any negative offset.
    """
    if byte_index < 0:
        return None
    for boundary in char_boundaries(text):
        if boundary.first_byte >= byte_index:
            return boundary
    return None


def _suffix(text: str, boundary: CharIndex) -> str:
    return text[boundary.char_index :]


def byte_span_to_char_span(text: str, span: Tuple[int, int]) -> Optional[CharSpan]:
    """
    Convert a (start, end) byte span of text into a character span.

    Bounds are swapped when start < end before resolving. The end is resolved as a
    distance from the resolved start, in the text that follows it.

    Returns:
        CharSpan, or None if either bound has no character boundary
    """
    start, end = span
    # NOTE: swaps ordered spans; ordered non-empty spans then have a negative
    # distance and do not resolve. Zero-width spans are unaffected.
    if start < end:
        start, end = end, start

    start_index = byte_index_to_char_index(text, start)
    if start_index is None:
        return None

    end_offset = byte_index_to_char_index(_suffix(text, start_index), end - start)
    if end_offset is None:
        return None

    end_index = end_offset + start_index
    return CharSpan(start=start_index.char_index, end=end_index.char_index)
