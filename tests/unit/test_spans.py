"""Unit tests for byte span to character span mapping."""

import pytest

from pagesnap.contexts.diagnostics.spans import (
    CharIndex,
    CharSpan,
    byte_index_to_char_index,
    byte_span_to_char_span,
    char_boundaries,
)


@pytest.mark.unit
class TestCharIndex:
    """Tests for the pair-wise boundary shift."""

    def test_add_shifts_both_components(self):
        shifted = CharIndex(first_byte=3, char_index=1) + CharIndex(first_byte=5, char_index=4)
        assert shifted == CharIndex(first_byte=8, char_index=5)

    def test_add_rejects_plain_numbers(self):
        with pytest.raises(TypeError):
            CharIndex(first_byte=1, char_index=1) + 1


@pytest.mark.unit
class TestCharBoundaries:
    def test_ascii(self):
        assert [b.first_byte for b in char_boundaries("abc")] == [0, 1, 2]

    def test_multibyte(self):
        boundaries = list(char_boundaries("hé日x"))
        assert [b.first_byte for b in boundaries] == [0, 1, 3, 6]
        assert [b.char_index for b in boundaries] == [0, 1, 2, 3]

    def test_empty(self):
        assert list(char_boundaries("")) == []


@pytest.mark.unit
class TestByteIndexToCharIndex:
    def test_exact_boundary(self):
        assert byte_index_to_char_index("héllo", 3) == CharIndex(first_byte=3, char_index=2)

    def test_inside_multibyte_rounds_up(self):
        # Byte 2 is the second byte of "é"; the next boundary is "l"
        assert byte_index_to_char_index("héllo", 2) == CharIndex(first_byte=3, char_index=2)

    def test_end_of_text_has_no_boundary(self):
        assert byte_index_to_char_index("abc", 3) is None

    def test_beyond_text(self):
        assert byte_index_to_char_index("abc", 10) is None

    def test_negative(self):
        assert byte_index_to_char_index("abc", -1) is None


@pytest.mark.unit
class TestByteSpanToCharSpan:
    """Tests for byte_span_to_char_span."""

    @pytest.mark.parametrize("offset", range(len("hello world")))
    def test_ascii_offsets_match_bytes(self, offset):
        span = byte_span_to_char_span("hello world", (offset, offset))
        assert span == CharSpan(start=offset, end=offset)

    def test_two_byte_character_before_span(self):
        # "é" is two bytes, so byte 5 is character 4
        assert byte_span_to_char_span("héllo world", (5, 5)) == CharSpan(4, 4)

    def test_three_byte_characters_before_span(self):
        # Three 3-byte characters: byte 9 is character 3
        assert byte_span_to_char_span("日本語abc", (9, 9)) == CharSpan(3, 3)

    def test_offset_inside_character(self):
        assert byte_span_to_char_span("日本語abc", (4, 4)) == CharSpan(2, 2)

    def test_empty_span_is_zero_width(self):
        span = byte_span_to_char_span("héllo", (3, 3))
        assert span.start == span.end == 2

    def test_offset_beyond_text(self):
        assert byte_span_to_char_span("héllo", (42, 42)) is None

    def test_offset_at_end_of_text(self):
        assert byte_span_to_char_span("héllo", (6, 6)) is None

    def test_empty_text(self):
        assert byte_span_to_char_span("", (0, 0)) is None

    def test_ordered_span_is_swapped_and_does_not_resolve(self):
        # start < end gets swapped, leaving a negative distance for the end bound
        assert byte_span_to_char_span("hello world", (2, 5)) is None

    def test_reversed_span_does_not_resolve(self):
        assert byte_span_to_char_span("hello world", (5, 2)) is None

    def test_unpacks_as_pair(self):
        start, end = byte_span_to_char_span("héllo", (5, 5))
        assert (start, end) == (4, 4)
