"""Tests for annotation target resolution."""
import pytest

from sagascribe.core.annotations import (
    CharTarget,
    SpanTarget,
    WordTarget,
    primary_word_index,
    target_includes_word,
    word_indices_of,
)


class TestWordIndicesOf:

    def test_word_target(self) -> None:
        assert word_indices_of(WordTarget(4)) == {4}

    def test_char_target_resolves_to_its_word(self) -> None:
        assert word_indices_of(CharTarget(7, 0, 2)) == {7}

    def test_span_is_inclusive(self) -> None:
        assert word_indices_of(SpanTarget(2, 5)) == {2, 3, 4, 5}

    def test_single_word_span(self) -> None:
        assert word_indices_of(SpanTarget(3, 3)) == {3}


class TestTargetIncludesWord:

    @pytest.mark.parametrize("word_index", [2, 3, 4, 5])
    def test_span_covers_bounds_and_interior(self, word_index: int) -> None:
        assert target_includes_word(SpanTarget(2, 5), word_index)

    @pytest.mark.parametrize("word_index", [1, 6])
    def test_span_excludes_neighbours(self, word_index: int) -> None:
        assert not target_includes_word(SpanTarget(2, 5), word_index)

    def test_word_and_char_targets(self) -> None:
        assert target_includes_word(WordTarget(5), 5)
        assert not target_includes_word(WordTarget(5), 4)
        assert target_includes_word(CharTarget(7, 1, 3), 7)
        assert not target_includes_word(CharTarget(7, 1, 3), 8)

    def test_agrees_with_word_indices_of(self) -> None:
        targets = [WordTarget(0), CharTarget(2, 0, 1), SpanTarget(1, 4)]
        for target in targets:
            covered = word_indices_of(target)
            for word_index in range(0, 7):
                assert target_includes_word(target, word_index) == (word_index in covered)

    def test_large_span_membership(self) -> None:
        target = SpanTarget(0, 10 ** 9)
        assert target_includes_word(target, 10 ** 9)
        assert not target_includes_word(target, 10 ** 9 + 1)


class TestPrimaryWordIndex:

    def test_primary_word(self) -> None:
        assert primary_word_index(WordTarget(3)) == 3
        assert primary_word_index(CharTarget(9, 0, 1)) == 9
        assert primary_word_index(SpanTarget(10, 15)) == 10
