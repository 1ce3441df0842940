"""
Resolution of annotation targets to the word indices they cover.

Targets are assumed to be well formed here; the manager validates them
before they are stored.
"""
from typing import Set

from .models import AnnotationTarget


def word_indices_of(target: AnnotationTarget) -> Set[int]:
    """
    Get every word index a target covers.

    Args:
        target: Word, char or span target

    Returns:
        The single word index for word/char targets, the expanded inclusive
        range for spans
    """
    if target.type == "span":
        return set(range(target.start_word, target.end_word + 1))
    return {target.word_index}


def target_includes_word(target: AnnotationTarget, word_index: int) -> bool:
    """Check if a target covers a word without expanding spans."""
    if target.type == "span":
        return target.start_word <= word_index <= target.end_word
    return target.word_index == word_index


def primary_word_index(target: AnnotationTarget) -> int:
    """Get the word a target is anchored on (first word for spans)."""
    if target.type == "span":
        return target.start_word
    return target.word_index
