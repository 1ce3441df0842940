"""
Lemma confirmation API over the annotation manager.

Older projects stored confirmed lemmas as a flat mapping of word index to
{lemma, msa, normalized}; this module keeps that shape available and
migrates it into lemma annotations.
"""
import logging
from typing import Any, Dict, Mapping, Optional, Union

from .manager import AnnotationManager
from .models import HistoryAction, create_lemma_annotation, lemma_id

logger = logging.getLogger(__name__)

LegacyConfirmations = Mapping[Union[int, str], Mapping[str, Any]]


def parse_word_index(key: Union[int, str]) -> Optional[int]:
    """
    Parse a legacy confirmation key.

    Returns:
        The word index, or None if the key is not a non-negative integer
    """
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 0 else None
    if isinstance(key, str):
        key = key.strip()
        if key.isdigit() and key.isascii():
            return int(key)
    return None


class LemmaConfirmations:
    """Confirms and unconfirms lemmas for single words."""

    def __init__(self, manager: AnnotationManager):
        self.manager = manager

    def confirm_lemma(self, word_index: int, lemma: str, msa: str,
                      normalized: Optional[str] = None,
                      record_history: bool = True) -> HistoryAction:
        """
        Confirm a lemma for a word.

        Re-confirming a word replaces its lemma annotation, so the recorded
        action is an UPDATE carrying the previous lemma.

        Args:
            word_index: 0-based word index
            lemma: Dictionary headword
            msa: Morphological analysis code
            normalized: Optional normalized word form
            record_history: Whether the change can be undone

        Returns:
            The ADD or UPDATE action
        """
        annotation = create_lemma_annotation(word_index, lemma, msa, normalized)
        return self.manager.add(annotation, record_history=record_history)

    def unconfirm_lemma(self, word_index: int,
                        record_history: bool = True) -> Optional[HistoryAction]:
        """Remove the lemma of a word; returns None if it had none."""
        return self.manager.remove(lemma_id(word_index), record_history=record_history)

    def is_lemma_confirmed(self, word_index: int) -> bool:
        return word_index in self.manager.confirmed_lemma_indices

    def get_lemma_mapping(self, word_index: int) -> Optional[Dict[str, str]]:
        return self.manager.lemma_mappings.get(word_index)

    def lemma_mappings(self) -> Dict[int, Dict[str, str]]:
        return self.manager.lemma_mappings

    def load_legacy_confirmations(self, confirmations: Optional[LegacyConfirmations]) -> int:
        """
        Import lemma confirmations from the legacy flat mapping.

        Entries with a key that is not a word index, or without lemma/msa,
        are skipped; the rest of the import proceeds. The import is not
        recorded as undoable actions, and it drops any pending redo.

        Args:
            confirmations: Mapping of word index (int or numeric string) to
                {lemma, msa, normalized?}

        Returns:
            Number of confirmations imported
        """
        if not confirmations:
            return 0

        imported = 0
        for key, mapping in confirmations.items():
            word_index = parse_word_index(key)
            if word_index is None:
                logger.warning("Skipping legacy confirmation with invalid word index %r", key)
                continue
            if not isinstance(mapping, Mapping) or 'lemma' not in mapping or 'msa' not in mapping:
                logger.warning("Skipping incomplete legacy confirmation for word %d", word_index)
                continue

            self.confirm_lemma(word_index, mapping['lemma'], mapping['msa'],
                               mapping.get('normalized'), record_history=False)
            imported += 1

        logger.info("Migrated %d legacy lemma confirmations", imported)
        return imported
