"""
Controller for managing annotation operations.
"""
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from sagascribe.core.errors import AnnotationError
from sagascribe.core.annotations import (
    Annotation,
    AnnotationManager,
    AnnotationMetadata,
    AnnotationPersistence,
    AnnotationTarget,
    AnnotationType,
    HistoryAction,
    LemmaConfirmations,
    create_note_annotation,
    create_semantic_annotation,
    load_project_annotations,
)
from sagascribe.utils.settings import AnnotationSettings

logger = logging.getLogger(__name__)


class AnnotationController(QObject):
    """Wraps the annotation manager and notifies views about changes."""

    # Signals
    annotations_changed = pyqtSignal()  # Emitted when the annotation set changes
    history_changed = pyqtSignal(bool, bool)  # can_undo, can_redo
    lemma_confirmed = pyqtSignal(int)  # word index
    lemma_unconfirmed = pyqtSignal(int)  # word index

    def __init__(self, annotation_manager: Optional[AnnotationManager] = None,
                 settings: Optional[AnnotationSettings] = None,
                 persistence: Optional[AnnotationPersistence] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.settings = settings or AnnotationSettings()
        self.annotation_manager = annotation_manager or AnnotationManager()
        self.annotation_manager.set_max_history(self.settings.max_history)
        self.lemmas = LemmaConfirmations(self.annotation_manager)
        self.persistence = persistence or AnnotationPersistence()
        self.document_path: Optional[str] = None
        self.has_unsaved_changes: bool = False

    def _changed(self) -> None:
        self.has_unsaved_changes = True
        self._auto_save()
        self.annotations_changed.emit()
        self.history_changed.emit(self.can_undo(), self.can_redo())

    def _new_metadata(self) -> AnnotationMetadata:
        now = datetime.now(timezone.utc).isoformat()
        return AnnotationMetadata(
            author=self.settings.default_author,
            created=now,
            modified=now,
            source="manual",
        )

    # Lemma operations

    def confirm_lemma(self, word_index: int, lemma: str, msa: str,
                      normalized: Optional[str] = None) -> HistoryAction:
        """
        Confirm a lemma for a word.

        Args:
            word_index: 0-based word index
            lemma: Dictionary headword
            msa: Morphological analysis code
            normalized: Optional normalized form

        Returns:
            The recorded ADD or UPDATE action
        """
        action = self.lemmas.confirm_lemma(word_index, lemma, msa, normalized)
        self._changed()
        self.lemma_confirmed.emit(word_index)
        return action

    def unconfirm_lemma(self, word_index: int) -> bool:
        """
        Remove the lemma confirmation of a word.

        Returns:
            True if a confirmation was removed
        """
        if self.lemmas.unconfirm_lemma(word_index) is None:
            return False
        self._changed()
        self.lemma_unconfirmed.emit(word_index)
        return True

    def is_lemma_confirmed(self, word_index: int) -> bool:
        return self.lemmas.is_lemma_confirmed(word_index)

    def get_lemma_mapping(self, word_index: int) -> Optional[Dict[str, str]]:
        return self.lemmas.get_lemma_mapping(word_index)

    # General annotations

    def add_annotation(self, annotation: Annotation) -> HistoryAction:
        """Add or replace an annotation."""
        action = self.annotation_manager.add(annotation)
        self._changed()
        return action

    def create_note(self, target: AnnotationTarget, text: str,
                    category: Optional[str] = None) -> Annotation:
        """Create a note stamped with the configured author."""
        annotation = replace(create_note_annotation(target, text, category),
                             metadata=self._new_metadata())
        self.add_annotation(annotation)
        return annotation

    def create_semantic(self, target: AnnotationTarget, category: str,
                        subcategory: Optional[str] = None,
                        label: Optional[str] = None) -> Annotation:
        annotation = replace(create_semantic_annotation(target, category, subcategory, label),
                             metadata=self._new_metadata())
        self.add_annotation(annotation)
        return annotation

    def delete_annotation(self, annotation_id: str) -> bool:
        """
        Delete an annotation.

        Returns:
            True if annotation was deleted
        """
        if self.annotation_manager.remove(annotation_id) is None:
            return False
        self._changed()
        return True

    def get_annotations_for_word(self, word_index: int) -> List[Annotation]:
        return self.annotation_manager.get_for_word(word_index)

    def counts(self) -> Dict[AnnotationType, int]:
        return self.annotation_manager.counts

    # History

    def undo(self) -> bool:
        """
        Undo the last annotation action.

        Returns:
            True if undo was successful
        """
        if self.annotation_manager.undo() is None:
            return False
        self._changed()
        return True

    def redo(self) -> bool:
        """
        Redo the last undone annotation action.

        Returns:
            True if redo was successful
        """
        if self.annotation_manager.redo() is None:
            return False
        self._changed()
        return True

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self.annotation_manager.can_undo()

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return self.annotation_manager.can_redo()

    # Documents

    def open_project(self, document_path: Optional[str],
                     annotations_json: Optional[str] = None,
                     confirmations_json: Optional[str] = None) -> int:
        """
        Replace the annotations with those of an opened project.

        Args:
            document_path: Path of the opened document
            annotations_json: Contents of annotations.json, if present
            confirmations_json: Contents of legacy confirmations.json, if present

        Returns:
            Number of annotations loaded
        """
        self.document_path = document_path
        load_project_annotations(self.annotation_manager, annotations_json, confirmations_json)
        self.has_unsaved_changes = False
        self.annotations_changed.emit()
        self.history_changed.emit(False, False)
        return self.annotation_manager.total

    def load_annotations(self, document_path: str) -> int:
        """
        Auto-load saved annotations for a document.

        Returns:
            Number of annotations loaded
        """
        self.document_path = document_path
        if not self.persistence.has_saved_annotations(document_path):
            self.annotation_manager.clear()
            self.annotations_changed.emit()
            self.history_changed.emit(False, False)
            return 0

        annotation_set, _ = self.persistence.load_from_json(document_path)
        try:
            self.annotation_manager.load_set(annotation_set)
        except AnnotationError as e:
            logger.warning("Ignoring invalid saved annotations for %s: %s", document_path, e)
            self.annotation_manager.clear()

        self.has_unsaved_changes = False
        self.annotations_changed.emit()
        self.history_changed.emit(False, False)
        return self.annotation_manager.total

    def close_document(self) -> None:
        """Discard the annotation set and its history."""
        self.annotation_manager.clear()
        self.document_path = None
        self.has_unsaved_changes = False
        self.annotations_changed.emit()
        self.history_changed.emit(False, False)

    def save(self) -> bool:
        """Save annotations for the current document."""
        if not self.document_path:
            return False
        if self.persistence.save_to_json(self.annotation_manager.annotation_set, self.document_path):
            self.has_unsaved_changes = False
            return True
        return False

    def _auto_save(self) -> None:
        if self.settings.auto_save and self.document_path:
            self.save()
