"""
Main annotation manager that owns the annotation set of a document.
"""
import logging
import re
from typing import Dict, List, Optional, Set

from sagascribe.core.errors import AnnotationValidationError
from .models import (
    ANNOTATION_SET_VERSION,
    ActionType,
    Annotation,
    AnnotationSet,
    AnnotationType,
    HistoryAction,
    MenotaAddPlace,
    MenotaAddType,
    MenotaCharType,
    MenotaDelRend,
    MenotaObservationType,
    MenotaSuppliedReason,
    MenotaUnclearReason,
    PaleographicType,
    is_value_compatible,
    lemma_id,
    VALUE_KINDS,
    TARGET_TYPES,
)
from .targets import target_includes_word, word_indices_of
from .undo_redo import DEFAULT_MAX_HISTORY, UndoRedoStack

logger = logging.getLogger(__name__)


def _is_index(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _in_unit_range(value) -> bool:
    if value is None:
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and 0.0 <= value <= 1.0


# Enum-typed fields per value kind; the first entry of each is required
_VALUE_ENUM_FIELDS = {
    "paleographic": (
        ('observation_type', PaleographicType),
    ),
    "menota-paleographic": (
        ('observation_type', MenotaObservationType),
        ('unclear_reason', MenotaUnclearReason),
        ('add_place', MenotaAddPlace),
        ('add_type', MenotaAddType),
        ('del_rend', MenotaDelRend),
        ('supplied_reason', MenotaSuppliedReason),
        ('char_type', MenotaCharType),
    ),
}

_LEMMA_ID_PATTERN = re.compile(r"lemma-\d+")


def _check_value_enums(value, ann_id: str) -> None:
    for position, (name, enum_cls) in enumerate(_VALUE_ENUM_FIELDS.get(value.kind, ())):
        field_value = getattr(value, name)
        if field_value is None and position > 0:
            continue
        if not isinstance(field_value, enum_cls):
            raise AnnotationValidationError(
                f"'{name}' must be a {enum_cls.__name__}, got {field_value!r}", ann_id)


def validate_annotation(annotation: Annotation) -> None:
    """
    Check an annotation against the store invariants.

    Raises:
        AnnotationValidationError: If the target, value or id is inconsistent
    """
    ann_id = annotation.id
    if not isinstance(ann_id, str) or not ann_id:
        raise AnnotationValidationError("Annotation id must be a non-empty string", ann_id)

    if not isinstance(annotation.annotation_type, AnnotationType):
        raise AnnotationValidationError(
            f"Unknown annotation type: {annotation.annotation_type!r}", ann_id)

    target = annotation.target
    if TARGET_TYPES.get(getattr(target, 'type', None)) is not type(target):
        raise AnnotationValidationError(f"Unknown target: {target!r}", ann_id)
    if target.type == "span":
        if not (_is_index(target.start_word) and _is_index(target.end_word)):
            raise AnnotationValidationError("Span word indices must be non-negative integers", ann_id)
        if target.start_word > target.end_word:
            raise AnnotationValidationError(
                f"Span start {target.start_word} is after end {target.end_word}", ann_id)
    else:
        if not _is_index(target.word_index):
            raise AnnotationValidationError("Word index must be a non-negative integer", ann_id)
        if target.type == "char":
            if not (_is_index(target.char_start) and _is_index(target.char_end)):
                raise AnnotationValidationError("Character offsets must be non-negative integers", ann_id)
            if target.char_start > target.char_end:
                raise AnnotationValidationError(
                    f"Character start {target.char_start} is after end {target.char_end}", ann_id)

    value = annotation.value
    if VALUE_KINDS.get(getattr(value, 'kind', None)) is not type(value):
        raise AnnotationValidationError(f"Unknown annotation value: {value!r}", ann_id)
    if not is_value_compatible(annotation.annotation_type, value):
        raise AnnotationValidationError(
            f"Value kind '{value.kind}' does not match type "
            f"'{annotation.annotation_type.value}'", ann_id)
    _check_value_enums(value, ann_id)
    if value.kind in ("paleographic", "menota-paleographic") and not _in_unit_range(value.certainty):
        raise AnnotationValidationError("Certainty must be between 0 and 1", ann_id)

    if (annotation.annotation_type == AnnotationType.LEMMA
            and target.type == "word" and ann_id != lemma_id(target.word_index)):
        raise AnnotationValidationError(
            f"Lemma annotation for word {target.word_index} must have id "
            f"'{lemma_id(target.word_index)}'", ann_id)

    # lemma-<n> ids belong to the confirmed lemma of word n
    if (_LEMMA_ID_PATTERN.fullmatch(ann_id)
            and (annotation.annotation_type != AnnotationType.LEMMA or target.type != "word")):
        raise AnnotationValidationError(
            f"Id '{ann_id}' is reserved for word lemma annotations", ann_id)

    if annotation.metadata is not None and not _in_unit_range(annotation.metadata.confidence):
        raise AnnotationValidationError("Confidence must be between 0 and 1", ann_id)


class AnnotationManager:
    """Manages all annotations for a document with undo/redo support."""

    def __init__(self, history: Optional[UndoRedoStack] = None,
                 max_history: int = DEFAULT_MAX_HISTORY):
        self._version: str = ANNOTATION_SET_VERSION
        self._annotations: List[Annotation] = []
        self.history = history if history is not None else UndoRedoStack(max_history)

    @property
    def annotations(self) -> List[Annotation]:
        return list(self._annotations)

    @property
    def annotation_set(self) -> AnnotationSet:
        """Snapshot of the current set, e.g. for serialization."""
        return AnnotationSet(version=self._version, annotations=list(self._annotations))

    @property
    def total(self) -> int:
        return len(self._annotations)

    def _index_of(self, annotation_id: str) -> int:
        for i, ann in enumerate(self._annotations):
            if ann.id == annotation_id:
                return i
        return -1

    def add(self, annotation: Annotation, record_history: bool = True) -> HistoryAction:
        """
        Add an annotation, replacing any existing one with the same id.

        Args:
            annotation: Annotation to store
            record_history: Whether to push the action onto the undo stack.
                Undone actions are dropped either way.

        Returns:
            The ADD or UPDATE action describing the change

        Raises:
            AnnotationValidationError: If the annotation is inconsistent
        """
        validate_annotation(annotation)
        action = self._apply_add(annotation)
        self._record(action, record_history)
        return action

    def _apply_add(self, annotation: Annotation) -> HistoryAction:
        index = self._index_of(annotation.id)
        if index >= 0:
            previous = self._annotations[index]
            self._annotations[index] = annotation
            action = HistoryAction(ActionType.UPDATE, annotation, previous)
        else:
            self._annotations.append(annotation)
            action = HistoryAction(ActionType.ADD, annotation, None)

        logger.debug("%s annotation %s", action.action_type.value, annotation.id)
        return action

    def _apply_remove(self, annotation_id: str) -> Optional[HistoryAction]:
        index = self._index_of(annotation_id)
        if index < 0:
            return None

        removed = self._annotations.pop(index)
        logger.debug("remove annotation %s", annotation_id)
        return HistoryAction(ActionType.REMOVE, removed, removed)

    def _record(self, action: HistoryAction, record_history: bool) -> None:
        if record_history:
            self.history.push_action(action)
        else:
            # An unrecorded change still invalidates what was undone
            self.history.clear_redo()

    def remove(self, annotation_id: str, record_history: bool = True) -> Optional[HistoryAction]:
        """
        Remove an annotation by id.

        Args:
            annotation_id: Id of the annotation to remove
            record_history: Whether to push the action onto the undo stack

        Returns:
            The REMOVE action, or None if no annotation had that id
        """
        action = self._apply_remove(annotation_id)
        if action is not None:
            self._record(action, record_history)
        return action

    def get(self, annotation_id: str) -> Optional[Annotation]:
        index = self._index_of(annotation_id)
        return self._annotations[index] if index >= 0 else None

    def get_for_word(self, word_index: int) -> List[Annotation]:
        """
        Get all annotations covering a word.

        Args:
            word_index: 0-based word index

        Returns:
            Annotations whose target covers the word, in insertion order
        """
        return [ann for ann in self._annotations if target_includes_word(ann.target, word_index)]

    def get_by_type(self, annotation_type: AnnotationType) -> List[Annotation]:
        return [ann for ann in self._annotations if ann.annotation_type == annotation_type]

    def has_annotation_type(self, word_index: int, annotation_type: AnnotationType) -> bool:
        return any(
            ann.annotation_type == annotation_type and target_includes_word(ann.target, word_index)
            for ann in self._annotations
        )

    # Derived views, recomputed on every access

    @property
    def annotations_by_word_index(self) -> Dict[int, List[Annotation]]:
        index: Dict[int, List[Annotation]] = {}
        for ann in self._annotations:
            for word_index in sorted(word_indices_of(ann.target)):
                index.setdefault(word_index, []).append(ann)
        return index

    @property
    def confirmed_lemma_indices(self) -> Set[int]:
        return {
            ann.target.word_index
            for ann in self._annotations
            if ann.annotation_type == AnnotationType.LEMMA and ann.target.type == "word"
        }

    @property
    def counts(self) -> Dict[AnnotationType, int]:
        counts = {annotation_type: 0 for annotation_type in AnnotationType}
        for ann in self._annotations:
            counts[ann.annotation_type] += 1
        return counts

    @property
    def lemma_mappings(self) -> Dict[int, Dict[str, str]]:
        """Word index to {lemma, msa, normalized?}, the legacy confirmation shape."""
        mappings: Dict[int, Dict[str, str]] = {}
        for ann in self._annotations:
            if (ann.annotation_type == AnnotationType.LEMMA
                    and ann.target.type == "word" and ann.value.kind == "lemma"):
                mapping = {'lemma': ann.value.lemma, 'msa': ann.value.msa}
                if ann.value.normalized is not None:
                    mapping['normalized'] = ann.value.normalized
                mappings[ann.target.word_index] = mapping
        return mappings

    def load_set(self, annotation_set: AnnotationSet) -> None:
        """
        Replace the whole annotation set and forget all history.

        Raises:
            AnnotationValidationError: If any annotation is invalid or ids
                repeat; the current set is kept in that case
        """
        seen: Set[str] = set()
        for ann in annotation_set.annotations:
            validate_annotation(ann)
            if ann.id in seen:
                raise AnnotationValidationError(f"Duplicate annotation id '{ann.id}'", ann.id)
            seen.add(ann.id)

        self._version = annotation_set.version
        self._annotations = list(annotation_set.annotations)
        self.history.clear()
        logger.debug("Loaded annotation set with %d annotations", len(self._annotations))

    def clear(self) -> None:
        """Reset to an empty set and forget all history."""
        self._version = ANNOTATION_SET_VERSION
        self._annotations = []
        self.history.clear()

    def undo(self) -> Optional[HistoryAction]:
        """
        Revert the most recent action.

        Returns:
            The reverted action, or None if there was nothing to undo
        """
        action = self.history.undo()
        if action is None:
            return None

        if action.action_type == ActionType.ADD:
            self._apply_remove(action.annotation.id)
        else:
            # REMOVE and UPDATE both restore the prior annotation
            self._apply_add(action.previous_annotation)
        return action

    def redo(self) -> Optional[HistoryAction]:
        """
        Re-apply the most recently undone action.

        Returns:
            The re-applied action, or None if there was nothing to redo
        """
        action = self.history.redo()
        if action is None:
            return None

        if action.action_type == ActionType.REMOVE:
            self._apply_remove(action.annotation.id)
        else:
            self._apply_add(action.annotation)
        return action

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self.history.can_undo()

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return self.history.can_redo()

    def set_max_history(self, max_history: int) -> None:
        self.history.set_max_history(max_history)
