"""
Annotation system for tokenized manuscript transcriptions.
"""
from .models import (
    ANNOTATION_SET_VERSION,
    ActionType,
    Annotation,
    AnnotationMetadata,
    AnnotationSet,
    AnnotationTarget,
    AnnotationType,
    AnnotationValue,
    CharTarget,
    CustomValue,
    HistoryAction,
    LemmaValue,
    MenotaPaleographicValue,
    NoteValue,
    PaleographicType,
    PaleographicValue,
    ReferenceValue,
    SemanticValue,
    SpanTarget,
    SyntaxValue,
    WordTarget,
    create_lemma_annotation,
    create_menota_paleographic_annotation,
    create_note_annotation,
    create_paleographic_annotation,
    create_semantic_annotation,
    lemma_id,
    type_label,
)
from .targets import primary_word_index, target_includes_word, word_indices_of
from .undo_redo import DEFAULT_MAX_HISTORY, UndoRedoStack
from .manager import AnnotationManager, validate_annotation
from .lemmas import LemmaConfirmations
from .persistence import (
    AnnotationPersistence,
    dumps_lemma_mappings,
    dumps_set,
    load_project_annotations,
    loads_legacy_confirmations,
    loads_set,
)

__all__ = [
    'ANNOTATION_SET_VERSION',
    'ActionType',
    'Annotation',
    'AnnotationMetadata',
    'AnnotationSet',
    'AnnotationTarget',
    'AnnotationType',
    'AnnotationValue',
    'CharTarget',
    'CustomValue',
    'HistoryAction',
    'LemmaValue',
    'MenotaPaleographicValue',
    'NoteValue',
    'PaleographicType',
    'PaleographicValue',
    'ReferenceValue',
    'SemanticValue',
    'SpanTarget',
    'SyntaxValue',
    'WordTarget',
    'create_lemma_annotation',
    'create_menota_paleographic_annotation',
    'create_note_annotation',
    'create_paleographic_annotation',
    'create_semantic_annotation',
    'lemma_id',
    'type_label',
    'primary_word_index',
    'target_includes_word',
    'word_indices_of',
    'DEFAULT_MAX_HISTORY',
    'UndoRedoStack',
    'AnnotationManager',
    'validate_annotation',
    'LemmaConfirmations',
    'AnnotationPersistence',
    'dumps_lemma_mappings',
    'dumps_set',
    'load_project_annotations',
    'loads_legacy_confirmations',
    'loads_set',
]
