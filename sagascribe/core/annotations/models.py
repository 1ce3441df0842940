"""
Data models for word-, character- and span-level annotations.
"""
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union

from sagascribe.core.errors import AnnotationFormatError


ANNOTATION_SET_VERSION = "1.0"


class AnnotationType(Enum):
    LEMMA = "lemma"
    SEMANTIC = "semantic"
    NOTE = "note"
    PALEOGRAPHIC = "paleographic"
    SYNTAX = "syntax"
    REFERENCE = "reference"
    CUSTOM = "custom"


class ActionType(Enum):
    ADD = "add"
    REMOVE = "remove"
    UPDATE = "update"


class PaleographicType(Enum):
    UNCLEAR = "unclear"
    DAMAGE = "damage"
    ERASURE = "erasure"
    LETTERFORM = "letterform"
    ABBREVIATION = "abbreviation"
    CORRECTION = "correction"
    ADDITION = "addition"
    DECORATION = "decoration"
    OTHER = "other"


# MENOTA Handbook v3 vocabularies

class MenotaObservationType(Enum):
    UNCLEAR = "unclear"
    ADDITION = "addition"
    DELETION = "deletion"
    SUPPLIED = "supplied"
    CHARACTER = "character"


class MenotaUnclearReason(Enum):
    ILLEGIBLE = "illegible"
    FADED = "faded"
    SMUDGED = "smudged"
    DAMAGE = "damage"
    ERASURE = "erasure"
    OVERWRITING = "overwriting"
    BINDING = "binding"
    OTHER = "other"


class MenotaAddPlace(Enum):
    INLINE = "inline"
    SUPRALINEAR = "supralinear"
    INFRALINEAR = "infralinear"
    MARGIN_LEFT = "margin-left"
    MARGIN_RIGHT = "margin-right"
    MARGIN_TOP = "margin-top"
    MARGIN_BOTTOM = "margin-bottom"
    INTERLINEAR = "interlinear"


class MenotaAddType(Enum):
    SUPPLEMENT = "supplement"
    GLOSS = "gloss"
    CORRECTION = "correction"


class MenotaDelRend(Enum):
    OVERSTRIKE = "overstrike"
    ERASURE = "erasure"
    SUBPUNCTION = "subpunction"
    EXPUNCTION = "expunction"
    BRACKETED = "bracketed"


class MenotaSuppliedReason(Enum):
    OMITTED = "omitted"
    DAMAGE = "damage"
    ILLEGIBLE = "illegible"
    RESTORATION = "restoration"
    EMENDATION = "emendation"


class MenotaCharType(Enum):
    INITIAL = "initial"
    CAPITAL = "capital"
    RUBRIC = "rubric"
    COLORED = "colored"


def _require(data: Dict[str, Any], key: str, what: str) -> Any:
    if key not in data:
        raise AnnotationFormatError(f"{what} is missing required field '{key}'")
    return data[key]


def _enum(enum_cls, raw: Any, what: str):
    try:
        return enum_cls(raw)
    except ValueError:
        raise AnnotationFormatError(f"Unknown {what}: {raw!r}") from None


def _optional_enum(enum_cls, raw: Any, what: str):
    return None if raw is None else _enum(enum_cls, raw, what)


def _put(data: Dict[str, Any], key: str, value: Any) -> None:
    """Set an optional wire field, skipping unset values."""
    if value is None:
        return
    data[key] = value.value if isinstance(value, Enum) else value


# ============================================================================
# Targets
# ============================================================================

@dataclass(frozen=True)
class WordTarget:
    """A single word."""
    type: ClassVar[str] = "word"

    word_index: int

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'wordIndex': self.word_index}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'WordTarget':
        return WordTarget(word_index=_require(data, 'wordIndex', "word target"))


@dataclass(frozen=True)
class CharTarget:
    """A character range inside one word."""
    type: ClassVar[str] = "char"

    word_index: int
    char_start: int
    char_end: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'wordIndex': self.word_index,
            'charStart': self.char_start,
            'charEnd': self.char_end,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'CharTarget':
        return CharTarget(
            word_index=_require(data, 'wordIndex', "char target"),
            char_start=_require(data, 'charStart', "char target"),
            char_end=_require(data, 'charEnd', "char target"),
        )


@dataclass(frozen=True)
class SpanTarget:
    """An inclusive range of consecutive words."""
    type: ClassVar[str] = "span"

    start_word: int
    end_word: int

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'startWord': self.start_word, 'endWord': self.end_word}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'SpanTarget':
        return SpanTarget(
            start_word=_require(data, 'startWord', "span target"),
            end_word=_require(data, 'endWord', "span target"),
        )


AnnotationTarget = Union[WordTarget, CharTarget, SpanTarget]

TARGET_TYPES = {
    WordTarget.type: WordTarget,
    CharTarget.type: CharTarget,
    SpanTarget.type: SpanTarget,
}


def target_from_dict(data: Dict[str, Any]) -> AnnotationTarget:
    """Decode a target from its tagged wire form."""
    if not isinstance(data, dict):
        raise AnnotationFormatError(f"Target must be an object, got {type(data).__name__}")
    target_cls = TARGET_TYPES.get(data.get('type'))
    if target_cls is None:
        raise AnnotationFormatError(f"Unknown target type: {data.get('type')!r}")
    return target_cls.from_dict(data)


# ============================================================================
# Values
# ============================================================================

@dataclass(frozen=True)
class LemmaValue:
    """Dictionary headword plus MENOTA morphological analysis."""
    kind: ClassVar[str] = "lemma"

    lemma: str
    msa: str
    normalized: Optional[str] = None
    onp_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'kind': self.kind, 'lemma': self.lemma, 'msa': self.msa}
        _put(data, 'normalized', self.normalized)
        _put(data, 'onpId', self.onp_id)
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'LemmaValue':
        return LemmaValue(
            lemma=_require(data, 'lemma', "lemma value"),
            msa=_require(data, 'msa', "lemma value"),
            normalized=data.get('normalized'),
            onp_id=data.get('onpId'),
        )


@dataclass(frozen=True)
class SemanticValue:
    kind: ClassVar[str] = "semantic"

    category: str
    subcategory: Optional[str] = None
    identifier: Optional[str] = None  # e.g. Wikidata ID
    label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'kind': self.kind, 'category': self.category}
        _put(data, 'subcategory', self.subcategory)
        _put(data, 'identifier', self.identifier)
        _put(data, 'label', self.label)
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'SemanticValue':
        return SemanticValue(
            category=_require(data, 'category', "semantic value"),
            subcategory=data.get('subcategory'),
            identifier=data.get('identifier'),
            label=data.get('label'),
        )


@dataclass(frozen=True)
class NoteValue:
    kind: ClassVar[str] = "note"

    text: str
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'kind': self.kind, 'text': self.text}
        _put(data, 'category', self.category)
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'NoteValue':
        return NoteValue(
            text=_require(data, 'text', "note value"),
            category=data.get('category'),
        )


@dataclass(frozen=True)
class PaleographicValue:
    """Generic paleographic observation."""
    kind: ClassVar[str] = "paleographic"

    observation_type: PaleographicType
    description: Optional[str] = None
    certainty: Optional[float] = None  # 0.0 - 1.0

    def to_dict(self) -> Dict[str, Any]:
        data = {'kind': self.kind, 'observationType': self.observation_type.value}
        _put(data, 'description', self.description)
        _put(data, 'certainty', self.certainty)
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'PaleographicValue':
        return PaleographicValue(
            observation_type=_enum(
                PaleographicType,
                _require(data, 'observationType', "paleographic value"),
                "paleographic observation type",
            ),
            description=data.get('description'),
            certainty=data.get('certainty'),
        )


@dataclass(frozen=True)
class MenotaPaleographicValue:
    """
    Paleographic observation using MENOTA attribute vocabularies.

    Which optional fields apply depends on the observation type: unclear
    readings use unclear_reason; additions use add_place, add_type and hand;
    deletions use del_rend and hand; supplied text uses supplied_reason,
    resp and source; characters use char_type and char_size.
    """
    kind: ClassVar[str] = "menota-paleographic"

    observation_type: MenotaObservationType
    unclear_reason: Optional[MenotaUnclearReason] = None
    add_place: Optional[MenotaAddPlace] = None
    add_type: Optional[MenotaAddType] = None
    hand: Optional[str] = None
    del_rend: Optional[MenotaDelRend] = None
    supplied_reason: Optional[MenotaSuppliedReason] = None
    resp: Optional[str] = None
    source: Optional[str] = None
    char_type: Optional[MenotaCharType] = None
    char_size: Optional[int] = None  # height in lines, for initials
    description: Optional[str] = None
    certainty: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'kind': self.kind, 'observationType': self.observation_type.value}
        _put(data, 'unclearReason', self.unclear_reason)
        _put(data, 'addPlace', self.add_place)
        _put(data, 'addType', self.add_type)
        _put(data, 'hand', self.hand)
        _put(data, 'delRend', self.del_rend)
        _put(data, 'suppliedReason', self.supplied_reason)
        _put(data, 'resp', self.resp)
        _put(data, 'source', self.source)
        _put(data, 'charType', self.char_type)
        _put(data, 'charSize', self.char_size)
        _put(data, 'description', self.description)
        _put(data, 'certainty', self.certainty)
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'MenotaPaleographicValue':
        return MenotaPaleographicValue(
            observation_type=_enum(
                MenotaObservationType,
                _require(data, 'observationType', "MENOTA paleographic value"),
                "MENOTA observation type",
            ),
            unclear_reason=_optional_enum(MenotaUnclearReason, data.get('unclearReason'), "unclear reason"),
            add_place=_optional_enum(MenotaAddPlace, data.get('addPlace'), "addition place"),
            add_type=_optional_enum(MenotaAddType, data.get('addType'), "addition type"),
            hand=data.get('hand'),
            del_rend=_optional_enum(MenotaDelRend, data.get('delRend'), "deletion rendering"),
            supplied_reason=_optional_enum(MenotaSuppliedReason, data.get('suppliedReason'), "supplied reason"),
            resp=data.get('resp'),
            source=data.get('source'),
            char_type=_optional_enum(MenotaCharType, data.get('charType'), "character type"),
            char_size=data.get('charSize'),
            description=data.get('description'),
            certainty=data.get('certainty'),
        )


@dataclass(frozen=True)
class SyntaxValue:
    kind: ClassVar[str] = "syntax"

    function: str
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'kind': self.kind, 'function': self.function}
        _put(data, 'details', self.details)
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'SyntaxValue':
        return SyntaxValue(
            function=_require(data, 'function', "syntax value"),
            details=data.get('details'),
        )


@dataclass(frozen=True)
class ReferenceValue:
    kind: ClassVar[str] = "reference"

    target: str
    ref_type: str
    label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'kind': self.kind, 'target': self.target, 'refType': self.ref_type}
        _put(data, 'label', self.label)
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'ReferenceValue':
        return ReferenceValue(
            target=_require(data, 'target', "reference value"),
            ref_type=_require(data, 'refType', "reference value"),
            label=data.get('label'),
        )


@dataclass(frozen=True)
class CustomValue:
    kind: ClassVar[str] = "custom"

    custom_type: str
    data: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'customType': self.custom_type, 'data': dict(self.data)}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'CustomValue':
        payload = data.get('data') or {}
        if not isinstance(payload, dict):
            raise AnnotationFormatError("Custom value 'data' must be an object")
        return CustomValue(
            custom_type=_require(data, 'customType', "custom value"),
            data={str(k): str(v) for k, v in payload.items()},
        )


AnnotationValue = Union[
    LemmaValue,
    SemanticValue,
    NoteValue,
    PaleographicValue,
    MenotaPaleographicValue,
    SyntaxValue,
    ReferenceValue,
    CustomValue,
]

VALUE_KINDS = {
    LemmaValue.kind: LemmaValue,
    SemanticValue.kind: SemanticValue,
    NoteValue.kind: NoteValue,
    PaleographicValue.kind: PaleographicValue,
    MenotaPaleographicValue.kind: MenotaPaleographicValue,
    SyntaxValue.kind: SyntaxValue,
    ReferenceValue.kind: ReferenceValue,
    CustomValue.kind: CustomValue,
}

# Value kinds each annotation type accepts.
COMPATIBLE_VALUE_KINDS = {
    AnnotationType.LEMMA: frozenset({LemmaValue.kind}),
    AnnotationType.SEMANTIC: frozenset({SemanticValue.kind}),
    AnnotationType.NOTE: frozenset({NoteValue.kind}),
    AnnotationType.PALEOGRAPHIC: frozenset({PaleographicValue.kind, MenotaPaleographicValue.kind}),
    AnnotationType.SYNTAX: frozenset({SyntaxValue.kind}),
    AnnotationType.REFERENCE: frozenset({ReferenceValue.kind}),
    AnnotationType.CUSTOM: frozenset({CustomValue.kind}),
}


def value_from_dict(data: Dict[str, Any]) -> AnnotationValue:
    """Decode a value from its kind-tagged wire form."""
    if not isinstance(data, dict):
        raise AnnotationFormatError(f"Value must be an object, got {type(data).__name__}")
    value_cls = VALUE_KINDS.get(data.get('kind'))
    if value_cls is None:
        raise AnnotationFormatError(f"Unknown value kind: {data.get('kind')!r}")
    return value_cls.from_dict(data)


def is_value_compatible(annotation_type: AnnotationType, value: AnnotationValue) -> bool:
    """Check whether a value's kind may be stored under the given type."""
    return value.kind in COMPATIBLE_VALUE_KINDS[annotation_type]


# ============================================================================
# Annotation records
# ============================================================================

@dataclass(frozen=True)
class AnnotationMetadata:
    """Provenance information attached to an annotation."""
    author: Optional[str] = None
    created: Optional[str] = None   # ISO 8601
    modified: Optional[str] = None
    confidence: Optional[float] = None  # 0.0 - 1.0
    source: Optional[str] = None    # "auto", "manual", "imported", ...
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        _put(data, 'author', self.author)
        _put(data, 'created', self.created)
        _put(data, 'modified', self.modified)
        _put(data, 'confidence', self.confidence)
        _put(data, 'source', self.source)
        _put(data, 'note', self.note)
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'AnnotationMetadata':
        if not isinstance(data, dict):
            raise AnnotationFormatError("Metadata must be an object")
        return AnnotationMetadata(
            author=data.get('author'),
            created=data.get('created'),
            modified=data.get('modified'),
            confidence=data.get('confidence'),
            source=data.get('source'),
            note=data.get('note'),
        )


@dataclass(frozen=True)
class Annotation:
    """A single annotation attached to a target in the transcription."""
    id: str
    annotation_type: AnnotationType
    target: AnnotationTarget
    value: AnnotationValue
    metadata: Optional[AnnotationMetadata] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert annotation to dictionary for JSON serialization."""
        data = {
            'id': self.id,
            'type': self.annotation_type.value,
            'target': self.target.to_dict(),
            'value': self.value.to_dict(),
        }
        if self.metadata is not None:
            data['metadata'] = self.metadata.to_dict()
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Annotation':
        """Create annotation from dictionary."""
        if not isinstance(data, dict):
            raise AnnotationFormatError(f"Annotation must be an object, got {type(data).__name__}")
        metadata = data.get('metadata')
        return Annotation(
            id=_require(data, 'id', "annotation"),
            annotation_type=_enum(AnnotationType, _require(data, 'type', "annotation"), "annotation type"),
            target=target_from_dict(_require(data, 'target', "annotation")),
            value=value_from_dict(_require(data, 'value', "annotation")),
            metadata=AnnotationMetadata.from_dict(metadata) if metadata is not None else None,
        )


@dataclass
class AnnotationSet:
    """All annotations of one document, in insertion order."""
    version: str = ANNOTATION_SET_VERSION
    annotations: List[Annotation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': self.version,
            'annotations': [ann.to_dict() for ann in self.annotations],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'AnnotationSet':
        if not isinstance(data, dict):
            raise AnnotationFormatError("Annotation set must be an object")
        annotations = data.get('annotations', [])
        if not isinstance(annotations, list):
            raise AnnotationFormatError("'annotations' must be a list")
        return AnnotationSet(
            version=str(data.get('version', ANNOTATION_SET_VERSION)),
            annotations=[Annotation.from_dict(ann) for ann in annotations],
        )


@dataclass(frozen=True)
class HistoryAction:
    """Represents a mutation that can be undone/redone."""
    action_type: ActionType
    annotation: Annotation  # state after the mutation (the removed one for REMOVE)
    previous_annotation: Optional[Annotation] = None  # for UPDATE and REMOVE


# ============================================================================
# Factories
# ============================================================================

def lemma_id(word_index: int) -> str:
    """Canonical id of the lemma annotation for a word."""
    return f"lemma-{word_index}"


def generate_id(prefix: str) -> str:
    """Generate a reasonably unique id: prefix, hex millis, 4 random hex digits."""
    millis = int(time.time() * 1000)
    return f"{prefix}-{millis:x}{random.randint(0, 0xffff):04x}"


def create_lemma_annotation(word_index: int, lemma: str, msa: str,
                            normalized: Optional[str] = None,
                            metadata: Optional[AnnotationMetadata] = None) -> Annotation:
    return Annotation(
        id=lemma_id(word_index),
        annotation_type=AnnotationType.LEMMA,
        target=WordTarget(word_index),
        value=LemmaValue(lemma=lemma, msa=msa, normalized=normalized),
        metadata=metadata,
    )


def create_note_annotation(target: AnnotationTarget, text: str,
                           category: Optional[str] = None) -> Annotation:
    return Annotation(
        id=generate_id("note"),
        annotation_type=AnnotationType.NOTE,
        target=target,
        value=NoteValue(text=text, category=category),
    )


def create_semantic_annotation(target: AnnotationTarget, category: str,
                               subcategory: Optional[str] = None,
                               label: Optional[str] = None) -> Annotation:
    return Annotation(
        id=generate_id("sem"),
        annotation_type=AnnotationType.SEMANTIC,
        target=target,
        value=SemanticValue(category=category, subcategory=subcategory, label=label),
    )


def create_paleographic_annotation(target: AnnotationTarget,
                                   observation_type: PaleographicType,
                                   description: Optional[str] = None,
                                   certainty: Optional[float] = None) -> Annotation:
    return Annotation(
        id=generate_id("paleo"),
        annotation_type=AnnotationType.PALEOGRAPHIC,
        target=target,
        value=PaleographicValue(
            observation_type=observation_type,
            description=description,
            certainty=certainty,
        ),
    )


def create_menota_paleographic_annotation(target: AnnotationTarget,
                                          value: MenotaPaleographicValue) -> Annotation:
    """MENOTA observations are stored under the paleographic type."""
    return Annotation(
        id=generate_id("menota"),
        annotation_type=AnnotationType.PALEOGRAPHIC,
        target=target,
        value=value,
    )


# ============================================================================
# Option catalogues for pickers
# ============================================================================

TYPE_LABELS = {
    AnnotationType.LEMMA: "Lemma",
    AnnotationType.SEMANTIC: "Semantic",
    AnnotationType.NOTE: "Note",
    AnnotationType.PALEOGRAPHIC: "Paleographic",
    AnnotationType.SYNTAX: "Syntax",
    AnnotationType.REFERENCE: "Reference",
    AnnotationType.CUSTOM: "Custom",
}


def type_label(annotation_type: AnnotationType) -> str:
    return TYPE_LABELS.get(annotation_type, "Unknown")


# Common semantic categories for Old Norse texts
SEMANTIC_CATEGORIES = (
    {'id': "person", 'label': "Person",
     'subcategories': ("masculine-name", "feminine-name", "patronymic", "nickname", "title")},
    {'id': "place", 'label': "Place",
     'subcategories': ("settlement", "region", "country", "toponym", "building")},
    {'id': "organization", 'label': "Organization",
     'subcategories': ("family", "political", "religious")},
    {'id': "event", 'label': "Event",
     'subcategories': ("battle", "assembly", "voyage", "legal")},
    {'id': "object", 'label': "Object",
     'subcategories': ("weapon", "ship", "treasure", "tool")},
    {'id': "concept", 'label': "Concept",
     'subcategories': ("legal-term", "religious", "social")},
    {'id': "divine", 'label': "Divine/Mythological",
     'subcategories': ("god", "giant", "creature", "realm")},
)

NOTE_CATEGORIES = (
    "editorial",
    "translation",
    "commentary",
    "textual",
    "historical",
    "linguistic",
)

MENOTA_UNCLEAR_REASONS = (
    (MenotaUnclearReason.ILLEGIBLE, "Illegible"),
    (MenotaUnclearReason.FADED, "Faded ink"),
    (MenotaUnclearReason.SMUDGED, "Smudged"),
    (MenotaUnclearReason.DAMAGE, "Physical damage"),
    (MenotaUnclearReason.ERASURE, "Erasure"),
    (MenotaUnclearReason.OVERWRITING, "Overwriting"),
    (MenotaUnclearReason.BINDING, "Hidden in binding"),
    (MenotaUnclearReason.OTHER, "Other"),
)

MENOTA_ADD_PLACES = (
    (MenotaAddPlace.INLINE, "Inline"),
    (MenotaAddPlace.SUPRALINEAR, "Above the line"),
    (MenotaAddPlace.INFRALINEAR, "Below the line"),
    (MenotaAddPlace.MARGIN_LEFT, "Left margin"),
    (MenotaAddPlace.MARGIN_RIGHT, "Right margin"),
    (MenotaAddPlace.MARGIN_TOP, "Top margin"),
    (MenotaAddPlace.MARGIN_BOTTOM, "Bottom margin"),
    (MenotaAddPlace.INTERLINEAR, "Between lines"),
)

MENOTA_DEL_RENDS = (
    (MenotaDelRend.OVERSTRIKE, "Struck through"),
    (MenotaDelRend.ERASURE, "Erased"),
    (MenotaDelRend.SUBPUNCTION, "Dots beneath"),
    (MenotaDelRend.EXPUNCTION, "Dots above"),
    (MenotaDelRend.BRACKETED, "Bracketed"),
)

MENOTA_CHAR_TYPES = (
    (MenotaCharType.INITIAL, "Decorated initial"),
    (MenotaCharType.CAPITAL, "Capital letter"),
    (MenotaCharType.RUBRIC, "Rubricated"),
    (MenotaCharType.COLORED, "Colored"),
)
