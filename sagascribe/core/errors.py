"""
Exception types raised by the annotation core.

Operations on absent entities (removing an unknown id, undoing with an empty
history) are not errors and never raise; they return None or False.
"""


class SagaScribeError(Exception):
    """Base class for all application errors."""


class AnnotationError(SagaScribeError):
    """Base class for annotation errors."""


class AnnotationValidationError(AnnotationError, ValueError):
    """An annotation violates a store invariant and was rejected."""

    def __init__(self, message: str, annotation_id: str = None):
        super().__init__(message)
        self.annotation_id = annotation_id


class AnnotationFormatError(AnnotationError, ValueError):
    """Serialized annotation data could not be decoded."""
