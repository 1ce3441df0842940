"""
Core, UI-independent functionality.
"""
from .errors import (
    SagaScribeError,
    AnnotationError,
    AnnotationValidationError,
    AnnotationFormatError,
)

__all__ = [
    'SagaScribeError',
    'AnnotationError',
    'AnnotationValidationError',
    'AnnotationFormatError',
]
