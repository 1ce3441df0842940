"""Pytest configuration and fixtures."""
import pytest

from sagascribe.core.annotations import (
    AnnotationManager,
    LemmaConfirmations,
    UndoRedoStack,
)


@pytest.fixture
def manager():
    return AnnotationManager()


@pytest.fixture
def lemmas(manager):
    return LemmaConfirmations(manager)


@pytest.fixture
def history():
    return UndoRedoStack()
