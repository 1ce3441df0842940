"""
Handles persistence of annotation sets to/from JSON.
"""
import hashlib
import json
import logging
import os
from typing import Any, Dict, Optional, Tuple

from sagascribe.core.errors import AnnotationError
from .lemmas import LemmaConfirmations
from .manager import AnnotationManager
from .models import AnnotationSet

logger = logging.getLogger(__name__)


def dumps_set(annotation_set: AnnotationSet) -> str:
    """Serialize an annotation set to the project JSON format."""
    return json.dumps(annotation_set.to_dict(), ensure_ascii=False)


def loads_set(text: Optional[str]) -> AnnotationSet:
    """
    Parse an annotation set.

    Unparseable or malformed input yields an empty set rather than an error.
    """
    if not text:
        return AnnotationSet()
    try:
        return AnnotationSet.from_dict(json.loads(text))
    except (TypeError, ValueError, AnnotationError) as e:
        logger.warning("Discarding unreadable annotation set: %s", e)
        return AnnotationSet()


def dumps_lemma_mappings(mappings: Dict[int, Dict[str, str]]) -> str:
    """Serialize lemma mappings in the legacy confirmations format."""
    return json.dumps({str(index): mapping for index, mapping in mappings.items()},
                      ensure_ascii=False)


def loads_legacy_confirmations(text: Optional[str]) -> Dict[str, Any]:
    """Parse a legacy confirmations map; bad input yields an empty map."""
    if not text:
        return {}
    try:
        data = json.loads(text)
    except ValueError as e:
        logger.warning("Discarding unreadable legacy confirmations: %s", e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Legacy confirmations must be an object, got %s", type(data).__name__)
        return {}
    return data


def load_project_annotations(manager: AnnotationManager,
                             annotations_json: Optional[str] = None,
                             confirmations_json: Optional[str] = None) -> None:
    """
    Populate a manager from the annotation parts of an opened project.

    The full annotation set wins when present; older projects only carry
    the legacy confirmations, which are migrated instead. History is empty
    afterwards either way.

    Args:
        manager: Manager to (re)populate
        annotations_json: Contents of annotations.json, if any
        confirmations_json: Contents of confirmations.json, if any
    """
    manager.clear()
    if annotations_json:
        annotation_set = loads_set(annotations_json)
        try:
            manager.load_set(annotation_set)
        except AnnotationError as e:
            logger.warning("Rejected invalid annotation set: %s", e)
            manager.clear()
    elif confirmations_json:
        LemmaConfirmations(manager).load_legacy_confirmations(
            loads_legacy_confirmations(confirmations_json))
        manager.history.clear()


class AnnotationPersistence:
    """Manages saving and loading annotation sets to/from disk."""

    def __init__(self, data_dir: Optional[str] = None):
        self._data_dir: Optional[str] = data_dir

    def get_data_dir(self) -> str:
        """
        Get or create the directory for storing annotation files.

        Returns:
            Path to the annotations directory
        """
        if self._data_dir:
            os.makedirs(self._data_dir, exist_ok=True)
            return self._data_dir

        from sagascribe.utils.resource_loader import get_annotations_dir
        self._data_dir = str(get_annotations_dir())
        return self._data_dir

    def get_json_path(self, document_path: str) -> str:
        """
        Get the JSON file path for a given document.

        Args:
            document_path: Path to the transcription or project file

        Returns:
            Path to the corresponding JSON annotations file
        """
        # Hash the path so each document gets its own file wherever it lives
        path_hash = hashlib.md5(document_path.encode()).hexdigest()
        return os.path.join(self.get_data_dir(), f"{path_hash}.json")

    def save_to_json(self, annotation_set: AnnotationSet, document_path: str,
                     file_path: Optional[str] = None) -> bool:
        """
        Save an annotation set to a JSON file.

        Args:
            annotation_set: Annotations to save
            document_path: Path to the associated document
            file_path: Optional custom path for the JSON file

        Returns:
            True if save was successful, False otherwise
        """
        if file_path is None:
            file_path = self.get_json_path(document_path)

        data = {
            'document_path': document_path,
            **annotation_set.to_dict(),
        }
        try:
            directory = os.path.dirname(file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            return True
        except OSError as e:
            logger.error("Failed to save annotations to %s: %s", file_path, e)
            return False

    def load_from_json(self, document_path: str,
                       file_path: Optional[str] = None) -> Tuple[AnnotationSet, bool]:
        """
        Load an annotation set from a JSON file.

        Args:
            document_path: Path to the associated document
            file_path: Optional custom path for the JSON file

        Returns:
            Tuple of (annotation set, success flag); the set is empty when
            the flag is False
        """
        if file_path is None:
            file_path = self.get_json_path(document_path)

        if not os.path.exists(file_path):
            return AnnotationSet(), False

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            stored_path = data.get('document_path') if isinstance(data, dict) else None
            if stored_path is not None and stored_path != document_path:
                logger.warning("Annotation file %s belongs to %s", file_path, stored_path)
            return AnnotationSet.from_dict(data), True
        except (OSError, TypeError, ValueError, AnnotationError) as e:
            logger.warning("Failed to load annotations from %s: %s", file_path, e)
            return AnnotationSet(), False

    def delete_json_file(self, document_path: str) -> bool:
        """
        Delete the JSON annotation file for a document.

        Returns:
            True if deletion was successful or file didn't exist
        """
        file_path = self.get_json_path(document_path)

        if not os.path.exists(file_path):
            return True

        try:
            os.remove(file_path)
            return True
        except OSError as e:
            logger.error("Failed to delete %s: %s", file_path, e)
            return False

    def has_saved_annotations(self, document_path: str) -> bool:
        """Check if saved annotations exist for a document."""
        return os.path.exists(self.get_json_path(document_path))
