"""Tests for annotation persistence and project loading."""
import json

import pytest

from sagascribe.core.annotations import (
    AnnotationPersistence,
    AnnotationSet,
    LemmaConfirmations,
    WordTarget,
    create_lemma_annotation,
    create_note_annotation,
    dumps_lemma_mappings,
    dumps_set,
    load_project_annotations,
    loads_legacy_confirmations,
    loads_set,
)


class TestSetSerialization:

    def test_dumps_shape(self) -> None:
        annotation_set = AnnotationSet(annotations=[create_lemma_annotation(0, "maðr", "xNC")])
        data = json.loads(dumps_set(annotation_set))
        assert data['version'] == "1.0"
        assert data['annotations'][0]['id'] == "lemma-0"
        assert "maðr" in dumps_set(annotation_set)

    def test_loads_restores_set(self) -> None:
        original = AnnotationSet(annotations=[
            create_lemma_annotation(0, "maðr", "xNC", "maðr"),
            create_note_annotation(WordTarget(1), "This is a note", "editorial"),
        ])
        assert loads_set(dumps_set(original)) == original

    @pytest.mark.parametrize("text", [
        None,
        "",
        "{not json",
        "[1, 2]",
        '{"annotations": "nope"}',
        '{"annotations": [{"id": "x"}]}',
        '{"annotations": [{"id": "x", "type": "note", "target": {"type": ["word"]}, "value": {}}]}',
    ])
    def test_malformed_input_fails_closed(self, text) -> None:
        result = loads_set(text)
        assert result.version == "1.0"
        assert result.annotations == []


class TestLegacyFormat:

    def test_mappings_use_string_keys(self) -> None:
        text = dumps_lemma_mappings({3: {'lemma': "hundr", 'msa': "nsm"}})
        assert json.loads(text) == {"3": {'lemma': "hundr", 'msa': "nsm"}}

    def test_loads_legacy(self) -> None:
        assert loads_legacy_confirmations('{"1": {"lemma": "a", "msa": "x"}}') == {
            "1": {'lemma': "a", 'msa': "x"},
        }

    @pytest.mark.parametrize("text", [None, "", "oops", "[]", "3"])
    def test_bad_legacy_input_is_empty(self, text) -> None:
        assert loads_legacy_confirmations(text) == {}


class TestLoadProjectAnnotations:

    def test_annotation_set_preferred_over_legacy(self, manager) -> None:
        annotations_json = dumps_set(AnnotationSet(annotations=[create_lemma_annotation(9, "kona", "xNC")]))
        confirmations_json = '{"1": {"lemma": "a", "msa": "x"}}'

        load_project_annotations(manager, annotations_json, confirmations_json)

        assert [ann.id for ann in manager.annotations] == ["lemma-9"]
        assert not manager.can_undo()

    def test_legacy_used_when_no_annotation_set(self, manager) -> None:
        load_project_annotations(manager, None, '{"1": {"lemma": "a", "msa": "x"}, "bad": {}}')

        assert LemmaConfirmations(manager).lemma_mappings() == {1: {'lemma': "a", 'msa': "x"}}
        assert not manager.can_undo()
        assert not manager.can_redo()

    def test_nothing_clears(self, manager) -> None:
        manager.add(create_lemma_annotation(0, "a", "x"))
        load_project_annotations(manager)
        assert manager.total == 0
        assert not manager.can_undo()

    def test_invalid_set_falls_back_to_empty(self, manager) -> None:
        bad = json.dumps({
            'version': "1.0",
            'annotations': [
                {'id': "n", 'type': "note", 'target': {'type': "span", 'startWord': 4, 'endWord': 1},
                 'value': {'kind': "note", 'text': "t"}},
            ],
        })
        load_project_annotations(manager, bad)
        assert manager.total == 0

    def test_save_load_cycle_through_legacy_format(self, manager, lemmas) -> None:
        lemmas.confirm_lemma(2, "vera", "xVB", "vera")
        confirmations_json = dumps_lemma_mappings(lemmas.lemma_mappings())

        load_project_annotations(manager, None, confirmations_json)
        assert lemmas.get_lemma_mapping(2) == {'lemma': "vera", 'msa': "xVB", 'normalized': "vera"}


class TestAnnotationPersistence:

    @pytest.fixture
    def persistence(self, tmp_path):
        return AnnotationPersistence(data_dir=str(tmp_path / "annotations"))

    def test_json_path_is_stable_per_document(self, persistence) -> None:
        first = persistence.get_json_path("/docs/saga.teis")
        assert first == persistence.get_json_path("/docs/saga.teis")
        assert first != persistence.get_json_path("/docs/other.teis")
        assert first.endswith(".json")

    def test_save_and_load(self, persistence) -> None:
        annotation_set = AnnotationSet(annotations=[create_lemma_annotation(1, "kona", "xNC")])
        assert persistence.save_to_json(annotation_set, "/docs/saga.teis")
        assert persistence.has_saved_annotations("/docs/saga.teis")

        loaded, ok = persistence.load_from_json("/docs/saga.teis")
        assert ok
        assert loaded == annotation_set

    def test_load_missing_file(self, persistence) -> None:
        loaded, ok = persistence.load_from_json("/docs/none.teis")
        assert not ok
        assert loaded.annotations == []

    def test_load_corrupt_file(self, persistence) -> None:
        path = persistence.get_json_path("/docs/saga.teis")
        with open(path, 'w', encoding='utf-8') as f:
            f.write("{broken")
        loaded, ok = persistence.load_from_json("/docs/saga.teis")
        assert not ok
        assert loaded.annotations == []

    def test_custom_file_path(self, persistence, tmp_path) -> None:
        target = tmp_path / "export" / "annotations.json"
        assert persistence.save_to_json(AnnotationSet(), "/docs/saga.teis", str(target))
        assert json.loads(target.read_text(encoding='utf-8'))['document_path'] == "/docs/saga.teis"

    def test_delete(self, persistence) -> None:
        persistence.save_to_json(AnnotationSet(), "/docs/saga.teis")
        assert persistence.delete_json_file("/docs/saga.teis")
        assert not persistence.has_saved_annotations("/docs/saga.teis")
        assert persistence.delete_json_file("/docs/saga.teis")
