"""Tests for key-path flattening and source/target alignment."""
import pytest

from jsontmx.align import MalformedContentError, align_documents, flatten_json, parse_json_files


def test_flatten_nested_objects_and_arrays() -> None:
    content = {
        "a": {"b": "x", "n": 1, "t": True, "z": None},
        "items": [{"title": "T"}, "s"],
        "grid": [["a", ["b"]]],
    }
    assert flatten_json(content) == {
        "a.b": "x",
        "items[0].title": "T",
        "items[1]": "s",
        "grid[0][0]": "a",
        "grid[0][1][0]": "b",
    }


def test_flatten_keeps_document_order() -> None:
    assert list(flatten_json({"z": "1", "a": "2", "m": {"k": "3"}})) == ["z", "a", "m.k"]


def test_flatten_top_level_list() -> None:
    assert flatten_json(["x", {"y": "z"}]) == {"[0]": "x", "[1].y": "z"}


@pytest.mark.parametrize("content", ["text", 3, None])
def test_flatten_rejects_scalar_root(content) -> None:
    with pytest.raises(MalformedContentError):
        flatten_json(content)


def test_no_source_files() -> None:
    result = parse_json_files([], [])
    assert result.errors == ["No source files provided"]
    assert result.translation_units == []


def test_missing_keys_still_produce_units(make_doc) -> None:
    source = make_doc("en/home.json", {"a": "Hello", "b": "Bye"})
    target = make_doc("fr/home.json", {"a": "Bonjour"})
    result = parse_json_files([source], [target])

    assert [(u.key_path, u.source_text, u.target_text) for u in result.translation_units] == [
        ("a", "Hello", "Bonjour"),
        ("b", "Bye", ""),
    ]
    assert result.missing_keys == ['Missing target for key "b" in home.json']
    assert result.translation_units[0].file_path == "en/home.json"
    assert result.processed_files == 1
    assert result.errors == []


def test_extra_target_keys_are_ignored(make_doc) -> None:
    source = make_doc("en/home.json", {"a": "Hello"})
    target = make_doc("fr/home.json", {"a": "Bonjour", "extra": "Plus"})
    result = parse_json_files([source], [target])
    assert [u.key_path for u in result.translation_units] == ["a"]
    assert result.missing_keys == []


def test_source_without_target_is_reported(make_doc) -> None:
    source = make_doc("en/home.json", {"a": "Hello"})
    target = make_doc("fr/about.json", {"a": "Bonjour"})
    result = parse_json_files([source], [target])
    assert result.errors == ["No corresponding target file found for home.json"]
    assert result.processed_files == 0


def test_malformed_source_does_not_abort_other_files(make_doc) -> None:
    sources = [make_doc("en/home.json", "oops"), make_doc("en/about.json", {"a": "Hi"})]
    targets = [make_doc("fr/home.json", {"a": "x"}), make_doc("fr/about.json", {"a": "Salut"})]
    result = parse_json_files(sources, targets)

    assert len(result.errors) == 1
    assert result.errors[0].startswith("Error processing home.json:")
    assert [u.target_text for u in result.translation_units] == ["Salut"]
    assert result.processed_files == 1


def test_segmentation_with_matching_counts(make_doc) -> None:
    source = make_doc("en/home.json", {"a": "One. Two."})
    target = make_doc("fr/home.json", {"a": "Un. Deux."})
    units = parse_json_files([source], [target], enable_segmentation=True).translation_units

    assert [(u.source_text, u.target_text, u.segment_index, u.total_segments) for u in units] == [
        ("One.", "Un.", 1, 2),
        ("Two.", "Deux.", 2, 2),
    ]


def test_segmentation_mismatch_falls_back(make_doc) -> None:
    source = make_doc("en/home.json", {"a": "One. Two."})
    target = make_doc("fr/home.json", {"a": "Un et deux."})
    result = parse_json_files([source], [target], enable_segmentation=True)

    assert [(u.source_text, u.target_text, u.segment_index) for u in result.translation_units] == [
        ("One. Two.", "Un et deux.", None)
    ]
    assert len(result.mismatches) == 1
    assert 'Segmentation mismatch for key "a"' in result.mismatches[0]


def test_segmentation_single_sentence_and_missing_target(make_doc) -> None:
    source = make_doc("en/home.json", {"a": "Only one.", "b": "One. Two."})
    target = make_doc("fr/home.json", {"a": "Un seul."})
    result = parse_json_files([source], [target], enable_segmentation=True)

    assert [(u.key_path, u.segment_index) for u in result.translation_units] == [("a", None), ("b", None)]
    assert result.mismatches == []


def test_align_documents_returns_diagnostics(make_doc) -> None:
    source = make_doc("en/home.json", {"a": "One. Two.", "b": "Bye"})
    target = make_doc("fr/other.json", {"a": "Un."})
    units, diagnostics = align_documents(source, target, enable_segmentation=True)

    assert len(units) == 2
    assert diagnostics[0] == 'Missing target for key "b" in other.json'
    assert diagnostics[1].startswith('Segmentation mismatch for key "a"')


def test_colon_introduced_list_aligns_per_segment(make_doc) -> None:
    source = make_doc("en/q.json", {"q": "A: 1. X"})
    units, diagnostics = align_documents(source, make_doc("fr/q.json", {"q": "Q: 1. Y"}), True)
    assert [(u.source_text, u.target_text, u.total_segments) for u in units] == [
        ("A:", "Q:", 2),
        ("1. X", "1. Y", 2),
    ]
    assert diagnostics == []

    units, diagnostics = align_documents(source, make_doc("fr/q.json", {"q": "Q: Y"}), True)
    assert len(units) == 1
    assert len(diagnostics) == 1
