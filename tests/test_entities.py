"""Tests for character reference decoding."""
import pytest

from jsontmx.entities import HTML_ENTITY_MAP, decode_entities


def test_named_and_numeric_references() -> None:
    assert decode_entities("caf&eacute; &#233; &#xE9; &#XE9;") == "café é é é"


def test_double_encoded_reference_is_resolved() -> None:
    assert decode_entities("It&amp;rsquo;s") == "It’s"
    assert decode_entities("&amp;lt;b&amp;gt;") == "<b>"


def test_max_passes_limits_nesting() -> None:
    assert decode_entities("&amp;lt;", max_passes=1) == "&lt;"


def test_unknown_and_invalid_references_are_kept() -> None:
    assert decode_entities("&notanentity; &#0; &#x110000;") == "&notanentity; &#0; &#x110000;"


def test_empty_input_is_returned_unchanged() -> None:
    assert decode_entities("") == ""
    assert decode_entities(None) is None


def test_reserved_names_and_nbsp() -> None:
    for name in ("amp", "lt", "gt"):
        assert name in HTML_ENTITY_MAP
    assert decode_entities("a&nbsp;b") == "a b"


def test_references_xml_cannot_carry_are_kept() -> None:
    for text in ("&#xD800;", "&#55296;", "&#xDFFF;", "&#1;", "&#x1F;", "&#xFFFE;", "&#65535;"):
        assert decode_entities(text) == text
    assert decode_entities("a&#9;b&#10;c") == "a\tb\nc"
    assert decode_entities("&#x1F600;") == "\U0001F600"


@pytest.mark.parametrize(
    "text",
    ["It&amp;rsquo;s", "caf&eacute;", "&lt;b&gt;x&lt;/b&gt;", "&#233; &#x41;", "&unknown; &#0;", "plain text"],
)
def test_decoding_is_idempotent(text) -> None:
    once = decode_entities(text)
    assert decode_entities(once) == once
