"""Tests for TMX serialization."""
import xml.etree.ElementTree as ET

from jsontmx import __version__
from jsontmx.tmx_writer import build_tmx_filename, generate_tmx, generate_tuid, process_text, write_tmx
from jsontmx.types import TranslationUnit

XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"


def test_tuid_is_stable_and_short() -> None:
    unit = TranslationUnit("Hello", "Bonjour", "greeting.hello", "en/home.json")
    assert generate_tuid(unit) == generate_tuid(TranslationUnit("Hello", "Salut", "greeting.hello"))
    assert len(generate_tuid(unit)) == 16


def test_tuid_distinguishes_close_records() -> None:
    first = TranslationUnit("A long shared sentence, part 1", "", "some.long.key.path")
    second = TranslationUnit("A long shared sentence, part 2", "", "some.long.key.path")
    assert generate_tuid(first) != generate_tuid(second)

    whole = TranslationUnit("One.", "Un.", "a")
    segment = TranslationUnit("One.", "Un.", "a", segment_index=1, total_segments=2)
    assert generate_tuid(whole) != generate_tuid(segment)


def test_tuid_handles_non_ascii() -> None:
    unit = TranslationUnit("日本語のテキスト", "", "jp")
    assert len(generate_tuid(unit)) == 16


def test_process_text_pipeline() -> None:
    assert process_text("1 &lt; 2") == "1 &lt; 2"
    assert process_text("Tom &amp;amp; Jerry") == "Tom &amp; Jerry"
    assert process_text("<b>Hi</b>") == '<bpt i="1">&lt;b&gt;</bpt>Hi<ept i="1">&lt;/b&gt;</ept>'


def test_generate_tmx_document() -> None:
    units = [
        TranslationUnit("Hello <b>world</b> &amp; co", "Bonjour <b>monde</b>", "greeting", "en/home.json"),
        TranslationUnit("Two.", "Deux.", "body", "en/home.json", segment_index=2, total_segments=2),
    ]
    content = generate_tmx(units, "en-GB", "fr")

    assert content.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert '<seg>Hello <bpt i="1">&lt;b&gt;</bpt>world<ept i="1">&lt;/b&gt;</ept> &amp; co</seg>' in content

    root = ET.fromstring(content.encode("utf-8"))
    assert root.tag == "tmx"
    assert root.get("version") == "1.4"
    header = root.find("header")
    assert header.get("srclang") == "en-GB"
    assert header.get("segtype") == "sentence"
    assert header.get("datatype") == "plaintext"
    assert header.get("creationtoolversion") == __version__

    tus = root.findall("body/tu")
    assert len(tus) == 2
    assert [tu.findtext("note") for tu in tus] == [
        "greeting (en/home.json)",
        "body [segment 2/2] (en/home.json)",
    ]
    assert [tuv.get(XML_LANG) for tuv in tus[0].findall("tuv")] == ["en-GB", "fr"]
    assert tus[1].findall("tuv")[1].findtext("seg") == "Deux."
    assert tus[0].get("tuid") == generate_tuid(units[0])


def test_generate_tmx_without_units() -> None:
    root = ET.fromstring(generate_tmx([], "en", "es").encode("utf-8"))
    assert root.findall("body/tu") == []


def test_build_tmx_filename() -> None:
    assert build_tmx_filename("en-GB", "fr") == "translation_memory_en-GB_fr.tmx"
    assert build_tmx_filename("en", "de", prefix="tm", ext=".xml") == "tm_en_de.xml"


def test_write_tmx_creates_directories(tmp_path) -> None:
    target = tmp_path / "nested" / "out.tmx"
    assert write_tmx("<tmx/>", target) == target
    assert target.read_text(encoding="utf-8") == "<tmx/>"


def test_unrepresentable_characters_keep_the_document_wellformed() -> None:
    units = [
        TranslationUnit("a&#1;b &#xD800;", "c\x01d", "k"),
        TranslationUnit("lone \ud800 surrogate", "x", "k2"),
    ]
    content = generate_tmx(units, "en", "fr")

    root = ET.fromstring(content.encode("utf-8"))
    assert [seg.text for seg in root.iter("seg")] == ["a&#1;b &#xD800;", "cd", "lone  surrogate", "x"]
    assert len(generate_tuid(units[1])) == 16
