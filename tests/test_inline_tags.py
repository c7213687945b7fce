"""Tests for HTML tag to TMX inline element conversion."""
from jsontmx.inline_tags import (
    PAIRED_END,
    PAIRED_START,
    SELF_CLOSING,
    STANDALONE,
    convert_html_tags_to_tmx_inline,
    escape_xml,
    escape_xml_except_tmx_tags,
    scan_tags,
    tmx_inline_to_placeholders,
)


def test_paired_tags_share_an_id() -> None:
    assert convert_html_tags_to_tmx_inline("<b>Hi</b>") == (
        '<bpt i="1">&lt;b&gt;</bpt>Hi<ept i="1">&lt;/b&gt;</ept>'
    )


def test_attributes_are_escaped_inside_bpt() -> None:
    result = convert_html_tags_to_tmx_inline('<a href="x">link</a>')
    assert result == '<bpt i="1">&lt;a href=&quot;x&quot;&gt;</bpt>link<ept i="1">&lt;/a&gt;</ept>'


def test_self_closing_and_void_tags_become_ph() -> None:
    assert convert_html_tags_to_tmx_inline("a<br/>b") == 'a<ph i="1">&lt;br/&gt;</ph>b'
    assert convert_html_tags_to_tmx_inline("a<br>b") == 'a<ph i="1">&lt;br&gt;</ph>b'
    assert [t.kind for t in scan_tags("<img src='x'/><hr>")] == [SELF_CLOSING, STANDALONE]


def test_orphans_become_standalone() -> None:
    assert convert_html_tags_to_tmx_inline("x</i>y") == 'x<ph i="1">&lt;/i&gt;</ph>y'
    assert convert_html_tags_to_tmx_inline("<b>x") == '<ph i="1">&lt;b&gt;</ph>x'


def test_closing_tag_pairs_with_oldest_same_name_opener() -> None:
    tags = scan_tags("<b><i><b></b>")
    assert [(t.kind, t.pair_id) for t in tags] == [
        (PAIRED_START, 1),
        (STANDALONE, 2),
        (STANDALONE, 3),
        (PAIRED_END, 1),
    ]


def test_nested_pairs() -> None:
    tags = scan_tags("<p>Hello <b>there</b></p>")
    assert [(t.tag_name, t.kind, t.pair_id) for t in tags] == [
        ("p", PAIRED_START, 1),
        ("b", PAIRED_START, 2),
        ("b", PAIRED_END, 2),
        ("p", PAIRED_END, 1),
    ]


def test_plain_text_untouched() -> None:
    assert convert_html_tags_to_tmx_inline("1 < 2 and 3 > 2") == "1 < 2 and 3 > 2"
    assert convert_html_tags_to_tmx_inline("") == ""


def test_escape_keeps_inline_elements() -> None:
    inline = convert_html_tags_to_tmx_inline("<b>A & B</b> 'q'")
    assert escape_xml_except_tmx_tags(inline) == (
        '<bpt i="1">&lt;b&gt;</bpt>A &amp; B<ept i="1">&lt;/b&gt;</ept> &apos;q&apos;'
    )
    assert escape_xml_except_tmx_tags("1 < 2") == "1 &lt; 2"


def test_escape_xml() -> None:
    assert escape_xml("<a href=\"x\">'&'</a>") == "&lt;a href=&quot;x&quot;&gt;&apos;&amp;&apos;&lt;/a&gt;"


def test_placeholder_rendering() -> None:
    inline = convert_html_tags_to_tmx_inline("<b>Hi</b><br/>")
    assert tmx_inline_to_placeholders(inline) == "{1}Hi{/1}{2}"
