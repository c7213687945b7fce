"""Conversion of embedded HTML tags into TMX inline elements.

Paired tags (``<b>text</b>``) become ``<bpt>``/``<ept>`` sharing one ``i``
attribute; self-closing, void and unmatched tags become ``<ph>``. The original
tag text is kept, XML-escaped, as the element content so the markup can be
reconstructed by a CAT tool.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

STANDALONE_TAG_NAMES = frozenset({"br", "hr", "img", "input", "meta", "link"})

PAIRED_START = "paired-start"
PAIRED_END = "paired-end"
SELF_CLOSING = "self-closing"
STANDALONE = "standalone"

_TAG_RE = re.compile(r"</?([a-zA-Z][a-zA-Z0-9]*)[^>]*/?>")
_TMX_INLINE_RE = re.compile(r"<(bpt|ept|ph)([^>]*)>.*?</(bpt|ept|ph)>", re.DOTALL)
_PLACEHOLDER_PREFIX = "___TMX_TAG_"
_PLACEHOLDER_RE = re.compile(_PLACEHOLDER_PREFIX + r"(\d+)___")

_XML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

__all__ = [
    "STANDALONE_TAG_NAMES",
    "TagInfo",
    "convert_html_tags_to_tmx_inline",
    "escape_xml",
    "escape_xml_except_tmx_tags",
    "scan_tags",
    "tmx_inline_to_placeholders",
]


@dataclass(slots=True)
class TagInfo:
    """A tag found in the source text and its classification."""

    kind: str
    full_tag: str
    tag_name: str
    index: int
    pair_id: int


def escape_xml(text: str) -> str:
    """Escape the five XML special characters."""

    for raw, escaped in _XML_ESCAPES:
        text = text.replace(raw, escaped)
    return text


def scan_tags(text: str) -> List[TagInfo]:
    """Classify every tag in *text*, in order of appearance.

    A closing tag pairs with the first open tag of the same name found on the
    stack, scanning from the oldest entry. This is intentionally looser than
    strict nesting; improperly nested same-name tags pair with the outermost
    opener. Openers never closed are demoted to standalone.
    """

    tags: List[TagInfo] = []
    # (tag name, pair id, position in ``tags``)
    stack: List[Tuple[str, int, int]] = []
    next_id = 1

    for match in _TAG_RE.finditer(text):
        full_tag = match.group(0)
        tag_name = match.group(1)
        if full_tag.endswith("/>"):
            tags.append(TagInfo(SELF_CLOSING, full_tag, tag_name, match.start(), next_id))
            next_id += 1
        elif full_tag.startswith("</"):
            position = next((i for i, entry in enumerate(stack) if entry[0] == tag_name), None)
            if position is not None:
                _, pair_id, _ = stack.pop(position)
                tags.append(TagInfo(PAIRED_END, full_tag, tag_name, match.start(), pair_id))
            else:
                tags.append(TagInfo(STANDALONE, full_tag, tag_name, match.start(), next_id))
                next_id += 1
        elif tag_name.lower() in STANDALONE_TAG_NAMES:
            tags.append(TagInfo(STANDALONE, full_tag, tag_name, match.start(), next_id))
            next_id += 1
        else:
            stack.append((tag_name, next_id, len(tags)))
            tags.append(TagInfo(PAIRED_START, full_tag, tag_name, match.start(), next_id))
            next_id += 1

    for _, _, position in stack:
        tags[position].kind = STANDALONE
    return tags


def _render_inline(tag: TagInfo) -> str:
    escaped = escape_xml(tag.full_tag)
    if tag.kind == PAIRED_START:
        return f'<bpt i="{tag.pair_id}">{escaped}</bpt>'
    if tag.kind == PAIRED_END:
        return f'<ept i="{tag.pair_id}">{escaped}</ept>'
    return f'<ph i="{tag.pair_id}">{escaped}</ph>'


def convert_html_tags_to_tmx_inline(text: str) -> str:
    """Replace HTML tags in *text* with TMX ``bpt``/``ept``/``ph`` elements."""

    if not text:
        return text
    result = text
    # Right to left so earlier offsets stay valid.
    for tag in sorted(scan_tags(text), key=lambda t: t.index, reverse=True):
        end = tag.index + len(tag.full_tag)
        result = result[: tag.index] + _render_inline(tag) + result[end:]
    return result


def escape_xml_except_tmx_tags(text: str) -> str:
    """Escape XML special characters while leaving TMX inline elements intact."""

    if not text:
        return text
    preserved: List[str] = []

    def _stash(match: re.Match[str]) -> str:
        preserved.append(match.group(0))
        return f"{_PLACEHOLDER_PREFIX}{len(preserved) - 1}___"

    def _restore(match: re.Match[str]) -> str:
        index = int(match.group(1))
        return preserved[index] if index < len(preserved) else match.group(0)

    result = _TMX_INLINE_RE.sub(_stash, text)
    result = escape_xml(result)
    return _PLACEHOLDER_RE.sub(_restore, result)


def tmx_inline_to_placeholders(text: str) -> str:
    """Render TMX inline elements as ``{1}…{/1}`` for display."""

    text = re.sub(r'<bpt i="(\d+)">[^<]*</bpt>', r"{\1}", text)
    text = re.sub(r'<ept i="(\d+)">[^<]*</ept>', r"{/\1}", text)
    return re.sub(r'<ph i="(\d+)">[^<]*</ph>', r"{\1}", text)
