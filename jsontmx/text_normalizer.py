"""Hidden-character normalization and heuristic sentence splitting."""
from __future__ import annotations

import re
from typing import Dict, List

from .logging_setup import is_debug_logging_enabled, log_debug, make_log_limit

ABBREVIATIONS: tuple[str, ...] = (
    "Dr",
    "Mr",
    "Mrs",
    "Ms",
    "Prof",
    "Sr",
    "Jr",
    "Inc",
    "Ltd",
    "Co",
    "Corp",
    "etc",
    "i.e",
    "e.g",
    "vs",
    "U.S",
    "U.K",
    "A.M",
    "P.M",
)
BULLET_GLYPHS = "•*-–—"

__all__ = [
    "ABBREVIATIONS",
    "BULLET_GLYPHS",
    "normalize_hidden_chars",
    "segment_sentences",
]

_HIDDEN_RE = re.compile("[\uFFFC\u200B\u200C\u200D\u2060\uFEFF]")
_NBSP_RE = re.compile("[\u00A0\u202F]")
_WS_RE = re.compile(r"\s+")

# Private-use sentinels never survive into the returned segments.
_BOUNDARY = "\uE000"
_DECIMAL_DOT = "\uE001"
_ABBREV_OPEN = "\uE002"
_ABBREV_CLOSE = "\uE003"

_BULLET_CLASS = "[" + re.escape(BULLET_GLYPHS) + "]"
_DECIMAL_RE = re.compile(r"(\d)\.(\d)")
_ABBREV_RES = tuple(
    re.compile(r"\b" + re.escape(abbrev) + r"\.", re.IGNORECASE) for abbrev in ABBREVIATIONS
)
_LIST_MARKER_RE = re.compile(r"(^|\r?\n)\s*(?:\d+\.|" + _BULLET_CLASS + r")\s+")
_COLON_LIST_RE = re.compile(r":\s+(?=\d+\.|" + _BULLET_CLASS + ")")
_LEADING_ENUM_RE = re.compile(r"^(\d+)\.(?=\s)")
_SENTENCE_END_RE = re.compile(r"(?:…|\.{3}|[.!?])(?=\s|$|<|[\"')\]])")
_PLACEHOLDER_RE = re.compile(_ABBREV_OPEN + r"(\d+)" + _ABBREV_CLOSE)
_LEADING_BULLET_RE = re.compile(r"^" + _BULLET_CLASS + r"\s+")


def _preview_line_for_debug(text: str, limit: int = 80) -> str:
    """Return a single-line preview for verbose logs."""

    compacted = text.replace("\n", " ").strip()
    return compacted[:limit] if compacted else "<empty>"


def normalize_hidden_chars(text: str) -> str:
    """Drop zero-width characters, turn NBSP into spaces and collapse whitespace."""

    if not text:
        return ""
    normalized = _HIDDEN_RE.sub("", text)
    normalized = _NBSP_RE.sub(" ", normalized)
    normalized = _WS_RE.sub(" ", normalized)
    return normalized.strip()


def _protect_abbreviations(text: str, originals: Dict[str, str]) -> str:
    def _stash(match: re.Match[str]) -> str:
        placeholder = f"{_ABBREV_OPEN}{len(originals)}{_ABBREV_CLOSE}"
        originals[placeholder] = match.group(0)
        return placeholder

    for pattern in _ABBREV_RES:
        text = pattern.sub(_stash, text)
    return text


def _split_part(part: str) -> List[str]:
    """Split one boundary-delimited part at sentence-ending punctuation."""

    # A leading "1." is a list enumerator, not the end of a sentence.
    part = _LEADING_ENUM_RE.sub(r"\1" + _DECIMAL_DOT, part)
    sentences: List[str] = []
    last = 0
    for match in _SENTENCE_END_RE.finditer(part):
        sentence = part[last : match.end()].strip()
        if sentence:
            sentences.append(sentence)
        last = match.end()
    remaining = part[last:].strip()
    if remaining:
        sentences.append(remaining)
    return sentences


def _restore(segment: str, originals: Dict[str, str]) -> str:
    restored = _PLACEHOLDER_RE.sub(lambda m: originals.get(m.group(0), m.group(0)), segment)
    restored = restored.replace(_DECIMAL_DOT, ".")
    restored = _LEADING_BULLET_RE.sub("", restored)
    return restored.strip()


def segment_sentences(text: str) -> List[str]:
    """Split *text* into sentence-like segments.

    Decimal numbers and common abbreviations are protected before splitting,
    list items (``1.``, bullets) always start a new segment, and a colon that
    introduces a list ends the preceding segment. Only ``. ! ?``, ``...`` and
    ``…`` end a sentence, and only when followed by whitespace, the end of the
    text, an opening tag or a closing quote/bracket. The result is never empty
    for non-empty input: when nothing usable remains, ``[text]`` is returned.
    """

    if not text or not isinstance(text, str):
        return [text]

    normalized = normalize_hidden_chars(text)
    if not normalized:
        return [text]

    originals: Dict[str, str] = {}
    processed = _DECIMAL_RE.sub(r"\1" + _DECIMAL_DOT + r"\2", normalized)
    processed = _protect_abbreviations(processed, originals)
    processed = _LIST_MARKER_RE.sub(r"\1" + _BOUNDARY, processed)
    processed = _COLON_LIST_RE.sub(":" + _BOUNDARY, processed)

    segments: List[str] = []
    for part in processed.split(_BOUNDARY):
        trimmed = part.strip()
        if trimmed:
            segments.extend(_split_part(trimmed))

    restored = [seg for seg in (_restore(s, originals) for s in segments) if seg]
    if is_debug_logging_enabled():
        limit = make_log_limit(20)
        log_debug("[segment] input=%s count=%d", _preview_line_for_debug(normalized), len(restored))
        for index, seg in enumerate(restored, start=1):
            log_debug("[segment] #%d %s", index, _preview_line_for_debug(seg), limit=limit)
    return restored or [text]
