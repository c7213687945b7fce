"""Language detection for localization files and source/target pairing.

A file's language can be signalled by a folder (``en-GB/home.json``), by the
file name (``home_fr.json``, ``fr.home.json``) or by ``language``/``locale``
fields inside the JSON itself. The most specific code wins; on a tie the
origin decides (path > filename > json).
"""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping

from .logging_setup import log_debug
from .types import Detection, JsonDocument, LanguagePair

ORIGIN_PRIORITY: Dict[str, int] = {"path": 3, "filename": 2, "json": 1}
DEFAULT_SOURCE_PRIORITY: tuple[str, ...] = ("en-GB", "en-US", "en")

_REGION_CODE_RE = re.compile(r"^[a-z]{2}-[A-Z]{2}$")
_BARE_CODE_RE = re.compile(r"^[a-z]{2}$")
_PATH_SPLIT_RE = re.compile(r"[\\/]")
_PATH_SEGMENT_RE = re.compile(r"^([a-z]{2})(?:[-_]([a-z]{2}))?$", re.IGNORECASE)
_FILENAME_SUFFIX_RE = re.compile(r"[._-]([a-z]{2})(?:[-_]([a-z]{2}))?\.(?:json|js)$", re.IGNORECASE)
_FILENAME_PREFIX_RE = re.compile(r"^([a-z]{2})(?:[-_]([a-z]{2}))?[._-]", re.IGNORECASE)
_CODE_RE = re.compile(r"^([a-z]{2})(?:[-_]([a-z]{2}))?$", re.IGNORECASE)

_LANG_SEGMENT_RE = re.compile(r"^[a-z]{2}(?:[-_][A-Za-z]{2})?$")
_EXTENSION_RE = re.compile(r"\.(?:json|js)$", re.IGNORECASE)
_LEADING_LANG_RE = re.compile(r"^[a-z]{2}(?:[-_][A-Za-z]{2})?[._-]+", re.IGNORECASE)
_TRAILING_LANG_RE = re.compile(r"[._-]+[a-z]{2}(?:[-_][A-Za-z]{2})?$", re.IGNORECASE)

__all__ = [
    "DEFAULT_SOURCE_PRIORITY",
    "detect_language_for_file",
    "detect_language_from_filename",
    "detect_language_from_json",
    "detect_language_from_path",
    "find_language_pairs",
    "get_base_name",
    "language_base",
    "normalize_language_code",
    "source_priority",
    "specificity",
]


def _format_code(lang: str, region: str | None) -> str:
    lang = lang.lower()
    return f"{lang}-{region.upper()}" if region else lang


def normalize_language_code(value: str | None) -> str | None:
    """Return ``xx`` / ``xx-YY`` for values such as ``EN``, ``en_us``, ``pt-br``."""

    if not value or not isinstance(value, str):
        return None
    match = _CODE_RE.match(value.strip())
    if not match:
        return None
    return _format_code(match.group(1), match.group(2))


def specificity(code: str | None) -> int:
    """Region-qualified codes score 2, bare codes 1, anything else 0."""

    if not code:
        return 0
    if _REGION_CODE_RE.match(code):
        return 2
    if _BARE_CODE_RE.match(code):
        return 1
    return 0


def language_base(code: str) -> str:
    """``en-GB`` -> ``en``."""

    return code.split("-", 1)[0].lower()


def detect_language_from_path(path: str) -> str | None:
    """Find a language folder in *path*, preferring region-specific ones."""

    best: str | None = None
    for segment in _PATH_SPLIT_RE.split(path):
        match = _PATH_SEGMENT_RE.match(segment)
        if not match:
            continue
        code = _format_code(match.group(1), match.group(2))
        if best is None or (specificity(best) == 1 and specificity(code) == 2):
            best = code
    return best


def detect_language_from_filename(filename: str) -> str | None:
    """Detect ``home_en-GB.json`` / ``home.fr.json`` first, then ``en-GB_home.json``."""

    match = _FILENAME_SUFFIX_RE.search(filename) or _FILENAME_PREFIX_RE.match(filename)
    if not match:
        return None
    return _format_code(match.group(1), match.group(2))


def detect_language_from_json(content: Any) -> str | None:
    """Read declared ``language`` and ``locale`` fields from the document root."""

    if not isinstance(content, Mapping):
        return None
    language = normalize_language_code(content.get("language"))
    locale = content.get("locale")
    locale = locale.strip() if isinstance(locale, str) else ""
    if language is None:
        # "locale" alone may carry a full code such as "de_AT".
        return normalize_language_code(locale)
    if specificity(language) == 2 or not locale:
        return language
    if re.fullmatch(r"[A-Za-z]{2}", locale):
        return f"{language}-{locale.upper()}"
    full = normalize_language_code(locale)
    if full and specificity(full) == 2 and language_base(full) == language:
        return full
    return language


def detect_language_for_file(doc: JsonDocument) -> Detection:
    """Combine path, filename and JSON detections into one :class:`Detection`."""

    from_path = detect_language_from_path(doc.path) if doc.path else None
    from_filename = detect_language_from_filename(doc.name)
    from_json = detect_language_from_json(doc.content)

    best_lang: str | None = None
    best_origin: str | None = None
    for lang, origin in ((from_path, "path"), (from_filename, "filename"), (from_json, "json")):
        if not lang:
            continue
        if best_lang is None:
            best_lang, best_origin = lang, origin
            continue
        current, candidate = specificity(best_lang), specificity(lang)
        if candidate > current or (
            candidate == current and ORIGIN_PRIORITY[origin] > ORIGIN_PRIORITY[best_origin or "json"]
        ):
            best_lang, best_origin = lang, origin

    log_debug(
        "[detect] %s path=%s filename=%s json=%s chosen=%s origin=%s",
        doc.identifier,
        from_path,
        from_filename,
        from_json,
        best_lang,
        best_origin,
    )
    return Detection(lang=best_lang, origin=best_origin)


def _strip_language_tokens(base: str) -> str:
    while True:
        stripped = _EXTENSION_RE.sub("", base)
        stripped = _TRAILING_LANG_RE.sub("", _LEADING_LANG_RE.sub("", stripped))
        if stripped == base or not stripped:
            return base
        base = stripped


def get_base_name(path_or_name: str) -> str:
    """Strip language folders, the extension and language tokens from a name.

    ``en-GB/home.json``, ``fr/home.json``, ``home_de.json`` and
    ``es-home.json`` all map to ``home``. A file named only by its language
    (``locales/en.json``) takes the name of the nearest other folder
    (``locales``), or ``""`` when there is none, so ``en.json`` and
    ``fr.json`` side by side form one group. Applying it twice is a no-op.
    """

    parts = [part for part in _PATH_SPLIT_RE.split(path_or_name) if part]
    filtered = [part for part in parts if not _LANG_SEGMENT_RE.match(part)]
    for part in reversed(filtered or parts):
        base = _strip_language_tokens(part)
        if not _CODE_RE.match(base):
            return base
    return ""


def source_priority(source_lang: str | None = None) -> List[str]:
    """Ordered list of codes tried when picking the source file of a group."""

    if not source_lang:
        return list(DEFAULT_SOURCE_PRIORITY)
    code = normalize_language_code(source_lang) or source_lang
    base = language_base(code)
    ordered = [code, f"{base}-GB", f"{base}-US", base]
    return list(dict.fromkeys(ordered))


def _group_by_base_name(documents: Iterable[JsonDocument]) -> Dict[str, List[JsonDocument]]:
    groups: Dict[str, List[JsonDocument]] = {}
    for doc in documents:
        groups.setdefault(get_base_name(doc.identifier), []).append(doc)
    return groups


def find_language_pairs(
    documents: Iterable[JsonDocument], source_lang: str | None = None
) -> List[LanguagePair]:
    """Group *documents* by base name and pair one source with every target.

    The source is the first group member whose language matches the source
    priority list; any other region variant of the source language is used
    when none of the listed codes is present. Every remaining member whose
    language base differs from the source's becomes a target.
    """

    priority = source_priority(source_lang)
    source_base = language_base(priority[0])
    groups = _group_by_base_name(documents)
    log_debug("[pairs] %d groups, source priority=%s", len(groups), priority)

    pairs: List[LanguagePair] = []
    for base_name, group in groups.items():
        detections = [(doc, detect_language_for_file(doc)) for doc in group]
        candidates = [
            (doc, det) for doc, det in detections if det.lang and language_base(det.lang) == source_base
        ]
        source: tuple[JsonDocument, Detection] | None = None
        for preferred in priority:
            source = next(((doc, det) for doc, det in candidates if det.lang == preferred), None)
            if source is not None:
                break
        if source is None and candidates:
            source = candidates[0]

        if source is None:
            found = ", ".join(f"{doc.name}({det.lang or 'n/a'})" for doc, det in detections)
            log_debug("[pairs] skip group %r: no %s source among %s", base_name, source_base, found)
            continue

        source_doc, source_det = source
        targets = [
            (doc, det)
            for doc, det in detections
            if doc is not source_doc and det.lang and language_base(det.lang) != source_base
        ]
        if not targets:
            log_debug("[pairs] skip group %r: source %s has no targets", base_name, source_doc.name)
            continue

        for target_doc, target_det in targets:
            log_debug(
                "[pairs] %s -> %s for %r (%s, origin=%s)",
                source_det.lang,
                target_det.lang,
                base_name,
                target_doc.name,
                target_det.origin,
            )
            pairs.append(
                LanguagePair(
                    source_language=source_det.lang or "",
                    target_language=target_det.lang or "",
                    source_files=[source_doc],
                    target_files=[target_doc],
                )
            )
    return pairs
