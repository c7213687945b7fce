"""Key-path flattening and source/target alignment of JSON documents."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence, Tuple

from .lang_detect import get_base_name
from .text_normalizer import segment_sentences
from .types import AlignmentResult, JsonDocument, TranslationUnit

LOGGER = logging.getLogger(__name__)

__all__ = [
    "MalformedContentError",
    "align_documents",
    "flatten_json",
    "parse_json_files",
]


class MalformedContentError(ValueError):
    """Raised when a document's content cannot be flattened into key paths."""


def _join_key(parent: str, key: str) -> str:
    return f"{parent}.{key}" if parent else key


def _walk(value: Any, path: str, items: Dict[str, str]) -> None:
    if isinstance(value, dict):
        for key, child in value.items():
            _walk(child, _join_key(path, str(key)), items)
    elif isinstance(value, list):
        for index, child in enumerate(value):
            _walk(child, f"{path}[{index}]", items)
    elif isinstance(value, str):
        items[path] = value
    # numbers, booleans and null carry nothing to translate


def flatten_json(content: Any) -> Dict[str, str]:
    """Flatten nested JSON into ``{"a.b[2]": "text"}``.

    Only string leaves are kept. The root must be an object or an array.
    """

    if not isinstance(content, (dict, list)):
        raise MalformedContentError(
            f"expected a JSON object or array at the root, got {type(content).__name__}"
        )
    items: Dict[str, str] = {}
    _walk(content, "", items)
    return items


def _units_for_key(
    key: str,
    source_text: str,
    target_text: str,
    file_path: str,
    enable_segmentation: bool,
    mismatches: List[str],
) -> List[TranslationUnit]:
    whole = [TranslationUnit(source_text, target_text, key, file_path)]
    if not enable_segmentation or not source_text:
        return whole

    source_segments = segment_sentences(source_text)
    if len(source_segments) <= 1 or not target_text:
        return whole

    target_segments = segment_sentences(target_text)
    if len(source_segments) != len(target_segments):
        message = (
            f'Segmentation mismatch for key "{key}" in {file_path} '
            f"(source={len(source_segments)}, target={len(target_segments)}). "
            "Fallback to unsegmented."
        )
        LOGGER.warning(message)
        mismatches.append(message)
        return whole

    total = len(source_segments)
    return [
        TranslationUnit(src, tgt, key, file_path, segment_index=index, total_segments=total)
        for index, (src, tgt) in enumerate(zip(source_segments, target_segments), start=1)
    ]


def _align_flat(
    source_flat: Dict[str, str],
    target_flat: Dict[str, str],
    file_path: str,
    target_name: str,
    enable_segmentation: bool,
    result: AlignmentResult,
) -> None:
    for key, source_text in source_flat.items():
        target_text = target_flat.get(key) or ""
        if not target_text:
            result.missing_keys.append(f'Missing target for key "{key}" in {target_name}')
        result.translation_units.extend(
            _units_for_key(
                key, source_text, target_text, file_path, enable_segmentation, result.mismatches
            )
        )


def parse_json_files(
    source_files: Sequence[JsonDocument],
    target_files: Sequence[JsonDocument],
    enable_segmentation: bool = False,
) -> AlignmentResult:
    """Align every source file with the target file sharing its base name.

    Problems are reported in the returned :class:`AlignmentResult` and never
    abort the run: a source without a counterpart, or whose content cannot be
    flattened, is skipped; a key absent from the target still yields a unit
    with an empty target text.
    """

    result = AlignmentResult()
    if not source_files:
        result.errors.append("No source files provided")
        return result

    targets_by_base: Dict[str, JsonDocument] = {}
    for target in target_files:
        targets_by_base.setdefault(get_base_name(target.identifier), target)

    for source in source_files:
        try:
            base_name = get_base_name(source.identifier)
            target = targets_by_base.get(base_name)
            if target is None:
                result.errors.append(f"No corresponding target file found for {source.name}")
                continue

            source_flat = flatten_json(source.content)
            target_flat = flatten_json(target.content)
            staged = AlignmentResult()
            _align_flat(
                source_flat, target_flat, source.identifier, target.name, enable_segmentation, staged
            )
        except Exception as exc:
            LOGGER.error("Error processing %s: %s", source.name, exc)
            result.errors.append(f"Error processing {source.name}: {exc}")
            continue

        result.translation_units.extend(staged.translation_units)
        result.missing_keys.extend(staged.missing_keys)
        result.mismatches.extend(staged.mismatches)
        result.processed_files += 1

    return result


def align_documents(
    source: JsonDocument, target: JsonDocument, enable_segmentation: bool = False
) -> Tuple[List[TranslationUnit], List[str]]:
    """Align a single source/target pair and return ``(units, diagnostics)``.

    The diagnostics list holds missing-key messages followed by segmentation
    mismatch messages. Unlike :func:`parse_json_files` the base names are not
    compared and malformed content raises :class:`MalformedContentError`.
    """

    result = AlignmentResult()
    _align_flat(
        flatten_json(source.content),
        flatten_json(target.content),
        source.identifier,
        target.name,
        enable_segmentation,
        result,
    )
    return result.translation_units, result.missing_keys + result.mismatches
