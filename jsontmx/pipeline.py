"""Pair documents by language, align each pair and serialize it to TMX."""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .align import parse_json_files
from .config import ConverterConfig
from .lang_detect import find_language_pairs
from .tmx_writer import build_tmx_filename, generate_tmx
from .types import JsonDocument, LanguagePair, TMXExport

LOGGER = logging.getLogger(__name__)

__all__ = ["RunResult", "build_exports", "combine_pairs_by_target", "export_pair"]


@dataclass(slots=True)
class RunResult:
    """All exports of one run plus run-level diagnostics."""

    exports: List[TMXExport] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def unit_count(self) -> int:
        return sum(len(export.translation_units) for export in self.exports)


def combine_pairs_by_target(pairs: Sequence[LanguagePair]) -> List[LanguagePair]:
    """Merge pairs sharing a target language; the first pair's source language wins."""

    combined: Dict[str, LanguagePair] = {}
    for pair in pairs:
        merged = combined.get(pair.target_language)
        if merged is None:
            combined[pair.target_language] = LanguagePair(
                source_language=pair.source_language,
                target_language=pair.target_language,
                source_files=list(pair.source_files),
                target_files=list(pair.target_files),
            )
            continue
        if pair.source_language != merged.source_language:
            LOGGER.info(
                "Combining %s source into %s export for %s",
                pair.source_language,
                merged.source_language,
                pair.target_language,
            )
        merged.source_files.extend(pair.source_files)
        merged.target_files.extend(pair.target_files)
    return list(combined.values())


def export_pair(pair: LanguagePair, cfg: ConverterConfig) -> TMXExport:
    """Align one language pair and render its TMX document."""

    result = parse_json_files(pair.source_files, pair.target_files, cfg.enable_segmentation)
    content = generate_tmx(result.translation_units, pair.source_language, pair.target_language)
    filename = build_tmx_filename(
        pair.source_language, pair.target_language, cfg.output_prefix, cfg.output_ext
    )
    LOGGER.info(
        "[export] %s -> %s units=%d missing=%d errors=%d",
        pair.source_language,
        pair.target_language,
        len(result.translation_units),
        len(result.missing_keys),
        len(result.errors),
    )
    return TMXExport(
        language_pair=pair,
        translation_units=result.translation_units,
        errors=result.errors + result.mismatches,
        missing_keys=result.missing_keys,
        content=content,
        filename=filename,
    )


def build_exports(documents: Sequence[JsonDocument], cfg: ConverterConfig | None = None) -> RunResult:
    """Run the whole conversion for *documents*.

    Pairs are independent, so with ``cfg.workers > 1`` they are processed on a
    thread pool; exports keep the order in which the pairs were found.
    """

    cfg = cfg or ConverterConfig()
    run = RunResult()
    if not documents:
        run.errors.append("No source files provided")
        return run

    start = time.perf_counter()
    pairs = find_language_pairs(documents, cfg.source_language)
    if not pairs:
        run.errors.append("No language pairs found")
        LOGGER.warning("No language pairs found among %d documents", len(documents))
        return run
    if cfg.combine_by_target:
        pairs = combine_pairs_by_target(pairs)

    if cfg.workers > 1 and len(pairs) > 1:
        with ThreadPoolExecutor(max_workers=cfg.workers) as executor:
            run.exports = list(executor.map(lambda pair: export_pair(pair, cfg), pairs))
    else:
        run.exports = [export_pair(pair, cfg) for pair in pairs]

    LOGGER.info(
        "[stage] done pairs=%d units=%d elapsed=%.2fs",
        len(run.exports),
        run.unit_count,
        time.perf_counter() - start,
    )
    return run
