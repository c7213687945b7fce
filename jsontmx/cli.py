"""jsontmx CLI 入口，使用 argparse 解析子命令并执行对应逻辑。"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .align import parse_json_files
from .config import ConfigError, ConverterConfig, load_config
from .entities import decode_entities
from .inline_tags import convert_html_tags_to_tmx_inline, tmx_inline_to_placeholders
from .lang_detect import (
    detect_language_for_file,
    find_language_pairs,
    get_base_name,
    normalize_language_code,
)
from .loader import load_documents
from .logging_setup import init_logging, set_debug_logging
from .pipeline import build_exports
from .tmx_writer import write_tmx

console = Console()

MAX_LISTED_DIAGNOSTICS = 20


def _resolve_config(args: argparse.Namespace) -> ConverterConfig:
    """配置文件打底，命令行参数覆盖。"""

    cfg = load_config(args.config)
    overrides = {}
    if getattr(args, "segment", False):
        overrides["enable_segmentation"] = True
    if getattr(args, "source_lang", None):
        code = normalize_language_code(args.source_lang)
        if code is None:
            raise ConfigError(f"--source-lang 不是有效的语言代码: {args.source_lang!r}")
        overrides["source_language"] = code
    if getattr(args, "combine_by_target", False):
        overrides["combine_by_target"] = True
    if getattr(args, "workers", None) is not None:
        if args.workers < 1:
            raise ConfigError("--workers 必须是正整数")
        overrides["workers"] = args.workers
    if getattr(args, "prefix", None):
        overrides["output_prefix"] = args.prefix
    return replace(cfg, **overrides) if overrides else cfg


def _display(text: str) -> str:
    return escape(tmx_inline_to_placeholders(convert_html_tags_to_tmx_inline(decode_entities(text))))


def _print_diagnostics(title: str, messages: list[str], style: str) -> None:
    if not messages:
        return
    console.print(f"[{style}]{title} ({len(messages)})[/{style}]")
    for message in messages[:MAX_LISTED_DIAGNOSTICS]:
        console.print(f"  - {message}", markup=False)
    if len(messages) > MAX_LISTED_DIAGNOSTICS:
        console.print(f"  ... {len(messages) - MAX_LISTED_DIAGNOSTICS} more")


def cmd_convert(args: argparse.Namespace) -> int:
    """处理 convert 子命令：配对、对齐并写出 TMX。"""

    cfg = args.cfg
    documents, read_errors = load_documents(args.inputs)
    run = build_exports(documents, cfg)
    out_dir = Path(args.output).expanduser()

    table = Table(title="TMX exports")
    table.add_column("Source")
    table.add_column("Target")
    table.add_column("Units", justify="right")
    table.add_column("Missing", justify="right")
    table.add_column("File")

    written = 0
    for export in run.exports:
        pair = export.language_pair
        if not export.translation_units:
            console.print(f"[yellow]跳过 {export.filename}：没有可导出的翻译单元。[/yellow]")
        else:
            write_tmx(export.content, out_dir / export.filename)
            written += 1
        table.add_row(
            pair.source_language,
            pair.target_language,
            str(len(export.translation_units)),
            str(len(export.missing_keys)),
            export.filename,
        )
        _print_diagnostics(f"{export.filename} errors", export.errors, "red")
        _print_diagnostics(f"{export.filename} missing keys", export.missing_keys, "yellow")

    if run.exports:
        console.print(table)
    _print_diagnostics("Input errors", read_errors, "red")
    _print_diagnostics("Run errors", run.errors, "red")
    if not written:
        console.print("[red]没有写出任何 TMX 文件。[/red]")
        return 1
    console.print(f"[bold green]已写出 {written} 个 TMX 文件到 {out_dir}。[/bold green]")
    return 0


def cmd_detect(args: argparse.Namespace) -> int:
    """处理 detect 子命令：列出每个文件的语言检测结果与基础名。"""

    documents, read_errors = load_documents(args.inputs)
    table = Table(title="Language detection")
    table.add_column("File")
    table.add_column("Language")
    table.add_column("Origin")
    table.add_column("Base name")
    for doc in documents:
        detection = detect_language_for_file(doc)
        table.add_row(
            escape(doc.identifier),
            detection.lang or "-",
            detection.origin or "-",
            escape(get_base_name(doc.identifier)) or "-",
        )
    console.print(table)
    _print_diagnostics("Input errors", read_errors, "red")
    return 0 if documents else 1


def cmd_preview(args: argparse.Namespace) -> int:
    """处理 preview 子命令：以 {1}…{/1} 形式展示对齐结果。"""

    cfg = args.cfg
    documents, read_errors = load_documents(args.inputs)
    _print_diagnostics("Input errors", read_errors, "red")
    pairs = find_language_pairs(documents, cfg.source_language)
    if not pairs:
        console.print("[red]未找到语言对。[/red]")
        return 1

    for pair in pairs:
        result = parse_json_files(pair.source_files, pair.target_files, cfg.enable_segmentation)
        table = Table(title=f"{pair.source_language} → {pair.target_language}")
        table.add_column("Key")
        table.add_column(pair.source_language)
        table.add_column(pair.target_language)
        for unit in result.translation_units[: args.limit]:
            key = unit.key_path
            if unit.segment_index is not None:
                key += f" [{unit.segment_index}/{unit.total_segments}]"
            table.add_row(escape(key), _display(unit.source_text), _display(unit.target_text))
        console.print(table)
        _print_diagnostics("Errors", result.errors + result.mismatches, "red")
    return 0


def _add_common_inputs(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("inputs", nargs="+", help="JSON 文件或包含 JSON 的目录")


def _add_alignment_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--segment", action="store_true", help="按句切分并逐句对齐")
    parser.add_argument("--source-lang", help="首选源语言代码，例如 en-GB")


def build_parser() -> argparse.ArgumentParser:
    """构建顶级 argparse 解析器。"""

    parser = argparse.ArgumentParser(prog="jsontmx", description="JSON localization files to TMX")
    parser.add_argument("--config", default=None, help="YAML 配置文件路径")
    parser.add_argument("--debug", action="store_true", help="输出语言检测与切分的调试日志")

    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="生成 TMX 文件")
    _add_common_inputs(convert)
    _add_alignment_options(convert)
    convert.add_argument("-o", "--output", default="out", help="输出目录 (默认: out)")
    convert.add_argument("--combine-by-target", action="store_true", help="同一目标语言合并输出")
    convert.add_argument("--workers", type=int, help="并行处理语言对的线程数")
    convert.add_argument("--prefix", help="输出文件名前缀")
    convert.set_defaults(func=cmd_convert)

    detect = subparsers.add_parser("detect", help="显示语言检测结果")
    _add_common_inputs(detect)
    detect.set_defaults(func=cmd_detect)

    preview = subparsers.add_parser("preview", help="预览对齐结果")
    _add_common_inputs(preview)
    _add_alignment_options(preview)
    preview.add_argument("--limit", type=int, default=20, help="每个语言对最多显示的条数")
    preview.set_defaults(func=cmd_preview)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI 入口函数，解析参数、初始化日志并派发。"""

    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.cfg = _resolve_config(args)
    except ConfigError as exc:
        console.print(f"[red]配置校验失败: {exc}[/red]")
        return 1
    init_logging(args.cfg.log_level, args.cfg.log_file)
    set_debug_logging(args.debug)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
