"""jsontmx.tmx_writer
用途: 将对齐结果序列化为 TMX 1.4 文档，并写出到磁盘。
依赖: Python 标准库 base64、hashlib、pathlib；内部 ``jsontmx.entities``、``jsontmx.inline_tags``。
示例: ``from jsontmx.tmx_writer import generate_tmx, write_tmx``。
"""
from __future__ import annotations

import base64
import hashlib
import re
from pathlib import Path
from typing import Iterable

from . import __version__
from .entities import decode_entities
from .inline_tags import convert_html_tags_to_tmx_inline, escape_xml, escape_xml_except_tmx_tags
from .types import TranslationUnit, ensure_outdir

CREATION_TOOL = "jsontmx"
DEFAULT_PREFIX = "translation_memory"
DEFAULT_EXT = "tmx"

_TUID_STRIP_RE = re.compile(r"[+=/]")
# JSON escapes such as "\u0001" or a lone "\ud800" yield characters XML 1.0 cannot carry.
_XML_INVALID_RE = re.compile(r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")

_HEADER_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<tmx version="1.4">
  <header
    creationtool="{tool}"
    creationtoolversion="{version}"
    segtype="sentence"
    o-tmf="json"
    adminlang="en"
    srclang="{srclang}"
    datatype="plaintext">
  </header>
  <body>"""

_FOOTER = """
  </body>
</tmx>
"""

_UNIT_TEMPLATE = """
    <tu tuid="{tuid}">
      <note>{note}</note>
      <tuv xml:lang="{srclang}">
        <seg>{source}</seg>
      </tuv>
      <tuv xml:lang="{tgtlang}">
        <seg>{target}</seg>
      </tuv>
    </tu>"""

__all__ = [
    "build_tmx_filename",
    "generate_tmx",
    "generate_tuid",
    "process_text",
    "write_tmx",
]


def process_text(text: str) -> str:
    """解码实体 → 转换内联标签 → 转义其余 XML 字符，并丢弃 XML 不允许的字符。"""

    cleaned = _XML_INVALID_RE.sub("", decode_entities(text) or "")
    return escape_xml_except_tmx_tags(convert_html_tags_to_tmx_inline(cleaned))


def generate_tuid(unit: TranslationUnit) -> str:
    """根据键路径、段序号与源文本生成稳定的 16 位 tuid。

    前 8 位来自 UTF-8 拼接串的 base64（便于肉眼辨认键路径），后 8 位取
    SHA-1 摘要，保证只在文本后部不同的两条记录也不会重复。
    """

    parts = [unit.key_path]
    if unit.segment_index is not None:
        parts.append(str(unit.segment_index))
    parts.append(unit.source_text)
    combined = "_".join(parts).encode("utf-8", "surrogatepass")
    readable = _TUID_STRIP_RE.sub("", base64.b64encode(combined).decode("ascii"))
    digest = hashlib.sha1(combined).hexdigest()
    return (readable[:8] + digest)[:16]


def _note_for(unit: TranslationUnit) -> str:
    note = unit.key_path
    if unit.segment_index is not None and unit.total_segments is not None:
        note += f" [segment {unit.segment_index}/{unit.total_segments}]"
    if unit.file_path:
        note += f" ({unit.file_path})"
    return note


def generate_tmx(
    translation_units: Iterable[TranslationUnit],
    source_language: str = "en",
    target_language: str = "es",
) -> str:
    """以 UTF-8 文本形式返回完整的 TMX 1.4 文档。"""

    srclang = escape_xml(source_language)
    tgtlang = escape_xml(target_language)
    chunks = [_HEADER_TEMPLATE.format(tool=CREATION_TOOL, version=__version__, srclang=srclang)]
    for unit in translation_units:
        chunks.append(
            _UNIT_TEMPLATE.format(
                tuid=generate_tuid(unit),
                note=process_text(_note_for(unit)),
                srclang=srclang,
                tgtlang=tgtlang,
                source=process_text(unit.source_text),
                target=process_text(unit.target_text),
            )
        )
    chunks.append(_FOOTER)
    return "".join(chunks)


def build_tmx_filename(
    source_language: str,
    target_language: str,
    prefix: str = DEFAULT_PREFIX,
    ext: str = DEFAULT_EXT,
) -> str:
    """``translation_memory_en-GB_fr.tmx`` 形式的建议文件名。"""

    return f"{prefix}_{source_language}_{target_language}.{ext.lstrip('.')}"


def write_tmx(content: str, out_path: Path) -> Path:
    """以 UTF-8 写出 TMX 文件，必要时创建目录。"""

    ensure_outdir(out_path.parent)
    out_path.write_text(content, "utf-8")
    return out_path
