"""jsontmx.types
用途: 提供 JSON → TMX 转换流程使用的数据类型与通用工具。
依赖: Python 标准库 dataclasses、pathlib。
示例: ``from jsontmx.types import JsonDocument, TranslationUnit``。
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True, frozen=True)
class JsonDocument:
    """一个已读取的 JSON 文档，``content`` 为任意嵌套的解码结果。"""

    name: str
    content: Any
    path: str | None = None

    @property
    def identifier(self) -> str:
        """用于分组与配对的标识：优先使用存储路径。"""

        return self.path or self.name


@dataclass(slots=True, frozen=True)
class Detection:
    """语言检测结果及其来源（path / filename / json）。"""

    lang: str | None
    origin: str | None


@dataclass(slots=True)
class LanguagePair:
    """一组源语言与目标语言文件。"""

    source_language: str
    target_language: str
    source_files: list[JsonDocument]
    target_files: list[JsonDocument]


@dataclass(slots=True, frozen=True)
class TranslationUnit:
    """对齐后的一条源/目标文本，可能是某个值的句级切片。"""

    source_text: str
    target_text: str
    key_path: str
    file_path: str | None = None
    segment_index: int | None = None
    total_segments: int | None = None


@dataclass(slots=True)
class AlignmentResult:
    """对齐阶段的产物以及诊断信息。"""

    translation_units: list[TranslationUnit] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    missing_keys: list[str] = field(default_factory=list)
    mismatches: list[str] = field(default_factory=list)
    processed_files: int = 0


@dataclass(slots=True)
class TMXExport:
    """单个语言对的导出结果。"""

    language_pair: LanguagePair
    translation_units: list[TranslationUnit]
    errors: list[str]
    missing_keys: list[str]
    content: str
    filename: str


def ensure_outdir(p: Path) -> None:
    """确保输出目录存在。"""

    p.mkdir(parents=True, exist_ok=True)


__all__ = [
    "AlignmentResult",
    "Detection",
    "JsonDocument",
    "LanguagePair",
    "TMXExport",
    "TranslationUnit",
    "ensure_outdir",
]
