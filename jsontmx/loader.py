"""读取本地 JSON 文件并构造 :class:`JsonDocument` 列表。"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from .types import JsonDocument

LOGGER = logging.getLogger(__name__)

JSON_PATTERNS = ("*.json",)


def iter_json_files(root: Path, patterns: Iterable[str] = JSON_PATTERNS) -> List[Path]:
    """递归匹配多个 glob 模式，返回去重且稳定排序的文件列表。"""

    root = root.expanduser().resolve()
    if not root.exists():
        return []
    seen: Dict[Path, None] = {}  # 使用字典保持插入顺序并去重
    for pattern in patterns:
        for path in root.rglob(pattern):
            if path.is_file() and path not in seen:
                seen[path] = None
    return sorted(seen.keys())


def read_document(path: Path, display_path: str | None = None) -> JsonDocument:
    """解析单个 JSON 文件；语法错误时抛出 ``json.JSONDecodeError``。"""

    content = json.loads(path.read_text(encoding="utf-8-sig"))
    return JsonDocument(name=path.name, content=content, path=display_path or path.as_posix())


def _display_path(entry: Path) -> str:
    """文件直接作为输入时使用的路径：相对输入保持原样，绝对路径取相对当前目录的部分。

    工作目录之外的文件只保留文件名，避免 ``/home/jo/...`` 中的 ``jo`` 被当成语言目录。
    """

    if not entry.is_absolute():
        return entry.as_posix()
    try:
        return entry.resolve().relative_to(Path.cwd().resolve()).as_posix()
    except ValueError:
        return entry.name


def load_documents(inputs: Iterable[str | Path]) -> Tuple[List[JsonDocument], List[str]]:
    """读取文件或目录，返回文档列表与错误信息。

    目录内的文件以相对该目录的路径作为 ``path``，以便 ``en-GB/home.json``
    这样的语言目录参与语言检测；单独给出的文件见 :func:`_display_path`。
    无法解析的文件记入错误并跳过。
    """

    documents: List[JsonDocument] = []
    errors: List[str] = []
    for raw in inputs:
        entry = Path(raw).expanduser()
        if entry.is_dir():
            root = entry.resolve()
            targets = [(path, path.relative_to(root).as_posix()) for path in iter_json_files(root)]
        elif entry.is_file():
            targets = [(entry, _display_path(entry))]
        else:
            errors.append(f"Input not found: {entry}")
            continue

        for path, display in targets:
            try:
                documents.append(read_document(path, display))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
                LOGGER.error("Failed to read %s: %s", path, exc)
                errors.append(f"Error reading {display}: {exc}")
    return documents, errors


__all__ = ["iter_json_files", "load_documents", "read_document"]
