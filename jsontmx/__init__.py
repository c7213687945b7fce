"""
项目: jsontmx
用途: 将多语言 JSON 本地化文件按键路径对齐，并导出为 TMX 1.4 翻译记忆文档。
依赖: PyYAML（配置）、rich（日志与控制台输出）。
示例用法:
    from jsontmx import __version__, pipeline_stages
    print(__version__)
    print(", ".join(pipeline_stages))
"""

from __future__ import annotations

__all__ = ["__version__", "pipeline_stages"]

__version__: str = "1.0.0"
"""当前发行版本号，同时写入 TMX 头部的 creationtoolversion。"""

pipeline_stages: tuple[str, ...] = (
    "lang_detect",
    "align",
    "text_normalizer",
    "entities",
    "inline_tags",
    "tmx_writer",
)
"""一次转换依次经过的核心模块。"""
