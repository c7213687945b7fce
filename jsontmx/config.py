"""配置加载与校验模块，负责解析 YAML 配置并提供带默认值的结构化数据。"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .lang_detect import normalize_language_code
from .tmx_writer import DEFAULT_EXT, DEFAULT_PREFIX

DEFAULT_LOG_LEVEL = "info"
ENV_SOURCE_LANG = "JSONTMX_SOURCE_LANG"
ENV_SEGMENT = "JSONTMX_SEGMENT"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class ConverterConfig:
    """一次转换运行所需的全部开关。"""

    enable_segmentation: bool = False  # 按句切分并逐句对齐
    source_language: Optional[str] = None  # 首选源语言，None 时按 en-GB/en-US/en
    combine_by_target: bool = False  # 同一目标语言的多个文件合并为一个 TMX
    output_prefix: str = DEFAULT_PREFIX  # 输出文件名前缀
    output_ext: str = DEFAULT_EXT  # 输出文件扩展名
    workers: int = 1  # 并行处理语言对的线程数
    log_level: str = DEFAULT_LOG_LEVEL  # 日志级别
    log_file: Optional[Path] = None  # 可选日志文件


class ConfigError(Exception):
    """配置解析相关的自定义异常。"""


def _load_yaml(path: Path) -> Dict[str, Any]:
    """加载 YAML 并返回字典；空文件视为空配置。"""

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"解析 YAML 失败: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("配置文件顶层必须是映射类型")
    return data


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE_VALUES | _FALSE_VALUES:
        return value.strip().lower() in _TRUE_VALUES
    raise ConfigError(f"{name} 必须是布尔值，实际为 {value!r}")


def _as_language(name: str, value: Any) -> Optional[str]:
    if value in (None, ""):
        return None
    code = normalize_language_code(value) if isinstance(value, str) else None
    if code is None:
        raise ConfigError(f"{name} 不是有效的语言代码: {value!r}")
    return code


def _as_text(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{name} 必须是非空字符串")
    return value.strip()


def _parse(data: Dict[str, Any], base_dir: Path) -> ConverterConfig:
    known = {f.name for f in fields(ConverterConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"未知的配置项: {', '.join(unknown)}")

    cfg = ConverterConfig()
    if "enable_segmentation" in data:
        cfg.enable_segmentation = _as_bool("enable_segmentation", data["enable_segmentation"])
    if "source_language" in data:
        cfg.source_language = _as_language("source_language", data["source_language"])
    if "combine_by_target" in data:
        cfg.combine_by_target = _as_bool("combine_by_target", data["combine_by_target"])
    if "output_prefix" in data:
        cfg.output_prefix = _as_text("output_prefix", data["output_prefix"])
    if "output_ext" in data:
        cfg.output_ext = _as_text("output_ext", data["output_ext"]).lstrip(".")
    if "workers" in data:
        workers = data["workers"]
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise ConfigError(f"workers 必须是正整数，实际为 {workers!r}")
        cfg.workers = workers
    if "log_level" in data:
        cfg.log_level = _as_text("log_level", data["log_level"])
    if data.get("log_file"):
        log_file = Path(_as_text("log_file", data["log_file"])).expanduser()
        cfg.log_file = log_file if log_file.is_absolute() else base_dir / log_file
    return cfg


def apply_env_overrides(cfg: ConverterConfig) -> ConverterConfig:
    """环境变量 JSONTMX_SOURCE_LANG / JSONTMX_SEGMENT 覆盖文件中的设置。"""

    updated = cfg
    raw_lang = os.getenv(ENV_SOURCE_LANG)
    if raw_lang:
        updated = replace(updated, source_language=_as_language(ENV_SOURCE_LANG, raw_lang))
    raw_segment = os.getenv(ENV_SEGMENT)
    if raw_segment is not None:
        updated = replace(updated, enable_segmentation=_as_bool(ENV_SEGMENT, raw_segment))
    return updated


def load_config(path: str | Path | None = None) -> ConverterConfig:
    """加载配置文件并返回 :class:`ConverterConfig`；文件缺失时使用默认值。"""

    if path is None:
        return apply_env_overrides(ConverterConfig())
    config_path = Path(path).expanduser()
    if not config_path.exists():
        return apply_env_overrides(ConverterConfig())
    config_path = config_path.resolve()
    cfg = _parse(_load_yaml(config_path), config_path.parent)
    return apply_env_overrides(cfg)


__all__ = [
    "ConfigError",
    "ConverterConfig",
    "apply_env_overrides",
    "load_config",
]
