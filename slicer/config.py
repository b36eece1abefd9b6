#!/usr/bin/env python3
"""
配置文件解析器 - 解析切片配置
"""

import json
import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from .naming import NameNormalizer

LANGUAGES = ("c", "cpp")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class SlicerConfig:
    """切片配置，所有字段都有默认值"""
    language: str = "c"
    function: str = "main"
    prefix_marker: str = "$"
    suffix_marker: str = "#"
    step_budget: Optional[int] = None
    log_level: str = "INFO"

    def __post_init__(self):
        self.validate()

    def validate(self):
        """检查取值范围，不合法时抛出 ValueError"""
        if self.language not in LANGUAGES:
            raise ValueError(f"不支持的语言: {self.language}，可选值为 {', '.join(LANGUAGES)}")
        if not self.function:
            raise ValueError("'function' 不能为空")
        if not self.suffix_marker:
            raise ValueError("'suffix_marker' 不能为空")
        if self.step_budget is not None:
            if isinstance(self.step_budget, bool) or not isinstance(self.step_budget, int) \
                    or self.step_budget <= 0:
                raise ValueError(f"'step_budget' 必须是正整数: {self.step_budget}")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"无效的日志级别: {self.log_level}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SlicerConfig':
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"配置文件包含未知配置项: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_file(cls, config_path: str) -> 'SlicerConfig':
        """加载JSON配置文件"""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"配置文件不存在: {config_path}")
        except json.JSONDecodeError as e:
            raise ValueError(f"配置文件格式错误: {e}")

        if not isinstance(data, dict):
            raise ValueError("配置文件顶层必须是JSON对象")
        return cls.from_dict(data)

    def merged(self, **overrides) -> 'SlicerConfig':
        """返回用非None的覆盖值更新后的新配置"""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data.update({key: value for key, value in overrides.items() if value is not None})
        return SlicerConfig.from_dict(data)

    def normalizer(self) -> NameNormalizer:
        return NameNormalizer(self.prefix_marker, self.suffix_marker)

    def logging_level(self) -> int:
        return getattr(logging, self.log_level.upper())
