#!/usr/bin/env python3
"""
数据模型定义
"""

from dataclasses import dataclass
from enum import Enum

ENTRY_LABEL = "entry"  # 没有行号的单元在结果中的标签


class EdgeKind(Enum):
    """依赖边类型"""
    CONTROL = "control"  # 控制依赖：目标是否执行取决于源的分支结果
    DATA = "data"        # 数据依赖：源定义的值在目标处被使用


@dataclass(frozen=True)
class SliceCriterion:
    """切片准则：目标行号 + 变量名"""
    line: int
    variable: str

    def __str__(self) -> str:
        return f"<{self.line}, {self.variable}>"
