#!/usr/bin/env python3
"""
切片错误类型
"""


class SlicerError(Exception):
    """切片核心错误的基类"""


class UnknownVariableError(SlicerError):
    """变量名无法解析为函数中声明的任何变量（用法错误，不是程序缺陷）"""

    def __init__(self, variable_name: str):
        super().__init__(f"Unknown variable name: '{variable_name}'")
        self.variable_name = variable_name


class MalformedFactsError(SlicerError):
    """前端提供的事实违反接口约定，例如引用了未枚举的语句单元"""


class SliceTruncatedError(SlicerError):
    """工作表循环超出步数预算，切片未完成"""

    def __init__(self, step_budget: int, visited: int):
        super().__init__(f"Slice truncated after {step_budget} steps ({visited} units visited)")
        self.step_budget = step_budget
        self.visited = visited
