#!/usr/bin/env python3
"""
C/C++ 函数程序切片核心实现

一次查询的流程：
    构建PDG -> 种子定位 -> 按变量过滤 -> 依赖收窄 -> 后向闭包 -> 行号投影
PDG 每次查询重新构建，查询之间不共享任何状态。
"""

import logging
from typing import Optional, Set

from analysis import FunctionFacts

from .engine import backward_slice
from .errors import UnknownVariableError
from .models import SliceCriterion
from .naming import DEFAULT_NORMALIZER, NameNormalizer, resolve_variables
from .narrow import narrow
from .pdg import DependenceGraph, build_pdg
from .projector import project
from .seeds import filter_by_variable, find_seeds

logger = logging.getLogger(__name__)


def slice_statements(facts, line_number: int, variable_name: str,
                     normalizer: NameNormalizer = DEFAULT_NORMALIZER,
                     step_budget: Optional[int] = None) -> Set[str]:
    """
    计算后向切片并投影为行号标签

    Args:
        facts: 函数的语句图事实（StatementFacts）
        line_number: 目标行号（从1开始）
        variable_name: 源代码中的变量名
        normalizer: 内部变量名规范化策略
        step_budget: 后向闭包的步数预算

    Returns:
        行号标签集合（可能含 "entry"）；查询落空时返回空集

    Raises:
        UnknownVariableError: 变量名无法解析
        MalformedFactsError: 事实不满足接口约定
        SliceTruncatedError: 超出步数预算
    """
    criterion = SliceCriterion(line_number, variable_name)
    logger.info(f"Slicing on criterion {criterion}")

    if not resolve_variables(facts, variable_name, normalizer):
        raise UnknownVariableError(variable_name)

    graph = build_pdg(facts)

    seeds = find_seeds(facts, line_number)
    seeds = filter_by_variable(facts, seeds, variable_name, normalizer)
    if not seeds:
        logger.info(f"No statement on line {line_number} uses '{variable_name}'")
        return set()

    narrowed = narrow(graph, facts, seeds, variable_name, normalizer)
    if not narrowed:
        logger.info(f"No dependence of '{variable_name}' reaches line {line_number}")
        return set()

    slice_units = backward_slice(graph, narrowed, step_budget)
    lines = project(slice_units, line_number, facts)
    logger.info(f"Slice of {criterion} covers {len(lines)} lines")
    return lines


class FunctionSlicer:
    """C/C++函数切片器"""

    def __init__(self, language: str = "c", normalizer: NameNormalizer = DEFAULT_NORMALIZER,
                 step_budget: Optional[int] = None):
        """
        Args:
            language: 语言类型，"c" 或 "cpp"
            normalizer: 变量名规范化策略，其后缀标记同时用于前端的重命名
            step_budget: 后向闭包的步数预算，None 表示不限制
        """
        self.language = language
        self.normalizer = normalizer
        self.step_budget = step_budget
        self.facts: Optional[FunctionFacts] = None

    def analyze_function(self, code: str, function_name: str = "main") -> FunctionFacts:
        """解析代码并计算指定函数的语句图事实"""
        self.facts = FunctionFacts.from_code(code, function_name, self.language,
                                             self.normalizer.suffix_marker)
        return self.facts

    def slice_function(self, target_variable: str, target_line: int) -> Set[str]:
        """对已分析的函数进行后向切片"""
        if self.facts is None:
            raise RuntimeError("analyze_function() must be called before slice_function()")
        return slice_statements(self.facts, target_line, target_variable,
                                self.normalizer, self.step_budget)

    def dependence_graph(self) -> DependenceGraph:
        """已分析函数的PDG（每次调用重新构建）"""
        if self.facts is None:
            raise RuntimeError("analyze_function() must be called before dependence_graph()")
        return build_pdg(self.facts)
