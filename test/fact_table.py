#!/usr/bin/env python3
"""
手写的语句图事实表，用于在不解析源代码的情况下测试切片核心
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from analysis import StatementFacts, Variable


class FactTable(StatementFacts):
    """
    单元用字符串表示

    Args:
        lines: 单元 -> 行号（None 表示合成单元），字典顺序即枚举顺序
        uses: 单元 -> 使用出现的原始变量名
        frontier: 单元 -> 后支配边界
        def_uses: 单元 -> 使用其定义值的单元
        reaching: (变量名, 单元) -> 到达该单元的定义
        variables: 声明的变量名
    """

    def __init__(self, lines, uses=None, frontier=None, def_uses=None, reaching=None, variables=()):
        self.lines = dict(lines)
        self.uses = uses or {}
        self.frontier = frontier or {}
        self.def_uses = def_uses or {}
        self.reaching = reaching or {}
        self.variables = {name: Variable(name, name) for name in variables}

    def units(self):
        return list(self.lines)

    def use_occurrences(self, unit):
        return {(name, self.variables.get(name, Variable(name, name))) for name in self.uses.get(unit, ())}

    def post_dominance_frontier(self, unit):
        return set(self.frontier.get(unit, ()))

    def uses_of(self, unit):
        return set(self.def_uses.get(unit, ()))

    def reaching_defs(self, variable, unit):
        return set(self.reaching.get((variable.name, unit), ()))

    def declared_variables(self):
        return set(self.variables.values())

    def source_line(self, unit):
        return self.lines[unit]


def straight_line_table() -> FactTable:
    """x = 1 (10); y = x + 1 (11); print(y) (12)"""
    return FactTable(
        lines={'s10': 10, 's11': 11, 's12': 12},
        uses={'s11': {'x'}, 's12': {'y'}},
        def_uses={'s10': {'s11'}, 's11': {'s12'}},
        reaching={('x', 's11'): {'s10'}, ('y', 's12'): {'s11'}},
        variables=('x', 'y'),
    )
