#!/usr/bin/env python3
"""
语句图事实接口

切片核心只通过 StatementFacts 访问一个函数体：语句枚举、使用出现、后支配边界、
定义-使用链、到达定义、已声明变量和行号。FunctionFacts 是基于tree-sitter
C/C++前端的实现。
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Set, Tuple

from .cfg import CFG
from .defuse import ReachingDefinitions
from .graph import Graph
from .node import Node
from .postdom import PostDominatorTree
from .variables import Variable, VariableTable

logger = logging.getLogger(__name__)


class StatementFacts(ABC):
    """一个函数体的语句级控制流/数据流事实"""

    @abstractmethod
    def units(self) -> List:
        """按顺序枚举全部语句单元"""

    @abstractmethod
    def use_occurrences(self, unit) -> Set[Tuple[str, object]]:
        """单元中变量的使用出现：(原始变量名, 变量)"""

    @abstractmethod
    def post_dominance_frontier(self, unit) -> Set:
        """单元在后支配树上的支配边界"""

    @abstractmethod
    def uses_of(self, unit) -> Set:
        """使用了该单元所定义值的单元（不区分变量）"""

    @abstractmethod
    def reaching_defs(self, variable, unit) -> Set:
        """定义了 variable 且能到达 unit 的单元"""

    @abstractmethod
    def declared_variables(self) -> Set:
        """函数体中声明的全部变量，每个变量都有 name 属性"""

    @abstractmethod
    def source_line(self, unit) -> Optional[int]:
        """单元的源代码行号，合成单元返回None"""


class FunctionFacts(StatementFacts):
    """由CFG、后支配树和到达定义分析组成的函数事实"""

    def __init__(self, cfg: Graph, variables: VariableTable):
        self.cfg = cfg
        self.variables = variables
        self.post_dominators = PostDominatorTree(cfg)
        self.reaching_definitions = ReachingDefinitions(cfg)

    @classmethod
    def from_code(cls, code: str, function_name: str = 'main', language: str = 'c',
                  suffix_marker: str = '#') -> 'FunctionFacts':
        """解析源代码，为指定函数计算全部事实"""
        builder = CFG(language, suffix_marker)
        cfg = builder.construct_cfg(code, function_name)
        logger.info(f"Analyzed function '{function_name}': {len(cfg.nodes)} units, "
                    f"{len(builder.variables.variables)} variables")
        return cls(cfg, builder.variables)

    def units(self) -> List[Node]:
        return list(self.cfg.nodes)

    def use_occurrences(self, unit: Node) -> Set[Tuple[str, Variable]]:
        return unit.use_occurrences

    def post_dominance_frontier(self, unit: Node) -> Set[Node]:
        return {self.cfg[node_id] for node_id in self.post_dominators.frontier_of(unit.id)}

    def uses_of(self, unit: Node) -> Set[Node]:
        return {self.cfg[node_id] for node_id in self.reaching_definitions.uses_of(unit.id)}

    def reaching_defs(self, variable: Variable, unit: Node) -> Set[Node]:
        return {self.cfg[node_id] for node_id in self.reaching_definitions.definitions_of(variable, unit.id)}

    def declared_variables(self) -> Set[Variable]:
        return set(self.variables.variables)

    def source_line(self, unit: Node) -> Optional[int]:
        return unit.line
