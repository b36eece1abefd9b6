"""
函数级程序分析模块

基于tree-sitter的C/C++前端：控制流图(CFG)、后支配树与后支配边界、到达定义，
以 StatementFacts 接口提供给切片核心
"""

from .base import BaseAnalyzer, FunctionNotFoundError
from .variables import Variable, VariableTable
from .node import Node, DefUseCollector
from .graph import Graph, Edge, EXIT_ID
from .cfg import CFG
from .postdom import PostDominatorTree
from .defuse import ReachingDefinitions
from .facts import StatementFacts, FunctionFacts

__all__ = [
    'BaseAnalyzer',
    'FunctionNotFoundError',
    'Variable',
    'VariableTable',
    'Node',
    'DefUseCollector',
    'Graph',
    'Edge',
    'EXIT_ID',
    'CFG',
    'PostDominatorTree',
    'ReachingDefinitions',
    'StatementFacts',
    'FunctionFacts',
]
