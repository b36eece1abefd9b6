#!/usr/bin/env python3
"""
依赖收窄

把种子语句在PDG上的直接前驱过滤为目标变量真正的依赖来源：
  - 控制依赖前驱无条件保留（控制依赖与变量无关）
  - 数据依赖前驱只有在它是目标变量在种子处的到达定义时才保留
只做一跳，不迭代。结果不包含种子本身，它将作为后向闭包的起点。
"""

import logging
from typing import Optional, Set

from .errors import UnknownVariableError
from .models import EdgeKind
from .naming import DEFAULT_NORMALIZER, NameNormalizer, resolve_variables
from .pdg import DependenceGraph

logger = logging.getLogger(__name__)


def narrow(graph: DependenceGraph, facts, seeds: Set, external_name: str,
           normalizer: NameNormalizer = DEFAULT_NORMALIZER) -> Set:
    """
    Args:
        graph: 程序依赖图
        facts: 语句图事实（提供到达定义）
        seeds: 种子语句
        external_name: 源代码中的变量名
    Returns:
        与目标变量相关的一跳前驱集合
    Raises:
        UnknownVariableError: 需要检查数据依赖时变量名解析为空
    """
    variables: Optional[Set] = None
    narrowed = set()

    for seed in seeds:
        for predecessor in graph.predecessor_units(seed):
            if graph.has_edge(predecessor, seed, EdgeKind.CONTROL):
                narrowed.add(predecessor)
                continue

            if variables is None:
                variables = resolve_variables(facts, external_name, normalizer)
            if not variables:
                raise UnknownVariableError(external_name)

            for variable in variables:
                if predecessor in facts.reaching_defs(variable, seed):
                    narrowed.add(predecessor)
                    break

    logger.debug(f"Narrowed {len(seeds)} seeds to {len(narrowed)} predecessors")
    return narrowed
