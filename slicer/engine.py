#!/usr/bin/env python3
"""
基于PDG的静态后向切片
"""

import logging
from typing import Iterable, Optional, Set

from .errors import SliceTruncatedError
from .pdg import DependenceGraph

logger = logging.getLogger(__name__)


def backward_slice(graph: DependenceGraph, seeds: Iterable,
                   step_budget: Optional[int] = None) -> Set:
    """
    后向可达闭包，考虑 data + control 两类前驱，不区分变量

    Args:
        graph: 程序依赖图（可以有环）
        seeds: 起点单元，结果包含它们本身
        step_budget: 最多访问的单元数（重复弹出的单元不计），None 表示不限制
    Returns:
        切片单元集合
    Raises:
        SliceTruncatedError: 超出步数预算；不返回部分结果
    """
    worklist = list(seeds)
    slice_units: Set = set()
    steps = 0

    while worklist:
        unit = worklist.pop()
        if unit in slice_units:
            continue
        if step_budget is not None and steps >= step_budget:
            raise SliceTruncatedError(step_budget, len(slice_units))
        steps += 1
        slice_units.add(unit)

        for predecessor in graph.predecessor_units(unit):
            if predecessor not in slice_units:
                worklist.append(predecessor)

    logger.debug(f"Backward slice: {len(slice_units)} units in {steps} steps")
    return slice_units
