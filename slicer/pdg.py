#!/usr/bin/env python3
"""
程序依赖图(PDG)

DependenceGraph 以语句单元为节点，每条边带有一个类型（control / data），
同一有序节点对、同一类型最多一条边。底层用 networkx.MultiDiGraph，边的
key 就是边类型，因此重复插入天然是幂等的。
"""

import logging
from typing import Iterator, Set, Tuple

import networkx as nx

from .errors import MalformedFactsError
from .models import EdgeKind

logger = logging.getLogger(__name__)


class DependenceGraph:
    """程序依赖图"""

    def __init__(self):
        self._graph = nx.MultiDiGraph()

    def add_node(self, unit):
        """添加节点，已存在时不做任何事"""
        if unit not in self._graph:
            self._graph.add_node(unit)

    def has_edge(self, source, target, kind: EdgeKind = None) -> bool:
        if kind is None:
            return self._graph.has_edge(source, target)
        return self._graph.has_edge(source, target, key=kind)

    def add_edge(self, source, target, kind: EdgeKind) -> bool:
        """添加一条带类型的边；边已存在时返回False"""
        if self._graph.has_edge(source, target, key=kind):
            return False
        self._graph.add_edge(source, target, key=kind)
        return True

    def predecessors(self, unit) -> Iterator[Tuple[object, EdgeKind]]:
        """unit 的全部入边：(前驱, 边类型)"""
        if unit not in self._graph:
            raise MalformedFactsError(f"{unit!r} is not a node of the dependence graph")
        for source, _, kind in self._graph.in_edges(unit, keys=True):
            yield source, kind

    def predecessor_units(self, unit) -> Set:
        """unit 的前驱集合（不区分边类型）"""
        return {source for source, _ in self.predecessors(unit)}

    def edges(self, kind: EdgeKind = None) -> Set[Tuple[object, object, EdgeKind]]:
        return {(source, target, key) for source, target, key in self._graph.edges(keys=True)
                if kind is None or key == kind}

    def nodes(self) -> Set:
        return set(self._graph.nodes)

    def __contains__(self, unit) -> bool:
        return unit in self._graph

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __iter__(self):
        return iter(self._graph.nodes)


def build_pdg(facts) -> DependenceGraph:
    """
    基于语句图事实构建PDG

    对每个单元 U：
      - 后支配边界中的每个 F 加控制依赖边 F -> U
      - 使用 U 所定义值的每个 V 加数据依赖边 U -> V（不区分变量）
    引用了未枚举单元的事实会立即报错。
    """
    graph = DependenceGraph()
    units = facts.units()
    known = set(units)

    for unit in units:
        graph.add_node(unit)

        for frontier in facts.post_dominance_frontier(unit):
            if frontier not in known:
                raise MalformedFactsError(f"frontier unit {frontier!r} of {unit!r} was never enumerated")
            graph.add_node(frontier)
            graph.add_edge(frontier, unit, EdgeKind.CONTROL)

        for use in facts.uses_of(unit):
            if use not in known:
                raise MalformedFactsError(f"use unit {use!r} of {unit!r} was never enumerated")
            graph.add_node(use)
            graph.add_edge(unit, use, EdgeKind.DATA)

    logger.debug(f"PDG built: {len(graph)} nodes, "
                 f"{len(graph.edges(EdgeKind.CONTROL))} control edges, "
                 f"{len(graph.edges(EdgeKind.DATA))} data edges")
    return graph
