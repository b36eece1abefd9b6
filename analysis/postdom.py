#!/usr/bin/env python3
"""
后支配树与后支配边界

在反向CFG（以虚拟出口为根）上求直接后支配者，使用 Cooper-Harvey-Kennedy
迭代算法；后支配边界使用 runner 算法。没有出口的死循环由循环头补一条
通往出口的虚拟边，保证每个节点都在后支配树上。

语义：F 在 N 的后支配边界中 <=> N 控制依赖于分支 F。
"""

import logging
from typing import Dict, List, Set

import networkx as nx

from .graph import EXIT_ID, Graph

logger = logging.getLogger(__name__)


class PostDominatorTree:
    """后支配树"""

    def __init__(self, cfg: Graph):
        self.cfg = cfg
        self.root = EXIT_ID
        self.succ: Dict[int, List[int]] = self._extended_successors()
        self.pred: Dict[int, List[int]] = {node_id: [] for node_id in self.succ}
        for source, targets in self.succ.items():
            for target in targets:
                self.pred[target].append(source)

        self.ipdom: Dict[int, int] = self._immediate_post_dominators()
        self.frontier: Dict[int, Set[int]] = self._post_dominance_frontier()

    def immediate_post_dominator(self, node_id: int) -> int:
        """直接后支配者，根节点返回自身"""
        return self.ipdom[node_id]

    def post_dominates(self, a: int, b: int) -> bool:
        """a 是否后支配 b（自反）"""
        runner = b
        while True:
            if runner == a:
                return True
            if runner == self.root:
                return False
            runner = self.ipdom[runner]

    def frontier_of(self, node_id: int) -> Set[int]:
        """节点的后支配边界"""
        return self.frontier[node_id]

    def _extended_successors(self) -> Dict[int, List[int]]:
        succ = {node.id: list(self.cfg.successors(node.id)) for node in self.cfg.nodes}
        succ[EXIT_ID] = []

        # 死循环构成不含出口的汇点强连通分量：只为其中枚举序号最小的节点（循环头）补虚拟边
        graph = nx.DiGraph()
        graph.add_nodes_from(succ)
        graph.add_edges_from((source, target) for source, targets in succ.items() for target in targets)
        condensed = nx.condensation(graph)
        for component in condensed.nodes:
            members = condensed.nodes[component]["members"]
            if condensed.out_degree(component) > 0 or EXIT_ID in members:
                continue
            header = min(members)
            logger.debug(f"node {header} cannot reach exit, adding virtual exit edge")
            succ[header].append(EXIT_ID)
        return succ

    def _reverse_postorder(self) -> List[int]:
        """反向图（沿CFG前驱）上的逆后序"""
        order = []
        visited = {self.root}
        stack = [(self.root, iter(self.pred[self.root]))]
        while stack:
            node_id, children = stack[-1]
            for child in children:
                if child not in visited:
                    visited.add(child)
                    stack.append((child, iter(self.pred[child])))
                    break
            else:
                stack.pop()
                order.append(node_id)
        order.reverse()
        return order

    def _immediate_post_dominators(self) -> Dict[int, int]:
        order = self._reverse_postorder()
        index = {node_id: i for i, node_id in enumerate(order)}
        ipdom = {self.root: self.root}

        def intersect(a: int, b: int) -> int:
            while a != b:
                while index[a] > index[b]:
                    a = ipdom[a]
                while index[b] > index[a]:
                    b = ipdom[b]
            return a

        changed = True
        while changed:
            changed = False
            for node_id in order:
                if node_id == self.root:
                    continue
                # 反向图中的前驱就是CFG中的后继
                processed = [s for s in self.succ[node_id] if s in ipdom]
                new_ipdom = processed[0]
                for other in processed[1:]:
                    new_ipdom = intersect(other, new_ipdom)
                if ipdom.get(node_id) != new_ipdom:
                    ipdom[node_id] = new_ipdom
                    changed = True
        return ipdom

    def _post_dominance_frontier(self) -> Dict[int, Set[int]]:
        frontier: Dict[int, Set[int]] = {node_id: set() for node_id in self.succ}
        for node_id, successors in self.succ.items():
            if len(successors) < 2:
                continue
            for successor in successors:
                runner = successor
                while runner != self.ipdom[node_id] and runner != self.root:
                    frontier[runner].add(node_id)
                    runner = self.ipdom[runner]
        return frontier
