#!/usr/bin/env python3
"""
到达定义与定义-使用链

经典的前向迭代数据流分析：
    IN[n]  = ∪ OUT[p]，p 为 n 的前驱
    OUT[n] = GEN[n] ∪ (IN[n] - KILL[n])
定义用 (变量, 节点ID) 表示。只考虑真实依赖（def -> use, RAW），反依赖和
输出依赖对切片没有意义。
"""

import logging
from collections import deque
from typing import Dict, FrozenSet, Set, Tuple

from .graph import EXIT_ID, Graph
from .variables import Variable

logger = logging.getLogger(__name__)

Definition = Tuple[Variable, int]


class ReachingDefinitions:
    """到达定义分析"""

    def __init__(self, cfg: Graph):
        self.cfg = cfg
        self.reach_in: Dict[int, FrozenSet[Definition]] = {}
        self.reach_out: Dict[int, FrozenSet[Definition]] = {}
        self._solve()
        self.def_uses: Dict[int, Set[int]] = self._link_uses()

    def _solve(self):
        for node in self.cfg.nodes:
            self.reach_in[node.id] = frozenset()
            self.reach_out[node.id] = frozenset()

        worklist = deque(node.id for node in self.cfg.nodes)
        queued = set(worklist)
        iterations = 0
        while worklist:
            node_id = worklist.popleft()
            queued.discard(node_id)
            iterations += 1

            incoming: Set[Definition] = set()
            for previous in self.cfg.predecessors(node_id):
                incoming |= self.reach_out[previous]
            self.reach_in[node_id] = frozenset(incoming)

            node = self.cfg[node_id]
            out = {(variable, site) for variable, site in incoming if variable not in node.defs}
            out |= {(variable, node_id) for variable in node.defs}
            out = frozenset(out)
            if out == self.reach_out[node_id]:
                continue
            self.reach_out[node_id] = out
            for successor in self.cfg.successors(node_id):
                if successor != EXIT_ID and successor not in queued:
                    worklist.append(successor)
                    queued.add(successor)
        logger.debug(f"Reaching definitions converged after {iterations} node visits")

    def _link_uses(self) -> Dict[int, Set[int]]:
        def_uses: Dict[int, Set[int]] = {node.id: set() for node in self.cfg.nodes}
        for node in self.cfg.nodes:
            for variable in node.uses:
                for site in self.definitions_of(variable, node.id):
                    def_uses[site].add(node.id)
        return def_uses

    def definitions_of(self, variable: Variable, node_id: int) -> Set[int]:
        """在 node_id 处到达、定义了 variable 的节点ID"""
        return {site for defined, site in self.reach_in[node_id] if defined == variable}

    def uses_of(self, node_id: int) -> Set[int]:
        """使用了 node_id 处定义的值的节点ID（不区分变量）"""
        return self.def_uses[node_id]
