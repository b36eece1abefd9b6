#!/usr/bin/env python3
"""
图数据结构模块

提供控制流图的基础数据结构和操作
"""

from typing import Dict, List, Optional

from .node import Node

EXIT_ID = -1  # 虚拟出口节点，不属于语句单元


class Edge:
    """控制流边"""

    def __init__(self, source: int, target: int, label: str = ''):
        """
        创建边
        Args:
            source: 源节点ID
            target: 目标节点ID（可以是 EXIT_ID）
            label: 分支标签，'Y' / 'N' / case 文本
        """
        self.source = source
        self.target = target
        self.label = label

    def __repr__(self) -> str:
        return f"Edge({self.source} -> {self.target}{', ' + self.label if self.label else ''})"


class Graph:
    """语句级控制流图"""

    def __init__(self):
        """初始化图"""
        self.nodes: List[Node] = []
        self.edges: List[Edge] = []
        self.id_to_nodes: Dict[int, Node] = {}
        self.succ: Dict[int, List[int]] = {EXIT_ID: []}
        self.pred: Dict[int, List[int]] = {EXIT_ID: []}
        self.entry: Optional[Node] = None

    def add_node(self, node: Node):
        """添加节点"""
        if node.id not in self.id_to_nodes:
            self.nodes.append(node)
            self.id_to_nodes[node.id] = node
            self.succ[node.id] = []
            self.pred[node.id] = []

    def add_edge(self, source: int, target: int, label: str = '') -> bool:
        """添加边，同一对节点只保留一条"""
        if target in self.succ[source]:
            return False
        self.succ[source].append(target)
        self.pred[target].append(source)
        self.edges.append(Edge(source, target, label))
        return True

    def __getitem__(self, node_id: int) -> Node:
        """支持通过graph[id]的方式获取节点"""
        node = self.id_to_nodes.get(node_id)
        if node is None:
            raise KeyError(f"Node with id {node_id} not found")
        return node

    def __len__(self) -> int:
        return len(self.nodes)

    def successors(self, node_id: int) -> List[int]:
        return self.succ.get(node_id, [])

    def predecessors(self, node_id: int) -> List[int]:
        return self.pred.get(node_id, [])

    def nodes_at_line(self, line: int) -> List[Node]:
        return [node for node in self.nodes if node.line == line]
