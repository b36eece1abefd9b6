#!/usr/bin/env python3
"""
可视化模块

PDG的行级边列表（调试输出）和 graphviz 渲染
"""

import html
from typing import List, Set

from graphviz import Digraph

from .models import EdgeKind, ENTRY_LABEL
from .pdg import DependenceGraph


def pdg_dot_edges(graph: DependenceGraph, facts) -> Set[str]:
    """
    PDG在行号层面的边：`"a" -> "b"`，控制依赖边追加 ` [ label="C" ];`

    同一行内部的边和没有行号的单元上的边都被跳过。
    """
    edges = set()
    for source, target, kind in graph.edges():
        source_line = facts.source_line(source)
        target_line = facts.source_line(target)
        if source_line is None or target_line is None or source_line == target_line:
            continue
        edge = f'"{source_line}" -> "{target_line}"'
        if kind == EdgeKind.CONTROL:
            edge += ' [ label="C" ];'
        edges.add(edge)
    return edges


def _unit_label(unit, line) -> str:
    code_label = html.escape(getattr(unit, 'text', '') or str(unit))
    line_label = ENTRY_LABEL if line is None else line
    return f"<{code_label}<SUB>{line_label}</SUB>>"


def build_pdg_dot(graph: DependenceGraph, facts, filename: str = 'PDG') -> Digraph:
    """PDG的 graphviz 表示：控制依赖为实线，数据依赖为红色虚线"""
    dot = Digraph(comment=filename)
    dot.attr(rankdir='TB')
    dot.attr('node', fontname='Arial')
    dot.attr('edge', fontname='Arial')

    units: List = facts.units()
    index = {unit: str(position) for position, unit in enumerate(units)}

    for unit in units:
        if unit not in graph:
            continue
        line = facts.source_line(unit)
        label = _unit_label(unit, line)
        if line is None:
            dot.node(index[unit], label=label, shape='ellipse', style='filled', fillcolor='lightgreen')
        elif getattr(unit, 'is_branch', False):
            dot.node(index[unit], shape='diamond', label=label, style='filled', fillcolor='yellow')
        else:
            dot.node(index[unit], shape='rectangle', label=label)

    for source, target, kind in sorted(graph.edges(), key=lambda e: (int(index[e[0]]), int(index[e[1]]), e[2].value)):
        if kind == EdgeKind.CONTROL:
            dot.edge(index[source], index[target], label='C')
        else:
            dot.edge(index[source], index[target], style='dotted', color='red')

    return dot


def visualize_pdg(graph: DependenceGraph, facts, filename: str = 'PDG', pdf: bool = True,
                  dot_format: bool = True, view: bool = False) -> Digraph:
    """可视化PDG，按需保存 .dot 文件并渲染 PDF"""
    dot = build_pdg_dot(graph, facts, filename)

    if dot_format:
        with open(f"{filename}.dot", 'w') as f:
            f.write(dot.source)

    if pdf:
        dot.render(filename, view=view, cleanup=True)

    return dot
