#!/usr/bin/env python3
"""
PDG构建测试（手写事实表）
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from slicer.errors import MalformedFactsError
from slicer.models import EdgeKind
from slicer.pdg import DependenceGraph, build_pdg
from fact_table import FactTable, straight_line_table


def test_data_edges_follow_def_use():
    graph = build_pdg(straight_line_table())
    assert graph.edges() == {
        ('s10', 's11', EdgeKind.DATA),
        ('s11', 's12', EdgeKind.DATA),
    }
    assert len(graph) == 3
    assert graph.nodes() == {'s10', 's11', 's12'}


def test_control_edges_from_frontier():
    facts = FactTable(
        lines={'if': 4, 'then': 5, 'else': 7, 'join': 8},
        frontier={'then': {'if'}, 'else': {'if'}},
    )
    graph = build_pdg(facts)
    assert graph.edges(EdgeKind.CONTROL) == {
        ('if', 'then', EdgeKind.CONTROL),
        ('if', 'else', EdgeKind.CONTROL),
    }
    assert graph.edges(EdgeKind.DATA) == set()
    assert 'join' in graph


def test_self_edge_is_kept():
    facts = FactTable(lines={'loop': 3, 'body': 4},
                      frontier={'loop': {'loop'}, 'body': {'loop'}})
    graph = build_pdg(facts)
    assert graph.has_edge('loop', 'loop', EdgeKind.CONTROL)


def test_edge_insertion_is_idempotent():
    graph = DependenceGraph()
    graph.add_node('a')
    graph.add_node('b')
    assert graph.add_edge('a', 'b', EdgeKind.DATA)
    assert not graph.add_edge('a', 'b', EdgeKind.DATA)
    assert graph.add_edge('a', 'b', EdgeKind.CONTROL)
    assert len(graph.edges()) == 2
    assert sorted(kind.value for _, kind in graph.predecessors('b')) == ['control', 'data']


def test_same_pair_with_both_kinds():
    facts = FactTable(lines={'p': 1, 'q': 2},
                      frontier={'q': {'p'}}, def_uses={'p': {'q'}})
    graph = build_pdg(facts)
    assert graph.has_edge('p', 'q', EdgeKind.CONTROL)
    assert graph.has_edge('p', 'q', EdgeKind.DATA)
    assert graph.predecessor_units('q') == {'p'}


def test_unknown_frontier_unit_is_malformed():
    facts = FactTable(lines={'a': 1}, frontier={'a': {'ghost'}})
    with pytest.raises(MalformedFactsError):
        build_pdg(facts)


def test_unknown_use_unit_is_malformed():
    facts = FactTable(lines={'a': 1}, def_uses={'a': {'ghost'}})
    with pytest.raises(MalformedFactsError):
        build_pdg(facts)


def test_predecessors_of_missing_node():
    graph = build_pdg(straight_line_table())
    with pytest.raises(MalformedFactsError):
        graph.predecessor_units('nowhere')
