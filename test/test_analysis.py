#!/usr/bin/env python3
"""
测试CFG、后支配树、到达定义和变量表的生成
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from analysis import CFG, EXIT_ID, FunctionFacts, PostDominatorTree, ReachingDefinitions
from slicer import slice_statements


def build(code, function_name):
    builder = CFG('c')
    cfg = builder.construct_cfg(code, function_name)
    return builder, cfg


def at_line(cfg, line, kind=None):
    nodes = [n for n in cfg.nodes_at_line(line) if kind is None or n.kind == kind]
    assert len(nodes) == 1, nodes
    return nodes[0]


def names(variables):
    return {v.name for v in variables}


FOR_CODE = "\n".join([
    "int total(int *a, int n)",                 # 1
    "{",                                        # 2
    "    int t = 0;",                           # 3
    "    for (int i = 0; i < n; i++) {",        # 4
    "        if (a[i] < 0)",                    # 5
    "            continue;",                    # 6
    "        t += a[i];",                       # 7
    "    }",                                    # 8
    "    return t;",                            # 9
    "}",                                        # 10
])

SWITCH_CODE = "\n".join([
    "int grade(int k)",                         # 1
    "{",                                        # 2
    "    int r = 0;",                           # 3
    "    switch (k) {",                         # 4
    "    case 1:",                              # 5
    "        r = 1;",                           # 6
    "    case 2:",                              # 7
    "        r = r + 2;",                       # 8
    "        break;",                           # 9
    "    default:",                             # 10
    "        r = 3;",                           # 11
    "    }",                                    # 12
    "    return r;",                            # 13
    "}",                                        # 14
])


def test_entry_defines_parameters():
    builder, cfg = build(FOR_CODE, 'total')
    assert cfg.entry.line is None
    assert cfg.entry.kind == 'entry'
    assert names(cfg.entry.defs) == {'a', 'n'}
    assert names(builder.variables.parameters) == {'a', 'n'}


def test_for_header_is_split():
    _, cfg = build(FOR_CODE, 'total')
    kinds = [n.kind for n in cfg.nodes_at_line(4)]
    assert kinds == ['declaration', 'for', 'for_update']

    condition = at_line(cfg, 4, 'for')
    update = at_line(cfg, 4, 'for_update')
    assert condition.is_branch
    assert update.id in cfg.successors(at_line(cfg, 7).id)
    assert condition.id in cfg.successors(update.id)
    # continue 跳到更新语句
    assert update.id in cfg.successors(at_line(cfg, 6).id)


def test_compound_assignment_defines_and_uses():
    _, cfg = build(FOR_CODE, 'total')
    node = at_line(cfg, 7)
    assert names(node.defs) == {'t'}
    assert names(node.uses) == {'t', 'a', 'i'}

    update = at_line(cfg, 4, 'for_update')
    assert names(update.defs) == {'i'}
    assert names(update.uses) == {'i'}


def test_switch_fallthrough():
    _, cfg = build(SWITCH_CODE, 'grade')
    case_two = at_line(cfg, 7)
    assert case_two.kind == 'case'
    assert case_two.id in cfg.successors(at_line(cfg, 6).id)
    assert at_line(cfg, 10).kind == 'case'
    # 有 default 时 switch 不直接连到后继语句
    assert at_line(cfg, 13).id not in cfg.successors(at_line(cfg, 4).id)
    assert at_line(cfg, 13).id in cfg.successors(at_line(cfg, 9).id)


def test_return_reaches_exit():
    _, cfg = build(SWITCH_CODE, 'grade')
    assert EXIT_ID in cfg.successors(at_line(cfg, 13).id)


def test_do_while_back_edge():
    code = "\n".join([
        "void count(int n)",        # 1
        "{",                        # 2
        "    do {",                 # 3
        "        n--;",             # 4
        "    } while (n > 0);",     # 5
        "}",                        # 6
    ])
    _, cfg = build(code, 'count')
    body = at_line(cfg, 4)
    condition = at_line(cfg, 5)
    assert condition.kind == 'do_while'
    assert body.id in cfg.successors(condition.id)
    assert condition.id in cfg.successors(body.id)
    assert body.id in cfg.successors(cfg.entry.id)


def test_goto_and_label():
    code = "\n".join([
        "int retry(int n)",         # 1
        "{",                        # 2
        "again:",                   # 3
        "    n = n - 1;",           # 4
        "    if (n > 0)",           # 5
        "        goto again;",      # 6
        "    return n;",            # 7
        "}",                        # 8
    ])
    _, cfg = build(code, 'retry')
    label = at_line(cfg, 3)
    assert label.kind == 'label'
    assert label.id in cfg.successors(at_line(cfg, 6).id)


def test_shadowed_names_get_suffix():
    code = "\n".join([
        "int f(int x)",             # 1
        "{",                        # 2
        "    {",                    # 3
        "        int x = 1;",       # 4
        "        x++;",             # 5
        "    }",                    # 6
        "    {",                    # 7
        "        int x = 2;",       # 8
        "    }",                    # 9
        "    return x;",            # 10
        "}",                        # 11
    ])
    builder, cfg = build(code, 'f')
    assert [v.name for v in builder.variables.variables] == ['x', 'x#1', 'x#2']
    assert names(at_line(cfg, 5).defs) == {'x#1'}
    assert names(at_line(cfg, 10).uses) == {'x'}
    assert all(v.source_name == 'x' for v in builder.variables.variables)


def test_globals_are_not_variables():
    code = "\n".join([
        "int limit;",               # 1
        "int g(int v)",             # 2
        "{",                        # 3
        "    limit = v;",           # 4
        "    return limit;",        # 5
        "}",                        # 6
    ])
    builder, cfg = build(code, 'g')
    assert names(builder.variables.variables) == {'v'}
    assert at_line(cfg, 4).defs == set()
    assert names(at_line(cfg, 4).uses) == {'v'}


def test_address_of_argument_is_definition():
    code = "\n".join([
        "int read(void)",                   # 1
        "{",                                # 2
        "    int value;",                   # 3
        "    scanf(\"%d\", &value);",       # 4
        "    return value;",                # 5
        "}",                                # 6
    ])
    _, cfg = build(code, 'read')
    assert names(at_line(cfg, 4).defs) == {'value'}
    # 没有初始化的声明不是定义
    assert at_line(cfg, 3).defs == set()


def test_post_dominance_frontier_of_branches():
    code = "\n".join([
        "int pick(int c)",          # 1
        "{",                        # 2
        "    int r = 0;",           # 3
        "    if (c > 0)",           # 4
        "        r = 1;",           # 5
        "    else",                 # 6
        "        r = 2;",           # 7
        "    return r;",            # 8
        "}",                        # 9
    ])
    _, cfg = build(code, 'pick')
    tree = PostDominatorTree(cfg)
    branch = at_line(cfg, 4)
    ret = at_line(cfg, 8)
    assert {e.label for e in cfg.edges if e.source == branch.id} == {'Y', 'N'}

    assert tree.frontier_of(at_line(cfg, 5).id) == {branch.id}
    assert tree.frontier_of(at_line(cfg, 7).id) == {branch.id}
    assert tree.frontier_of(ret.id) == set()
    assert tree.immediate_post_dominator(branch.id) == ret.id
    assert tree.post_dominates(ret.id, at_line(cfg, 3).id)
    assert not tree.post_dominates(at_line(cfg, 5).id, branch.id)


def test_loop_header_depends_on_itself():
    _, cfg = build(FOR_CODE, 'total')
    tree = PostDominatorTree(cfg)
    condition = at_line(cfg, 4, 'for')
    assert condition.id in tree.frontier_of(condition.id)
    assert condition.id in tree.frontier_of(at_line(cfg, 5).id)
    assert at_line(cfg, 5).id in tree.frontier_of(at_line(cfg, 7).id)


def test_infinite_loop_gets_virtual_exit():
    code = "\n".join([
        "void spin(int n)",         # 1
        "{",                        # 2
        "    for (;;) {",           # 3
        "        n++;",             # 4
        "    }",                    # 5
        "}",                        # 6
    ])
    _, cfg = build(code, 'spin')
    tree = PostDominatorTree(cfg)
    loop = at_line(cfg, 3)
    body = at_line(cfg, 4)
    assert tree.immediate_post_dominator(body.id) == loop.id
    assert loop.id in tree.frontier_of(body.id)


def test_statements_before_infinite_loop_are_not_branches():
    code = "\n".join([
        "int main(void)",           # 1
        "{",                        # 2
        "    int a = 1;",           # 3
        "    int b = 2;",           # 4
        "    int c = 3;",           # 5
        "    for (;;) {",           # 6
        "        b = b + 1;",       # 7
        "    }",                    # 8
        "}",                        # 9
    ])
    _, cfg = build(code, 'main')
    tree = PostDominatorTree(cfg)
    loop = at_line(cfg, 6)
    # 只有循环头得到通往出口的虚拟边
    assert [n for n in cfg.nodes if EXIT_ID in tree.succ[n.id]] == [loop]
    for line in (3, 4, 5):
        assert tree.frontier_of(at_line(cfg, line).id) == set()
    assert tree.frontier_of(loop.id) == {loop.id}

    facts = FunctionFacts.from_code(code, 'main')
    assert slice_statements(facts, 7, 'b') == {'4', '6', '7'}


def test_reaching_definitions_and_def_use():
    code = "\n".join([
        "int f(int p)",             # 1
        "{",                        # 2
        "    int a = p;",           # 3
        "    if (a > 1)",           # 4
        "        a = 2;",           # 5
        "    return a;",            # 6
        "}",                        # 7
    ])
    builder, cfg = build(code, 'f')
    reaching = ReachingDefinitions(cfg)
    a = next(v for v in builder.variables.variables if v.name == 'a')

    ret = at_line(cfg, 6)
    assert reaching.definitions_of(a, ret.id) == {at_line(cfg, 3).id, at_line(cfg, 5).id}
    assert reaching.uses_of(at_line(cfg, 3).id) == {at_line(cfg, 4).id, ret.id}
    assert reaching.uses_of(cfg.entry.id) == {at_line(cfg, 3).id}


def test_function_facts_interface():
    code = "\n".join([
        "int f(int p)",             # 1
        "{",                        # 2
        "    int a = p;",           # 3
        "    return a;",            # 4
        "}",                        # 5
    ])
    facts = FunctionFacts.from_code(code, 'f')
    units = facts.units()
    assert units[0] is facts.cfg.entry
    assert facts.source_line(units[0]) is None
    assert [facts.source_line(u) for u in units[1:]] == [3, 4]
    assert names(facts.declared_variables()) == {'p', 'a'}

    ret = units[2]
    assert {raw for raw, _ in facts.use_occurrences(ret)} == {'a'}
    assert facts.uses_of(units[1]) == {ret}
    a = next(v for v in facts.declared_variables() if v.name == 'a')
    assert facts.reaching_defs(a, ret) == {units[1]}
    assert facts.post_dominance_frontier(ret) == set()
