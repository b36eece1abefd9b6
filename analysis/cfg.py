#!/usr/bin/env python3
"""
控制流图(CFG)构建器

基于tree-sitter构建函数级、语句粒度的控制流图。
- 合成的 entry 节点没有行号，定义全部函数参数
- for 循环的初始化、条件、更新分别是独立节点（同一行）
- 多个声明器的声明语句按声明器拆分
- 所有正常出口和 return 都连向虚拟出口 EXIT_ID
"""

import logging
from typing import List, Optional, Tuple

from .base import BaseAnalyzer
from .graph import EXIT_ID, Graph
from .node import DefUseCollector, Node
from .utils import clean_code_text, declarator_identifier, line_of, node_key, text
from .variables import VariableTable

logger = logging.getLogger(__name__)

Incoming = List[Tuple[Node, str]]


class _JumpContext:
    """循环或switch的跳转上下文"""

    def __init__(self, is_loop: bool, continue_target: Optional[Node] = None):
        self.is_loop = is_loop
        self.continue_target = continue_target
        self.breaks: List[Node] = []
        self.continues: List[Node] = []


class CFG(BaseAnalyzer):
    """单函数控制流图构建器"""

    def __init__(self, language: str = "c", suffix_marker: str = '#'):
        """初始化CFG构建器"""
        super().__init__(language)
        self.suffix_marker = suffix_marker
        self.cfg: Optional[Graph] = None
        self.variables: Optional[VariableTable] = None

    def construct_cfg(self, code: str, function_name: str = 'main') -> Graph:
        """解析代码并为指定函数构建CFG"""
        function_node = self.find_function(code, function_name)
        return self.construct_cfg_from_node(function_node)

    def construct_cfg_from_node(self, function_node) -> Graph:
        """为tree-sitter函数定义节点构建CFG"""
        self.variables = VariableTable(self.suffix_marker).build(function_node)
        self._graph = Graph()
        self._collector = DefUseCollector(self.variables)
        self._contexts: List[_JumpContext] = []
        self._labels = {}
        self._gotos: List[Tuple[Node, str]] = []

        entry = self._new_node('entry', None, 'entry')
        entry.defs = set(self.variables.parameters)
        self._graph.entry = entry

        body = function_node.child_by_field_name('body')
        out_nodes = self._visit(body, [(entry, '')]) if body is not None else [(entry, '')]
        self._connect(out_nodes, EXIT_ID)

        for goto_node, label in self._gotos:
            target = self._labels.get(label)
            if target is None:
                logger.warning(f"goto target '{label}' not found, edge dropped")
                continue
            self._graph.add_edge(goto_node.id, target.id)

        self.cfg = self._graph
        logger.debug(f"CFG built: {len(self.cfg.nodes)} nodes, {len(self.cfg.edges)} edges")
        return self.cfg

    # -------- 节点与边 --------

    def _new_node(self, kind: str, line: Optional[int], node_text: str, is_branch: bool = False) -> Node:
        node = Node(len(self._graph.nodes), kind, line, node_text, is_branch)
        self._graph.add_node(node)
        return node

    def _statement_node(self, kind: str, ts_node, node_text: Optional[str] = None) -> Node:
        node_text = node_text if node_text is not None else clean_code_text(text(ts_node))
        node = self._new_node(kind, line_of(ts_node), node_text)
        node.defs, node.uses = self._collector.collect(ts_node)
        return node

    def _branch_node(self, kind: str, ts_node, node_text: str, condition) -> Node:
        """分支节点只分析条件部分，不包括语句体"""
        node = self._new_node(kind, line_of(ts_node), node_text, is_branch=condition is not None)
        node.defs, node.uses = self._collector.collect(condition)
        return node

    def _connect(self, in_nodes: Incoming, target):
        target_id = target if isinstance(target, int) else target.id
        for source, label in in_nodes:
            self._graph.add_edge(source.id, target_id, label)

    # -------- 语句分派 --------

    def _visit(self, node, in_nodes: Incoming) -> Incoming:
        """
        递归创建CFG
        Args:
            node: 当前tree-sitter语句节点
            in_nodes: 入节点列表，格式为[(node, edge_label), ...]
        Returns:
            出节点列表
        """
        node_type = node.type
        if not node.is_named or node_type == 'comment':
            return in_nodes

        if node_type == 'compound_statement':
            for child in node.named_children:
                in_nodes = self._visit(child, in_nodes)
            return in_nodes
        if node_type == 'declaration':
            return self._visit_declaration(node, in_nodes)
        if node_type == 'expression_statement':
            if node.named_child_count == 0:
                return in_nodes
            statement = self._statement_node('expression', node)
            self._connect(in_nodes, statement)
            return [(statement, '')]

        handler = {
            'if_statement': self._visit_if,
            'while_statement': self._visit_while,
            'do_statement': self._visit_do,
            'for_statement': self._visit_for,
            'for_range_loop': self._visit_range_for,
            'switch_statement': self._visit_switch,
            'break_statement': self._visit_break,
            'continue_statement': self._visit_continue,
            'return_statement': self._visit_return,
            'goto_statement': self._visit_goto,
            'labeled_statement': self._visit_labeled,
        }.get(node_type)
        if handler is not None:
            return handler(node, in_nodes)

        statement = self._statement_node('statement', node)
        self._connect(in_nodes, statement)
        return [(statement, '')]

    def _visit_declaration(self, node, in_nodes: Incoming) -> Incoming:
        type_node = node.child_by_field_name('type')
        type_text = text(type_node) if type_node is not None else ''
        for declarator in node.children_by_field_name('declarator'):
            if declarator.type == 'function_declarator':
                continue
            statement = self._new_node('declaration', line_of(declarator),
                                       clean_code_text(f"{type_text} {text(declarator)}"))
            statement.defs, statement.uses = self._collector.collect_declarator(declarator)
            self._connect(in_nodes, statement)
            in_nodes = [(statement, '')]
        return in_nodes

    def _visit_if(self, node, in_nodes: Incoming) -> Incoming:
        condition = node.child_by_field_name('condition')
        branch = self._branch_node('if', node, f"if {clean_code_text(text(condition))}", condition)
        self._connect(in_nodes, branch)

        then_out = self._visit(node.child_by_field_name('consequence'), [(branch, 'Y')])
        alternative = node.child_by_field_name('alternative')
        if alternative is None:
            return then_out + [(branch, 'N')]
        if alternative.type == 'else_clause':
            alternative = next((c for c in alternative.named_children if c.type != 'comment'), None)
        if alternative is None:
            return then_out + [(branch, 'N')]
        return then_out + self._visit(alternative, [(branch, 'N')])

    def _visit_while(self, node, in_nodes: Incoming) -> Incoming:
        condition = node.child_by_field_name('condition')
        branch = self._branch_node('while', node, f"while {clean_code_text(text(condition))}", condition)
        self._connect(in_nodes, branch)

        context = self._push(is_loop=True, continue_target=branch)
        body_out = self._visit(node.child_by_field_name('body'), [(branch, 'Y')])
        self._contexts.pop()

        self._connect(body_out, branch)
        return [(branch, 'N')] + [(b, '') for b in context.breaks]

    def _visit_do(self, node, in_nodes: Incoming) -> Incoming:
        first_index = len(self._graph.nodes)
        context = self._push(is_loop=True)
        body_out = self._visit(node.child_by_field_name('body'), in_nodes)
        self._contexts.pop()

        condition = node.child_by_field_name('condition')
        branch = self._branch_node('do_while', condition, f"while {clean_code_text(text(condition))}",
                                   condition)
        self._connect(body_out + [(c, '') for c in context.continues], branch)

        # 回边：条件成立时回到循环体的第一个节点，空循环体时回到条件自身
        body_entry = self._graph.nodes[first_index]
        self._graph.add_edge(branch.id, body_entry.id, 'Y')
        return [(branch, 'N')] + [(b, '') for b in context.breaks]

    def _visit_for(self, node, in_nodes: Incoming) -> Incoming:
        initializer = node.child_by_field_name('initializer')
        condition = node.child_by_field_name('condition')
        update = node.child_by_field_name('update')

        if initializer is not None:
            if initializer.type == 'declaration':
                in_nodes = self._visit_declaration(initializer, in_nodes)
            else:
                init = self._statement_node('for_init', initializer)
                self._connect(in_nodes, init)
                in_nodes = [(init, '')]

        condition_text = clean_code_text(text(condition)) if condition is not None else ';'
        branch = self._branch_node('for', node, f"for ({condition_text})", condition)
        self._connect(in_nodes, branch)

        context = self._push(is_loop=True)
        body_out = self._visit(node.child_by_field_name('body'), [(branch, 'Y')])
        self._contexts.pop()

        back_sources = body_out + [(c, '') for c in context.continues]
        if update is not None:
            step = self._statement_node('for_update', update)
            self._connect(back_sources, step)
            self._graph.add_edge(step.id, branch.id)
        else:
            self._connect(back_sources, branch)

        # 没有条件的 for(;;) 只能通过 break / return 离开
        out_nodes = [(branch, 'N')] if condition is not None else []
        return out_nodes + [(b, '') for b in context.breaks]

    def _visit_range_for(self, node, in_nodes: Incoming) -> Incoming:
        body = node.child_by_field_name('body')
        header_text = node.text[:body.start_byte - node.start_byte].decode('utf-8')
        right = node.child_by_field_name('right')
        header = self._branch_node('for_range', node, clean_code_text(header_text), right)

        ident = declarator_identifier(node.child_by_field_name('declarator'))
        variable = self.variables.lookup(ident) if ident is not None else None
        if variable is not None:
            header.defs.add(variable)
        self._connect(in_nodes, header)

        context = self._push(is_loop=True, continue_target=header)
        body_out = self._visit(body, [(header, 'Y')])
        self._contexts.pop()

        self._connect(body_out, header)
        return [(header, 'N')] + [(b, '') for b in context.breaks]

    def _visit_switch(self, node, in_nodes: Incoming) -> Incoming:
        condition = node.child_by_field_name('condition')
        branch = self._branch_node('switch', node, f"switch {clean_code_text(text(condition))}", condition)
        self._connect(in_nodes, branch)

        context = self._push(is_loop=False)
        fallthrough: Incoming = []
        has_default = False
        body = node.child_by_field_name('body')
        for child in (body.named_children if body is not None else []):
            if child.type == 'comment':
                continue
            if child.type != 'case_statement':
                fallthrough = self._visit(child, fallthrough)
                continue

            value = child.child_by_field_name('value')
            has_default = has_default or value is None
            label = f"case {clean_code_text(text(value))}" if value is not None else 'default'
            case = self._new_node('case', line_of(child), label)
            self._connect([(branch, label)] + fallthrough, case)

            case_out: Incoming = [(case, '')]
            for statement in child.named_children:
                if value is not None and node_key(statement) == node_key(value):
                    continue
                case_out = self._visit(statement, case_out)
            fallthrough = case_out
        self._contexts.pop()

        out_nodes = fallthrough + [(b, '') for b in context.breaks]
        if not has_default:
            out_nodes.append((branch, 'N'))
        return out_nodes

    def _visit_break(self, node, in_nodes: Incoming) -> Incoming:
        statement = self._statement_node('break', node, 'break')
        self._connect(in_nodes, statement)
        if self._contexts:
            self._contexts[-1].breaks.append(statement)
        else:
            logger.warning(f"break outside loop or switch at line {statement.line}")
        return []

    def _visit_continue(self, node, in_nodes: Incoming) -> Incoming:
        statement = self._statement_node('continue', node, 'continue')
        self._connect(in_nodes, statement)
        loop = next((c for c in reversed(self._contexts) if c.is_loop), None)
        if loop is None:
            logger.warning(f"continue outside loop at line {statement.line}")
        elif loop.continue_target is not None:
            self._graph.add_edge(statement.id, loop.continue_target.id)
        else:
            loop.continues.append(statement)
        return []

    def _visit_return(self, node, in_nodes: Incoming) -> Incoming:
        statement = self._statement_node('return', node)
        self._connect(in_nodes, statement)
        self._graph.add_edge(statement.id, EXIT_ID)
        return []

    def _visit_goto(self, node, in_nodes: Incoming) -> Incoming:
        statement = self._statement_node('goto', node)
        self._connect(in_nodes, statement)
        self._gotos.append((statement, text(node.child_by_field_name('label'))))
        return []

    def _visit_labeled(self, node, in_nodes: Incoming) -> Incoming:
        label = node.child_by_field_name('label')
        name = text(label)
        target = self._new_node('label', line_of(node), f"{name}:")
        self._connect(in_nodes, target)
        self._labels[name] = target

        out_nodes: Incoming = [(target, '')]
        for child in node.named_children:
            if node_key(child) != node_key(label):
                out_nodes = self._visit(child, out_nodes)
        return out_nodes

    def _push(self, is_loop: bool, continue_target: Optional[Node] = None) -> _JumpContext:
        context = _JumpContext(is_loop, continue_target)
        self._contexts.append(context)
        return context
