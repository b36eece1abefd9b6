#!/usr/bin/env python3
"""
语句节点模块

Node 是控制流图上的语句级单元；DefUseCollector 从语句的语法树中收集
定义和使用的局部变量。
"""

from typing import Optional, Set, Tuple

from .utils import declarator_identifier, node_key, text
from .variables import Variable, VariableTable


class Node:
    """程序分析节点（语句级单元）"""

    def __init__(self, node_id: int, kind: str, line: Optional[int], text: str = '',
                 is_branch: bool = False):
        """
        创建节点
        Args:
            node_id: 枚举序号，函数内唯一
            kind: 语句类别，如 'declaration'、'if'、'entry'
            line: 源代码行号，合成节点为None
            text: 语句文本
            is_branch: 是否为分支判断节点
        """
        self.id = node_id
        self.kind = kind
        self.line = line
        self.text = text
        self.is_branch = is_branch
        self.defs: Set[Variable] = set()  # 定义的变量集合
        self.uses: Set[Variable] = set()  # 使用的变量集合

    @property
    def use_occurrences(self) -> Set[Tuple[str, Variable]]:
        """使用出现：(原始变量名, 变量)"""
        return {(variable.name, variable) for variable in self.uses}

    def __repr__(self) -> str:
        line = 'entry' if self.line is None else f"L{self.line}"
        return f"Node({self.id}, {line}, {self.text!r})"


class DefUseCollector:
    """
    收集语法树片段中定义/使用的局部变量

    规则：
    - 带初始化的声明器定义被声明的变量
    - 赋值左侧定义变量，复合赋值（+= 等）同时使用该变量
    - ++/-- 定义并使用变量
    - 对数组元素、结构体字段、解引用的写入视为对基变量的定义和使用
    - 作为 &x 传给函数调用的变量视为定义和使用（输出参数）
    - 其余读取都是使用
    嵌套的复合语句属于其他语句单元，不在此收集。
    """

    LVALUE_WRAPPERS = ('subscript_expression', 'field_expression', 'pointer_expression')

    def __init__(self, variables: VariableTable):
        self.variables = variables
        self._defs: Set[Variable] = set()
        self._uses: Set[Variable] = set()

    def collect(self, ts_node) -> Tuple[Set[Variable], Set[Variable]]:
        """收集表达式或语句片段的定义和使用"""
        self._defs, self._uses = set(), set()
        if ts_node is not None:
            self._visit(ts_node)
        return self._defs, self._uses

    def collect_declarator(self, declarator) -> Tuple[Set[Variable], Set[Variable]]:
        """收集单个声明器（可能带初始化）的定义和使用"""
        self._defs, self._uses = set(), set()
        if declarator.type == 'init_declarator':
            self._visit_init_declarator(declarator)
        else:
            self._visit_declarator(declarator, define=False)
        return self._defs, self._uses

    def _define(self, ident):
        variable = self.variables.lookup(ident)
        if variable is not None:
            self._defs.add(variable)
        return variable

    def _use(self, ident):
        variable = self.variables.lookup(ident)
        if variable is not None:
            self._uses.add(variable)

    def _visit(self, node):
        node_type = node.type
        if node_type == 'identifier':
            self._use(node)
        elif node_type == 'compound_statement':
            return
        elif node_type == 'assignment_expression':
            operator = node.child_by_field_name('operator')
            operator_text = text(operator) if operator is not None else text(node.children[1])
            self._visit_lvalue(node.child_by_field_name('left'), also_use=operator_text != '=')
            self._visit(node.child_by_field_name('right'))
        elif node_type == 'update_expression':
            self._visit_lvalue(node.child_by_field_name('argument'), also_use=True)
        elif node_type == 'init_declarator':
            self._visit_init_declarator(node)
        elif node_type == 'call_expression':
            self._visit(node.child_by_field_name('function'))
            arguments = node.child_by_field_name('arguments')
            for argument in (arguments.named_children if arguments is not None else []):
                if self._is_address_of(argument):
                    self._visit_lvalue(argument.child_by_field_name('argument'), also_use=True)
                else:
                    self._visit(argument)
        else:
            for child in node.children:
                self._visit(child)

    def _visit_init_declarator(self, node):
        value = node.child_by_field_name('value')
        self._visit_declarator(node.child_by_field_name('declarator'), define=value is not None)
        if value is not None:
            self._visit(value)

    def _visit_declarator(self, declarator, define: bool):
        ident = declarator_identifier(declarator)
        if ident is None:
            self._visit(declarator)
            return
        if define:
            self._define(ident)
        self._visit_except(declarator, ident)

    def _visit_lvalue(self, left, also_use: bool):
        base, partial = left, False
        while base is not None:
            if base.type == 'parenthesized_expression' and base.named_child_count == 1:
                base = base.named_children[0]
            elif base.type in self.LVALUE_WRAPPERS:
                base, partial = base.child_by_field_name('argument'), True
            else:
                break

        if base is None or base.type != 'identifier':
            self._visit(left)
            return

        variable = self._define(base)
        if variable is not None and (also_use or partial):
            self._uses.add(variable)
        self._visit_except(left, base)

    def _visit_except(self, node, skipped):
        if node_key(node) == node_key(skipped) or node.type == 'parameter_list':
            return
        if node.type == 'identifier':
            self._use(node)
            return
        for child in node.children:
            self._visit_except(child, skipped)

    @staticmethod
    def _is_address_of(argument) -> bool:
        if argument.type != 'pointer_expression':
            return False
        operator = argument.child_by_field_name('operator')
        return operator is not None and text(operator) == '&'
