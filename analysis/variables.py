#!/usr/bin/env python3
"""
变量作用域模块

为函数中的参数和局部变量建立内部变量标识。同一函数里同名变量被再次声明时
（内层作用域遮蔽、并列代码块中的重名声明），内部名追加后缀标记和计数器，
例如 `x`、`x#1`、`x#2`。未在函数内声明的标识符（全局变量、宏、函数名）
不属于局部变量，不会被绑定。
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .utils import declarator_identifier, line_of, node_key, text


@dataclass(frozen=True)
class Variable:
    """函数内的一个局部变量或参数"""
    name: str                   # 内部名，可能带后缀标记
    source_name: str            # 源代码中的标识符
    line: Optional[int] = None  # 声明所在行
    is_parameter: bool = False

    def __str__(self) -> str:
        return self.name


class VariableTable:
    """函数级变量表：声明 -> Variable，标识符出现 -> Variable"""

    SCOPED_NODES = ('compound_statement', 'for_statement', 'for_range_loop', 'catch_clause')

    def __init__(self, suffix_marker: str = '#'):
        self.suffix_marker = suffix_marker
        self.variables: List[Variable] = []
        self.parameters: List[Variable] = []
        self._bindings: Dict[tuple, Variable] = {}
        self._counters: Dict[str, int] = {}
        self._scopes: List[Dict[str, Variable]] = []

    def build(self, function_node) -> 'VariableTable':
        """遍历函数定义，建立全部绑定"""
        self._scopes = [{}]
        declarator = function_node.child_by_field_name('declarator')
        while declarator is not None and declarator.type != 'function_declarator':
            declarator = declarator.child_by_field_name('declarator')
        if declarator is not None:
            parameters = declarator.child_by_field_name('parameters')
            if parameters is not None:
                for parameter in parameters.named_children:
                    if parameter.type not in ('parameter_declaration', 'optional_parameter_declaration'):
                        continue
                    ident = declarator_identifier(parameter.child_by_field_name('declarator'))
                    if ident is not None:
                        self.parameters.append(self._declare(ident, is_parameter=True))

        body = function_node.child_by_field_name('body')
        if body is not None:
            self._walk(body)
        self._scopes = []
        return self

    def lookup(self, identifier_node) -> Optional[Variable]:
        """返回标识符出现处绑定的变量，不是局部变量时返回None"""
        return self._bindings.get(node_key(identifier_node))

    def _declare(self, ident, is_parameter: bool = False) -> Variable:
        source_name = text(ident)
        count = self._counters.get(source_name, 0)
        self._counters[source_name] = count + 1
        name = source_name if count == 0 else f"{source_name}{self.suffix_marker}{count}"

        variable = Variable(name, source_name, line_of(ident), is_parameter)
        self.variables.append(variable)
        self._scopes[-1][source_name] = variable
        self._bindings[node_key(ident)] = variable
        return variable

    def _resolve(self, ident):
        name = text(ident)
        for scope in reversed(self._scopes):
            if name in scope:
                self._bindings[node_key(ident)] = scope[name]
                return

    def _walk(self, node):
        if node.type in self.SCOPED_NODES:
            self._scopes.append({})
            if node.type == 'for_range_loop':
                self._walk_range_loop(node)
            else:
                for child in node.children:
                    self._walk(child)
            self._scopes.pop()
        elif node.type == 'declaration':
            self._walk_declaration(node)
        elif node.type == 'identifier':
            self._resolve(node)
        else:
            for child in node.children:
                self._walk(child)

    def _walk_declaration(self, node):
        for declarator in node.children_by_field_name('declarator'):
            if declarator.type == 'function_declarator':
                # 函数体内的函数原型声明
                continue
            if declarator.type == 'init_declarator':
                target = declarator.child_by_field_name('declarator')
                value = declarator.child_by_field_name('value')
            else:
                target, value = declarator, None

            ident = declarator_identifier(target)
            if ident is None:
                self._walk(declarator)
                continue
            self._declare(ident)
            self._walk_except(target, ident)
            if value is not None:
                self._walk(value)

    def _walk_range_loop(self, node):
        right = node.child_by_field_name('right')
        if right is not None:
            self._walk(right)
        target = node.child_by_field_name('declarator')
        ident = declarator_identifier(target) if target is not None else None
        if ident is not None:
            self._declare(ident)
        body = node.child_by_field_name('body')
        if body is not None:
            self._walk(body)

    def _walk_except(self, node, skipped):
        """遍历声明器中除被声明标识符之外的部分（数组长度等）"""
        if node_key(node) == node_key(skipped) or node.type == 'parameter_list':
            return
        if node.type == 'identifier':
            self._resolve(node)
            return
        for child in node.children:
            self._walk_except(child, skipped)
