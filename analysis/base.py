#!/usr/bin/env python3
"""
基础分析器模块

提供程序分析的基础类和接口
"""

import logging
from typing import List, Optional

import tree_sitter_c as tsc
import tree_sitter_cpp as tscpp
from tree_sitter import Language, Parser

from .utils import text

logger = logging.getLogger(__name__)


class FunctionNotFoundError(LookupError):
    """源代码中找不到指定的函数定义"""

    def __init__(self, function_name: str):
        super().__init__(f"Function '{function_name}' not found")
        self.function_name = function_name


_LANGUAGES = {
    'c': tsc.language,
    'cpp': tscpp.language,
}


class BaseAnalyzer:
    """基础分析器"""

    def __init__(self, language: str = "c"):
        """
        初始化分析器
        Args:
            language: 编程语言 ("c" 或 "cpp")
        """
        if language not in _LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")

        self.language = Language(_LANGUAGES[language]())
        self.parser = Parser(self.language)
        self.language_name = language

    def parse_code(self, code: str):
        """解析代码"""
        tree = self.parser.parse(bytes(code, 'utf-8'))
        if tree.root_node.has_error:
            logger.warning("Syntax errors detected, analysis continues on the partial tree")
        return tree.root_node

    def find_functions(self, root_node) -> List:
        """查找所有函数定义"""
        functions = []

        def traverse(node):
            if node.type == 'function_definition':
                functions.append(node)
            for child in node.children:
                traverse(child)

        traverse(root_node)
        return functions

    @staticmethod
    def function_name(function_node) -> Optional[str]:
        """获取函数定义节点的函数名"""
        declarator = function_node.child_by_field_name('declarator')
        while declarator is not None and declarator.type != 'function_declarator':
            declarator = declarator.child_by_field_name('declarator')
        if declarator is None:
            return None
        name_node = declarator.child_by_field_name('declarator')
        if name_node is None:
            return None
        # C++ 中可能是 qualified_identifier（如 Foo::bar），取最后一段
        name = text(name_node)
        return name.split('::')[-1]

    def find_function(self, code: str, function_name: str):
        """在源代码中查找指定名称的函数定义"""
        root = self.parse_code(code)
        for function_node in self.find_functions(root):
            if self.function_name(function_node) == function_name:
                return function_node
        raise FunctionNotFoundError(function_name)
