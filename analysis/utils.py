#!/usr/bin/env python3
"""
工具函数模块

提供程序分析所需的基础工具函数
"""

import re
from typing import Optional, Tuple


def text(node) -> str:
    """获取tree-sitter节点的文本内容"""
    return node.text.decode('utf-8')


def node_key(node) -> Tuple[int, int, str]:
    """tree-sitter节点的结构化标识（字节区间 + 类型）"""
    return (node.start_byte, node.end_byte, node.type)


def normalize_whitespace(code: str) -> str:
    """标准化代码中的空白字符"""
    return re.sub(r'\s+', ' ', code.strip())


def line_of(node) -> int:
    """tree-sitter节点所在的源代码行号（从1开始）"""
    return node.start_point[0] + 1


def declarator_identifier(declarator) -> Optional[object]:
    """
    沿声明器链找到被声明的标识符

    例如 `*p`、`a[10]`、`(*fp)(int)` 最终都落到一个 identifier 上
    """
    current = declarator
    while current is not None:
        if current.type == 'identifier':
            return current
        if current.type in ('pointer_declarator', 'array_declarator', 'init_declarator',
                            'function_declarator', 'reference_declarator'):
            inner = current.child_by_field_name('declarator')
            if inner is None:
                # reference_declarator 在 C++ 语法中没有 declarator 字段
                inner = next((c for c in current.named_children
                              if c.type.endswith('declarator') or c.type == 'identifier'), None)
            current = inner
        elif current.type == 'parenthesized_declarator':
            current = current.named_children[0] if current.named_children else None
        else:
            return None
    return None


def clean_code_text(code_text: str) -> str:
    """清理代码文本，移除末尾分号和多余空白"""
    code_text = normalize_whitespace(code_text)
    if code_text.endswith(';'):
        code_text = code_text[:-1].rstrip()
    return code_text
