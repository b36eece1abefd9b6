#!/usr/bin/env python3
"""
输出和文件保存工具
"""

import logging
from typing import Iterable, List, Optional

from .models import ENTRY_LABEL

logger = logging.getLogger(__name__)


def sorted_labels(lines: Iterable[str]) -> List[str]:
    """行号标签排序："entry" 在前，其余按数值升序"""
    return sorted(lines, key=lambda label: (-1, 0) if label == ENTRY_LABEL else (0, int(label)))


def write_slice_lines(lines: Optional[Iterable[str]], output_path: str) -> str:
    """
    保存切片结果：每个标签后跟一个制表符

    lines 为 None 或空集时写入空文件。
    """
    labels = sorted_labels(lines) if lines else []
    with open(output_path, 'w', encoding='utf-8') as f:
        for label in labels:
            f.write(label + "\t")
    logger.info(f"Wrote {len(labels)} slice lines to {output_path}")
    return output_path


def print_slice_result(code: str, slice_lines: Iterable[str]):
    """
    打印切片结果

    Args:
        code: 源代码
        slice_lines: 切片包含的行号标签
    """
    lines = code.split('\n')
    labels = sorted_labels(slice_lines)

    print(f"切片包含 {len(labels)} 行代码:")
    print("-" * 40)

    for label in labels:
        if label == ENTRY_LABEL:
            print(f"{ENTRY_LABEL:>6}: <函数入口>")
            continue
        line_num = int(label)
        if 1 <= line_num <= len(lines):
            print(f"行{line_num:3d}: {lines[line_num-1]}")
    print()
