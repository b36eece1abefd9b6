#!/usr/bin/env python3
"""
切片结果投影：单元 -> 行号标签
"""

from typing import Iterable, Set

from .models import ENTRY_LABEL


def project(slice_units: Iterable, query_line: int, facts) -> Set[str]:
    """
    目标行总是包含在结果中；没有行号的单元记为 "entry"
    """
    lines = {str(query_line)}
    for unit in slice_units:
        line = facts.source_line(unit)
        lines.add(ENTRY_LABEL if line is None else str(line))
    return lines
