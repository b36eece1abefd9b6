#!/usr/bin/env python3
"""
Slicer包 - C/C++代码切片工具
"""

import logging
import sys

from .errors import SlicerError, UnknownVariableError, MalformedFactsError, SliceTruncatedError
from .models import EdgeKind, SliceCriterion, ENTRY_LABEL
from .naming import NameNormalizer, DEFAULT_NORMALIZER, resolve_variables
from .pdg import DependenceGraph, build_pdg
from .seeds import find_seeds, filter_by_variable
from .narrow import narrow
from .engine import backward_slice
from .projector import project
from .slicer_core import slice_statements, FunctionSlicer
from .config import SlicerConfig

# 版本信息
__version__ = "1.0.0"
__author__ = "Slicer Team"

# 公开的API
__all__ = [
    'SlicerError',
    'UnknownVariableError',
    'MalformedFactsError',
    'SliceTruncatedError',
    'EdgeKind',
    'SliceCriterion',
    'ENTRY_LABEL',
    'NameNormalizer',
    'DEFAULT_NORMALIZER',
    'resolve_variables',
    'DependenceGraph',
    'build_pdg',
    'find_seeds',
    'filter_by_variable',
    'narrow',
    'backward_slice',
    'project',
    'slice_statements',
    'FunctionSlicer',
    'SlicerConfig',
    'setup_logging',
]


def setup_logging(level=logging.INFO, format_string=None):
    """
    配置日志记录

    Args:
        level: 日志级别 (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR)
        format_string: 自定义日志格式字符串
    """
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    # 切片核心和分析前端使用同一级别
    for package in (__name__.split('.')[0], 'analysis'):
        logging.getLogger(package).setLevel(level)


# 包的简介
__doc__ = """
Slicer包提供了基于程序依赖图(PDG)的函数内后向切片：

主要功能：
- 由后支配边界推导控制依赖，由定义-使用链推导数据依赖
- 外部变量名与前端内部变量名（带 $ 前缀、# 后缀标记）的匹配
- 针对目标变量的一跳依赖收窄 + 不区分变量的后向闭包
- 结果投影为行号集合（没有行号的入口单元记为 "entry"）

使用示例：

from slicer import FunctionSlicer

code = '''
int main() {
    int x = 1;
    int y = x + 1;
    return y;
}
'''

slicer = FunctionSlicer("c")
slicer.analyze_function(code, "main")
print(slicer.slice_function("y", 5))
"""
