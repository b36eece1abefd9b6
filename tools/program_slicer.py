#!/usr/bin/env python3
"""
程序切片工具
对C/C++函数中某一行的某个变量进行后向切片，把切片行号写入输出文件

退出码：0 成功（包括落空的查询），1 输入错误，2 变量名无效，3 超出步数预算
"""

import argparse
import logging
import os
import sys

# 添加父目录到路径，以便导入slicer包
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from analysis import FunctionFacts, FunctionNotFoundError
from slicer import setup_logging
from slicer.config import LANGUAGES, LOG_LEVELS, SlicerConfig
from slicer.errors import MalformedFactsError, SliceTruncatedError, UnknownVariableError
from slicer.output_utils import print_slice_result, write_slice_lines
from slicer.pdg import build_pdg
from slicer.slicer_core import slice_statements
from slicer.visualization import pdg_dot_edges, visualize_pdg

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_UNKNOWN_VARIABLE = 2
EXIT_TRUNCATED = 3


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="C/C++ 函数后向程序切片工具")
    parser.add_argument("file", help="源代码文件路径")
    parser.add_argument("output", help="切片结果输出文件")
    parser.add_argument("line", type=int, help="目标行号")
    parser.add_argument("variable", help="目标变量名")
    parser.add_argument("--function", help="函数名（默认 main）")
    parser.add_argument("--language", choices=LANGUAGES, help="语言类型（默认 c）")
    parser.add_argument("--config", help="JSON配置文件，命令行参数优先")
    parser.add_argument("--dot", help="把PDG保存为 .dot 文件（不含扩展名的路径）")
    parser.add_argument("--print-pdg", action="store_true", help="把PDG的行级边打印到标准输出")
    parser.add_argument("--step-budget", type=int, help="后向闭包的最大步数")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="日志级别")
    parser.add_argument("--show", action="store_true", help="同时打印切片包含的代码行")
    return parser


def load_config(args) -> SlicerConfig:
    config = SlicerConfig.from_file(args.config) if args.config else SlicerConfig()
    return config.merged(language=args.language, function=args.function,
                         step_budget=args.step_budget, log_level=args.log_level)


def main(argv=None) -> int:
    """主函数"""
    args = build_arg_parser().parse_args(argv)

    try:
        config = load_config(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"错误：{e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    setup_logging(config.logging_level())

    try:
        with open(args.file, 'r', encoding='utf-8') as f:
            code = f.read()
    except OSError as e:
        logger.error(f"Cannot read source file '{args.file}': {e}")
        return EXIT_INPUT_ERROR

    try:
        facts = FunctionFacts.from_code(code, config.function, config.language, config.suffix_marker)
    except FunctionNotFoundError as e:
        logger.error(str(e))
        return EXIT_INPUT_ERROR

    if args.dot:
        visualize_pdg(build_pdg(facts), facts, args.dot, pdf=False)
    if args.print_pdg:
        for edge in sorted(pdg_dot_edges(build_pdg(facts), facts)):
            print(edge)

    try:
        lines = slice_statements(facts, args.line, args.variable,
                                 config.normalizer(), config.step_budget)
    except UnknownVariableError as e:
        logger.error(f"Wrong variable name: {e}")
        return EXIT_UNKNOWN_VARIABLE
    except SliceTruncatedError as e:
        logger.error(str(e))
        return EXIT_TRUNCATED
    except MalformedFactsError as e:
        logger.error(f"Front-end produced inconsistent facts: {e}")
        return EXIT_INPUT_ERROR

    write_slice_lines(lines, args.output)
    if args.show:
        print_slice_result(code, lines)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
