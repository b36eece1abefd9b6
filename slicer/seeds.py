#!/usr/bin/env python3
"""
切片种子：目标行上引用了目标变量的语句
"""

import logging
from typing import Set

from .naming import DEFAULT_NORMALIZER, NameNormalizer

logger = logging.getLogger(__name__)


def find_seeds(facts, line_number: int) -> Set:
    """目标行上的全部语句单元（没有行号的单元不参与）"""
    seeds = set()
    for unit in facts.units():
        line = facts.source_line(unit)
        if line is not None and line == line_number:
            seeds.add(unit)
    logger.debug(f"Line {line_number}: {len(seeds)} statements")
    return seeds


def filter_by_variable(facts, seeds: Set, external_name: str,
                       normalizer: NameNormalizer = DEFAULT_NORMALIZER) -> Set:
    """保留使用出现中含有目标变量的语句"""
    selected = set()
    for unit in seeds:
        for raw_name, _ in facts.use_occurrences(unit):
            if normalizer.matches(raw_name, external_name):
                selected.add(unit)
                break
    logger.debug(f"{len(selected)} of {len(seeds)} statements use '{external_name}'")
    return selected
