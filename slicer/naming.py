#!/usr/bin/env python3
"""
变量名解析

前端可能给内部变量名加上消歧标记：版本前缀标记（如 `$x`）和唯一化后缀标记
（如 `x#2`）。NameNormalizer 负责把内部名还原为源代码中的基础名，所有
文本比较都通过它完成；标记字符可配置，以适配不同前端的命名方案。
"""

import logging
from dataclasses import dataclass
from typing import Set

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameNormalizer:
    """内部变量名的规范化策略"""
    prefix_marker: str = '$'
    suffix_marker: str = '#'

    def normalize(self, name: str) -> str:
        """去掉全部前缀标记字符，并在第一个后缀标记处截断"""
        if self.prefix_marker:
            name = name.replace(self.prefix_marker, '')
        if self.suffix_marker and self.suffix_marker in name:
            name = name[:name.index(self.suffix_marker)]
        return name

    def is_mangled(self, name: str) -> bool:
        """名字是否带有任一消歧标记"""
        return bool((self.prefix_marker and self.prefix_marker in name)
                    or (self.suffix_marker and self.suffix_marker in name))

    def matches(self, raw_name: str, external_name: str) -> bool:
        """内部名是否与外部（源代码）变量名等价"""
        if raw_name == external_name:
            return True
        return external_name in raw_name and self.normalize(raw_name) == external_name


DEFAULT_NORMALIZER = NameNormalizer()


def resolve_variables(facts, external_name: str,
                      normalizer: NameNormalizer = DEFAULT_NORMALIZER) -> Set:
    """
    把外部变量名解析为函数中声明的内部变量集合

    精确匹配直接入选；否则只有带消歧标记、且规范化后与外部名相等的变量才入选。
    返回空集表示变量名无效，由调用方决定如何报告。
    """
    resolved = set()
    for variable in facts.declared_variables():
        raw_name = variable.name
        if raw_name == external_name:
            resolved.add(variable)
        elif normalizer.is_mangled(raw_name) and normalizer.matches(raw_name, external_name):
            resolved.add(variable)

    logger.debug(f"Variable '{external_name}' resolved to {sorted(v.name for v in resolved)}")
    return resolved
