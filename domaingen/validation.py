#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
validation.py

输入参数的解析与校验：域名长度、后缀列表、每个文件的最大行数。
所有校验都在枚举开始之前完成，失败时抛出 InvalidInputError。
"""

from typing import Iterable, List, Union

from .exceptions import InvalidInputError


# 支持的域名主体长度范围
MIN_LENGTH = 1
MAX_LENGTH = 6


def validate_length(value: Union[int, str]) -> int:
    """
    校验并返回域名长度

    参数:
        value: 整数或可以解析为整数的字符串

    返回:
        位于 [MIN_LENGTH, MAX_LENGTH] 范围内的长度
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"无效的长度: {value!r}")

    try:
        length = int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"无效的长度: {value!r}，应为 {MIN_LENGTH} 到 {MAX_LENGTH} 之间的整数")

    if isinstance(value, float) and value != length:
        raise InvalidInputError(f"无效的长度: {value!r}，应为整数")

    if length < MIN_LENGTH or length > MAX_LENGTH:
        raise InvalidInputError(f"长度 {length} 超出范围，应在 {MIN_LENGTH} 到 {MAX_LENGTH} 之间")

    return length


def parse_suffixes(raw: Union[str, Iterable[str]]) -> List[str]:
    """
    解析后缀列表：按逗号拆分(如果是字符串)、去除首尾空白、丢弃空项。
    保留原始顺序，不去重。

    参数:
        raw: 逗号分隔的字符串或字符串序列

    返回:
        非空后缀列表(可能为空列表，由 validate_suffixes 负责拒绝)
    """
    if raw is None:
        return []

    items = raw.split(',') if isinstance(raw, str) else list(raw)
    suffixes = [str(item).strip() for item in items]
    return [suffix for suffix in suffixes if suffix]


def validate_suffixes(suffixes: Iterable[str]) -> List[str]:
    """校验后缀列表非空且每一项都是非空字符串"""
    if suffixes is None or isinstance(suffixes, str):
        raise InvalidInputError("后缀必须以列表形式提供")

    result = list(suffixes)
    if not result:
        raise InvalidInputError("至少需要提供一个后缀")

    for suffix in result:
        if not isinstance(suffix, str) or not suffix:
            raise InvalidInputError(f"无效的后缀: {suffix!r}")

    return result


def validate_max_rows(value: Union[int, str]) -> int:
    """校验每个文件的最大行数，必须是正整数"""
    if isinstance(value, bool):
        raise InvalidInputError(f"无效的最大行数: {value!r}")

    try:
        max_rows = int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"无效的最大行数: {value!r}")

    if max_rows < 1:
        raise InvalidInputError(f"每个文件的最大行数必须为正整数，当前值: {max_rows}")

    return max_rows


def normalize_archive_name(value: str, default: str = "domains.zip") -> str:
    """确保归档文件名以.zip结尾，空值使用默认文件名"""
    value = (value or "").strip()
    if not value:
        return default
    if not value.lower().endswith('.zip'):
        value = f"{value}.zip"
    return value
