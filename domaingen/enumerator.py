#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
enumerator.py

组合枚举器模块：把 [0, 26^L) 中的整数索引确定性地映射为长度为 L 的字母串，
并惰性地产生所有 (名称 × 后缀) 记录，每条记录附带全局完成百分比。

枚举顺序固定：名称按索引递增(即字典序)变化最慢，后缀按给定顺序变化最快。
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Iterable, Iterator, List, Sequence

from .exceptions import GenerationFailure, InvalidInputError
from .validation import validate_length, validate_suffixes

# 配置日志
logger = logging.getLogger("enumerator")

# 固定字母表，作为 26 进制的数字符号
ALPHABET = "abcdefghijklmnopqrstuvwxyz"
ALPHABET_SIZE = len(ALPHABET)

# 异步枚举时每处理多少个外层索引让出一次事件循环
DEFAULT_YIELD_INTERVAL = 1000


@dataclass(frozen=True)
class CandidateRecord:
    """一条候选记录：名称、后缀以及产生该记录后的完成百分比"""

    index: int
    name: str
    suffix: str
    progress: float

    @property
    def domain(self) -> str:
        return f"{self.name}.{self.suffix}"

    def __str__(self) -> str:
        return self.domain


def index_to_name(index: int, length: int) -> str:
    """
    把整数索引转换为定长名称(以字母表为数字符号的 26 进制编码)

    每一轮取 index % 26 选出一个字母并放在最前面，再把 index 整除 26，
    共进行 length 轮。最高位最后产生、放在最前。

    参数:
        index: 位于 [0, 26^length) 的索引
        length: 名称长度

    返回:
        长度为 length 的小写字母串
    """
    if length < 1:
        raise InvalidInputError(f"名称长度必须为正整数，当前值: {length}")
    if index < 0 or index >= ALPHABET_SIZE ** length:
        raise InvalidInputError(f"索引 {index} 超出范围 [0, {ALPHABET_SIZE ** length})")

    chars: List[str] = []
    for _ in range(length):
        index, digit = divmod(index, ALPHABET_SIZE)
        chars.append(ALPHABET[digit])
    chars.reverse()
    return "".join(chars)


def name_to_index(name: str) -> int:
    """index_to_name 的逆运算：把名称按 26 进制解码回索引"""
    if not name:
        raise InvalidInputError("名称不能为空")

    index = 0
    for char in name:
        digit = ALPHABET.find(char)
        if digit < 0:
            raise InvalidInputError(f"名称 '{name}' 包含字母表之外的字符: '{char}'")
        index = index * ALPHABET_SIZE + digit
    return index


def combination_count(length: int) -> int:
    """组合空间大小 26^length"""
    return ALPHABET_SIZE ** length


def total_records(length: int, suffixes: Sequence[str]) -> int:
    """一次运行会产生的记录总数"""
    return combination_count(length) * len(suffixes)


class CombinationEnumerator:
    """组合枚举器，产生单次遍历、按需拉取的记录序列"""

    def __init__(self, yield_interval: int = DEFAULT_YIELD_INTERVAL):
        """
        初始化枚举器

        参数:
            yield_interval: 异步枚举时让出事件循环的外层索引间隔
        """
        if yield_interval < 1:
            raise InvalidInputError(f"yield_interval 必须为正整数，当前值: {yield_interval}")
        self.yield_interval = yield_interval

    def generate(self, length: int, suffixes: Iterable[str]) -> Iterator[CandidateRecord]:
        """
        同步枚举所有记录

        参数在返回生成器之前就完成校验，因此无效输入会在调用时立即报错，
        不会产生任何记录。

        参数:
            length: 名称长度
            suffixes: 后缀序列(非空)

        返回:
            CandidateRecord 迭代器
        """
        length = validate_length(length)
        suffix_list = tuple(validate_suffixes(suffixes))
        logger.debug(f"开始枚举: 长度 {length}, 后缀 {', '.join(suffix_list)}, "
                     f"共 {total_records(length, suffix_list)} 条记录")
        return self._iter_records(length, suffix_list)

    def agenerate(self, length: int, suffixes: Iterable[str]) -> AsyncIterator[CandidateRecord]:
        """
        异步枚举所有记录，输出与 generate 完全相同

        每完成一个外层索引(且索引是 yield_interval 的整数倍)后
        通过 asyncio.sleep(0) 让出事件循环。
        """
        length = validate_length(length)
        suffix_list = tuple(validate_suffixes(suffixes))
        return self._aiter_records(length, suffix_list)

    def _iter_records(self, length: int, suffixes: Sequence[str]) -> Iterator[CandidateRecord]:
        total = total_records(length, suffixes)
        emitted = 0

        try:
            for index in range(combination_count(length)):
                name = index_to_name(index, length)
                for suffix in suffixes:
                    emitted += 1
                    yield CandidateRecord(index, name, suffix, emitted / total * 100)
        except GeneratorExit:
            logger.debug(f"枚举被提前终止，已产生 {emitted}/{total} 条记录")
            raise
        except Exception as e:
            logger.error(f"枚举记录时出错: {e}", exc_info=True)
            raise GenerationFailure(f"枚举失败: {e}")

    async def _aiter_records(self, length: int, suffixes: Sequence[str]) -> AsyncIterator[CandidateRecord]:
        records = self._iter_records(length, suffixes)
        last_index = None

        try:
            for record in records:
                if last_index is not None and record.index != last_index:
                    # 上一个外层索引的内层循环已经完成
                    if last_index % self.yield_interval == 0:
                        await asyncio.sleep(0)
                last_index = record.index
                yield record
        finally:
            records.close()
