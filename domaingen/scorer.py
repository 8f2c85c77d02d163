#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
scorer.py

域名评分模块，读取生成的 domains_part_<n>.csv 文件(zip 归档内或散落的文件)，
过滤掉难读的名称，按可读性打分并输出 best_domains.csv。
"""

import csv
import glob
import io
import os
import re
import logging
import zipfile
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .exceptions import InvalidInputError

# 配置日志
logger = logging.getLogger("scorer")

DEFAULT_OUTPUT_FILE = "best_domains.csv"
ENTRY_NAME_REGEX = re.compile(r'^domains_part_(\d+)\.csv$')

GOOD_WORDS = frozenset([
    "web", "vip", "dev", "box", "pix", "fun", "max", "zip", "top", "biz",
    "app", "tech", "lab", "hub", "pro", "net", "cloud", "smart", "digital",
    "code", "data", "ai", "io", "eco", "cyber", "meta", "crypto",
])
VOWELS = frozenset("aeiouy")


@dataclass(frozen=True)
class DomainScore:
    """一个域名及其得分"""

    domain: str
    score: int


class DomainEvaluator:
    """域名评估器：先用排除规则过滤，再按可读性规则计分"""

    def __init__(self):
        self.good_words = GOOD_WORDS
        self.vowels = VOWELS
        self.consonant_pattern = re.compile(r'[bcdfghjklmnpqrstvwxz]{3,}')
        self.bad_patterns = [
            re.compile(r'[bcdfghjklmnpqrstvwxz]{4,}'),  # 4个以上连续辅音
            re.compile(r'[^a-zA-Z]'),  # 非字母字符
            re.compile(r'.{16,}'),  # 超过15个字符
        ]

    def evaluate_domain(self, domain: str) -> Optional[DomainScore]:
        """
        评估一个域名

        参数:
            domain: 完整域名 (例如 web.com)，只对第一个点之前的部分评分

        返回:
            DomainScore，如果域名被排除规则过滤则返回 None
        """
        domain = domain.strip().lower()
        base_domain = domain.split('.')[0]
        if not base_domain:
            return None

        for pattern in self.bad_patterns:
            if pattern.search(base_domain):
                return None

        score = 0

        if base_domain in self.good_words:
            score += 30

        vowel_count = sum(1 for c in base_domain if c in self.vowels)
        score += vowel_count * 5

        if self.consonant_pattern.search(base_domain):
            score -= 15

        # 元音/辅音交替次数
        alternations = sum(
            1 for prev, cur in zip(base_domain, base_domain[1:])
            if (prev in self.vowels) != (cur in self.vowels)
        )
        score += alternations * 3

        # 短域名加分，每少一个字符 +5
        if len(base_domain) <= 6:
            score += (7 - len(base_domain)) * 5

        return DomainScore(domain, score)


def _entry_sort_key(name: str) -> int:
    match = ENTRY_NAME_REGEX.match(os.path.basename(name))
    return int(match.group(1)) if match else 0


def _iter_csv_column(text: str) -> Iterator[str]:
    for row in csv.reader(io.StringIO(text)):
        if row and row[0].strip():
            yield row[0]


def iter_domains(source: str) -> Iterator[str]:
    """
    从数据源读取域名

    参数:
        source: zip 归档、包含 domains_part_<n>.csv 的目录，或单个 csv 文件

    生成:
        每行第一列的域名
    """
    if not os.path.exists(source):
        logger.error(f"数据源不存在: {source}")
        raise FileNotFoundError(f"找不到域名数据源: {source}")

    if os.path.isdir(source):
        paths = [path for path in glob.glob(os.path.join(source, "domains_part_*.csv"))
                 if ENTRY_NAME_REGEX.match(os.path.basename(path))]
        if not paths:
            logger.warning(f"目录 {source} 中没有找到 domains_part_<n>.csv 文件")
        for path in sorted(paths, key=_entry_sort_key):
            logger.debug(f"读取文件: {path}")
            with open(path, 'r', encoding='utf-8') as f:
                yield from _iter_csv_column(f.read())

    elif zipfile.is_zipfile(source):
        with zipfile.ZipFile(source) as archive:
            names = [name for name in archive.namelist() if ENTRY_NAME_REGEX.match(name)]
            for name in sorted(names, key=_entry_sort_key):
                logger.debug(f"读取归档条目: {name}")
                yield from _iter_csv_column(archive.read(name).decode('utf-8'))

    elif source.lower().endswith('.zip'):
        raise InvalidInputError(f"无效的 zip 归档: {source}")

    else:
        with open(source, 'r', encoding='utf-8') as f:
            yield from _iter_csv_column(f.read())


def load_and_evaluate_domains(source: str, evaluator: Optional[DomainEvaluator] = None) -> List[DomainScore]:
    """读取并评估全部域名，按得分从高到低排序(同分保持读取顺序)"""
    evaluator = evaluator or DomainEvaluator()
    scores: List[DomainScore] = []
    total = 0

    for domain in iter_domains(source):
        total += 1
        result = evaluator.evaluate_domain(domain)
        if result is not None:
            scores.append(result)

    logger.info(f"共读取 {total} 个域名，保留 {len(scores)} 个，过滤 {total - len(scores)} 个")
    scores.sort(key=lambda item: item.score, reverse=True)
    return scores


def save_best_domains(scores: List[DomainScore], output_file: str = DEFAULT_OUTPUT_FILE) -> None:
    """把评分结果写入 csv 文件，表头为 domain,score"""
    with open(output_file, 'w', encoding='utf-8', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(["domain", "score"])
        for item in scores:
            writer.writerow([item.domain, item.score])
    logger.info(f"评分结果已保存到: {output_file}")


def score_domains(source: str, output_file: str = DEFAULT_OUTPUT_FILE) -> List[DomainScore]:
    """读取、评估并保存，返回排序后的结果"""
    scores = load_and_evaluate_domains(source)
    save_best_domains(scores, output_file)
    return scores
