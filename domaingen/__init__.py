#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
domaingen

定长域名组合生成工具：枚举所有定长小写字母组合，拼接后缀，
按批次写入 zip 归档中的多个 csv 文件。
"""

__version__ = "0.3.0"

from .enumerator import (
    ALPHABET,
    CandidateRecord,
    CombinationEnumerator,
    index_to_name,
    name_to_index,
)
from .archive_writer import BatchArchiveWriter, ProgressSnapshot
from .builder import generate_archive, agenerate_archive, parse_suffixes
from .scorer import DomainEvaluator, DomainScore, score_domains
from .exceptions import (
    DomainGenError,
    InvalidInputError,
    GenerationFailure,
    AssemblyFailure,
)
