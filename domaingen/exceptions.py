#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
exceptions.py

生成流程中使用的异常类型。三种错误对当前调用都是终止性的，不做自动重试。
"""


class DomainGenError(Exception):
    """所有生成错误的基类"""

    def __init__(self, message):
        super().__init__(message)


class InvalidInputError(DomainGenError, ValueError):
    """输入参数无效(长度越界、后缀列表为空等)，在枚举开始前抛出"""


class GenerationFailure(DomainGenError):
    """枚举或格式化记录时发生的错误"""


class AssemblyFailure(DomainGenError):
    """序列化或交付最终归档时发生的错误"""
