#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
delivery.py

归档交付模块，负责把最终生成的 zip 字节交给外部：
写入磁盘文件，或保存在内存中供调用方读取。
"""

import os
import logging
import tempfile
from typing import Optional

# 配置日志
logger = logging.getLogger("delivery")


class FileDelivery:
    """把归档写入指定目录。先写临时文件再原子替换，失败时不会留下半个文件"""

    def __init__(self, output_dir: str = "."):
        """
        初始化文件交付器

        参数:
            output_dir: 归档输出目录
        """
        self.output_dir = output_dir
        self.last_path: Optional[str] = None

    def deliver(self, data: bytes, archive_name: str) -> str:
        """
        写入归档文件

        参数:
            data: zip 字节内容
            archive_name: 归档文件名

        返回:
            写入的文件路径
        """
        if not os.path.exists(self.output_dir):
            logger.info(f"创建输出目录: {self.output_dir}")
            os.makedirs(self.output_dir)

        target_path = os.path.join(self.output_dir, archive_name)
        fd, tmp_path = tempfile.mkstemp(prefix=".domaingen-", suffix=".tmp", dir=self.output_dir)

        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.replace(tmp_path, target_path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        self.last_path = target_path
        logger.info(f"归档已保存到: {target_path} ({len(data)} 字节)")
        return target_path


class MemoryDelivery:
    """把归档保存在内存中"""

    def __init__(self):
        self.data: Optional[bytes] = None
        self.archive_name: Optional[str] = None
        self.deliveries = 0

    def deliver(self, data: bytes, archive_name: str) -> str:
        self.data = data
        self.archive_name = archive_name
        self.deliveries += 1
        logger.debug(f"归档已保存在内存中: {archive_name} ({len(data)} 字节)")
        return archive_name
