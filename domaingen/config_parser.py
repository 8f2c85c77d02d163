#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
config_parser.py

配置文件解析模块，负责读取和解析config.txt文件，
提供默认配置和配置验证功能。
"""

import os
import logging
from typing import Dict, Any

from .exceptions import InvalidInputError
from .validation import normalize_archive_name, parse_suffixes, validate_length, validate_max_rows

# 默认配置
DEFAULT_CONFIG = {
    "length": 3,
    "suffixes": ["com", "net", "org"],
    "max_rows_per_file": 50000,
    "output_dir": ".",
    "archive_name": "domains.zip",
    "compression": "deflated",  # stored, deflated
}

DEFAULT_CONFIG_TEXT = """# 域名组合生成器配置文件
# 修改配置后生效，不需要修改代码

# 域名主体长度 (1-6)
length = 3

# 后缀列表，多个后缀用逗号分隔
suffixes = com, net, org

# 每个csv文件的最大行数
max_rows_per_file = 50000

# 归档输出目录和文件名
output_dir = .
archive_name = domains.zip

# 压缩方式: stored, deflated
compression = deflated
"""


def default_config() -> Dict[str, Any]:
    """返回默认配置的副本"""
    config = DEFAULT_CONFIG.copy()
    config["suffixes"] = list(DEFAULT_CONFIG["suffixes"])
    return config


class ConfigParser:
    """配置解析器类，处理配置文件的读取和验证"""

    def __init__(self, config_path: str = "config.txt"):
        """
        初始化配置解析器

        参数:
            config_path: 配置文件路径
        """
        self.config_path = config_path
        self.logger = logging.getLogger("config")
        self.config = default_config()

    def parse_config(self) -> Dict[str, Any]:
        """
        解析配置文件

        返回:
            配置字典
        """
        if not os.path.exists(self.config_path):
            self.logger.warning(f"配置文件 {self.config_path} 不存在，将创建默认配置")
            self._create_default_config()
            return self.config

        try:
            self.logger.info(f"正在读取配置文件: {self.config_path}")
            with open(self.config_path, 'r', encoding='utf-8') as f:
                for line in f:
                    line = line.strip()
                    # 跳过空行和注释
                    if not line or line.startswith('#'):
                        continue

                    # 解析键值对
                    try:
                        key, value = [part.strip() for part in line.split('=', 1)]
                    except ValueError:
                        self.logger.warning(f"无法解析配置行: {line}")
                        continue
                    self._process_config_item(key, value)

            # 验证配置
            self._validate_config()
            return self.config

        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"读取配置文件时出错: {e}", exc_info=True)
            self.logger.warning("使用默认配置继续")
            return default_config()

    def _process_config_item(self, key: str, value: str) -> None:
        """
        处理单个配置项

        参数:
            key: 配置键
            value: 配置值字符串
        """
        if key == "length":
            try:
                self.config["length"] = validate_length(value)
            except InvalidInputError as e:
                self.logger.warning(f"{e}，使用默认值: {DEFAULT_CONFIG['length']}")

        elif key == "suffixes":
            self.config["suffixes"] = parse_suffixes(value)

        elif key == "max_rows_per_file":
            try:
                self.config["max_rows_per_file"] = validate_max_rows(value)
            except InvalidInputError as e:
                self.logger.warning(f"{e}，使用默认值: {DEFAULT_CONFIG['max_rows_per_file']}")

        elif key == "output_dir":
            self.config["output_dir"] = value or "."

        elif key == "archive_name":
            self.config["archive_name"] = normalize_archive_name(value, DEFAULT_CONFIG["archive_name"])

        elif key == "compression":
            if value in ["stored", "deflated"]:
                self.config["compression"] = value
            else:
                self.logger.warning(f"无效的compression值: {value}，使用默认值: {DEFAULT_CONFIG['compression']}")

        else:
            self.logger.warning(f"未知配置项: {key}")

    def _validate_config(self) -> None:
        """验证配置是否有效"""
        if not self.config.get("suffixes"):
            self.logger.warning("配置中未设置后缀，使用默认后缀")
            self.config["suffixes"] = list(DEFAULT_CONFIG["suffixes"])

    def _create_default_config(self) -> None:
        """创建默认配置文件"""
        try:
            with open(self.config_path, 'w', encoding='utf-8') as f:
                f.write(DEFAULT_CONFIG_TEXT)
            self.logger.info(f"已创建默认配置文件: {self.config_path}")
        except OSError as e:
            self.logger.error(f"创建默认配置文件失败: {e}")
