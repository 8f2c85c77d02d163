#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
builder.py

生成流程协调器，把组合枚举器和批量归档写入器串联起来，
提供一次完整生成运行的入口、进度统计和结果汇总。
"""

import time
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional

from .enumerator import CombinationEnumerator, total_records
from .archive_writer import (
    BatchArchiveWriter,
    ProgressSnapshot,
    DEFAULT_ARCHIVE_NAME,
    DEFAULT_MAX_ROWS_PER_FILE,
)
from .delivery import FileDelivery
from .exceptions import DomainGenError, InvalidInputError
from .validation import parse_suffixes, validate_length, validate_max_rows, validate_suffixes

# 配置日志
logger = logging.getLogger("builder")

__all__ = [
    "DomainArchiveBuilder",
    "generate_archive",
    "agenerate_archive",
    "parse_suffixes",
    "validate_length",
]


def generate_archive(length: int,
                     suffixes: Iterable[str],
                     max_rows_per_file: int = DEFAULT_MAX_ROWS_PER_FILE,
                     progress_callback: Optional[Callable[[ProgressSnapshot], Any]] = None,
                     delivery: Any = None,
                     archive_name: str = DEFAULT_ARCHIVE_NAME,
                     compression: str = "deflated") -> int:
    """
    生成全部域名组合并写入归档

    参数:
        length: 名称长度 (1-6)
        suffixes: 后缀列表
        max_rows_per_file: 每个 csv 条目的最大行数
        progress_callback: 进度回调
        delivery: 交付对象，默认写入当前目录
        archive_name: 归档文件名
        compression: 压缩方式

    返回:
        生成的记录总数
    """
    # 先完成所有校验，无效输入不会创建归档
    records = CombinationEnumerator().generate(length, suffixes)
    writer = BatchArchiveWriter(
        max_rows_per_file=max_rows_per_file,
        progress_callback=progress_callback,
        delivery=delivery if delivery is not None else FileDelivery("."),
        archive_name=archive_name,
        compression=compression,
    )
    return writer.write(records)


async def agenerate_archive(length: int,
                            suffixes: Iterable[str],
                            max_rows_per_file: int = DEFAULT_MAX_ROWS_PER_FILE,
                            progress_callback: Optional[Callable[[ProgressSnapshot], Any]] = None,
                            delivery: Any = None,
                            archive_name: str = DEFAULT_ARCHIVE_NAME,
                            compression: str = "deflated") -> int:
    """generate_archive 的异步版本，枚举器和写入器各自定期让出事件循环"""
    records = CombinationEnumerator().agenerate(length, suffixes)
    writer = BatchArchiveWriter(
        max_rows_per_file=max_rows_per_file,
        progress_callback=progress_callback,
        delivery=delivery if delivery is not None else FileDelivery("."),
        archive_name=archive_name,
        compression=compression,
    )
    return await writer.awrite(records)


class DomainArchiveBuilder:
    """生成运行协调器，根据配置字典执行一次完整生成并记录统计信息"""

    def __init__(self, config: Dict[str, Any], delivery: Any = None):
        """
        初始化生成器

        参数:
            config: 配置字典，包含所有必要设置
            delivery: 交付对象，默认按 output_dir 写入文件
        """
        self.length = validate_length(config.get("length", 3))
        self.suffixes = validate_suffixes(parse_suffixes(config.get("suffixes", [])))
        self.max_rows_per_file = validate_max_rows(config.get("max_rows_per_file", 50000))
        self.output_dir = config.get("output_dir", ".")
        self.archive_name = config.get("archive_name", DEFAULT_ARCHIVE_NAME)
        self.compression = config.get("compression", "deflated")

        self.delivery = delivery if delivery is not None else FileDelivery(self.output_dir)

        # 进度日志的时间间隔(秒)
        self.progress_interval = 5.0
        self._last_progress_time = 0.0

        self.total_generated = 0
        self._reset_stats()

    def run(self) -> bool:
        """
        运行生成任务

        返回:
            是否成功完成
        """
        expected = total_records(self.length, self.suffixes)
        logger.info(f"开始生成域名组合: 长度 {self.length}, 后缀 {', '.join(self.suffixes)}")
        logger.info(f"预计生成 {expected} 条记录，每个文件最多 {self.max_rows_per_file} 行")

        self._reset_stats()
        self.stats['expected'] = expected
        self.stats['start_time'] = time.time()
        self._last_progress_time = self.stats['start_time']

        try:
            self.total_generated = generate_archive(
                self.length,
                self.suffixes,
                max_rows_per_file=self.max_rows_per_file,
                progress_callback=self._on_progress,
                delivery=self.delivery,
                archive_name=self.archive_name,
                compression=self.compression,
            )
            self._finalize_run()
            return True

        except KeyboardInterrupt:
            logger.warning("用户中断生成 (Ctrl+C)，未生成归档")
            self._finalize_run(interrupted=True)
            return False
        except InvalidInputError as e:
            logger.error(f"输入无效: {e}")
            self._finalize_run(error=str(e))
            return False
        except DomainGenError as e:
            logger.error(f"生成过程中发生错误: {e}", exc_info=True)
            self._finalize_run(error=str(e))
            return False

    def _on_progress(self, snapshot: ProgressSnapshot) -> None:
        """进度回调：更新统计，按固定时间间隔记录进度"""
        self.stats['total_generated'] = snapshot.total_records
        self.stats['batches'] = snapshot.batches_finalized
        self.stats['progress'] = snapshot.progress

        current_time = time.time()
        if current_time - self._last_progress_time >= self.progress_interval:
            self._log_progress()
            self._last_progress_time = current_time

    def _log_progress(self) -> None:
        """记录当前生成进度到日志"""
        if self.stats['total_generated'] == 0:
            return

        elapsed = time.time() - self.stats['start_time']
        rate = self.stats['total_generated'] / elapsed if elapsed > 0 else 0

        logger.info(f"进度 {self.stats['progress']:.1f}% | 文件 {self.stats['batches']} | "
                    f"记录 {self.stats['total_generated']}/{self.stats['expected']} | "
                    f"速度 {rate:.0f} 条/秒")

    def _finalize_run(self, interrupted: bool = False, error: Optional[str] = None) -> None:
        """
        完成运行，记录汇总信息

        参数:
            interrupted: 是否被用户中断
            error: 错误信息(如有)
        """
        self.stats['end_time'] = time.time()
        duration = self.stats['end_time'] - self.stats['start_time']

        if interrupted:
            logger.warning("生成已中断")
            return
        if error:
            logger.error(f"生成失败: {error}")
            return

        rate = self.total_generated / duration if duration > 0 else 0
        end_time = datetime.fromtimestamp(self.stats['end_time']).strftime("%Y-%m-%d %H:%M:%S")

        logger.info("生成完成")
        logger.info(f"结束时间: {end_time}")
        logger.info(f"总记录数: {self.total_generated}")
        file_count = -(-self.total_generated // self.max_rows_per_file)
        logger.info(f"文件数量: {file_count}")
        logger.info(f"总耗时: {duration:.1f} 秒 ({rate:.0f} 条/秒)")

    def _reset_stats(self) -> None:
        """重置统计信息"""
        self.stats = {
            'expected': 0,
            'total_generated': 0,
            'batches': 0,
            'progress': 0.0,
            'start_time': None,
            'end_time': None,
        }
