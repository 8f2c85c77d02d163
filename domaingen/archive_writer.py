#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
archive_writer.py

批量归档写入器：消费枚举器产生的记录，按固定大小分批，
每批作为一个 csv 条目写入内存中的 zip 归档，最后一次性交付。
"""

import io
import asyncio
import logging
import zipfile
from dataclasses import dataclass
from typing import Any, AsyncIterable, Callable, Iterable, List, Optional, Tuple

from .delivery import MemoryDelivery
from .exceptions import AssemblyFailure, DomainGenError, GenerationFailure, InvalidInputError
from .validation import validate_max_rows

# 配置日志
logger = logging.getLogger("archive_writer")

ENTRY_NAME_TEMPLATE = "domains_part_{}.csv"
DEFAULT_MAX_ROWS_PER_FILE = 500
DEFAULT_ARCHIVE_NAME = "domains.zip"
DEFAULT_YIELD_INTERVAL = 1000

COMPRESSION_METHODS = {
    "stored": zipfile.ZIP_STORED,
    "deflated": zipfile.ZIP_DEFLATED,
}


@dataclass(frozen=True)
class ProgressSnapshot:
    """每条记录之后传给进度回调的快照"""

    progress: float
    batches_finalized: int
    total_records: int


class BatchArchiveWriter:
    """批量归档写入器，单次调用内独占批次缓冲区和计数器"""

    def __init__(self,
                 max_rows_per_file: int = DEFAULT_MAX_ROWS_PER_FILE,
                 progress_callback: Optional[Callable[[ProgressSnapshot], Any]] = None,
                 delivery: Any = None,
                 archive_name: str = DEFAULT_ARCHIVE_NAME,
                 compression: str = "deflated",
                 yield_interval: int = DEFAULT_YIELD_INTERVAL):
        """
        初始化写入器

        参数:
            max_rows_per_file: 每个 csv 条目的最大行数
            progress_callback: 进度回调，每条记录同步调用一次
            delivery: 交付对象，需提供 deliver(data, archive_name) 方法
            archive_name: 归档文件名
            compression: 压缩方式 (stored, deflated)
            yield_interval: 异步写入时每处理多少条记录让出一次事件循环
        """
        if compression not in COMPRESSION_METHODS:
            raise InvalidInputError(f"不支持的压缩方式: {compression}")
        if yield_interval < 1:
            raise InvalidInputError(f"yield_interval 必须为正整数，当前值: {yield_interval}")

        self.max_rows_per_file = validate_max_rows(max_rows_per_file)
        self.progress_callback = progress_callback
        self.delivery = delivery if delivery is not None else MemoryDelivery()
        self.archive_name = archive_name
        self.yield_interval = yield_interval

        self.total_records = 0
        self._batch_counter = 1
        self._current_batch: List[str] = []
        self._entries: List[Tuple[str, int]] = []
        self._finalized = False

        self._buffer = io.BytesIO()
        self._zip = zipfile.ZipFile(self._buffer, mode="w", compression=COMPRESSION_METHODS[compression])

    @property
    def entry_names(self) -> List[str]:
        """已写入归档的条目名称"""
        return [name for name, _ in self._entries]

    @property
    def batch_sizes(self) -> List[int]:
        """已写入归档的每个条目的行数"""
        return [size for _, size in self._entries]

    @property
    def batch_counter(self) -> int:
        """当前正在填充的批次编号(从1开始)"""
        return self._batch_counter

    def add(self, record: Any) -> None:
        """
        处理一条记录：格式化、加入当前批次、回调进度，批次满时立即写入归档

        参数:
            record: 带有 name, suffix, progress 属性的记录
        """
        if self._finalized:
            raise GenerationFailure("归档已完成，不能继续写入记录")

        try:
            line = f"{record.name}.{record.suffix}"
            progress = record.progress
        except AttributeError as e:
            raise GenerationFailure(f"无法格式化记录 {record!r}: {e}")

        self._current_batch.append(line)
        self.total_records += 1

        if self.progress_callback:
            try:
                self.progress_callback(ProgressSnapshot(progress, self._batch_counter, self.total_records))
            except Exception as e:
                logger.error(f"进度回调出错: {e}", exc_info=True)
                raise GenerationFailure(f"进度回调失败: {e}")

        if len(self._current_batch) == self.max_rows_per_file:
            self._flush_batch()
            self._batch_counter += 1

    def write(self, records: Iterable[Any]) -> int:
        """
        同步消费全部记录并完成归档

        参数:
            records: 记录迭代器

        返回:
            记录总数
        """
        try:
            for record in records:
                self.add(record)
        except DomainGenError:
            self._discard()
            raise
        except Exception as e:
            self._discard()
            logger.error(f"写入记录时出错: {e}", exc_info=True)
            raise GenerationFailure(f"生成失败: {e}")
        except BaseException:
            # KeyboardInterrupt、任务取消等
            self._discard()
            raise

        self.finalize()
        return self.total_records

    async def awrite(self, records: AsyncIterable[Any]) -> int:
        """
        异步消费全部记录并完成归档，每处理 yield_interval 条记录让出一次事件循环

        参数:
            records: 异步记录迭代器

        返回:
            记录总数
        """
        try:
            async for record in records:
                self.add(record)
                if self.total_records % self.yield_interval == 0:
                    await asyncio.sleep(0)
        except DomainGenError:
            self._discard()
            raise
        except Exception as e:
            self._discard()
            logger.error(f"写入记录时出错: {e}", exc_info=True)
            raise GenerationFailure(f"生成失败: {e}")
        except BaseException:
            # KeyboardInterrupt、任务取消等
            self._discard()
            raise

        self.finalize()
        return self.total_records

    def finalize(self) -> bytes:
        """
        写入最后一个未满的批次(若非空)，关闭归档并交付，整个调用只执行一次

        返回:
            归档字节内容
        """
        if self._finalized:
            raise AssemblyFailure("归档已经完成交付，不能重复完成")
        self._finalized = True

        if self._current_batch:
            self._flush_batch()

        try:
            self._zip.close()
            data = self._buffer.getvalue()
        except Exception as e:
            logger.error(f"生成归档时出错: {e}", exc_info=True)
            raise AssemblyFailure(f"无法生成归档: {e}")
        finally:
            self._buffer.close()

        try:
            self.delivery.deliver(data, self.archive_name)
        except Exception as e:
            logger.error(f"交付归档时出错: {e}", exc_info=True)
            raise AssemblyFailure(f"无法交付归档 {self.archive_name}: {e}")

        logger.info(f"归档完成: {self.archive_name}, 共 {len(self._entries)} 个文件, "
                    f"{self.total_records} 条记录")
        return data

    def _flush_batch(self) -> None:
        """把当前批次写入归档并清空"""
        entry_name = ENTRY_NAME_TEMPLATE.format(self._batch_counter)
        try:
            self._zip.writestr(entry_name, "\n".join(self._current_batch))
        except Exception as e:
            self._discard()
            logger.error(f"写入归档条目 {entry_name} 时出错: {e}", exc_info=True)
            raise AssemblyFailure(f"无法写入归档条目 {entry_name}: {e}")

        self._entries.append((entry_name, len(self._current_batch)))
        logger.debug(f"已写入 {entry_name} ({len(self._current_batch)} 行)")
        self._current_batch = []

    def _discard(self) -> None:
        """丢弃未完成的归档，不交付任何内容"""
        self._finalized = True
        self._current_batch = []
        try:
            self._zip.close()
        except Exception as e:
            logger.debug(f"关闭未完成的归档时出错: {e}")
        self._buffer.close()
