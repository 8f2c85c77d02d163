#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
cli.py

命令行接口模块，负责解析命令行参数、合并配置文件，
并调用生成器执行域名组合生成任务。
"""

import sys
import argparse
import os
import logging
import zipfile
from datetime import datetime
from typing import Dict, Any, List, Optional

import daemon
import lockfile
from wcwidth import wcswidth

from . import __version__
from .builder import DomainArchiveBuilder
from .config_parser import ConfigParser
from .exceptions import InvalidInputError
from .scorer import DEFAULT_OUTPUT_FILE as DEFAULT_SCORE_OUTPUT, score_domains
from .validation import normalize_archive_name, parse_suffixes

# 程序版本和描述
PROGRAM_NAME = "Domain Forge"
VERSION = __version__
DESCRIPTION = "定长域名组合批量生成工具"

logger = logging.getLogger("cli")


class ChineseArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        # 简化错误消息的中文替换
        message = message.replace("the following arguments are required:", "缺少以下必需参数:")
        message = message.replace("unrecognized arguments", "无法识别的参数")
        message = message.replace("invalid int value", "无效的整数值")
        self.exit(2, f"错误: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    """创建命令行参数解析器"""
    parser = ChineseArgumentParser(
        description=f"{PROGRAM_NAME} v{VERSION} - {DESCRIPTION}",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument("-l", "--length", type=int,
                        help="域名主体长度 (1-6)，覆盖配置文件")
    parser.add_argument("-s", "--suffixes", type=str,
                        help="逗号分隔的后缀列表 (例如: com,net,org)，覆盖配置文件")
    parser.add_argument("-m", "--max-rows", type=int,
                        help="每个csv文件的最大行数，覆盖配置文件")
    parser.add_argument("-o", "--output-dir", type=str,
                        help="归档输出目录，覆盖配置文件")
    parser.add_argument("-n", "--archive-name", type=str,
                        help="归档文件名，覆盖配置文件")
    parser.add_argument("-c", "--config", type=str, default="config.txt",
                        help="配置文件路径")
    parser.add_argument("--score", type=str, metavar="SOURCE",
                        help="对已生成的域名评分 (zip归档、目录或csv文件)，不执行生成")
    parser.add_argument("--score-output", type=str, default=DEFAULT_SCORE_OUTPUT,
                        help="评分结果输出文件")
    parser.add_argument("--top", type=int, default=10,
                        help="评分后显示的最佳域名数量")
    parser.add_argument("-d", "--daemon", action="store_true",
                        help="以守护进程模式在后台运行")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="详细输出模式")
    parser.add_argument("--version", action="version",
                        version=f"{PROGRAM_NAME} v{VERSION}")

    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    解析命令行参数

    返回:
        解析后的参数对象
    """
    return build_parser().parse_args(argv)


def print_banner() -> None:
    """打印程序横幅"""
    program_text = f"{PROGRAM_NAME}  v{VERSION}"
    desc_text = f"{DESCRIPTION}"

    # 框内视觉宽度 (不包括左右的 '│')
    inner_width = 41
    left_padding_str = "   "
    left_padding_width = 3

    # wcswidth 把中文字符计为宽度2
    program_text_width = wcswidth(program_text)
    desc_text_width = wcswidth(desc_text)

    # 包含控制字符时 wcswidth 返回 -1
    if program_text_width < 0:
        program_text_width = len(program_text)
    if desc_text_width < 0:
        desc_text_width = len(desc_text)

    program_padding = " " * max(0, inner_width - left_padding_width - program_text_width)
    desc_padding = " " * max(0, inner_width - left_padding_width - desc_text_width)

    banner = f"""
    ┌─────────────────────────────────────────┐
    │                                         │
    │{left_padding_str}{program_text}{program_padding}│
    │{left_padding_str}{desc_text}{desc_padding}│
    │                                         │
    └─────────────────────────────────────────┘
    """
    print(banner)


def setup_logging(verbose: bool = False, log_file: str = "log.txt") -> None:
    """
    设置日志记录

    参数:
        verbose: 是否启用详细日志
        log_file: 日志文件路径
    """
    # 清除现有的日志处理器
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    log_level = logging.DEBUG if verbose else logging.INFO

    file_handler = logging.FileHandler(filename=log_file, mode="w", encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))

    logging.root.setLevel(log_level)
    logging.root.addHandler(file_handler)
    logging.root.addHandler(console_handler)

    logging.info(f"{PROGRAM_NAME} v{VERSION} 启动")
    logging.info(f"日志级别: {'DEBUG' if verbose else 'INFO'}")


def merge_arguments(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """
    用命令行参数覆盖配置文件中的值

    参数:
        config: 配置文件解析结果
        args: 解析后的参数对象

    返回:
        合并后的配置字典
    """
    merged = dict(config)
    if args.length is not None:
        merged["length"] = args.length
    if args.suffixes is not None:
        merged["suffixes"] = parse_suffixes(args.suffixes)
    if args.max_rows is not None:
        merged["max_rows_per_file"] = args.max_rows
    if args.output_dir is not None:
        merged["output_dir"] = args.output_dir
    if args.archive_name is not None:
        merged["archive_name"] = normalize_archive_name(args.archive_name)
    return merged


def print_config_summary(builder: DomainArchiveBuilder) -> None:
    """打印配置摘要"""
    print("\n=== 生成配置 ===")
    print(f"域名长度: {builder.length}")
    print(f"后缀列表: {', '.join(builder.suffixes)}")
    print(f"每个文件最大行数: {builder.max_rows_per_file}")
    print(f"输出文件: {os.path.join(builder.output_dir, builder.archive_name)}")
    print("===============\n")


def run_builder(builder: DomainArchiveBuilder) -> int:
    """
    运行生成器

    返回:
        退出代码 (0表示成功，非0表示错误)
    """
    try:
        success = builder.run()
        return 0 if success else 1
    except KeyboardInterrupt:
        logging.warning("程序被用户中断 (Ctrl+C)")
        return 1


def run_scorer(source: str, output_file: str, top: int = 10) -> int:
    """
    对已生成的域名评分并打印最佳结果

    参数:
        source: zip归档、目录或csv文件
        output_file: 评分结果文件
        top: 打印的最佳域名数量

    返回:
        退出代码 (0表示成功，1表示失败，2表示数据源无效)
    """
    try:
        logging.info(f"正在加载并评估域名: {source}")
        scores = score_domains(source, output_file)
    except (FileNotFoundError, InvalidInputError) as e:
        logger.error(f"数据源无效: {e}")
        print(f"错误: {e}")
        return 2
    except (OSError, UnicodeDecodeError, zipfile.BadZipFile) as e:
        logger.error(f"评分过程中出现错误: {e}", exc_info=True)
        print(f"评分失败: {e}")
        return 1

    print(f"\n前 {min(top, len(scores))} 个最佳域名:")
    for i, item in enumerate(scores[:top], start=1):
        print(f"{i}. {item.domain} (得分: {item.score})")

    print(f"\n共评估域名: {len(scores)}")
    print(f"完整结果已保存到: {output_file}")
    return 0


def daemon_run(builder: DomainArchiveBuilder) -> int:
    """
    以守护进程模式运行生成器

    返回:
        退出代码
    """
    if not os.path.exists("pid"):
        os.makedirs("pid")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    pid_file = f"pid/domaingen_{timestamp}.pid"

    print(f"将在后台运行生成任务...")
    print(f"PID文件: {pid_file}")
    print(f"日志文件: log.txt")
    print("您可以关闭此终端，生成将继续在后台执行")

    context = daemon.DaemonContext(
        working_directory=os.getcwd(),
        umask=0o002,
        pidfile=lockfile.FileLock(pid_file),
        detach_process=True
    )

    with context:
        # 守护进程模式总是使用详细日志
        setup_logging(verbose=True)
        logging.info(f"守护进程已启动，PID文件: {pid_file}")
        return run_builder(builder)


def main(argv: Optional[List[str]] = None) -> int:
    """
    主程序入口点

    返回:
        退出代码 (0表示成功，1表示生成失败，2表示参数无效)
    """
    print_banner()

    args = parse_arguments(argv)
    setup_logging(verbose=args.verbose)

    if args.score:
        return run_scorer(args.score, args.score_output, args.top)

    try:
        config = ConfigParser(args.config).parse_config()
        config = merge_arguments(config, args)
        builder = DomainArchiveBuilder(config)
    except InvalidInputError as e:
        logger.error(f"参数无效: {e}")
        print(f"错误: {e}")
        return 2

    print_config_summary(builder)

    if args.daemon:
        return daemon_run(builder)
    return run_builder(builder)


if __name__ == "__main__":
    sys.exit(main())
