# -*- coding: utf-8 -*-
"""
# @Time    : 2026/10/19 11:20
# @Author  : Pedro
# @File    : bench.py
# @Software: PyCharm

批量生成 ID 并统计耗时

    python -m idworker.cli.bench --node-id 5 --sequence 1 --count 620000 --quiet
"""
import argparse
import sys
import time

from loguru import logger

from idworker.core.exception import ConfigError
from idworker.core.logger import init_logger
from idworker.config.settings_manager import get_current_settings
from idworker.util.generate_id import IdGenerator, IdLayout


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="idworker-bench", description="Issue ids and time the run")
    parser.add_argument("--node-id", type=int, default=None, help="机器号，默认取配置 worker.node_id")
    parser.add_argument("--sequence", type=int, default=None, help="初始序列号，默认取配置 worker.initial_sequence")
    parser.add_argument("-n", "--count", type=int, default=10, help="生成数量")
    parser.add_argument("-q", "--quiet", action="store_true", help="不输出 ID，只输出耗时")
    parser.add_argument("--decode", action="store_true", help="同时输出拆解后的字段")
    return parser


def run(args, out=None) -> int:
    out = out or sys.stdout
    try:
        settings = get_current_settings()
        worker = settings.worker
        layout = IdLayout(
            epoch=worker.epoch,
            node_id_bits=worker.node_id_bits,
            sequence_bits=worker.sequence_bits,
            random_bits=worker.random_bits,
        )
        node_id = worker.node_id if args.node_id is None else args.node_id
        sequence = worker.initial_sequence if args.sequence is None else args.sequence
        generator = IdGenerator(node_id, sequence, layout=layout, poll_interval=worker.poll_interval)
    except ConfigError as e:
        logger.error(f"❌ {e.msg}")
        return 2

    start = time.perf_counter()
    for _ in range(args.count):
        new_id = generator.next_id()
        if args.quiet:
            continue
        if args.decode:
            parts = generator.decode(new_id)
            out.write(
                f"{new_id}\ttimestamp={parts.timestamp} sequence={parts.sequence} "
                f"node_id={parts.node_id} random={parts.random}\n"
            )
        else:
            out.write(f"{new_id}\n")

    time_use = (time.perf_counter() - start) * 1000
    out.write(f"time use: {time_use:.2f}ms ({args.count} ids, drift {generator.drift_ms()}ms)\n")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    init_logger()
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
