# -*- coding: utf-8 -*-
"""
# @Time    : 2026/10/19 9:30
# @Author  : Pedro
# @File    : generate_id.py
# @Software: PyCharm
"""

import random
import threading
from typing import NamedTuple, Optional

from loguru import logger

from idworker.core.exception import ConfigError
from idworker.util.clock import system_clock

# 2020-03-31 08:44:28.888 UTC
DEFAULT_EPOCH = 1585644268888
DEFAULT_NODE_ID_BITS = 6
DEFAULT_SEQUENCE_BITS = 12
DEFAULT_RANDOM_BITS = 4

# 符号位不用，剩余 63 位分给 时间 / 序列 / 机器 / 随机
PAYLOAD_BITS = 63
UINT64_MASK = (1 << 64) - 1


class IdParts(NamedTuple):
    timestamp: int  # 绝对毫秒时间（已加回 epoch）
    sequence: int
    node_id: int
    random: int


class IdLayout:
    """
    64bit 结构（高位 → 低位）：
    1bit 符号位 + 41bit 时间基数 + 12bit 序列号 + 6bit 机器号 + 4bit 随机数
    位宽可调，但 时间 + 序列 + 机器 + 随机 必须等于 63
    """

    def __init__(
        self,
        epoch: int = DEFAULT_EPOCH,
        node_id_bits: int = DEFAULT_NODE_ID_BITS,
        sequence_bits: int = DEFAULT_SEQUENCE_BITS,
        random_bits: int = DEFAULT_RANDOM_BITS,
    ):
        widths = {"node_id_bits": node_id_bits, "sequence_bits": sequence_bits, "random_bits": random_bits}
        for name, bits in widths.items():
            if not isinstance(bits, int) or isinstance(bits, bool) or bits <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {bits!r}", detail={name: bits})

        time_bits = PAYLOAD_BITS - node_id_bits - sequence_bits - random_bits
        if time_bits <= 0:
            raise ConfigError(
                f"field widths leave no room for the time field ({node_id_bits}+{sequence_bits}+{random_bits} >= 63)",
                detail=widths,
            )

        self.epoch = epoch
        self.node_id_bits = node_id_bits
        self.sequence_bits = sequence_bits
        self.random_bits = random_bits
        self.time_bits = time_bits

        # 最大取值
        self.max_node_id = -1 ^ (-1 << node_id_bits)
        self.sequence_mask = -1 ^ (-1 << sequence_bits)
        self.random_bound = 1 << random_bits
        self.time_mask = -1 ^ (-1 << time_bits)

        # 位移偏移
        self.node_id_shift = random_bits
        self.sequence_shift = random_bits + node_id_bits
        self.timestamp_shift = sequence_bits + node_id_bits + random_bits

    def pack(self, timestamp: int, sequence: int, node_id: int, rand: int) -> int:
        value = (
            ((timestamp - self.epoch) << self.timestamp_shift)
            | (sequence << self.sequence_shift)
            | (node_id << self.node_id_shift)
            | rand
        )
        return value & UINT64_MASK

    def decode(self, value: int) -> IdParts:
        """pack() 的逆运算"""
        return IdParts(
            timestamp=((value >> self.timestamp_shift) & self.time_mask) + self.epoch,
            sequence=(value >> self.sequence_shift) & self.sequence_mask,
            node_id=(value >> self.node_id_shift) & self.max_node_id,
            random=value & (self.random_bound - 1),
        )

    def __eq__(self, other):
        if not isinstance(other, IdLayout):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __hash__(self):
        return hash(tuple(self.as_dict().values()))

    def as_dict(self) -> dict:
        return {
            "epoch": self.epoch,
            "time_bits": self.time_bits,
            "sequence_bits": self.sequence_bits,
            "node_id_bits": self.node_id_bits,
            "random_bits": self.random_bits,
        }

    def __repr__(self):
        return (
            f"IdLayout(epoch={self.epoch}, time={self.time_bits}, sequence={self.sequence_bits}, "
            f"node={self.node_id_bits}, random={self.random_bits})"
        )


DEFAULT_LAYOUT = IdLayout()


class IdGenerator:
    """
    🚀 分布式唯一 ID 生成器（时间基数 + 随机数，抗时钟回拨）
    ----------------------------------------------------------
    ✅ 初始化时的时间戳作为时间基数 base_timestamp
    ✅ 序列号溢出（4096 个）时时间基数 +1；下一次调用等待真实时钟超过新的时间基数
    ✅ 时钟回拨时阻塞等待，直到时钟追上时间基数，ID 不重复、不倒退
    ✅ 末尾随机位，降低 node_id 配置冲突时的碰撞概率（非安全用途）

    base_timestamp 只会递增，不会被校正到真实时间。
    """

    def __init__(
        self,
        node_id: int,
        initial_sequence: int = 0,
        *,
        layout: Optional[IdLayout] = None,
        clock=None,
        rng: Optional[random.Random] = None,
        poll_interval: float = 0.001,
    ):
        self._layout = layout or DEFAULT_LAYOUT
        if not isinstance(node_id, int) or isinstance(node_id, bool):
            raise ConfigError(f"node_id must be an integer, got {node_id!r}", detail={"node_id": node_id})
        if node_id < 0 or node_id > self._layout.max_node_id:
            raise ConfigError(
                f"node_id can't be greater than {self._layout.max_node_id} or less than 0",
                detail={"node_id": node_id, "max_node_id": self._layout.max_node_id},
            )
        if isinstance(poll_interval, bool) or not isinstance(poll_interval, (int, float)) or not poll_interval > 0:
            raise ConfigError(
                f"poll_interval must be a positive number, got {poll_interval!r}",
                detail={"poll_interval": poll_interval},
            )

        self._node_id = node_id
        self._sequence = initial_sequence
        self._clock = clock or system_clock
        self._rng = rng or random.Random()
        self._poll_interval = poll_interval
        self._base_timestamp = self._clock.now_ms()
        delta = self._base_timestamp - self._layout.epoch
        if delta < 0 or delta > self._layout.time_mask:
            # 时间差放不进 time_bits，编码会溢出
            raise ConfigError(
                f"current time is outside the {self._layout.time_bits}-bit time field of {self._layout!r}",
                detail={
                    "base_timestamp": self._base_timestamp,
                    "epoch": self._layout.epoch,
                    "time_bits": self._layout.time_bits,
                },
            )
        self._lock = threading.Lock()

        logger.debug(
            f"IdGenerator ready: node_id={node_id} base_timestamp={self._base_timestamp} {self._layout!r}"
        )

    @property
    def node_id(self) -> int:
        return self._node_id

    @property
    def layout(self) -> IdLayout:
        return self._layout

    @property
    def base_timestamp(self) -> int:
        with self._lock:
            return self._base_timestamp

    @property
    def sequence(self) -> int:
        with self._lock:
            return self._sequence

    def timestamp(self) -> int:
        """当前时钟读数（毫秒）"""
        return self._clock.now_ms()

    def drift_ms(self) -> int:
        """时间基数领先真实时钟的毫秒数"""
        with self._lock:
            return self._base_timestamp - self._clock.now_ms()

    def decode(self, value: int) -> IdParts:
        return self._layout.decode(value)

    def _wait_past_base(self, now: int) -> int:
        """时钟回拨：阻塞轮询，直到时钟读数 > base_timestamp"""
        base = self._base_timestamp
        logger.warning(
            f"clock is moving backwards ({base - now}ms behind). "
            f"Blocking id generation for node {self._node_id} until {base}."
        )
        started = now
        polls = 0
        while now <= base:
            self._clock.sleep(self._poll_interval)
            now = self._clock.now_ms()
            polls += 1
        logger.info(f"clock recovered past {base} after {polls} polls (clock advanced {now - started}ms)")
        return now

    def next_id(self) -> int:
        layout = self._layout
        with self._lock:
            now = self._clock.now_ms()

            if now < self._base_timestamp:
                self._wait_past_base(now)

            # 序列号只保留低 sequence_bits 位；回到 0 说明本时间基数已用完
            self._sequence = (self._sequence + 1) & layout.sequence_mask
            if self._sequence == 0:
                self._base_timestamp += 1

            rand = self._rng.randrange(layout.random_bound)

            return layout.pack(self._base_timestamp, self._sequence, self._node_id, rand)

    def __repr__(self):
        return f"IdGenerator(node_id={self._node_id}, layout={self._layout!r})"


def new_generator(node_id: int, initial_sequence: int = 0, **kwargs) -> IdGenerator:
    """构造生成器；node_id 越界时抛 ConfigError"""
    return IdGenerator(node_id, initial_sequence, **kwargs)


def create_generator(settings=None, *, clock=None, rng: Optional[random.Random] = None) -> IdGenerator:
    """
    按配置构造生成器（依赖注入入口，不提供全局单例）
    settings 为空时使用 get_current_settings()
    """
    if settings is None:
        from idworker.config.settings_manager import get_current_settings
        settings = get_current_settings()

    worker = settings.worker
    layout = IdLayout(
        epoch=worker.epoch,
        node_id_bits=worker.node_id_bits,
        sequence_bits=worker.sequence_bits,
        random_bits=worker.random_bits,
    )
    return IdGenerator(
        worker.node_id,
        worker.initial_sequence,
        layout=layout,
        clock=clock,
        rng=rng,
        poll_interval=worker.poll_interval,
    )
