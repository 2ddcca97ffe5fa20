"""
# @Time    : 2026/10/19 13:02
# @Author  : Pedro
# @File    : conftest.py
# @Software: PyCharm
"""
import random
import threading

import pytest
from loguru import logger

from idworker.config.settings_manager import clear_settings

START_MS = 1_700_000_000_000


class ManualClock:
    """
    手动控制的时钟
    - set() / advance() 修改当前毫秒值，并唤醒所有 sleep() 中的线程
    - sleep() 最多等待 seconds 秒，时钟被修改时提前返回
    - auto_advance_ms > 0 时，每次 sleep() 直接把时钟推进对应毫秒，不真实等待
    """

    def __init__(self, start_ms: int = 0, auto_advance_ms: int = 0):
        self._now = start_ms
        self._cond = threading.Condition()
        self.auto_advance_ms = auto_advance_ms
        self.sleep_calls = 0

    def now_ms(self) -> int:
        with self._cond:
            return self._now

    def set(self, value_ms: int):
        with self._cond:
            self._now = value_ms
            self._cond.notify_all()

    def advance(self, delta_ms: int = 1):
        with self._cond:
            self._now += delta_ms
            self._cond.notify_all()

    def sleep(self, seconds: float):
        with self._cond:
            self.sleep_calls += 1
            if self.auto_advance_ms:
                self._now += self.auto_advance_ms
                return
            self._cond.wait(timeout=seconds)


@pytest.fixture
def clock():
    return ManualClock(START_MS)


@pytest.fixture
def ticking_clock():
    """等待时自动前进 1ms 的时钟"""
    return ManualClock(START_MS, auto_advance_ms=1)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def log_messages():
    """收集 loguru 输出"""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """每个用例使用空配置目录，避免读取包内 dev.yaml"""
    monkeypatch.setenv("IDWORKER_CONFIG_DIR", str(tmp_path))
    monkeypatch.delenv("IDWORKER_ENV", raising=False)
    for key in ("IDWORKER_WORKER__NODE_ID", "IDWORKER_NODE_ID", "IDWORKER_APP__DEBUG"):
        monkeypatch.delenv(key, raising=False)
    clear_settings()
    yield tmp_path
    clear_settings()
