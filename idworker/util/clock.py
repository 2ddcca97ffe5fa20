# -*- coding: utf-8 -*-
"""
# @Time    : 2026/10/19 9:12
# @Author  : Pedro
# @File    : clock.py
# @Software: PyCharm

时间源抽象：生成器只通过 now_ms() / sleep() 访问时钟，
测试中可注入手动控制的时钟来模拟时钟回拨。
"""
import time


class SystemClock:
    """系统墙钟（毫秒）"""

    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000

    def sleep(self, seconds: float):
        time.sleep(seconds)


# 默认时钟
system_clock = SystemClock()
