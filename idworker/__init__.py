# -*- coding: utf-8 -*-
"""
idworker: 进程内 64 位有序唯一 ID 生成器
--------------------------------------------
✅ 时间基数 + 序列号 + 机器号 + 随机数
✅ 时钟回拨阻塞等待，不报错、不重复
✅ 线程安全
"""
from .core.exception import ConfigError, IdWorkerException
from .util.clock import SystemClock
from .util.generate_id import IdGenerator, IdLayout, IdParts, create_generator, new_generator

__version__ = "0.1.0"
