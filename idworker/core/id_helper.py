# -*- coding: utf-8 -*-
"""
# @Time    : 2026/10/19 10:05
# @Author  : Pedro
# @File    : id_helper.py
# @Software: PyCharm
"""
from datetime import datetime, timezone
from typing import Any, Optional

from idworker.util.generate_id import DEFAULT_LAYOUT, IdLayout, IdParts


class IDHelper:
    """
    🧩 ID 工具
    --------------------------------------------------------
    ✅ 支持 int / str 两种形式的 ID
    ✅ 拆解 ID：时间 / 序列 / 机器号 / 随机数
    ✅ 统一输出为 str，兼容 JSON（JS 只能安全表示 53 位整数）
    """

    @staticmethod
    def normalize(value: Any) -> int:
        """将输入转成 int"""
        if value is None:
            raise ValueError("ID 不能为空")
        if isinstance(value, bool):
            raise ValueError(f"无法识别的 ID 格式: {value!r}")
        if isinstance(value, int):
            result = value
        elif isinstance(value, str) and value.strip().isdigit():
            result = int(value.strip())
        else:
            raise ValueError(f"无法识别的 ID 格式: {value!r}")
        if result < 0 or result >> 64:
            raise ValueError(f"ID 超出 64 位无符号整数范围: {value!r}")
        return result

    @staticmethod
    def to_str(value: Any) -> str:
        return str(IDHelper.normalize(value))

    @staticmethod
    def parse(value: Any, layout: Optional[IdLayout] = None) -> IdParts:
        return (layout or DEFAULT_LAYOUT).decode(IDHelper.normalize(value))

    @staticmethod
    def node_of(value: Any, layout: Optional[IdLayout] = None) -> int:
        return IDHelper.parse(value, layout).node_id

    @staticmethod
    def to_datetime(value: Any, layout: Optional[IdLayout] = None) -> datetime:
        """
        ID 中编码的时间基数（UTC）
        注意：时间基数可能超前于真实签发时间
        """
        parts = IDHelper.parse(value, layout)
        return datetime.fromtimestamp(parts.timestamp / 1000, tz=timezone.utc)

    @staticmethod
    def min_id_at(ts_ms: int, layout: Optional[IdLayout] = None) -> int:
        """某毫秒时间基数下可能出现的最小 ID，可用于按时间范围查询"""
        layout = layout or DEFAULT_LAYOUT
        return layout.pack(ts_ms, 0, 0, 0)
