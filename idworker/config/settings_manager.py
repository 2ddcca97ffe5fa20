"""
idworker Settings Manager (Safe Lazy Import)
--------------------------------
✅ 支持全局单例访问
✅ 支持注入自定义 Settings（测试 / 嵌入式使用）
✅ 彻底避免 config ↔ generate_id 循环导入
"""

from typing import Optional

# 全局变量存储当前 Settings 实例
_settings_instance: Optional["Settings"] = None


def init_settings(settings: Optional["Settings"] = None) -> "Settings":
    """
    初始化 settings。
    - 传入 settings 时直接替换当前实例；
    - 否则若已存在实例，则复用。
    """
    global _settings_instance
    if settings is not None:
        _settings_instance = settings
    elif _settings_instance is None:
        # ✅ 延迟导入，防止循环
        from idworker.core.config import get_current_settings as _load
        _settings_instance = _load()
    return _settings_instance


def get_current_settings() -> "Settings":
    """从任意模块安全地获取当前 settings 实例。"""
    if _settings_instance is None:
        return init_settings()
    return _settings_instance


def clear_settings():
    global _settings_instance
    _settings_instance = None
    from idworker.core.config import reset_settings
    reset_settings()
