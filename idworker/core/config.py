# -*- coding: utf-8 -*-
"""
@Time    : 2026/10/19
@Author  : Pedro
@File    : config.py
@Software: PyCharm

idworker Config System
---------------------------------------------------
✅ 自动加载根目录 .env
✅ YAML 支持 ${ENV_VAR} 占位符解析
✅ 根据 IDWORKER_ENV 加载 dev.yaml / production.yaml
✅ 深度递归合并配置（环境变量 > YAML > 默认值）
✅ 线程安全单例
"""

import os
import re
import threading
from functools import lru_cache
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from idworker.core.exception import ConfigError
from idworker.util.generate_id import (
    DEFAULT_EPOCH,
    DEFAULT_NODE_ID_BITS,
    DEFAULT_RANDOM_BITS,
    DEFAULT_SEQUENCE_BITS,
)


# ======================================================
# 🔧 加载 .env 文件
# ======================================================
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))
ENV_PATH = os.path.join(BASE_DIR, ".env")
if os.path.exists(ENV_PATH):
    load_dotenv(ENV_PATH, override=False)

DEFAULT_CONFIG_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../config"))


# ======================================================
# 🧩 配置模型
# ======================================================
class AppConfig(BaseModel):
    name: str = "idworker"
    env: str = "dev"
    debug: bool = False


class WorkerConfig(BaseModel):
    node_id: int = 0
    initial_sequence: int = 0
    epoch: int = DEFAULT_EPOCH
    node_id_bits: int = DEFAULT_NODE_ID_BITS
    sequence_bits: int = DEFAULT_SEQUENCE_BITS
    random_bits: int = DEFAULT_RANDOM_BITS
    # 时钟回拨时的轮询间隔（秒）
    poll_interval: float = Field(default=0.001, gt=0)


class LogConfig(BaseModel):
    level: str = "INFO"
    file: Optional[str] = None
    rotation: str = "00:00"
    retention: str = "14 days"


# ======================================================
# 🧠 工具函数
# ======================================================
def deep_merge(base: dict, override: dict) -> dict:
    """递归合并字典"""
    result = base.copy()
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def substitute_env_vars(value: Any) -> Any:
    """解析 ${VAR} 变量，未设置的变量原样保留"""
    if isinstance(value, str):
        matches = re.findall(r"\$\{([^}^{]+)\}", value)
        for var in matches:
            env_val = os.getenv(var)
            if env_val:
                value = value.replace(f"${{{var}}}", env_val)
    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]
    return value


def load_yaml_config(env: str, config_dir: Optional[str] = None) -> Dict[str, Any]:
    """加载 YAML 配置文件并解析环境变量"""
    config_dir = config_dir or os.getenv("IDWORKER_CONFIG_DIR") or DEFAULT_CONFIG_DIR
    for ext in ("yaml", "yml"):
        file_path = os.path.join(config_dir, f"{env}.{ext}")
        if os.path.exists(file_path):
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            logger.debug(f"loaded config file: {file_path}")
            return substitute_env_vars(data)

    logger.debug(f"no config file for env '{env}' in {config_dir}, using defaults")
    return {}


# ======================================================
# 🌍 Settings 主配置类
# ======================================================
class Settings(BaseSettings):
    app: AppConfig = AppConfig()
    worker: WorkerConfig = WorkerConfig()
    log: LogConfig = LogConfig()

    model_config = SettingsConfigDict(
        env_prefix="IDWORKER_",
        env_nested_delimiter="__",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def __init__(self, **kwargs):
        try:
            super().__init__(**kwargs)
        except ValidationError as e:
            raise ConfigError(f"invalid settings: {e}", detail={"errors": e.errors()}) from e

        env = os.getenv("IDWORKER_ENV", self.app.env or "dev")
        yaml_data = load_yaml_config(env)

        # 显式设置的值（kwargs / 环境变量）优先于 YAML
        for field_name in type(self).model_fields:
            section = yaml_data.get(field_name)
            current_val = getattr(self, field_name)
            if section and isinstance(section, dict) and isinstance(current_val, BaseModel):
                merged = deep_merge(section, current_val.model_dump(exclude_unset=True))
                try:
                    setattr(self, field_name, type(current_val)(**merged))
                except ValidationError as e:
                    raise ConfigError(
                        f"invalid '{field_name}' section in {env} config: {e}",
                        detail={"errors": e.errors()},
                    ) from e

    def summary(self) -> str:
        """配置概要"""
        lines = [f"[{self.app.env}] {self.app.name}"]
        for name in type(self).model_fields:
            value = getattr(self, name)
            if isinstance(value, BaseModel):
                lines.append(f"{name}: {value.model_dump()}")
        return "\n".join(lines)


# ======================================================
# 🧷 单例实例
# ======================================================
_settings_instance: Optional[Settings] = None
_settings_lock = threading.Lock()


@lru_cache()
def get_settings() -> Settings:
    """加载配置（带缓存）"""
    s = Settings()
    logger.debug(s.summary())
    return s


def get_current_settings() -> Settings:
    """线程安全全局访问"""
    global _settings_instance
    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                _settings_instance = get_settings()
    return _settings_instance


def reset_settings():
    """清空缓存（测试 / 重新加载配置）"""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None
        get_settings.cache_clear()
