# -*- coding: utf-8 -*-
"""
idworker exception system
-------------------------
✅ 统一异常基类（msg + error_code）
✅ ConfigError：唯一对外报告的错误类型，只在构造阶段抛出
"""
from typing import Optional

from pydantic import BaseModel


class IdWorkerExceptionModel(BaseModel):
    msg: str = "idworker error"
    error_code: int = 999
    detail: Optional[dict] = None


class IdWorkerException(Exception):
    def __init__(self, msg="idworker error", error_code=999, detail: Optional[dict] = None):
        super().__init__(msg)
        self.msg = msg
        self.error_code = error_code
        self.detail = detail

    def to_dict(self) -> dict:
        return IdWorkerExceptionModel(msg=self.msg, error_code=self.error_code, detail=self.detail).model_dump()

    def __str__(self):
        return self.msg


class ConfigError(IdWorkerException):
    """配置错误：node_id 越界、位宽不合法等"""

    def __init__(self, msg="配置错误", error_code=1002, detail: Optional[dict] = None):
        super().__init__(msg, error_code, detail)
