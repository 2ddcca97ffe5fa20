"""
# @Time    : 2026/10/19 9:05
# @Author  : Pedro
# @File    : __init__.py
# @Software: PyCharm
"""
from .exception import ConfigError, IdWorkerException
from .id_helper import IDHelper
