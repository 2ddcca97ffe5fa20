# -*- coding: utf-8 -*-
"""
idworker 启动文件
--------------------------------
入口职责：
✅ 加载配置 + 日志
✅ 按参数批量生成 ID 并输出耗时（同 idworker-bench）
"""

import sys

from idworker.cli.bench import main

if __name__ == "__main__":
    sys.exit(main())
