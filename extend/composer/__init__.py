"""扩展包管理编排

- options.py: 选项组装
- prober.py: 扩展服务器连通性探测
- manifest.py: 扩展清单初始化
- session.py: 委托包管理器会话
- actions.py: 各包管理操作
- formatter.py: 包信息格式化
- manager.py: 请求级编排入口
"""

from extend.composer.actions import default_actions
from extend.composer.manager import PackageManager
from extend.composer.options import build_options
from extend.composer.prober import REACHABLE_STATUSES, ConnectivityProber

__all__ = [
    "PackageManager",
    "ConnectivityProber",
    "REACHABLE_STATUSES",
    "build_options",
    "default_actions",
]
