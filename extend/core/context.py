"""请求级上下文

每个管理请求构造一个 RequestContext，承载扩展目录可写、在线状态与诊断消息，
请求结束即丢弃，不在请求之间共享。
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class RequestContext:
    """扩展管理请求上下文"""

    writable: bool = False
    online: bool = False
    messages: list[str] = field(default_factory=list)

    @classmethod
    def for_directory(cls, extensions_dir: str | Path) -> RequestContext:
        """根据扩展目录是否存在且可写构造上下文"""
        p = Path(extensions_dir)
        return cls(writable=p.is_dir() and os.access(p, os.W_OK))

    def add_message(self, message: str) -> None:
        self.messages.append(message)
