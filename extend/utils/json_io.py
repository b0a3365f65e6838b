"""JSON 文件读写工具

包管理器清单（composer.json）与已安装仓库文件（installed.json）均为 JSON，
写入格式与包管理器自身保持一致: 4 空格缩进、不转义斜杠和 Unicode。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from extend.utils.yaml_io import atomic_write

logger = logging.getLogger(__name__)


def load_json(path: str | Path) -> Any:
    """读取 JSON 文件，文件不存在返回 None

    异常:
        json.JSONDecodeError: JSON 格式错误
        OSError: IO 错误
    """
    p = Path(path)
    if not p.exists():
        return None
    with open(p, encoding="utf-8") as f:
        return json.load(f)


def dump_json(data: Any) -> str:
    return json.dumps(data, indent=4, ensure_ascii=False) + "\n"


def save_json(path: str | Path, data: Any) -> None:
    """原子写入 JSON 文件（自动创建父目录）"""
    p = Path(path)
    try:
        atomic_write(p, dump_json(data))
    except OSError as e:
        logger.error("写入文件失败: %s, 错误: %s", path, e)
        raise
