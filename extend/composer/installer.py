"""扩展安装助手

由包管理器在包安装 / 更新后的脚本钩子中调用（当前目录为扩展根目录）。
将每个已安装扩展包的 assets/ 目录同步到 Web 目录，使静态资源可被直接访问:

    <bolt-web-path>/<vendor>/<name>/...

Web 目录取自 composer.json 的 extra.bolt-web-path。
本文件会被原样复制到扩展根目录，因此只依赖标准库。
"""

from __future__ import annotations

import json
import logging
import shutil
import sys
from pathlib import Path

logger = logging.getLogger("extension_installer")

INSTALLER_FILENAME = "extension_installer.py"
EXTENSION_TYPE = "bolt-extension"


def _installed_packages(basedir: Path) -> list[dict]:
    path = basedir / "vendor" / "composer" / "installed.json"
    if not path.exists():
        return []
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("packages") or []
    return [p for p in data if isinstance(p, dict)]


def sync_assets(basedir: Path) -> list[str]:
    """同步扩展静态资源，返回已同步的包名"""
    manifest = json.loads((basedir / "composer.json").read_text(encoding="utf-8"))
    web_path = (manifest.get("extra") or {}).get("bolt-web-path")
    if not web_path:
        logger.warning("composer.json 未配置 extra.bolt-web-path，跳过")
        return []

    web_root = (basedir / web_path).resolve()
    synced = []
    for pkg in _installed_packages(basedir):
        if pkg.get("type") != EXTENSION_TYPE:
            continue
        name = pkg["name"]
        assets = basedir / "vendor" / name / "assets"
        if not assets.is_dir():
            continue
        dest = web_root / name
        shutil.copytree(assets, dest, dirs_exist_ok=True)
        logger.info("静态资源已同步: %s -> %s", name, dest)
        synced.append(name)
    return synced


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = sys.argv[1:] if argv is None else argv
    basedir = Path(args[0]) if args else Path.cwd()
    try:
        sync_assets(basedir)
    except (OSError, ValueError) as e:
        logger.error("同步扩展静态资源失败: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
