"""Gunicorn 生产配置

用法:
  gunicorn --config deploy/gunicorn.conf.py extend.web.app:app
"""

import os

# ---------- 网络 ----------
bind = os.getenv("GUNICORN_BIND", "127.0.0.1:8888")

# ---------- 并发 ----------
# 包安装会改写同一扩展目录，多个 worker 并发执行 composer 会互相踩踏
workers = int(os.getenv("GUNICORN_WORKERS", "1"))
worker_class = "sync"
# composer install / update 可能持续数分钟
timeout = int(os.getenv("GUNICORN_TIMEOUT", "900"))

# ---------- 日志 ----------
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")

# ---------- 进程管理 ----------
graceful_timeout = 30
keepalive = 5
