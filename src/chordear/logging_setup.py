"""日志初始化模块：统一 CLI 与库调用方的日志格式与等级。

库本身只通过 ``logging.getLogger(__name__)`` 输出；是否安装处理器由入口
（CLI 或宿主应用）决定，因此重复调用 :func:`setup_logging` 不会叠加处理器。"""

from __future__ import annotations

import logging
from typing import Final, Optional

from .config import settings

_LOG_FORMAT: Final[str] = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"


def setup_logging(level: Optional[int] = None) -> None:
    """配置根日志记录器，避免重复添加处理器。

    未显式传入 ``level`` 时使用配置中的 ``LOG_LEVEL``。
    """

    if level is None:
        level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)


__all__ = ["setup_logging"]
