"""配置模块：集中管理进行生成器的可调参数。

沿用 ``os.getenv`` + ``.env`` 解析方案：日志等级、模板短路概率、重复和弦
拒绝概率、抽取次数上限以及可选的随机种子都可以在不修改代码的情况下调整。
概率类字段会被夹在 0-1 之间，抽取上限至少为 1，避免错误的环境变量让生成
器无限循环。"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


def _load_env_file() -> None:
    """读取根目录下的 .env 文件并合并到环境变量。"""

    env_path = Path(".env")
    if not env_path.exists():
        return
    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def _clamp_probability(value: float) -> float:
    """将概率限制在 [0, 1] 区间。"""

    return min(1.0, max(0.0, value))


def _optional_int(value: str) -> Optional[int]:
    """空字符串表示未设置。"""

    value = value.strip()
    return int(value) if value else None


@dataclass
class Settings:
    """生成器运行所需的全部配置，支持 .env 与环境变量覆盖。"""

    log_level: str = field(default="WARNING")
    template_probability: float = field(default=0.4)
    repeat_rejection: float = field(default=0.7)
    max_draw_attempts: int = field(default=1000)
    random_seed: Optional[int] = field(default=None)

    @classmethod
    def from_env(cls) -> "Settings":
        """根据环境变量构造配置实例。"""

        _load_env_file()
        return cls(
            log_level=os.getenv("LOG_LEVEL", "WARNING"),
            template_probability=_clamp_probability(
                float(os.getenv("TEMPLATE_PROBABILITY", "0.4"))
            ),
            repeat_rejection=_clamp_probability(
                float(os.getenv("REPEAT_REJECTION", "0.7"))
            ),
            max_draw_attempts=max(1, int(os.getenv("MAX_DRAW_ATTEMPTS", "1000"))),
            random_seed=_optional_int(os.getenv("RANDOM_SEED", "")),
        )


settings = Settings.from_env()
"""全局唯一的配置实例，供其它模块引用。"""

__all__ = ["Settings", "settings"]
