import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from chordear.config import settings


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """将生成参数恢复为默认值，避免环境变量影响统计类测试。"""

    monkeypatch.setattr(settings, "template_probability", 0.4, raising=False)
    monkeypatch.setattr(settings, "repeat_rejection", 0.7, raising=False)
    monkeypatch.setattr(settings, "max_draw_attempts", 1000, raising=False)
    yield
