"""错误码与异常定义模块，统一和弦引擎对调用方暴露的失败类型。

错误码采用 ``E_`` 前缀加大写下划线格式。引擎内部可恢复的情况（例如和弦池
中某个级数在当前调内无法解析）不会抛出异常，只有结构性配置错误与编程契约
违规才会传播给调用方。
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ChordEarError(Exception):
    """chordear 自定义异常基类，包含错误码与详情字典。"""

    code: str = "E_INTERNAL"
    default_message: str = "internal error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """初始化异常并保存详情，方便日志与 CLI 输出使用。"""

        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """转换为标准字典结构，便于直接序列化。"""

        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(ChordEarError):
    """调用参数校验失败，例如作答数量与进行长度不一致。"""

    code = "E_VALIDATION"
    default_message = "validation failed"


class ConfigError(ChordEarError):
    """关卡或风格配置不合法，例如和弦池在当前调内全部无法解析。"""

    code = "E_CONFIG"
    default_message = "configuration error"


class InvalidNoteError(ChordEarError, ValueError):
    """音符记号无法解析（音级 + 八度），属于上游数据错误。"""

    code = "E_NOTE"
    default_message = "malformed note token"


class InvalidKeyError(ChordEarError, ValueError):
    """主音不在十二个半音音级之内。"""

    code = "E_KEY"
    default_message = "unknown tonic"


class UnknownStyleError(ChordEarError, ValueError):
    """未知的风格标签，属于编程错误，必须立即失败而不是回退默认风格。"""

    code = "E_STYLE"
    default_message = "unknown level type"


class UnknownSongError(ChordEarError, LookupError):
    """真实歌曲目录中不存在的歌曲编号。"""

    code = "E_SONG"
    default_message = "unknown song"


def error_response(exc: ChordEarError) -> Dict[str, Any]:
    """根据异常构造统一错误结构，CLI 的 JSON 输出沿用同一格式。"""

    return {
        "ok": False,
        "error": exc.to_dict(),
    }


__all__ = [
    "ChordEarError",
    "ValidationError",
    "ConfigError",
    "InvalidNoteError",
    "InvalidKeyError",
    "UnknownStyleError",
    "UnknownSongError",
    "error_response",
]
