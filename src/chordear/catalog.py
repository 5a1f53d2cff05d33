"""关卡与风格目录：每个难度关卡的调式、和弦池以及风格化模板。

风格分派采用 ``LevelType -> StyleConfig`` 的封闭映射，模块导入时校验映射
覆盖全部风格标签；新增风格时若忘记登记配置会在导入阶段直接失败。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigError, UnknownStyleError, ValidationError

logger = logging.getLogger(__name__)


class LevelType(str, Enum):
    """风格标签（和声模式），与前端关卡类型保持同名。"""

    MAJOR = "MAJOR"
    MINOR = "MINOR"
    MIXOLYDIAN = "MIXOLYDIAN"
    MODAL_INTERCHANGE = "MODAL_INTERCHANGE"
    SECONDARY_DOMINANT = "SECONDARY_DOMINANT"
    MINOR_PLAGAL = "MINOR_PLAGAL"
    CHROMATIC = "CHROMATIC"
    TRITONE_SUB = "TRITONE_SUB"
    DORIAN = "DORIAN"
    OUDOU = "OUDOU"
    CITY_POP = "CITY_POP"


@dataclass(frozen=True)
class StyleConfig:
    """单个风格的生成参数。

    Attributes:
        minor: 是否使用小调调图（Dorian 与自然小调共享）。
        key_label: 调名模板，``{tonic}`` 会被替换为主音。
        tonic_symbol: 随机生成时第一个和弦使用的主和弦级数。
        pool: 关卡未单独声明时使用的默认和弦池。
        templates: 人工整理的四和弦模板，按固定概率整体采用。
    """

    minor: bool
    key_label: str
    tonic_symbol: str
    pool: Tuple[str, ...]
    templates: Tuple[Tuple[str, ...], ...] = field(default=())

    def label_for(self, tonic: str) -> str:
        """生成展示用调名，例如 ``"C Major (Jazz)"``。"""

        return self.key_label.format(tonic=tonic)


CITY_POP_TEMPLATES: Tuple[Tuple[str, ...], ...] = (
    ("IVM7", "III7", "vi7", "v7"),  # Just the Two of Us
    ("IVM7", "IV/V", "IM7", "v7"),  # Ride on Time
    ("IVM7", "III7", "vi7", "IV/V"),
    ("IM7", "v7", "IVM7", "IV/V"),  # 转调前的准备
)

_STYLES: Dict[LevelType, StyleConfig] = {
    LevelType.MAJOR: StyleConfig(
        minor=False,
        key_label="{tonic} Major",
        tonic_symbol="I",
        pool=("I", "ii", "iii", "IV", "V", "vi"),
    ),
    LevelType.MINOR: StyleConfig(
        minor=True,
        key_label="{tonic} Minor",
        tonic_symbol="i",
        pool=("i", "III", "iv", "v", "VI", "VII"),
    ),
    LevelType.MIXOLYDIAN: StyleConfig(
        minor=False,
        key_label="{tonic} Mixolydian",
        tonic_symbol="I",
        pool=("I", "IV", "V", "bVII", "vi"),
    ),
    LevelType.MODAL_INTERCHANGE: StyleConfig(
        minor=False,
        key_label="{tonic} Major (Borrowed)",
        tonic_symbol="I",
        pool=("I", "IV", "V", "bIII", "bVI", "bVII"),
    ),
    LevelType.SECONDARY_DOMINANT: StyleConfig(
        minor=False,
        key_label="{tonic} Major (Sec. Dom)",
        tonic_symbol="I",
        pool=("I", "IV", "V", "II7", "III7", "VI7"),
    ),
    LevelType.MINOR_PLAGAL: StyleConfig(
        minor=False,
        key_label="{tonic} Major (Minor iv)",
        tonic_symbol="I",
        pool=("I", "IV", "iv", "V", "vi"),
    ),
    LevelType.CHROMATIC: StyleConfig(
        minor=False,
        key_label="{tonic} Major (Chromatic)",
        tonic_symbol="I",
        pool=("I", "V", "vi", "I+", "I7"),
    ),
    LevelType.TRITONE_SUB: StyleConfig(
        minor=False,
        key_label="{tonic} Major (Jazz)",
        tonic_symbol="IM7",
        pool=("IM7", "ii7", "V7", "bII7", "vi7"),
    ),
    LevelType.DORIAN: StyleConfig(
        minor=True,
        key_label="{tonic} Dorian (Coltrane)",
        tonic_symbol="i",
        pool=("i", "IV", "ii", "bVII", "III"),
    ),
    LevelType.OUDOU: StyleConfig(
        minor=False,
        key_label="{tonic} Major (Royal Road)",
        tonic_symbol="IVM7",
        pool=("IVM7", "V7", "iii7", "vi7", "IM7"),
    ),
    LevelType.CITY_POP: StyleConfig(
        minor=False,
        key_label="{tonic} Major (Tatsuro)",
        tonic_symbol="IVM7",
        pool=("IM7", "IVM7", "III7", "vi7", "v7", "IV/V"),
        templates=CITY_POP_TEMPLATES,
    ),
}

_missing = [level_type.value for level_type in LevelType if level_type not in _STYLES]
if _missing:
    raise ConfigError("风格配置缺失", details={"missing": _missing})


def coerce_level_type(mode: Union[LevelType, str]) -> LevelType:
    """将字符串风格标签转换为 :class:`LevelType`，未知标签立即失败。"""

    if isinstance(mode, LevelType):
        return mode
    try:
        return LevelType(str(mode).upper())
    except ValueError:
        raise UnknownStyleError(
            f"unknown level type: {mode!r}", details={"mode": str(mode)}
        ) from None


def style_for(mode: Union[LevelType, str]) -> StyleConfig:
    """返回风格配置；映射在导入时已校验为穷尽。"""

    return _STYLES[coerce_level_type(mode)]


class LevelConfig(BaseModel):
    """单个难度关卡：编号、风格标签与可选和弦。"""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Level number shown in the level selector")
    type: LevelType
    available_chords: Tuple[str, ...] = Field(
        ..., description="Roman-numeral symbols offered as answers"
    )

    @field_validator("available_chords")
    @classmethod
    def _check_pool(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        """和弦池不能为空。"""

        if not value:
            raise ValidationError("available_chords 至少需要一个和弦")
        return value


LEVELS: Tuple[LevelConfig, ...] = (
    LevelConfig(id=1, type=LevelType.MAJOR, available_chords=("I", "ii", "iii", "IV", "V", "vi")),
    LevelConfig(id=2, type=LevelType.MINOR, available_chords=("i", "III", "iv", "v", "VI", "VII")),
    # 进阶大调：加入属七
    LevelConfig(id=3, type=LevelType.MAJOR, available_chords=("I", "IV", "V", "V7", "vi")),
    LevelConfig(id=4, type=LevelType.MIXOLYDIAN, available_chords=("I", "IV", "V", "bVII", "vi")),
    LevelConfig(
        id=5,
        type=LevelType.MODAL_INTERCHANGE,
        available_chords=("I", "IV", "V", "bIII", "bVI", "bVII"),
    ),
    LevelConfig(
        id=6,
        type=LevelType.SECONDARY_DOMINANT,
        available_chords=("I", "IV", "V", "II7", "III7", "VI7"),
    ),
    LevelConfig(id=7, type=LevelType.MINOR_PLAGAL, available_chords=("I", "IV", "iv", "V", "vi")),
    LevelConfig(id=8, type=LevelType.CHROMATIC, available_chords=("I", "V", "vi", "I+", "I7")),
    LevelConfig(id=9, type=LevelType.TRITONE_SUB, available_chords=("IM7", "ii7", "V7", "bII7", "vi7")),
    LevelConfig(id=10, type=LevelType.DORIAN, available_chords=("i", "IV", "ii", "bVII", "III")),
    LevelConfig(id=11, type=LevelType.OUDOU, available_chords=("IVM7", "V7", "iii7", "vi7", "IM7")),
    LevelConfig(
        id=12,
        type=LevelType.CITY_POP,
        available_chords=("IM7", "IVM7", "III7", "vi7", "v7", "IV/V"),
    ),
)

_LEVELS_BY_ID: Dict[int, LevelConfig] = {level.id: level for level in LEVELS}


def get_level(level_id: int) -> Optional[LevelConfig]:
    """按编号查找关卡，不存在时返回 ``None``。"""

    return _LEVELS_BY_ID.get(level_id)


def resolve_pool(level_id: int, mode: Union[LevelType, str]) -> Sequence[str]:
    """返回生成所用的和弦池。

    关卡编号与风格匹配时使用关卡自己的和弦池（例如第 3 关带 V7），否则
    回退到风格默认池，因此越界编号不会报错。
    """

    level_type = coerce_level_type(mode)
    level = get_level(level_id)
    if level is not None and level.type is level_type:
        return level.available_chords
    logger.debug("Level %s has no %s pool; using style default", level_id, level_type.value)
    return _STYLES[level_type].pool


__all__ = [
    "CITY_POP_TEMPLATES",
    "LEVELS",
    "LevelConfig",
    "LevelType",
    "StyleConfig",
    "coerce_level_type",
    "get_level",
    "resolve_pool",
    "style_for",
]
