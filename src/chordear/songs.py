"""真实歌曲目录：带有标注和弦进行的片段，供“听真歌”模式使用。

片段本身由前端播放，这里只负责把歌曲标注的级数解析为具体音符，使
评分与和弦试听逻辑与随机生成的回合完全一致。"""

from __future__ import annotations

import logging
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .catalog import LevelType
from .errors import ConfigError, UnknownSongError, ValidationError
from .generator import Chord, Progression
from .keymap import build_key_map, parse_key_label

logger = logging.getLogger(__name__)

SONG_ROUND_POINTS = 50


class RealSong(BaseModel):
    """带时间区间的歌曲片段及其四和弦标注。"""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    artist: str
    youtube_id: str
    start_time: int = Field(..., description="Clip start in seconds")
    end_time: int = Field(..., description="Clip end in seconds")
    level_type: LevelType
    key: str = Field(..., description="Key label such as 'A Major'")
    progression: Tuple[str, ...]

    @model_validator(mode="after")
    def _check_clip(self) -> "RealSong":
        """片段结束时间必须晚于开始时间。"""

        if self.end_time <= self.start_time:
            raise ValidationError(
                "片段结束时间必须晚于开始时间",
                details={"start_time": self.start_time, "end_time": self.end_time},
            )
        return self


REAL_SONGS: Tuple[RealSong, ...] = (
    RealSong(
        id="stand_by_me",
        title="Stand By Me",
        artist="Ben E. King",
        youtube_id="hwZNL7QVJjE",
        start_time=0,
        end_time=18,
        level_type=LevelType.MAJOR,
        key="A Major",
        progression=("I", "vi", "IV", "V"),  # A, F#m, D, E
    ),
    RealSong(
        id="hello_adele",
        title="Hello",
        artist="Adele",
        youtube_id="YQHsXMglC9A",
        start_time=83,  # 副歌
        end_time=96,
        level_type=LevelType.MINOR,
        key="F Minor",
        progression=("i", "III", "VII", "VI"),  # Fm, Ab, Eb, Db
    ),
)

_SONGS_BY_ID: Dict[str, RealSong] = {song.id: song for song in REAL_SONGS}


def get_song(song_id: str) -> RealSong:
    """按编号获取歌曲，不存在时抛出 :class:`UnknownSongError`。"""

    try:
        return _SONGS_BY_ID[song_id]
    except KeyError:
        raise UnknownSongError(f"unknown song: {song_id!r}", details={"song_id": song_id}) from None


def song_progression(song_id: str) -> Progression:
    """把歌曲标注的级数解析为与生成回合同构的 :class:`Progression`。"""

    song = get_song(song_id)
    tonic, minor = parse_key_label(song.key)
    key_map = build_key_map(tonic, minor)
    chords = []
    for roman in song.progression:
        notes = key_map.get(roman)
        if not notes:
            raise ConfigError(
                f"{song.title}: {roman} is not available in {song.key}",
                details={"song_id": song.id, "roman": roman},
            )
        chords.append(Chord(roman=roman, notes=notes, display_name=roman))
    logger.debug("Resolved song %s in %s", song.id, song.key)
    return Progression(id=song.id, key=song.key, chords=tuple(chords))


__all__ = ["REAL_SONGS", "RealSong", "SONG_ROUND_POINTS", "get_song", "song_progression"]
