"""命令行工具：列出关卡、生成和弦进行、查询和弦音与评分。"""

from __future__ import annotations

import json
import logging
import random
from typing import List, Optional

import typer

from .catalog import LEVELS, LevelType, get_level
from .errors import ChordEarError, error_response
from .generator import Progression, generate_progression, get_chord_notes
from .grading import ROUND_POINTS, grade_round
from .logging_setup import setup_logging
from .songs import REAL_SONGS, SONG_ROUND_POINTS, song_progression

app = typer.Typer(help="和弦进行听辨练习引擎 CLI")

_LOGGER = logging.getLogger(__name__)

_VALID_MODES = {level_type.value for level_type in LevelType}


def _validate_mode(value: str, option_name: str = "--mode") -> LevelType:
    """校验风格标签取值是否合法。"""

    normalised = value.upper()
    if normalised not in _VALID_MODES:
        raise typer.BadParameter(
            f"Unsupported mode: {value} / 不支持的风格: {value}",
            param_hint=option_name,
        )
    return LevelType(normalised)


def _split_symbols(value: str) -> List[str]:
    """将逗号分隔的级数字符串拆分为列表。"""

    return [item.strip() for item in value.split(",") if item.strip()]


def _echo_progression(progression: Progression, as_json: bool) -> None:
    """在控制台打印和弦进行，JSON 模式输出完整结构。"""

    if as_json:
        typer.echo(json.dumps(progression.model_dump(mode="json"), ensure_ascii=False))
        return
    typer.echo(f"Key: {progression.key}")
    for chord in progression.chords:
        typer.echo(f"  {chord.roman:<6} {' '.join(chord.notes)}")


def _fail(exc: ChordEarError, as_json: bool = False) -> None:
    """统一的错误输出，退出码为 1。"""

    if as_json:
        typer.echo(json.dumps(error_response(exc), ensure_ascii=False))
    else:
        typer.echo(f"错误 [{exc.code}]: {exc.message}")
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="启用 INFO 日志"),
    debug: bool = typer.Option(False, "--debug", help="启用 DEBUG 日志"),
) -> None:
    """配置 CLI 全局日志等级。"""

    # 未指定开关时沿用 LOG_LEVEL 配置
    level = logging.DEBUG if debug else logging.INFO if verbose else None
    setup_logging(level)
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = logging.getLogger().level


@app.command("levels")
def list_levels() -> None:
    """列出全部关卡及其可选和弦。"""

    for level in LEVELS:
        typer.echo(f"{level.id:>2}  {level.type.value:<20} {', '.join(level.available_chords)}")


@app.command("generate")
def generate(
    level: int = typer.Option(1, "--level", "-l", help="关卡编号"),
    mode: Optional[str] = typer.Option(
        None, help="风格标签，默认取关卡自身的风格"
    ),
    tonic: Optional[str] = typer.Option(None, help="固定主音，例如 C 或 F#"),
    seed: Optional[int] = typer.Option(None, help="随机种子，便于复现"),
    count: int = typer.Option(1, min=1, help="生成的进行数量"),
    as_json: bool = typer.Option(False, "--json", help="以 JSON 输出"),
) -> None:
    """生成和弦进行，示例: chordear generate --level 12 --seed 7."""

    if mode is not None:
        level_type = _validate_mode(mode)
    else:
        configured = get_level(level)
        if configured is None:
            raise typer.BadParameter(
                "未知关卡，请同时指定 --mode", param_hint="--level"
            )
        level_type = configured.type
    rng = random.Random(seed) if seed is not None else None
    try:
        for _ in range(count):
            progression = generate_progression(level, level_type, rng=rng, tonic=tonic)
            _echo_progression(progression, as_json)
    except ChordEarError as exc:
        _LOGGER.debug("generation failed: %s", exc.to_dict())
        _fail(exc, as_json)


@app.command("notes")
def notes(
    roman: str = typer.Argument(..., help="罗马数字级数，例如 V7"),
    mode: str = typer.Option("MAJOR", help="风格标签"),
    key: Optional[str] = typer.Option(None, help="调名，例如 'C Major'"),
) -> None:
    """查询单个和弦的音符。"""

    level_type = _validate_mode(mode)
    resolved = get_chord_notes(roman, level_type, key)
    if not resolved:
        typer.echo(f"{roman}: 当前调内不可用")
        raise typer.Exit(code=1)
    typer.echo(" ".join(resolved))


@app.command("song")
def song(
    song_id: Optional[str] = typer.Argument(None, help="歌曲编号，省略时列出全部"),
    as_json: bool = typer.Option(False, "--json", help="以 JSON 输出"),
) -> None:
    """列出真实歌曲，或解析指定歌曲的和弦进行。"""

    if song_id is None:
        for item in REAL_SONGS:
            typer.echo(f"{item.id:<14} {item.title} - {item.artist} ({item.key})")
        return
    try:
        _echo_progression(song_progression(song_id), as_json)
    except ChordEarError as exc:
        _fail(exc, as_json)


@app.command("grade")
def grade(
    expected: str = typer.Option(..., help="正确答案，逗号分隔，例如 I,V,vi,IV"),
    guess: str = typer.Option(..., help="作答，逗号分隔"),
    real_song: bool = typer.Option(False, "--real-song", help="按真实歌曲模式计分"),
) -> None:
    """按位置比对作答并输出结果。"""

    points = SONG_ROUND_POINTS if real_song else ROUND_POINTS
    try:
        result = grade_round(_split_symbols(expected), _split_symbols(guess), points=points)
    except ChordEarError as exc:
        _fail(exc)
    if result.correct:
        typer.echo(f"Perfect! +{result.points}")
        return
    for index, answer, guessed in result.mismatches:
        typer.echo(f"Chord {index + 1}: expected {answer}, got {guessed}")
    raise typer.Exit(code=1)


__all__ = ["app"]
