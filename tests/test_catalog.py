import pytest

from chordear.catalog import (
    CITY_POP_TEMPLATES,
    LEVELS,
    LevelConfig,
    LevelType,
    get_level,
    resolve_pool,
    style_for,
)
from chordear.errors import UnknownStyleError, ValidationError
from chordear.keymap import build_key_map


def test_every_level_type_has_a_style() -> None:
    for level_type in LevelType:
        style = style_for(level_type)
        assert style.pool
        assert "{tonic}" in style.key_label


def test_style_lookup_accepts_strings() -> None:
    assert style_for("dorian") is style_for(LevelType.DORIAN)
    assert style_for("MINOR").minor is True
    assert style_for(LevelType.MIXOLYDIAN).minor is False


def test_unknown_style_fails_fast() -> None:
    with pytest.raises(UnknownStyleError):
        style_for("INVALID")


def test_key_labels() -> None:
    assert style_for(LevelType.MAJOR).label_for("C") == "C Major"
    assert style_for(LevelType.DORIAN).label_for("D") == "D Dorian (Coltrane)"
    assert style_for(LevelType.CITY_POP).label_for("F") == "F Major (Tatsuro)"


def test_levels_are_numbered_and_typed() -> None:
    assert [level.id for level in LEVELS] == list(range(1, 13))
    assert get_level(3).type is LevelType.MAJOR
    assert "V7" in get_level(3).available_chords
    assert get_level(999) is None


def test_resolve_pool_prefers_the_level_pool() -> None:
    assert tuple(resolve_pool(3, LevelType.MAJOR)) == ("I", "IV", "V", "V7", "vi")
    assert tuple(resolve_pool(1, "MAJOR")) == ("I", "ii", "iii", "IV", "V", "vi")


def test_resolve_pool_falls_back_to_style_default() -> None:
    default = tuple(style_for(LevelType.MAJOR).pool)
    assert tuple(resolve_pool(0, LevelType.MAJOR)) == default
    assert tuple(resolve_pool(999, LevelType.MAJOR)) == default
    assert tuple(resolve_pool(2, LevelType.MAJOR)) == default


def test_level_config_is_frozen_and_validated() -> None:
    level = get_level(1)
    with pytest.raises(Exception):
        level.id = 5  # type: ignore[misc]
    with pytest.raises(ValidationError):
        LevelConfig(id=13, type=LevelType.MAJOR, available_chords=())


def test_city_pop_templates_resolve_in_every_key() -> None:
    assert style_for(LevelType.CITY_POP).templates == CITY_POP_TEMPLATES
    for tonic in ("C", "F#", "A#"):
        key_map = build_key_map(tonic)
        for template in CITY_POP_TEMPLATES:
            assert len(template) == 4
            assert all(key_map.get(symbol) for symbol in template)
