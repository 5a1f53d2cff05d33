"""验证进行生成器的调性分布、长度、防重复与模板短路行为。"""

import random
import re

import pytest

import chordear.generator as generator
from chordear.catalog import CITY_POP_TEMPLATES, LEVELS, LevelType
from chordear.config import settings
from chordear.errors import ConfigError, InvalidKeyError, UnknownStyleError, ValidationError
from chordear.generator import Chord, Progression, generate_progression
from chordear.pitch import MAJOR_KEYS, MINOR_KEYS, parse_note


def test_generate_basic_shape() -> None:
    progression = generate_progression(1, LevelType.MAJOR, rng=random.Random(1))
    assert isinstance(progression, Progression)
    assert len(progression.chords) == 4
    assert progression.id
    assert re.match(r"^[A-G]#? Major$", progression.key)


def test_forced_c_major_starts_on_tonic_triad() -> None:
    progression = generate_progression(1, LevelType.MAJOR, rng=random.Random(5), tonic="C")
    first = progression.chords[0]
    assert progression.key == "C Major"
    assert first.roman == "I"
    assert first.notes == ("C4", "E4", "G4")
    assert first.display_name == "I (C Major)"
    pool = {"I", "ii", "iii", "IV", "V", "vi"}
    assert set(progression.romans) <= pool


def test_forced_flat_tonic_is_spelled_with_sharps() -> None:
    progression = generate_progression(1, "MAJOR", rng=random.Random(2), tonic="Bb")
    assert progression.key == "A# Major"


def test_every_major_and_minor_tonic_appears() -> None:
    rng = random.Random(2024)
    major = {generate_progression(1, LevelType.MAJOR, rng=rng).key.split()[0] for _ in range(400)}
    minor = {generate_progression(2, LevelType.MINOR, rng=rng).key.split()[0] for _ in range(400)}
    assert major == set(MAJOR_KEYS)
    assert minor == set(MINOR_KEYS)


@pytest.mark.parametrize("level", LEVELS, ids=lambda level: level.type.value)
def test_every_level_yields_four_chords_from_its_pool(level) -> None:
    rng = random.Random(level.id)
    pool = set(level.available_chords)
    for _ in range(50):
        progression = generate_progression(level.id, level.type, rng=rng)
        assert len(progression.chords) == 4
        for chord in progression.chords:
            assert chord.notes
            assert all(parse_note(note) for note in chord.notes)
            assert chord.roman in pool or chord.roman == progression.romans[0]


def test_tonic_symbol_per_style() -> None:
    rng = random.Random(11)
    assert generate_progression(2, LevelType.MINOR, rng=rng).romans[0] == "i"
    assert generate_progression(10, LevelType.DORIAN, rng=rng).romans[0] == "i"
    assert generate_progression(9, LevelType.TRITONE_SUB, rng=rng).romans[0] == "IM7"
    assert generate_progression(11, LevelType.OUDOU, rng=rng).romans[0] == "IVM7"
    assert generate_progression(4, LevelType.MIXOLYDIAN, rng=rng).romans[0] == "I"


def test_key_labels_per_style() -> None:
    rng = random.Random(3)
    assert re.match(r"^[A-G]#? Major \(Sec\. Dom\)$", generate_progression(6, "SECONDARY_DOMINANT", rng=rng).key)
    assert re.match(r"^[A-G]#? Major \(Jazz\)$", generate_progression(9, "TRITONE_SUB", rng=rng).key)
    assert re.match(r"^[A-G]#? Dorian \(Coltrane\)$", generate_progression(10, "DORIAN", rng=rng).key)
    assert re.match(r"^[A-G]#? Mixolydian$", generate_progression(4, "MIXOLYDIAN", rng=rng).key)


def test_edge_level_ids_use_style_defaults() -> None:
    rng = random.Random(4)
    for level_id in (0, 999):
        progression = generate_progression(level_id, LevelType.MAJOR, rng=rng)
        assert len(progression.chords) == 4


def test_unknown_mode_fails_fast() -> None:
    with pytest.raises(UnknownStyleError):
        generate_progression(1, "INVALID")


def test_unknown_forced_tonic_raises() -> None:
    with pytest.raises(InvalidKeyError):
        generate_progression(1, LevelType.MAJOR, tonic="H")


def test_same_seed_same_progression() -> None:
    first = generate_progression(5, LevelType.MODAL_INTERCHANGE, rng=random.Random(99))
    second = generate_progression(5, LevelType.MODAL_INTERCHANGE, rng=random.Random(99))
    assert first.key == second.key
    assert first.chords == second.chords
    assert first.id != second.id


def test_immediate_repetition_is_rare() -> None:
    rng = random.Random(7)
    repeats = 0
    transitions = 0
    for _ in range(600):
        romans = generate_progression(1, LevelType.MAJOR, rng=rng).romans
        for previous, current in zip(romans, romans[1:]):
            transitions += 1
            repeats += previous == current
    # 均匀独立抽取时约为 1/6，70% 拒绝后约为 0.057
    assert repeats / transitions < 0.1


def test_repetition_allowed_without_rejection(monkeypatch) -> None:
    monkeypatch.setattr(settings, "repeat_rejection", 0.0, raising=False)
    rng = random.Random(7)
    repeats = 0
    for _ in range(600):
        romans = generate_progression(1, LevelType.MAJOR, rng=rng).romans
        repeats += sum(a == b for a, b in zip(romans, romans[1:]))
    assert repeats / 1800 > 0.12


def test_city_pop_reproduces_templates() -> None:
    rng = random.Random(12)
    templates = set(CITY_POP_TEMPLATES)
    runs = 1000
    hits = sum(
        tuple(generate_progression(12, LevelType.CITY_POP, rng=rng).romans) in templates
        for _ in range(runs)
    )
    assert 0.3 <= hits / runs <= 0.5


def test_template_probability_is_configurable(monkeypatch) -> None:
    rng = random.Random(8)
    monkeypatch.setattr(settings, "template_probability", 1.0, raising=False)
    for _ in range(20):
        progression = generate_progression(12, LevelType.CITY_POP, rng=rng)
        assert tuple(progression.romans) in set(CITY_POP_TEMPLATES)
        assert progression.key.endswith("Major (Tatsuro)")
    monkeypatch.setattr(settings, "template_probability", 0.0, raising=False)
    for _ in range(20):
        progression = generate_progression(12, LevelType.CITY_POP, rng=rng)
        assert progression.chords[0].display_name == f"IVM7 ({progression.key})"


def test_templates_only_apply_to_styles_that_have_them(monkeypatch) -> None:
    monkeypatch.setattr(settings, "template_probability", 1.0, raising=False)
    progression = generate_progression(1, LevelType.MAJOR, rng=random.Random(1), tonic="C")
    assert progression.romans[0] == "I"


def test_unresolvable_pool_raises_config_error(monkeypatch) -> None:
    monkeypatch.setattr(generator, "resolve_pool", lambda level_id, mode: ("XIII", "Gm9"))
    monkeypatch.setattr(settings, "max_draw_attempts", 50, raising=False)
    with pytest.raises(ConfigError) as excinfo:
        generate_progression(1, LevelType.MAJOR, rng=random.Random(0))
    assert excinfo.value.code == "E_CONFIG"
    assert excinfo.value.details["attempts"] == 50


def test_progression_requires_four_chords() -> None:
    chord = Chord(roman="I", notes=("C4", "E4", "G4"), display_name="I")
    with pytest.raises(ValidationError):
        Progression(id="x", key="C Major", chords=(chord, chord, chord))


def test_progression_is_immutable() -> None:
    progression = generate_progression(1, LevelType.MAJOR, rng=random.Random(1))
    with pytest.raises(Exception):
        progression.key = "D Major"  # type: ignore[misc]
    with pytest.raises(Exception):
        progression.chords[0].roman = "V"  # type: ignore[misc]
