"""Progression generation and chord-note lookup.

:func:`generate_progression` is the engine entry point used by the game: it
derives a random key for the level's style, builds that key's map and fills
four chord slots.  Styles with hand-curated templates short-circuit to one of
them with a fixed probability so that famous sequences surface regularly.
:func:`get_chord_notes` answers one-off lookups such as playing a single
comparison chord.

Randomness is threaded through an explicit :class:`random.Random`; omitting it
falls back to a process-wide generator seeded from ``RANDOM_SEED`` when set.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .catalog import LevelType, coerce_level_type, resolve_pool, style_for
from .config import settings
from .errors import ConfigError, InvalidKeyError, ValidationError
from .keymap import KeyMap, build_key_map, canonical_tonic, parse_key_label
from .pitch import MAJOR_KEYS, MINOR_KEYS

logger = logging.getLogger(__name__)

PROGRESSION_LENGTH = 4

# Reference keys for lookups that only need relative chord colour.
DEFAULT_MAJOR_TONIC = "C"
DEFAULT_MINOR_TONIC = "A"

_default_rng = random.Random(settings.random_seed)


class Chord(BaseModel):
    """One resolved chord of a progression."""

    model_config = ConfigDict(frozen=True)

    roman: str
    notes: Tuple[str, ...] = Field(..., description="Note tokens such as C4, E4, G4")
    display_name: str


class Progression(BaseModel):
    """A generated round: key label plus exactly four chords."""

    model_config = ConfigDict(frozen=True)

    id: str
    key: str = Field(..., description="Display label, e.g. 'C Major (Jazz)'")
    chords: Tuple[Chord, ...]

    @field_validator("chords")
    @classmethod
    def _check_length(cls, value: Tuple[Chord, ...]) -> Tuple[Chord, ...]:
        if len(value) != PROGRESSION_LENGTH:
            raise ValidationError(
                "a progression holds exactly four chords",
                details={"chords": len(value)},
            )
        return value

    @property
    def romans(self) -> List[str]:
        """Roman-numeral answers in order, as graded against user guesses."""

        return [chord.roman for chord in self.chords]


def _pick_tonic(minor: bool, rng: random.Random) -> str:
    return rng.choice(MINOR_KEYS if minor else MAJOR_KEYS)


def _from_template(
    template: Sequence[str], key_map: KeyMap, key_label: str
) -> Tuple[Chord, ...]:
    chords = []
    for roman in template:
        notes = key_map.get(roman)
        if not notes:
            raise ConfigError(
                f"template chord {roman} is not available in {key_label}",
                details={"template": list(template), "key": key_label},
            )
        chords.append(Chord(roman=roman, notes=notes, display_name=roman))
    return tuple(chords)


def _fill_from_pool(
    pool: Sequence[str],
    key_map: KeyMap,
    chords: List[Chord],
    rng: random.Random,
    key_label: str,
) -> None:
    """Append pool draws to ``chords`` until the progression is complete.

    Draws missing from the key map are skipped.  An immediate repeat of the
    previous symbol is rejected with probability ``settings.repeat_rejection``.
    """

    attempts = 0
    while len(chords) < PROGRESSION_LENGTH:
        if attempts >= settings.max_draw_attempts:
            raise ConfigError(
                "chord pool cannot fill a progression",
                details={"pool": list(pool), "key": key_label, "attempts": attempts},
            )
        attempts += 1
        roman = rng.choice(pool)
        notes = key_map.get(roman)
        if not notes:
            logger.debug("Skipping %s: not available in %s", roman, key_label)
            continue
        if chords and chords[-1].roman == roman and rng.random() < settings.repeat_rejection:
            continue
        chords.append(Chord(roman=roman, notes=notes, display_name=roman))


def generate_progression(
    level_id: int,
    mode: Union[LevelType, str],
    *,
    rng: Optional[random.Random] = None,
    tonic: Optional[str] = None,
) -> Progression:
    """Generate a four-chord progression for a level.

    Args:
        level_id: Level number; an id whose type differs from ``mode`` (or an
            unknown id) uses the style's default chord pool.
        mode: Style tag such as ``LevelType.MAJOR`` or ``"CITY_POP"``.
        rng: Random source; defaults to the module's process-wide generator.
        tonic: Force the key's tonic instead of drawing it at random.

    Returns:
        A fresh :class:`Progression` with exactly four chords.

    Raises:
        UnknownStyleError: If ``mode`` is not a known style tag.
        InvalidKeyError: If ``tonic`` is not a pitch class.
        ConfigError: If the chord pool cannot be resolved in the key.
    """

    rng = rng or _default_rng
    level_type = coerce_level_type(mode)
    style = style_for(level_type)
    pool = resolve_pool(level_id, level_type)

    tonic = canonical_tonic(tonic) if tonic is not None else _pick_tonic(style.minor, rng)
    key_map = build_key_map(tonic, style.minor)
    key_label = style.label_for(tonic)

    if style.templates and rng.random() < settings.template_probability:
        template = rng.choice(style.templates)
        logger.debug("Using %s template %s in %s", level_type.value, template, key_label)
        return Progression(
            id=uuid4().hex,
            key=key_label,
            chords=_from_template(template, key_map, key_label),
        )

    chords: List[Chord] = []
    first_notes = key_map.get(style.tonic_symbol)
    if first_notes:
        chords.append(
            Chord(
                roman=style.tonic_symbol,
                notes=first_notes,
                display_name=f"{style.tonic_symbol} ({key_label})",
            )
        )
    else:
        logger.warning("Tonic chord %s missing in %s", style.tonic_symbol, key_label)

    _fill_from_pool(pool, key_map, chords, rng, key_label)
    progression = Progression(id=uuid4().hex, key=key_label, chords=tuple(chords))
    logger.debug("Generated %s in %s", progression.romans, key_label)
    return progression


def get_chord_notes(
    roman: str, mode: Union[LevelType, str], key: Optional[str] = None
) -> List[str]:
    """Resolve one Roman-numeral symbol to notes.

    With ``key`` (a display label such as ``"C Major"``) the symbol is looked
    up in that key's map.  Without it the style's reference key is used:
    A minor for minor-family styles, C major otherwise.  Unknown symbols and
    unparseable key labels yield an empty list.
    """

    style = style_for(mode)
    if key:
        try:
            tonic, minor = parse_key_label(key)
        except InvalidKeyError:
            logger.warning("Unrecognised key label %r", key)
            return []
    else:
        minor = style.minor
        tonic = DEFAULT_MINOR_TONIC if minor else DEFAULT_MAJOR_TONIC
    return list(build_key_map(tonic, minor).get(roman, ()))


__all__ = [
    "Chord",
    "PROGRESSION_LENGTH",
    "Progression",
    "generate_progression",
    "get_chord_notes",
]
