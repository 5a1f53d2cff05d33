"""Key map builder.

A key map resolves every Roman-numeral symbol the game uses to concrete notes
for one tonic and one mode.  Diatonic chords come from the mode's own scale
steps; extended, borrowed and secondary chords are rooted relative to the
major scale of the same tonic, which is how chord symbols such as ``bVII`` or
``V7`` are read regardless of mode.  Maps are pure functions of
``(tonic, minor)`` and are memoised as read-only mappings.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple

from .errors import InvalidKeyError, InvalidNoteError
from .pitch import CHROMATIC_NOTES, parse_note, pitch_class_index, transpose
from .vocabulary import ROMAN_TO_QUALITY, intervals_for

logger = logging.getLogger(__name__)

KeyMap = Mapping[str, Tuple[str, ...]]

MAJOR_SCALE_SEMITONES: Sequence[int] = (0, 2, 4, 5, 7, 9, 11)
MINOR_SCALE_SEMITONES: Sequence[int] = (0, 2, 3, 5, 7, 8, 10)

MAJOR_DEGREES: Sequence[str] = ("I", "ii", "iii", "IV", "V", "vi", "vii°")
MINOR_DEGREES: Sequence[str] = ("i", "ii°", "III", "iv", "v", "VI", "VII")

ROMAN_NUMERALS: Sequence[str] = ("I", "II", "III", "IV", "V", "VI", "VII")

EXTENDED_SYMBOLS: Sequence[str] = (
    "V7",
    "IM7",
    "IVM7",
    "ii7",
    "iii7",
    "vi7",
    "bII7",
    "II7",
    "III7",
    "VI7",
    "bIII",
    "bVI",
    "bVII",
    "iv",
    "I+",
    "I7",
    "v7",
)

# Dorian colour chords (raised sixth) layered onto minor keys.
DORIAN_SYMBOLS: Sequence[str] = ("ii", "IV")

SLASH_DOMINANT = "IV/V"

ROOT_OCTAVE = 4

# Fixed root offsets for borrowed or altered chords.  ``v7`` sits an octave
# below the fifth degree.
_SPECIAL_ROOTS: Dict[str, int] = {
    "iv": 5,
    "I+": 0,
    "I7": 0,
    "v7": -5,
}

_SYMBOL_PATTERN = re.compile(r"^(?P<flat>b?)(?P<numeral>[IViv]+)(?P<suffix>M7|7)?$")


def _root_offset(symbol: str) -> Optional[int]:
    """Semitone offset of ``symbol``'s root above the tonic.

    ``b`` lowers the major-scale degree by one semitone and a ``7``/``M7``
    suffix keeps the degree's own offset.  Returns ``None`` when the symbol
    does not spell a scale degree.
    """

    if symbol in _SPECIAL_ROOTS:
        return _SPECIAL_ROOTS[symbol]
    match = _SYMBOL_PATTERN.match(symbol)
    if match is None:
        return None
    numeral = match.group("numeral").upper()
    if numeral not in ROMAN_NUMERALS:
        return None
    offset = MAJOR_SCALE_SEMITONES[ROMAN_NUMERALS.index(numeral)]
    return offset - 1 if match.group("flat") else offset


def _chord_notes(root: str, symbol: str) -> Tuple[str, ...]:
    quality = ROMAN_TO_QUALITY[symbol]
    return tuple(transpose(root, semitones) for semitones in intervals_for(quality))


def _checked_root(tonic_note: str, offset: int, symbol: str) -> Optional[str]:
    """Transpose the tonic to a chord root, dropping roots that do not parse."""

    root = transpose(tonic_note, offset)
    try:
        parse_note(root)
    except InvalidNoteError:
        logger.warning("Dropping %s: root %r is not a valid note", symbol, root)
        return None
    return root


def _slash_dominant(tonic_note: str) -> Tuple[str, ...]:
    """IV triad over the dominant in the octave below (F/G in C)."""

    bass = transpose(tonic_note, 7 - 12)
    upper_root = transpose(tonic_note, 5)
    return (bass,) + _chord_notes(upper_root, "IV")


@lru_cache(maxsize=None)
def _build_key_map(tonic: str, minor: bool) -> KeyMap:
    tonic_note = f"{tonic}{ROOT_OCTAVE}"
    degrees = MINOR_DEGREES if minor else MAJOR_DEGREES
    steps = MINOR_SCALE_SEMITONES if minor else MAJOR_SCALE_SEMITONES
    chords: Dict[str, Tuple[str, ...]] = {}

    for symbol, offset in zip(degrees, steps):
        root = _checked_root(tonic_note, offset, symbol)
        if root is not None:
            chords[symbol] = _chord_notes(root, symbol)

    extended = tuple(EXTENDED_SYMBOLS) + (tuple(DORIAN_SYMBOLS) if minor else ())
    for symbol in extended:
        offset = _root_offset(symbol)
        if offset is None:
            logger.warning("No root rule for %s; leaving it out of the key map", symbol)
            continue
        root = _checked_root(tonic_note, offset, symbol)
        if root is not None:
            chords[symbol] = _chord_notes(root, symbol)

    chords[SLASH_DOMINANT] = _slash_dominant(tonic_note)

    logger.debug(
        "Built key map for %s %s with %d symbols",
        tonic,
        "minor" if minor else "major",
        len(chords),
    )
    return MappingProxyType(chords)


def canonical_tonic(tonic: str) -> str:
    """Return the sharp spelling of ``tonic`` (``"Bb"`` becomes ``"A#"``).

    Raises:
        InvalidKeyError: If ``tonic`` is not a pitch class.
    """

    try:
        return CHROMATIC_NOTES[pitch_class_index(tonic)]
    except InvalidNoteError:
        raise InvalidKeyError(f"unknown tonic: {tonic!r}", details={"tonic": tonic}) from None


def build_key_map(tonic: str, minor: bool = False) -> KeyMap:
    """Build (or fetch the memoised) key map for ``tonic`` in major or minor.

    Args:
        tonic: Pitch class of the key, e.g. ``"C"``, ``"F#"`` or ``"Bb"``.
        minor: ``True`` for natural minor (and Dorian, which shares it).

    Returns:
        Read-only mapping from Roman-numeral symbol to a tuple of note tokens.
        Symbols the key cannot realise are absent; callers treat a missing
        symbol as unavailable in that key.

    Raises:
        InvalidKeyError: If ``tonic`` is not a pitch class.
    """

    return _build_key_map(canonical_tonic(tonic), bool(minor))


def parse_key_label(label: str) -> Tuple[str, bool]:
    """Split a display label such as ``"D Dorian (Coltrane)"`` into tonic and mode.

    The tonic is the first word; the key counts as minor when the label
    names Minor or Dorian.

    Raises:
        InvalidKeyError: If the label is empty or its tonic is unknown.
    """

    words = label.split()
    if not words:
        raise InvalidKeyError("empty key label", details={"key": label})
    return canonical_tonic(words[0]), ("Minor" in words or "Dorian" in words)


__all__ = [
    "DORIAN_SYMBOLS",
    "EXTENDED_SYMBOLS",
    "KeyMap",
    "MAJOR_DEGREES",
    "MAJOR_SCALE_SEMITONES",
    "MINOR_DEGREES",
    "MINOR_SCALE_SEMITONES",
    "ROOT_OCTAVE",
    "SLASH_DOMINANT",
    "build_key_map",
    "canonical_tonic",
    "parse_key_label",
]
