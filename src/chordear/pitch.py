"""Pitch and interval primitives.

Notes are plain string tokens made of a pitch class and an integer octave,
for example ``"C4"`` (middle C) or ``"F#3"``.  Every token produced by this
package is spelled with sharps; flat spellings such as ``"Bb3"`` are accepted
on input and normalised on the way out.  Transposition is arithmetic on the
chromatic index so that arbitrarily large or negative offsets resolve in a
single step.
"""

from __future__ import annotations

import re
from typing import Dict, Sequence, Tuple

from .errors import InvalidNoteError

CHROMATIC_NOTES: Sequence[str] = (
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
)

# Tonic orderings offered to the generator.  They are two independent
# enumerations: major keys start at C, minor keys start at A.
MAJOR_KEYS: Sequence[str] = (
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
)
MINOR_KEYS: Sequence[str] = (
    "A", "A#", "B", "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#",
)

_NOTE_INDEX: Dict[str, int] = {name: index for index, name in enumerate(CHROMATIC_NOTES)}
_FLAT_ALIASES: Dict[str, str] = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
}
_NOTE_PATTERN = re.compile(r"^([A-G][#b]?)(-?\d+)$")


def pitch_class_index(name: str) -> int:
    """Return the chromatic index (``C`` = 0) of a pitch-class name.

    Args:
        name: Pitch class such as ``"C"``, ``"F#"`` or ``"Bb"``.

    Returns:
        Integer in ``range(12)``.

    Raises:
        InvalidNoteError: If ``name`` is not one of the twelve pitch classes.
    """

    canonical = _FLAT_ALIASES.get(name, name)
    try:
        return _NOTE_INDEX[canonical]
    except KeyError:
        raise InvalidNoteError(
            f"unknown pitch class: {name!r}", details={"pitch_class": name}
        ) from None


def parse_note(note: str) -> Tuple[str, int]:
    """Split a note token into its sharp-spelled pitch class and octave.

    Args:
        note: Token such as ``"C4"``, ``"A#3"`` or ``"Bb-1"``.

    Returns:
        Tuple of ``(pitch_class, octave)``.

    Raises:
        InvalidNoteError: If the token cannot be parsed.  A malformed token
            always points at an upstream data bug, so it is never tolerated.
    """

    match = _NOTE_PATTERN.match(note) if isinstance(note, str) else None
    if match is None:
        raise InvalidNoteError(f"malformed note token: {note!r}", details={"note": note})
    name, octave = match.groups()
    return CHROMATIC_NOTES[pitch_class_index(name)], int(octave)


def transpose(note: str, semitones: int) -> str:
    """Transpose ``note`` by ``semitones`` with octave carry.

    The pitch class wraps modulo 12 and the octave moves by
    ``floor((index + semitones) / 12)``, so ``transpose("B4", 1)`` is ``"C5"``
    and ``transpose("C4", -1)`` is ``"B3"``.

    Args:
        note: Source note token.
        semitones: Any integer offset, positive, negative or zero.

    Returns:
        The transposed note token, spelled with sharps.
    """

    name, octave = parse_note(note)
    absolute = _NOTE_INDEX[name] + semitones
    return f"{CHROMATIC_NOTES[absolute % 12]}{octave + absolute // 12}"


def note_to_midi(note: str) -> int:
    """Convert a note token to its MIDI number (``"C4"`` is 60)."""

    name, octave = parse_note(note)
    return (octave + 1) * 12 + _NOTE_INDEX[name]


__all__ = [
    "CHROMATIC_NOTES",
    "MAJOR_KEYS",
    "MINOR_KEYS",
    "note_to_midi",
    "parse_note",
    "pitch_class_index",
    "transpose",
]
