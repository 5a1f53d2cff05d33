"""Chord vocabulary: qualities, their interval sets and Roman-numeral lookup."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Sequence


class ChordQuality(str, Enum):
    """Closed set of chord qualities understood by the key map builder."""

    MAJOR = "major"
    MINOR = "minor"
    DIMINISHED = "diminished"
    AUGMENTED = "augmented"
    DOMINANT7 = "dominant7"
    MAJOR7 = "major7"
    MINOR7 = "minor7"
    SUS2 = "sus2"
    SUS4 = "sus4"


CHORD_INTERVALS: Dict[ChordQuality, Sequence[int]] = {
    # Triads
    ChordQuality.MAJOR: (0, 4, 7),
    ChordQuality.MINOR: (0, 3, 7),
    ChordQuality.DIMINISHED: (0, 3, 6),
    ChordQuality.AUGMENTED: (0, 4, 8),
    # Sevenths
    ChordQuality.DOMINANT7: (0, 4, 7, 10),
    ChordQuality.MAJOR7: (0, 4, 7, 11),
    ChordQuality.MINOR7: (0, 3, 7, 10),
    # Suspended
    ChordQuality.SUS4: (0, 5, 7),
    ChordQuality.SUS2: (0, 2, 7),
}

ROMAN_TO_QUALITY: Dict[str, ChordQuality] = {
    # Major key diatonic
    "I": ChordQuality.MAJOR,
    "ii": ChordQuality.MINOR,
    "iii": ChordQuality.MINOR,
    "IV": ChordQuality.MAJOR,
    "V": ChordQuality.MAJOR,
    "vi": ChordQuality.MINOR,
    "vii°": ChordQuality.DIMINISHED,
    # Minor key diatonic
    "i": ChordQuality.MINOR,
    "ii°": ChordQuality.DIMINISHED,
    "III": ChordQuality.MAJOR,
    "iv": ChordQuality.MINOR,
    "v": ChordQuality.MINOR,
    "VI": ChordQuality.MAJOR,
    "VII": ChordQuality.MAJOR,
    # Diatonic sevenths
    "V7": ChordQuality.DOMINANT7,
    "IM7": ChordQuality.MAJOR7,
    "IVM7": ChordQuality.MAJOR7,
    "ii7": ChordQuality.MINOR7,
    "iii7": ChordQuality.MINOR7,
    "vi7": ChordQuality.MINOR7,
    # Secondary dominants and tritone substitute
    "II7": ChordQuality.DOMINANT7,
    "III7": ChordQuality.DOMINANT7,
    "VI7": ChordQuality.DOMINANT7,
    "bII7": ChordQuality.DOMINANT7,
    # Modal interchange
    "bIII": ChordQuality.MAJOR,
    "bVI": ChordQuality.MAJOR,
    "bVII": ChordQuality.MAJOR,
    # Chromatic colour
    "I+": ChordQuality.AUGMENTED,
    "I7": ChordQuality.DOMINANT7,
    # City pop: minor dominant (ii of IV) and the F/G style slash dominant
    "v7": ChordQuality.MINOR7,
    "IV/V": ChordQuality.SUS4,
}


def intervals_for(quality: ChordQuality) -> Sequence[int]:
    """Return the semitone offsets from the root for ``quality``."""

    return CHORD_INTERVALS[ChordQuality(quality)]


def quality_for(symbol: str) -> Optional[ChordQuality]:
    """Look up the quality of a Roman-numeral symbol.

    Unknown symbols map to ``None`` so callers can treat them as unavailable
    instead of failing.
    """

    return ROMAN_TO_QUALITY.get(symbol)


def is_slash_chord(symbol: str) -> bool:
    """Whether ``symbol`` notates an upper structure over a separate bass."""

    return "/" in symbol


__all__ = [
    "CHORD_INTERVALS",
    "ChordQuality",
    "ROMAN_TO_QUALITY",
    "intervals_for",
    "is_slash_chord",
    "quality_for",
]
