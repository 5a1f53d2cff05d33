"""chordear: chord progression generator and transposition engine for ear training."""

from __future__ import annotations

from .catalog import LEVELS, LevelType
from .generator import Chord, Progression, generate_progression, get_chord_notes
from .keymap import build_key_map
from .pitch import transpose

__all__ = [
    "__version__",
    "Chord",
    "LEVELS",
    "LevelType",
    "Progression",
    "build_key_map",
    "generate_progression",
    "get_chord_notes",
    "transpose",
]

__version__: str = "0.1.0"
