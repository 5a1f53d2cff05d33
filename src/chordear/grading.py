"""Round grading: position-wise comparison of guesses against a progression.

Only the structured verdict lives here.  Turning the first mismatch into
localized feedback text is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .errors import ValidationError

ROUND_POINTS = 10


@dataclass(frozen=True)
class RoundResult:
    """Outcome of a graded round.

    Attributes:
        correct: ``True`` when every position matches.
        first_error: Index of the first wrong guess, or ``None``.
        mismatches: ``(index, expected, guessed)`` for every wrong position.
        points: Points awarded, zero unless the whole round is correct.
    """

    correct: bool
    first_error: Optional[int]
    mismatches: Tuple[Tuple[int, str, str], ...] = field(default=())
    points: int = 0


def grade_round(
    expected: Sequence[str], guesses: Sequence[str], points: int = ROUND_POINTS
) -> RoundResult:
    """Compare ``guesses`` against the ``expected`` Roman numerals.

    Args:
        expected: Correct symbols, usually ``Progression.romans``.
        guesses: The player's symbols in slot order.
        points: Award for a fully correct round.

    Raises:
        ValidationError: If the sequences differ in length.
    """

    if len(expected) != len(guesses):
        raise ValidationError(
            "guess count does not match the progression",
            details={"expected": len(expected), "guesses": len(guesses)},
        )
    mismatches: List[Tuple[int, str, str]] = [
        (index, answer, guess)
        for index, (answer, guess) in enumerate(zip(expected, guesses))
        if answer != guess
    ]
    if not mismatches:
        return RoundResult(correct=True, first_error=None, points=points)
    return RoundResult(
        correct=False,
        first_error=mismatches[0][0],
        mismatches=tuple(mismatches),
    )


__all__ = ["ROUND_POINTS", "RoundResult", "grade_round"]
