"""
Game Data Models

Contains all round-related data structures and enums.
"""

import string
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Optional

from ..config.game_settings import MAX_ROUNDS, WORD_LENGTH

ALPHABET = string.ascii_uppercase


class LetterState(IntEnum):
    """Feedback rank of a letter. Higher ranks win when merged."""
    UNSELECTED = 0
    ABSENT = 1
    PRESENT = 2
    CORRECT = 3


class GuessError(Enum):
    """Recoverable reasons for rejecting a submitted row."""
    INCOMPLETE_GUESS = f"Your guess must be a {WORD_LENGTH}-letter word."
    INVALID_WORD = "That's not a valid word."

    @property
    def message(self) -> str:
        return self.value


class Outcome(Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    LOSS = "loss"


def _empty_grid() -> List[List[str]]:
    return [[""] * WORD_LENGTH for _ in range(MAX_ROUNDS)]


def _fresh_keyboard() -> Dict[str, LetterState]:
    return {letter: LetterState.UNSELECTED for letter in ALPHABET}


@dataclass
class RoundState:
    """
    Live state of one round.

    Rows before ``current_row`` are finalized. Cells of the current row at or
    after ``current_col`` hold stale input and are not part of the guess.
    """
    target: str
    grid: List[List[str]] = field(default_factory=_empty_grid)
    results: List[List[LetterState]] = field(default_factory=list)
    current_row: int = 0
    current_col: int = 0
    keyboard: Dict[str, LetterState] = field(default_factory=_fresh_keyboard)
    outcome: Outcome = Outcome.IN_PROGRESS

    @property
    def game_over(self) -> bool:
        return self.outcome is not Outcome.IN_PROGRESS

    def current_guess(self) -> str:
        return "".join(self.grid[self.current_row][:self.current_col])

    def visible_grid(self) -> List[List[str]]:
        """Grid cells as a client should see them, stale input blanked out."""
        rows = []
        for row_index, row in enumerate(self.grid):
            if row_index < self.current_row:
                rows.append(list(row))
            elif row_index == self.current_row:
                rows.append([cell if col < self.current_col else "" for col, cell in enumerate(row)])
            else:
                rows.append([""] * WORD_LENGTH)
        return rows


@dataclass
class GameState:
    """Client-facing snapshot of a session's round."""
    grid: List[List[str]]
    results: List[List[str]]  # Letter states as names for JSON serialization
    current_row: int
    current_col: int
    keyboard: Dict[str, str]
    game_over: bool
    won: bool
    status: str
    score: int
    error_count: int = 0
    max_rounds: int = MAX_ROUNDS
    word_length: int = WORD_LENGTH
    answer: Optional[str] = None  # Only included after a loss
