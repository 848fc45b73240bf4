"""
Game Engine

Drives one player's rounds: character input, guess validation and scoring,
keyboard feedback and win/loss detection. Outcomes are folded into the
shared score store when a round ends.
"""

import string
import time
from collections import deque
from typing import Callable, Deque, List, Optional

from ..config.game_settings import MAX_ROUNDS, WORD_LENGTH, get_word, is_word
from ..models.game import ALPHABET, GameState, GuessError, LetterState, Outcome, RoundState
from ..models.score import OutcomeHistogram
from .score_store import ScoreStore, StoreError, StoreReadError
from ..utils.game_logger import game_logger

INPUT_ERROR_SECONDS = 1.0
STORE_ERROR_SECONDS = 3.0
MAX_KEPT_ERRORS = 20


def score_guess(guess: str, target: str) -> List[LetterState]:
    """
    Ranks every position of a guess against the target.

    A letter that is not in its target position is PRESENT whenever it occurs
    anywhere in the target. Occurrences are not counted, so a repeated guess
    letter can be PRESENT more times than the target contains it.
    """
    ranks = []
    for position, letter in enumerate(guess):
        if letter == target[position]:
            ranks.append(LetterState.CORRECT)
        elif letter in target:
            ranks.append(LetterState.PRESENT)
        else:
            ranks.append(LetterState.ABSENT)
    return ranks


class GameEngine:
    """
    Single-session round state machine.

    Every public method is one synchronous input step. Only the score store
    performs I/O, and only when a round starts or ends.
    """

    def __init__(self,
                 score_store: ScoreStore,
                 is_word: Callable[[str], bool] = is_word,
                 get_word: Callable[[], str] = get_word,
                 clock: Callable[[], float] = time.monotonic):
        self.score_store = score_store
        self.is_word = is_word
        self.get_word = get_word
        self.clock = clock

        self.score = 0
        # Most recent persistence failures; error_count keeps the total
        self.errors: Deque[Exception] = deque(maxlen=MAX_KEPT_ERRORS)
        self.error_count = 0
        self._sticky_status: Optional[str] = None
        self._transient_status: Optional[str] = None
        self._transient_until = 0.0

        self.round: Optional[RoundState] = None
        self.new_round()

    # Round lifecycle

    def new_round(self) -> None:
        """Starts a round on a freshly chosen word and re-reads the score."""
        self.start_round(self.get_word())
        self._refresh_score()

    def start_round(self, target: str) -> None:
        """
        Resets the grid, cursor and keyboard for a new target.

        Raises:
            ValueError: If target is not a word of WORD_LENGTH letters
        """
        target = target.upper()
        if len(target) != WORD_LENGTH or any(letter not in ALPHABET for letter in target):
            raise ValueError(f"Target must be {WORD_LENGTH} letters A-Z, got {target!r}")

        self.round = RoundState(target=target)
        self._sticky_status = None
        self._transient_status = None

    # Input events

    def input_char(self, ch: str) -> None:
        """Writes one letter at the cursor. Anything but a single letter A-Z is ignored."""
        state = self.round
        if state.game_over or state.current_row >= MAX_ROUNDS or state.current_col >= WORD_LENGTH:
            return

        # Only a-z is folded; str.upper() maps some non-ASCII letters onto A-Z
        if ch in string.ascii_lowercase:
            ch = ch.upper()
        if len(ch) != 1 or ch not in ALPHABET:
            return

        state.grid[state.current_row][state.current_col] = ch
        state.current_col += 1

    def delete_char(self) -> None:
        """Moves the cursor back one cell. The cell keeps its stale letter until overwritten."""
        state = self.round
        if state.game_over or state.current_col == 0:
            return
        state.current_col -= 1

    def submit_guess(self) -> Optional[GuessError]:
        """
        Scores the current row.

        Returns:
            GuessError if the row was rejected, None if it was accepted or the
            round is already over
        """
        state = self.round
        if state.game_over:
            return None

        if state.current_col != WORD_LENGTH:
            return self._reject(GuessError.INCOMPLETE_GUESS)

        guess = state.current_guess()
        if not self.is_word(guess):
            return self._reject(GuessError.INVALID_WORD)

        ranks = score_guess(guess, state.target)
        for letter, rank in zip(guess, ranks):
            # Keyboard ranks only ever move up
            if state.keyboard[letter] < rank:
                state.keyboard[letter] = rank
        state.results.append(ranks)

        state.current_row += 1
        state.current_col = 0

        if all(rank is LetterState.CORRECT for rank in ranks):
            self._win()
        elif state.current_row == MAX_ROUNDS:
            self._loss()
        return None

    # Terminal outcomes

    def _win(self) -> None:
        state = self.round
        state.outcome = Outcome.WIN
        guesses_used = state.current_row
        self._sticky_status = "You win!"
        self._record(lambda histogram: ScoreStore.record_win(histogram, guesses_used))

    def _loss(self) -> None:
        state = self.round
        state.outcome = Outcome.LOSS
        self._sticky_status = f"The word was {state.target}. Better luck next time!"
        self._record(ScoreStore.record_loss)

    def _record(self, mutate: Callable[[OutcomeHistogram], None]) -> None:
        try:
            histogram = self.score_store.update(mutate)
        except StoreReadError as e:
            self._report_error(e, "Error loading score file.")
            return
        except StoreError as e:
            self._report_error(e, "Error saving score file.")
            return
        self.score = ScoreStore.score(histogram)

    def _refresh_score(self) -> None:
        try:
            histogram = self.score_store.load()
        except StoreReadError as e:
            self._report_error(e, "Error loading score file.")
            return
        self.score = ScoreStore.score(histogram)

    # Status line

    @property
    def status(self) -> str:
        if self._transient_status is not None and self.clock() < self._transient_until:
            return self._transient_status
        if self._sticky_status is not None:
            return self._sticky_status
        return f"Score: {self.score}"

    def set_status(self, message: str, duration: float) -> None:
        """Shows a message for duration seconds, then falls back to the previous status."""
        self._transient_status = message
        self._transient_until = self.clock() + duration

    def _reject(self, error: GuessError) -> GuessError:
        self.set_status(error.message, INPUT_ERROR_SECONDS)
        return error

    def _report_error(self, error: Exception, message: str) -> None:
        self.errors.append(error)
        self.error_count += 1
        game_logger.logger.error(f"{message} {error}")
        self.set_status(message, STORE_ERROR_SECONDS)

    # Snapshot

    def get_state(self) -> GameState:
        """Returns the client-facing view of the round (answer only after a loss)."""
        state = self.round
        return GameState(
            grid=state.visible_grid(),
            results=[[rank.name for rank in row] for row in state.results],
            current_row=state.current_row,
            current_col=state.current_col,
            keyboard={letter: rank.name for letter, rank in state.keyboard.items()},
            game_over=state.game_over,
            won=state.outcome is Outcome.WIN,
            status=self.status,
            score=self.score,
            error_count=self.error_count,
            answer=state.target if state.outcome is Outcome.LOSS else None
        )
