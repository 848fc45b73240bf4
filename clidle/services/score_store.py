"""
Score Store

Persists the outcome histogram as JSON and computes the cumulative score
from it. The score itself is never stored.
"""

import json
import os
import tempfile
import threading
from typing import Callable

from ..config.game_settings import MAX_ROUNDS
from ..models.score import OutcomeHistogram
from ..utils.game_logger import game_logger

POINTS_FIRST_GUESS = 100
POINTS_PER_EXTRA_GUESS = 10


class StoreError(Exception):
    """Base class for score file failures."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class StoreReadError(StoreError):
    """The score file exists but could not be read or parsed."""


class StoreWriteError(StoreError):
    """The score file could not be written."""


class ScoreStore:
    """
    File-backed outcome histogram.

    One store may be shared by every session of a process. ``update`` holds
    the store's lock for the whole load, mutate and save cycle so concurrent
    rounds cannot lose increments.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def load(self) -> OutcomeHistogram:
        """
        Reads the persisted histogram.

        Returns:
            OutcomeHistogram, all zeros if the file does not exist yet

        Raises:
            StoreReadError: On any other read or parse failure
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return OutcomeHistogram()
        except (OSError, ValueError) as e:
            raise StoreReadError(self.path, "Could not read score file") from e

        try:
            return OutcomeHistogram.from_dict(data)
        except ValueError as e:
            raise StoreReadError(self.path, f"Malformed score file ({e})") from e

    def save(self, histogram: OutcomeHistogram) -> None:
        """
        Overwrites the score file with the full histogram.

        The record is written to a temporary file in the same directory and
        moved over the score file, so an interrupted write leaves the previous
        contents in place.

        Raises:
            StoreWriteError: On any I/O failure
        """
        directory = os.path.dirname(self.path) or '.'
        temp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(prefix='.db-', suffix='.tmp', dir=directory)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(histogram.to_dict(), f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path)
            temp_path = None
        except OSError as e:
            raise StoreWriteError(self.path, "Could not write score file") from e
        finally:
            if temp_path is not None and os.path.exists(temp_path):
                os.remove(temp_path)

    def update(self, mutate: Callable[[OutcomeHistogram], None]) -> OutcomeHistogram:
        """Runs one serialized load, mutate and save cycle and returns the saved histogram."""
        with self._lock:
            histogram = self.load()
            mutate(histogram)
            self.save(histogram)
        game_logger.logger.info(f"Score file updated: {self.path} {histogram.guesses}")
        return histogram

    @staticmethod
    def record_loss(histogram: OutcomeHistogram) -> None:
        histogram.guesses[0] += 1

    @staticmethod
    def record_win(histogram: OutcomeHistogram, guesses_used: int) -> None:
        if not 1 <= guesses_used <= MAX_ROUNDS:
            raise ValueError(f"guesses_used must be between 1 and {MAX_ROUNDS}, got {guesses_used}")
        histogram.guesses[guesses_used] += 1

    @staticmethod
    def score(histogram: OutcomeHistogram) -> int:
        """
        Cumulative score of a histogram.

        A win with one guess is worth 100 points and each additional guess
        lowers the value of the win by 10. Losses are worth nothing.
        """
        return sum(
            (POINTS_FIRST_GUESS - POINTS_PER_EXTRA_GUESS * (guesses_used - 1)) * histogram.guesses[guesses_used]
            for guesses_used in range(1, MAX_ROUNDS + 1)
        )
