"""
Score Data Models

The outcome histogram is the only state that outlives a round.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..config.game_settings import MAX_ROUNDS


def _zero_guesses() -> List[int]:
    return [0] * (MAX_ROUNDS + 1)


@dataclass
class OutcomeHistogram:
    """
    Win/loss counts.

    ``guesses[0]`` is the number of rounds lost, ``guesses[i]`` the number of
    rounds won with exactly ``i`` guesses.
    """
    guesses: List[int] = field(default_factory=_zero_guesses)

    @classmethod
    def from_dict(cls, data: Any) -> "OutcomeHistogram":
        """
        Build a histogram from its persisted form.

        Raises:
            ValueError: If the record does not hold MAX_ROUNDS + 1 non-negative integers
        """
        if not isinstance(data, dict) or "guesses" not in data:
            raise ValueError("Score record must be an object with a 'guesses' field")

        guesses = data["guesses"]
        if not isinstance(guesses, list) or len(guesses) != MAX_ROUNDS + 1:
            raise ValueError(f"'guesses' must be a list of {MAX_ROUNDS + 1} counts")

        for count in guesses:
            # bool is an int subclass
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise ValueError(f"Invalid count in 'guesses': {count!r}")

        return cls(guesses=list(guesses))

    def to_dict(self) -> Dict[str, List[int]]:
        return {"guesses": list(self.guesses)}

    @property
    def losses(self) -> int:
        return self.guesses[0]

    @property
    def wins(self) -> int:
        return sum(self.guesses[1:])
