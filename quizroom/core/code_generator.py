"""Utility for generating short public join codes."""

from __future__ import annotations

import random
from threading import Lock

from quizroom.constants.quiz_constants import JOIN_CODE_ALPHABET, JOIN_CODE_LENGTH


class JoinCodeGenerator:
    """Produces codes drawn independently and uniformly from a fixed alphabet.

    The generator does not know which codes are taken; uniqueness is enforced
    by the store and the caller retries on collision.
    """

    def __init__(
        self,
        alphabet: str = JOIN_CODE_ALPHABET,
        length: int = JOIN_CODE_LENGTH,
        seed: int | None = None,
    ) -> None:
        if not alphabet:
            raise ValueError("Alphabet cannot be empty.")
        if length <= 0:
            raise ValueError("Code length must be a positive integer.")
        self._alphabet = alphabet
        self._length = length
        self._lock = Lock()
        self._rng = random.SystemRandom() if seed is None else random.Random(seed)

    @property
    def length(self) -> int:
        return self._length

    def next_code(self) -> str:
        with self._lock:
            return "".join(self._rng.choice(self._alphabet) for _ in range(self._length))
