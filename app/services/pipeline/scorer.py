"""
Raw score normalization.

Strategies report unit-less raw scores that are not comparable across
cipher families. This module rescales them into [0, 1] for presentation,
favouring simpler ciphers and candidates made of real words.
"""

import math
import re
from typing import ClassVar

from app.models.schemas import CipherMethod


class ScoreNormalizer:
    """
    Maps a strategy's raw score onto a bounded presentation score.

    Steps:
    1. Non-finite scores normalize to 0
    2. Negative scores clamp to 0, then divide by SCALE
    3. Multiply by the method weight
    4. Blend in the valid-word percentage (floor multiplier 0.3)
    5. Reward space-preserving ciphers
    6. Clamp to [0, 1]

    This is distinct from the coordinator's confidence, which is pure
    word validity.
    """

    SCALE: ClassVar[float] = 1000.0
    DEFAULT_WEIGHT: ClassVar[float] = 1.0
    WORD_FLOOR: ClassVar[float] = 0.3
    SPACE_BONUS: ClassVar[float] = 1.2

    WEIGHTS: ClassVar[dict[str, float]] = {
        "caesar": 1.2,
        "railfence": 0.8,
        "vigenere": 0.7,
    }

    def normalize(
        self,
        method: str | CipherMethod,
        raw_score: float,
        valid_word_percentage: float | None = None,
        preserves_spaces: bool = False,
    ) -> float:
        if not self._is_finite_number(raw_score):
            return 0.0

        score = max(0.0, float(raw_score)) / self.SCALE
        score *= self.weight(method)

        if self._is_finite_number(valid_word_percentage):
            word_score = min(100.0, max(0.0, float(valid_word_percentage))) / 100
            score *= self.WORD_FLOOR + (1 - self.WORD_FLOOR) * word_score

        if preserves_spaces:
            score *= self.SPACE_BONUS

        return max(0.0, min(1.0, score))

    def weight(self, method: str | CipherMethod) -> float:
        """Weight for a method name, matched loosely ("Rail Fence" == "railFence")."""
        return self.WEIGHTS.get(self._method_key(method), self.DEFAULT_WEIGHT)

    @staticmethod
    def _method_key(method: str | CipherMethod) -> str:
        name = method.value if isinstance(method, CipherMethod) else str(method)
        name = name.replace("è", "e").replace("È", "E")
        return re.sub(r"[^a-z]", "", name.lower())

    @staticmethod
    def _is_finite_number(value: object) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return math.isfinite(value)
