from typing import ClassVar

from app.core.exceptions import StrategyError
from app.models.schemas import CipherMethod
from app.services.engines.base import CaesarBreak, CipherStrategy
from app.services.engines.registry import StrategyRegistry


@StrategyRegistry.register
class CaesarStrategy(CipherStrategy):
    """
    Caesar cipher strategy.

    The Caesar cipher is a simple substitution cipher that shifts each letter
    by a fixed amount. With only 26 possible keys, it can be trivially broken
    by trying all shifts and scoring each result.
    """

    name = "Caesar Cipher"
    method = CipherMethod.CAESAR
    description = (
        "A substitution cipher where each letter is shifted by a fixed amount. "
        "Named after Julius Caesar who used it for military communications."
    )

    KEY_SPACE: ClassVar[int] = 26

    def break_caesar(self, ciphertext: str) -> CaesarBreak:
        """
        Try all 26 shifts and return the best scoring one.

        Ties keep the smallest shift. The returned text is uppercase with
        non-letters left in place; the ciphertext's letter case is not kept.

        Raises:
            StrategyError: If the ciphertext has no letters to shift
        """
        if not self.letters_only(ciphertext):
            raise StrategyError(self.method.value, "no alphabetic characters")

        best: CaesarBreak | None = None

        for shift in range(self.KEY_SPACE):
            plaintext = self.decrypt(ciphertext, shift)
            score = self.score(plaintext)

            if best is None or score > best.score:
                best = CaesarBreak(shift=shift, text=plaintext, score=score)

        return best

    def encrypt(self, plaintext: str, key: int | str) -> str:
        """Encrypt plaintext with the given shift."""
        return self._shift(plaintext, self._parse_key(key))

    def decrypt(self, ciphertext: str, key: int | str) -> str:
        """Decrypt by shifting in reverse."""
        return self._shift(ciphertext, -self._parse_key(key))

    def _parse_key(self, key: int | str) -> int:
        """Parse key to integer shift value."""
        return int(key) % self.KEY_SPACE

    def _shift(self, text: str, shift: int) -> str:
        result = []

        for char in text.upper():
            if char in self.ALPHABET:
                idx = self.ALPHABET.index(char)
                result.append(self.ALPHABET[(idx + shift) % 26])
            else:
                result.append(char)

        return "".join(result)
