from app.core.exceptions import StrategyError
from app.models.schemas import CipherMethod
from app.services.engines.base import CipherStrategy, RailFenceBreak
from app.services.engines.registry import StrategyRegistry


@StrategyRegistry.register
class RailFenceStrategy(CipherStrategy):
    """
    Rail Fence cipher strategy.

    The Rail Fence cipher writes the plaintext in a zigzag pattern across
    a number of "rails" (rows), then reads off each rail in order to
    produce the ciphertext. Every character, spaces included, takes part
    in the transposition, so word boundaries come back on decryption.

    Example with 3 rails:
    Plaintext: WEAREDISCOVEREDRUNATONCE

    W . . . E . . . C . . . R . . . U . . . O . . .
    . E . R . D . S . O . E . E . R . N . T . N . E
    . . A . . . I . . . V . . . D . . . A . . . C .

    Read off rows: WECRUO + ERDSOEERNTNE + AIVDAC
    """

    name = "Rail Fence Cipher"
    method = CipherMethod.RAIL_FENCE
    description = (
        "A transposition cipher that writes plaintext in a zigzag pattern "
        "across multiple 'rails' (rows), then reads each rail in sequence. "
        "The number of rails is the key."
    )

    MIN_RAILS = 2

    def __init__(self, dictionary=None, max_rails: int = 10):
        super().__init__(dictionary)
        self.max_rails = max(self.MIN_RAILS, max_rails)

    def break_rail_fence(self, ciphertext: str) -> RailFenceBreak:
        """
        Try rail counts from 2 up to max_rails and return the best one.

        Rail counts at or above the text length are skipped since they
        leave the text unchanged. Ties keep the smaller rail count.
        The returned text is uppercase; the ciphertext's letter case is not
        kept.

        Raises:
            StrategyError: If the ciphertext is too short to transpose
        """
        n = len(ciphertext)
        upper = min(self.max_rails, n - 1)

        if upper < self.MIN_RAILS:
            raise StrategyError(self.method.value, f"text too short for rails (length {n})")

        best: RailFenceBreak | None = None

        for rails in range(self.MIN_RAILS, upper + 1):
            plaintext = self.decrypt(ciphertext, rails)
            score = self.score(plaintext)

            if best is None or score > best.score:
                best = RailFenceBreak(rails=rails, text=plaintext, score=score)

        return best

    def encrypt(self, plaintext: str, key: int | str) -> str:
        """Encrypt using the specified number of rails."""
        rails = self._parse_key(key)
        plaintext = plaintext.upper()

        if rails >= len(plaintext):
            return plaintext

        fence: list[list[str]] = [[] for _ in range(rails)]
        for char, rail in zip(plaintext, self._zigzag(len(plaintext), rails)):
            fence[rail].append(char)

        return "".join("".join(row) for row in fence)

    def decrypt(self, ciphertext: str, key: int | str) -> str:
        """Decrypt using the specified number of rails."""
        rails = self._parse_key(key)
        ciphertext = ciphertext.upper()
        n = len(ciphertext)

        if rails >= n:
            return ciphertext

        pattern = self._zigzag(n, rails)

        # Calculate how many characters go in each rail
        rail_lengths = [0] * rails
        for rail in pattern:
            rail_lengths[rail] += 1

        # Split ciphertext into rails
        fence = []
        idx = 0
        for length in rail_lengths:
            fence.append(iter(ciphertext[idx:idx + length]))
            idx += length

        # Read off in zigzag pattern
        return "".join(next(fence[rail]) for rail in pattern)

    def _parse_key(self, key: int | str) -> int:
        """Parse key to number of rails."""
        rails = int(key)
        if rails < self.MIN_RAILS:
            raise ValueError(f"Invalid key: rails must be >= {self.MIN_RAILS}")
        return rails

    @staticmethod
    def _zigzag(length: int, rails: int) -> list[int]:
        """Rail index visited by each character position."""
        pattern = []
        rail = 0
        direction = 1  # 1 = down, -1 = up

        for _ in range(length):
            pattern.append(rail)

            # Change direction at top or bottom
            if rail == 0:
                direction = 1
            elif rail == rails - 1:
                direction = -1

            rail += direction

        return pattern
