import asyncio
from collections import Counter
from typing import ClassVar

from app.core.exceptions import StrategyError
from app.models.schemas import CipherMethod
from app.services.engines.base import (
    CipherStrategy,
    VigenereBreak,
    VigenereValidation,
)
from app.services.engines.registry import StrategyRegistry
from app.services.pipeline.validator import TextValidator, tokenize


@StrategyRegistry.register
class VigenereStrategy(CipherStrategy):
    """
    Vigenère cipher strategy.

    A polyalphabetic substitution cipher that uses a keyword to determine
    the shift for each letter. Each letter of the keyword represents a
    different Caesar shift applied in sequence.

    Breaking involves:
    1. Estimating key lengths from column IOC and Kasiski repeats
    2. Breaking each column as an independent Caesar cipher
    3. A dictionary attack trying known words as keys

    The search can be long for big dictionaries, so break_vigenere runs it
    on a worker thread.
    """

    name = "Vigenère Cipher"
    method = CipherMethod.VIGENERE
    description = (
        "A polyalphabetic cipher where each letter is shifted by a different amount "
        "based on a repeating keyword. More secure than Caesar but vulnerable to "
        "Kasiski examination and frequency analysis per key position."
    )

    MIN_LETTERS: ClassVar[int] = 10
    LENGTH_CANDIDATES: ClassVar[int] = 5
    MIN_KEY_LENGTH: ClassVar[int] = 2

    COMMON_KEYS: ClassVar[tuple[str, ...]] = (
        "KEY", "SECRET", "PASSWORD", "CIPHER", "CODE", "CRYPTO",
        "HIDDEN", "LOCK", "SAFE", "SECURE", "VIGENERE", "LEMON",
    )

    def __init__(self, dictionary=None, max_key_length: int = 15):
        super().__init__(dictionary)
        self.max_key_length = max(1, max_key_length)

    @property
    def common_words(self) -> frozenset[str]:
        return super().common_words | frozenset(self.COMMON_KEYS)

    async def break_vigenere(self, ciphertext: str) -> VigenereBreak:
        """Search for the key without blocking the event loop."""
        return await asyncio.to_thread(self.solve, ciphertext)

    def solve(self, ciphertext: str) -> VigenereBreak:
        """
        Find the best key and decrypt.

        The decrypted text is uppercase with non-letters left in place.

        Raises:
            StrategyError: If there are too few letters to analyze
        """
        filtered = self.letters_only(ciphertext)

        if len(filtered) < self.MIN_LETTERS:
            raise StrategyError(
                self.method.value,
                f"need at least {self.MIN_LETTERS} letters, got {len(filtered)}",
            )

        best_key = ""
        best_score = float("-inf")

        for key in self._candidate_keys(filtered):
            score = self.score(self.decrypt(ciphertext, key))
            if score > best_score:
                best_key, best_score = key, score

        decrypted = self.decrypt(ciphertext, best_key)

        return VigenereBreak(
            key=best_key,
            decrypted=decrypted,
            score=best_score,
            validation=self._validate(decrypted),
        )

    def encrypt(self, plaintext: str, key: int | str) -> str:
        """Encrypt using the keyword."""
        return self._apply(plaintext, self._parse_key(key), direction=1)

    def decrypt(self, ciphertext: str, key: int | str) -> str:
        """Decrypt using the keyword."""
        return self._apply(ciphertext, self._parse_key(key), direction=-1)

    def _candidate_keys(self, filtered: str) -> list[str]:
        """
        Keys to try, in a fixed order.

        Frequency-derived keys for the likeliest lengths come first, then
        the dictionary attack. Duplicates are dropped so earlier sources
        win ties.
        """
        keys = [
            self._shortest_period(self._find_key(filtered, length))
            for length in self._estimate_key_lengths(filtered)[:self.LENGTH_CANDIDATES]
        ]

        keys.extend(self.COMMON_KEYS)

        if self.dictionary is not None:
            keys.extend(
                word for word in self.dictionary
                if self.MIN_KEY_LENGTH <= len(word) <= self.max_key_length
                and all(c in self.ALPHABET for c in word)
            )

        return list(dict.fromkeys(keys))

    @staticmethod
    def _shortest_period(key: str) -> str:
        """Reduce a repeated key such as SECRETSECRET to SECRET."""
        for size in range(1, len(key)):
            if len(key) % size == 0 and key[:size] * (len(key) // size) == key:
                return key[:size]
        return key

    def _estimate_key_lengths(self, ciphertext: str) -> list[int]:
        """
        Estimate likely key lengths using IOC analysis.

        For each potential key length, compute the average IOC of
        each "column" (every nth letter). Higher average IOC suggests
        correct key length. Lengths that divide Kasiski distances are
        moved to the front.
        """
        n = len(ciphertext)
        candidates = []

        for length in range(1, min(self.max_key_length, n // 2) + 1):
            columns = [ciphertext[i::length] for i in range(length)]
            avg_ioc = sum(self._calculate_ioc(col) for col in columns) / length
            candidates.append((length, avg_ioc))

        # Stable: equal IOC keeps the shorter length first
        candidates.sort(key=lambda x: x[1], reverse=True)

        kasiski_lengths = self._kasiski_factors(ciphertext)
        prioritized = [length for length, _ in candidates if length in kasiski_lengths]
        remaining = [length for length, _ in candidates if length not in kasiski_lengths]

        return prioritized + remaining

    def _kasiski_factors(self, ciphertext: str, size: int = 3) -> set[int]:
        """Key lengths that divide the distance between repeated trigrams."""
        positions: dict[str, list[int]] = {}
        for i in range(len(ciphertext) - size + 1):
            positions.setdefault(ciphertext[i:i + size], []).append(i)

        likely = set()
        for found in positions.values():
            for a, b in zip(found, found[1:]):
                distance = b - a
                for factor in range(2, min(distance, self.max_key_length) + 1):
                    if distance % factor == 0:
                        likely.add(factor)

        return likely

    def _calculate_ioc(self, text: str) -> float:
        """Calculate Index of Coincidence for text."""
        n = len(text)
        if n <= 1:
            return 0.0

        counter = Counter(text)
        numerator = sum(f * (f - 1) for f in counter.values())
        return numerator / (n * (n - 1))

    def _find_key(self, ciphertext: str, key_length: int) -> str:
        """
        Find the key by breaking each Caesar cipher independently.

        For each position, try all 26 shifts and pick the one whose
        letter distribution is closest to English.
        """
        key = []

        for i in range(key_length):
            column = ciphertext[i::key_length]

            best_shift = 0
            best_score = float("inf")

            for shift in range(26):
                decrypted = "".join(
                    self.ALPHABET[(self.ALPHABET.index(c) - shift) % 26]
                    for c in column
                )
                score = self.scorer.chi_squared(decrypted)

                if score < best_score:
                    best_score = score
                    best_shift = shift

            key.append(self.ALPHABET[best_shift])

        return "".join(key)

    def _validate(self, decrypted: str) -> VigenereValidation:
        """
        Percentage of decrypted tokens that are known words.

        Only the injected dictionary counts when there is one, so the figure
        matches what the coordinator's validator would report. Without a
        dictionary the built-in word list stands in.
        """
        if self.dictionary is not None and len(self.dictionary) > 0:
            report = TextValidator(self.dictionary).validate(decrypted)
            return VigenereValidation(
                percentage=report.confidence * 100,
                invalid_words=report.invalid_words,
            )

        words = tokenize(decrypted)
        if not words:
            return VigenereValidation(percentage=0.0)

        invalid = tuple(w for w in words if w not in self.common_words)
        percentage = (len(words) - len(invalid)) / len(words) * 100

        return VigenereValidation(percentage=percentage, invalid_words=invalid)

    def _parse_key(self, key: int | str) -> str:
        key_str = str(key).upper()
        if not key_str or not all(c in self.ALPHABET for c in key_str):
            raise ValueError("Invalid key: must be alphabetic")
        return key_str

    def _apply(self, text: str, key: str, direction: int) -> str:
        """Shift each letter by the next key letter; other characters pass through."""
        result = []
        key_idx = 0

        for char in text.upper():
            if char in self.ALPHABET:
                shift = self.ALPHABET.index(key[key_idx % len(key)]) * direction
                result.append(self.ALPHABET[(self.ALPHABET.index(char) + shift) % 26])
                key_idx += 1
            else:
                result.append(char)

        return "".join(result)
