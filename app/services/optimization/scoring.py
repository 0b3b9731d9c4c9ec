import string
from collections import Counter
from typing import ClassVar

from app.services.preprocessing.dictionary import WordDictionary


class PlaintextScorer:
    """
    Scores candidate plaintexts for the brute-force strategies.

    Combines three signals into a raw score on roughly [0, 1000],
    higher is better:
    - Word coverage: share of letters that belong to known words
    - Frequency fit: chi-squared against English letter frequencies
    - Bigram fit: share of common English bigrams
    """

    ALPHABET: ClassVar[str] = string.ascii_uppercase
    SCALE: ClassVar[float] = 1000.0

    WORD_WEIGHT: ClassVar[float] = 0.6
    FREQUENCY_WEIGHT: ClassVar[float] = 0.25
    BIGRAM_WEIGHT: ClassVar[float] = 0.15

    # Chi-squared at or above this contributes nothing
    CHI_SQUARED_CEILING: ClassVar[float] = 500.0
    # Typical share of common bigrams in English prose
    BIGRAM_REFERENCE: ClassVar[float] = 0.4

    # English letter frequencies (percentage)
    ENGLISH_FREQ: ClassVar[dict[str, float]] = {
        "E": 12.70, "T": 9.06, "A": 8.17, "O": 7.51, "I": 6.97,
        "N": 6.75, "S": 6.33, "H": 6.09, "R": 5.99, "D": 4.25,
        "L": 4.03, "C": 2.78, "U": 2.76, "M": 2.41, "W": 2.36,
        "F": 2.23, "G": 2.02, "Y": 1.97, "P": 1.93, "B": 1.29,
        "V": 0.98, "K": 0.77, "J": 0.15, "X": 0.15, "Q": 0.10,
        "Z": 0.07,
    }

    # Built-in word list, used alongside (or instead of) the dictionary
    COMMON_WORDS: ClassVar[frozenset[str]] = frozenset({
        "A", "I", "AN", "AS", "AT", "BE", "BY", "DO", "GO", "HE", "IF",
        "IN", "IS", "IT", "ME", "MY", "NO", "OF", "ON", "OR", "SO", "TO",
        "UP", "US", "WE",
        "THE", "AND", "FOR", "ARE", "BUT", "NOT", "YOU", "ALL",
        "CAN", "HAD", "HER", "WAS", "ONE", "OUR", "OUT", "HAS",
        "HIS", "HOW", "ITS", "MAY", "NEW", "NOW", "OLD", "SEE",
        "TWO", "WAY", "WHO", "BOY", "DID", "GET", "HIM", "LET",
        "PUT", "SAY", "SHE", "TOO", "USE", "THAT", "WITH", "HAVE",
        "THIS", "WILL", "YOUR", "FROM", "THEY", "BEEN", "CALL",
        "FIRST", "COULD", "PEOPLE", "ABOUT", "WOULD", "THEIR",
    })

    COMMON_BIGRAMS: ClassVar[frozenset[str]] = frozenset({
        "TH", "HE", "IN", "ER", "AN", "RE", "ON", "AT", "EN", "ND",
        "TI", "ES", "OR", "TE", "OF", "ED", "IS", "IT", "AL", "AR",
        "ST", "TO", "NT", "NG", "SE", "HA", "AS", "OU", "IO", "LE",
    })

    def __init__(self, dictionary: WordDictionary | None = None):
        self.dictionary = dictionary

    def is_word(self, word: str) -> bool:
        if word in self.COMMON_WORDS:
            return True
        return self.dictionary is not None and self.dictionary.contains(word)

    def chi_squared(self, text: str) -> float:
        """
        Chi-squared against English frequencies.

        Lower = better match to English.
        """
        letters = self._letters(text)
        n = len(letters)

        if n == 0:
            return float("inf")

        counter = Counter(letters)
        chi_squared = 0.0

        for letter in self.ALPHABET:
            observed = counter.get(letter, 0)
            expected = (self.ENGLISH_FREQ[letter] / 100) * n
            chi_squared += ((observed - expected) ** 2) / expected

        return chi_squared

    def bigram_score(self, text: str) -> float:
        """Share of common bigrams within words. Higher is better."""
        total = 0
        common = 0

        for word in self._words(text):
            for i in range(len(word) - 1):
                total += 1
                if word[i:i + 2] in self.COMMON_BIGRAMS:
                    common += 1

        return common / total if total else 0.0

    def word_coverage(self, text: str) -> float:
        """Share of letters that sit inside known words. Higher is better."""
        words = self._words(text)
        total = sum(len(w) for w in words)

        if total == 0:
            return 0.0

        covered = sum(len(w) for w in words if self.is_word(w))
        return covered / total

    def raw_score(self, text: str) -> float:
        """Combined score on [0, SCALE]; higher = more likely English."""
        if not self._letters(text):
            return 0.0

        frequency_fit = max(0.0, 1.0 - self.chi_squared(text) / self.CHI_SQUARED_CEILING)
        bigram_fit = min(1.0, self.bigram_score(text) / self.BIGRAM_REFERENCE)

        combined = (
            self.WORD_WEIGHT * self.word_coverage(text)
            + self.FREQUENCY_WEIGHT * frequency_fit
            + self.BIGRAM_WEIGHT * bigram_fit
        )
        return combined * self.SCALE

    def _letters(self, text: str) -> str:
        return "".join(c for c in text.upper() if c in self.ALPHABET)

    def _words(self, text: str) -> list[str]:
        """Extract maximal runs of letters."""
        words = []
        current = []

        for char in text.upper():
            if char in self.ALPHABET:
                current.append(char)
            elif current:
                words.append("".join(current))
                current = []
        if current:
            words.append("".join(current))

        return words
