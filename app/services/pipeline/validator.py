"""
Dictionary-based text validation.

Confidence for a candidate plaintext is the fraction of its
whitespace-separated tokens that are known words.
"""

from dataclasses import dataclass

from app.services.preprocessing.dictionary import WordDictionary, normalize_word


@dataclass(frozen=True)
class ValidationReport:
    """Word validity of a piece of text."""

    confidence: float
    valid_words: int
    total_words: int
    invalid_words: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> "ValidationReport":
        return cls(confidence=0.0, valid_words=0, total_words=0, invalid_words=())


def tokenize(text: str) -> list[str]:
    """Split on whitespace, keep letters only, uppercase, drop empties."""
    tokens = (normalize_word(word) for word in text.split())
    return [token for token in tokens if token]


class TextValidator:
    """Scores text by dictionary membership of its words."""

    def __init__(self, dictionary: WordDictionary):
        self.dictionary = dictionary

    def validate(self, text: str) -> ValidationReport:
        if not text or not isinstance(text, str):
            return ValidationReport.empty()

        words = tokenize(text)
        if not words:
            return ValidationReport.empty()

        invalid_words = []
        valid_count = 0

        for word in words:
            if self.dictionary.contains(word):
                valid_count += 1
            else:
                invalid_words.append(word)

        return ValidationReport(
            confidence=valid_count / len(words),
            valid_words=valid_count,
            total_words=len(words),
            invalid_words=tuple(invalid_words),
        )
