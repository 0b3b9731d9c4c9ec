import json
import logging
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

_NON_ALPHA = re.compile(r"[^A-Za-z]")


def normalize_word(word: str) -> str:
    """Uppercase a word and drop every character that is not A-Z."""
    return _NON_ALPHA.sub("", word).upper()


class WordDictionary:
    """
    Immutable, case-normalized set of known words.

    Built once at startup and shared read-only by the validator, the
    coordinator and every strategy. Words are stored uppercase; lookups
    normalize the probe the same way, so "don't" matches DONT.
    """

    __slots__ = ("_words",)

    def __init__(self, words: Iterable[str] = ()):
        normalized = (
            normalize_word(word)
            for word in words
            if isinstance(word, str)
        )
        self._words: frozenset[str] = frozenset(w for w in normalized if w)

    @classmethod
    def from_words(cls, *word_lists: Iterable[str]) -> "WordDictionary":
        """Build a dictionary from the union of several word lists."""
        merged: list[str] = []
        for words in word_lists:
            merged.extend(words)
        return cls(merged)

    @classmethod
    def load(cls, path: str | Path) -> "WordDictionary | None":
        """
        Load a dictionary from a JSON document with a ``commonWords`` array.

        Returns None when the file is missing, is not valid JSON, or lacks
        the ``commonWords`` array; callers treat that as "no dictionary".
        """
        path = Path(path)

        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error loading dictionary %s: %s", path, e)
            return None

        words = data.get("commonWords") if isinstance(data, dict) else None
        if not isinstance(words, list):
            logger.error("Dictionary %s must contain a commonWords array", path)
            return None

        dictionary = cls(words)
        logger.info("Loaded %d words from %s", len(dictionary), path)
        return dictionary

    def contains(self, word: str) -> bool:
        return normalize_word(word) in self._words

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.contains(word)

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._words))

    @property
    def size(self) -> int:
        return len(self._words)

    def __repr__(self) -> str:
        return f"WordDictionary(size={len(self._words)})"
