import string
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from app.models.schemas import CipherMethod
from app.services.optimization.scoring import PlaintextScorer
from app.services.preprocessing.dictionary import WordDictionary


@dataclass(frozen=True)
class CaesarBreak:
    """Best Caesar candidate."""

    shift: int
    text: str
    score: float


@dataclass(frozen=True)
class RailFenceBreak:
    """Best Rail Fence candidate."""

    rails: int
    text: str
    score: float


@dataclass(frozen=True)
class VigenereValidation:
    """Word validation already performed by the Vigenère search."""

    percentage: float
    invalid_words: tuple[str, ...] = ()


@dataclass(frozen=True)
class VigenereBreak:
    """Best Vigenère candidate."""

    key: str
    decrypted: str
    score: float
    validation: VigenereValidation | None = None


class CipherStrategy(ABC):
    """
    Abstract base class for the cipher-breaking strategies.

    Each strategy must provide:
    - encrypt(): Encrypt plaintext with a known key
    - decrypt(): Decrypt with a known key

    and its own ``break_*`` method that searches the key space and returns
    the single best candidate. Strategies are deterministic: the same
    ciphertext and dictionary always yield the same candidate.
    """

    # Strategy metadata
    name: str
    method: CipherMethod
    description: str

    ALPHABET: ClassVar[str] = string.ascii_uppercase

    def __init__(self, dictionary: WordDictionary | None = None):
        self.dictionary = dictionary
        self.scorer = PlaintextScorer(dictionary)

    @property
    def common_words(self) -> frozenset[str]:
        """Built-in word list, usable when no dictionary is loaded."""
        return PlaintextScorer.COMMON_WORDS

    @abstractmethod
    def encrypt(self, plaintext: str, key: int | str) -> str:
        """
        Encrypt plaintext with the given key.

        Args:
            plaintext: The plaintext to encrypt
            key: The encryption key

        Returns:
            Ciphertext (uppercase)
        """
        pass

    @abstractmethod
    def decrypt(self, ciphertext: str, key: int | str) -> str:
        """
        Decrypt with a known key.

        Args:
            ciphertext: The ciphertext to decrypt
            key: The decryption key

        Returns:
            Plaintext (uppercase)
        """
        pass

    def score(self, plaintext: str) -> float:
        """
        Score a plaintext candidate.

        Returns:
            Raw score on roughly [0, 1000] (higher is better)
        """
        return self.scorer.raw_score(plaintext)

    def letters_only(self, text: str) -> str:
        return "".join(c for c in text.upper() if c in self.ALPHABET)
