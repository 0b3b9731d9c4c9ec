"""Tests for the Caesar cipher strategy."""

import pytest

from app.core.exceptions import StrategyError
from app.services.engines.monoalphabetic.caesar import CaesarStrategy


class TestCaesarStrategy:
    """Test suite for the Caesar cipher strategy."""

    @pytest.fixture
    def strategy(self):
        return CaesarStrategy()

    @pytest.fixture
    def long_plaintext(self):
        """Longer text with natural English letter distribution."""
        return (
            "CRYPTOGRAPHY IS THE STUDY OF SECURE COMMUNICATION IN THE PRESENCE "
            "OF ADVERSARIES. LONG BEFORE COMPUTERS EXISTED PEOPLE INVENTED CIPHERS "
            "TO HIDE MEANING FROM UNAUTHORIZED READERS. SOME METHODS RELIED ON SIMPLE "
            "SUBSTITUTION WHILE OTHERS USED TRANSPOSITION OR PERIODIC KEYS."
        )

    def test_encrypt_shift_7(self, strategy):
        """Test specific encryption with shift 7."""
        assert strategy.encrypt("HELLO", 7) == "OLSSV"

    def test_decrypt_shift_7(self, strategy):
        """Test specific decryption with shift 7."""
        assert strategy.decrypt("OLSSV", "7") == "HELLO"

    def test_preserves_non_letters(self, strategy):
        assert strategy.encrypt("Hello, World 42!", 3) == "KHOOR, ZRUOG 42!"

    def test_shift_wraps_around(self, strategy):
        assert strategy.encrypt("XYZ", 29) == "ABC"

    def test_break_finds_shift(self, strategy, long_plaintext):
        """Test automatic key finding."""
        ciphertext = strategy.encrypt(long_plaintext, 13)

        result = strategy.break_caesar(ciphertext)

        assert result.shift == 13
        assert result.text == long_plaintext

    def test_break_with_dictionary(self, dictionary, pangram):
        strategy = CaesarStrategy(dictionary)
        ciphertext = strategy.encrypt(pangram, 7)

        result = strategy.break_caesar(ciphertext)

        assert result.shift == 7
        assert result.text == pangram

    def test_break_plaintext_is_shift_zero(self, dictionary, pangram):
        result = CaesarStrategy(dictionary).break_caesar(pangram)

        assert result.shift == 0

    def test_break_without_letters_fails(self, strategy):
        with pytest.raises(StrategyError):
            strategy.break_caesar("123 !!!")

    def test_score_prefers_english(self, strategy, long_plaintext):
        assert strategy.score(long_plaintext) > strategy.score(strategy.encrypt(long_plaintext, 5))

    def test_break_returns_uppercase(self, dictionary, pangram):
        strategy = CaesarStrategy(dictionary)
        ciphertext = strategy.encrypt(pangram, 3).lower()

        result = strategy.break_caesar(ciphertext)

        assert result.shift == 3
        assert result.text == pangram
