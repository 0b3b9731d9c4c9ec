"""Shared fixtures for the cipher breaker tests."""

import json

import pytest

from app.core.config import Settings
from app.services.pipeline.orchestrator import DecryptionCoordinator
from app.services.preprocessing.dictionary import WordDictionary

WORDS = [
    "THE", "QUICK", "BROWN", "FOX", "JUMPS", "OVER", "LAZY", "DOG",
    "WE", "ARE", "DISCOVERED", "FLEE", "AT", "ONCE",
    "ATTACK", "DAWN", "AND", "WHILE", "SECRET", "MESSAGE",
    "HELLO", "WORLD",
]


@pytest.fixture
def words():
    return list(WORDS)


@pytest.fixture
def dictionary(words):
    return WordDictionary(words)


@pytest.fixture
def dictionary_file(tmp_path, words):
    path = tmp_path / "words.json"
    path.write_text(json.dumps({"commonWords": words}), encoding="utf-8")
    return path


@pytest.fixture
def coordinator(dictionary):
    return DecryptionCoordinator.from_dictionary(dictionary)


@pytest.fixture
def settings(dictionary_file):
    return Settings(dictionary_path=dictionary_file)


@pytest.fixture
def pangram():
    return "THE QUICK BROWN FOX JUMPS OVER THE LAZY DOG"


@pytest.fixture
def long_sentence():
    """Enough letters for the Vigenère key-length estimate."""
    return (
        "THE QUICK BROWN FOX JUMPS OVER THE LAZY DOG AND WE ATTACK AT DAWN "
        "WHILE THE SECRET MESSAGE AND THE DOG ARE DISCOVERED AND WE FLEE AT ONCE"
    )
