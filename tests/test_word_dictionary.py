"""Tests for the word dictionary."""

import pytest

from app.services.preprocessing.dictionary import WordDictionary


class TestWordDictionary:
    """Test suite for WordDictionary."""

    def test_lookup_is_case_insensitive(self, dictionary):
        assert dictionary.contains("the")
        assert dictionary.contains("Quick")
        assert "fox" in dictionary
        assert not dictionary.contains("ZEBRA")

    def test_words_are_normalized(self):
        d = WordDictionary([" hello ", "World", "", "   "])

        assert len(d) == 2
        assert list(d) == ["HELLO", "WORLD"]

    def test_non_string_entries_are_ignored(self):
        d = WordDictionary(["CAT", 42, None, "DOG"])

        assert d.size == 2

    def test_from_words_merges_lists(self):
        d = WordDictionary.from_words(["CAT", "DOG"], {"dog", "BIRD"})

        assert list(d) == ["BIRD", "CAT", "DOG"]

    def test_is_immutable(self, dictionary):
        with pytest.raises(AttributeError):
            dictionary.extra = {"NEW"}

    def test_load_from_file(self, dictionary_file, words):
        d = WordDictionary.load(dictionary_file)

        assert d is not None
        assert len(d) == len(set(words))
        assert d.contains("discovered")

    def test_load_missing_file_returns_none(self, tmp_path):
        assert WordDictionary.load(tmp_path / "missing.json") is None

    def test_load_malformed_json_returns_none(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        assert WordDictionary.load(path) is None

    @pytest.mark.parametrize(
        "content",
        ['{"words": ["CAT"]}', '{"commonWords": "CAT"}', '["CAT"]'],
    )
    def test_load_without_word_array_returns_none(self, tmp_path, content):
        path = tmp_path / "words.json"
        path.write_text(content, encoding="utf-8")

        assert WordDictionary.load(path) is None

    def test_load_logs_word_count(self, dictionary_file, caplog):
        with caplog.at_level("INFO", logger="app"):
            WordDictionary.load(dictionary_file)

        assert "Loaded" in caplog.text

    def test_bundled_dictionary_loads(self):
        from app.core.config import DEFAULT_DICTIONARY_PATH

        d = WordDictionary.load(DEFAULT_DICTIONARY_PATH)

        assert d is not None
        assert len(d) > 100
        assert d.contains("THE")

    def test_entries_keep_letters_only(self):
        d = WordDictionary(["don't", "e-mail", "--", "42"])

        assert list(d) == ["DONT", "EMAIL"]
        assert d.contains("DON'T")
