"""Tests for the response formatter."""

import pytest

from app.models.schemas import CipherMethod
from app.services.explanation.generator import ResultFormatter
from app.services.pipeline.orchestrator import DecryptionOutcome, KeywordParams, RailParams
from app.services.pipeline.validator import ValidationReport


@pytest.fixture
def formatter():
    return ResultFormatter()


@pytest.fixture
def rail_outcome():
    return DecryptionOutcome(
        success=False,
        method=CipherMethod.RAIL_FENCE,
        decrypted="WE ARE XQZ",
        confidence=2 / 3,
        key=3,
        params=RailParams(rails=3),
        details=ValidationReport(2 / 3, 2, 3, ("XQZ",)),
        raw_score=400.0,
    )


class TestResultFormatter:
    @pytest.mark.parametrize(
        "method, key, expected",
        [
            (CipherMethod.CAESAR, 3, "Shift 3"),
            (CipherMethod.RAIL_FENCE, 4, "4 rails"),
            (CipherMethod.VIGENERE, "LEMON", '"LEMON"'),
        ],
    )
    def test_format_key(self, method, key, expected):
        assert ResultFormatter.format_key(method, key) == expected

    def test_fallback_response(self, formatter, rail_outcome):
        response = formatter.build_response(rail_outcome)

        assert response.success is False
        assert response.result.key == "3 rails"
        assert response.result.params == {"rails": 3}
        assert response.result.additional_info.invalid_words == ["XQZ"]
        assert response.final_analysis.subtitle == ResultFormatter.FALLBACK_SUBTITLE

        candidate = response.final_analysis.candidates[0]
        assert candidate.method == "Rail Fence Cipher"
        assert candidate.confidence == "66.7%"
        assert candidate.valid_words == "2/3"

    def test_normalized_score_is_separate_from_confidence(self, formatter, rail_outcome):
        # 400 / 1000 * 0.8 weight * (0.3 + 0.7 * 2/3) word blend
        expected = 0.4 * 0.8 * (0.3 + 0.7 * (2 / 3))

        assert formatter.normalized_score(rail_outcome) == pytest.approx(expected)

    def test_vigenere_display_name(self, formatter):
        outcome = DecryptionOutcome(
            success=True,
            method=CipherMethod.VIGENERE,
            decrypted="ATTACK AT DAWN",
            confidence=1.0,
            key="LEMON",
            params=KeywordParams(key="LEMON"),
            details=ValidationReport(1.0, 3, 3, ()),
            raw_score=800.0,
        )

        response = formatter.build_response(outcome)

        assert response.final_analysis.candidates[0].method == "Vigenère Cipher"
        assert response.result.params == {"key": "LEMON"}
        assert response.model_dump(by_alias=True)["result"]["rawKey"] == "LEMON"
