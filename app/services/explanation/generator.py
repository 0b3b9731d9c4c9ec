from dataclasses import asdict

from app.models.schemas import (
    AdditionalInfo,
    BreakCipherResponse,
    BreakResult,
    CipherMethod,
    FinalAnalysis,
    RankedCandidate,
)
from app.services.pipeline.orchestrator import DecryptionOutcome
from app.services.pipeline.scorer import ScoreNormalizer


class ResultFormatter:
    """
    Turns a resolution outcome into the API response.

    Every figure shown is taken from the outcome itself; the normalized
    score is the only derived number and is labelled separately from
    confidence.
    """

    SUCCESS_SUBTITLE = "Decryption successful with high confidence"
    FALLBACK_SUBTITLE = "Best possible decryption (below confidence threshold)"

    # Transpositions move spaces around; substitutions keep them in place
    SPACE_PRESERVING = frozenset({CipherMethod.CAESAR, CipherMethod.VIGENERE})

    def __init__(self, normalizer: ScoreNormalizer | None = None):
        self.normalizer = normalizer or ScoreNormalizer()

    @staticmethod
    def format_key(method: CipherMethod, key: int | str) -> str:
        """Human-readable key: ``Shift 3``, ``3 rails`` or ``"KEY"``."""
        if method is CipherMethod.CAESAR:
            return f"Shift {key}"
        if method is CipherMethod.RAIL_FENCE:
            return f"{key} rails"
        if method is CipherMethod.VIGENERE:
            return f'"{key}"'
        return str(key)

    def normalized_score(self, outcome: DecryptionOutcome) -> float:
        return self.normalizer.normalize(
            outcome.method,
            outcome.raw_score,
            valid_word_percentage=outcome.confidence * 100,
            preserves_spaces=outcome.method in self.SPACE_PRESERVING,
        )

    def build_response(self, outcome: DecryptionOutcome) -> BreakCipherResponse:
        details = outcome.details
        key = self.format_key(outcome.method, outcome.key)
        percentage = outcome.confidence * 100

        result = BreakResult(
            method=outcome.method,
            key=key,
            raw_key=outcome.key,
            decrypted=outcome.decrypted,
            confidence=outcome.confidence,
            normalized_score=self.normalized_score(outcome),
            params=asdict(outcome.params),
            additional_info=AdditionalInfo(
                valid_words=details.valid_words,
                total_words=details.total_words,
                invalid_words=list(details.invalid_words),
                valid_word_percentage=percentage,
            ),
        )

        final_analysis = FinalAnalysis(
            title="Final Analysis Results",
            subtitle=self.SUCCESS_SUBTITLE if outcome.success else self.FALLBACK_SUBTITLE,
            candidates=[
                RankedCandidate(
                    rank=1,
                    method=f"{outcome.method.display_name} Cipher",
                    key=key,
                    confidence=f"{percentage:.1f}%",
                    valid_words=f"{details.valid_words}/{details.total_words}",
                    valid_word_percentage=f"{percentage:.1f}%",
                    decrypted_text=outcome.decrypted,
                )
            ],
        )

        return BreakCipherResponse(
            success=outcome.success,
            result=result,
            final_analysis=final_analysis,
        )
