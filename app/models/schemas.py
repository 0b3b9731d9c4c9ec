from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ============================================================================
# Enums
# ============================================================================


class CipherMethod(str, Enum):
    """Cipher families tried by the cascade, in priority order."""

    CAESAR = "Caesar"
    RAIL_FENCE = "RailFence"
    VIGENERE = "Vigenere"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[CipherMethod, str] = {
    CipherMethod.CAESAR: "Caesar",
    CipherMethod.RAIL_FENCE: "Rail Fence",
    CipherMethod.VIGENERE: "Vigenère",
}


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ============================================================================
# Request Schemas
# ============================================================================


class BreakCipherRequest(BaseModel):
    """Request schema for /break-cipher endpoint."""

    ciphertext: str = Field(min_length=1)


# ============================================================================
# Response Schemas
# ============================================================================


class AdditionalInfo(CamelModel):
    """Word validation details for the returned candidate."""

    valid_words: int = Field(ge=0)
    total_words: int = Field(ge=0)
    invalid_words: list[str] = Field(default_factory=list)
    valid_word_percentage: float = Field(ge=0.0, le=100.0)


class BreakResult(CamelModel):
    """The resolved (or best-effort) decryption."""

    method: CipherMethod
    key: str
    raw_key: int | str
    decrypted: str
    confidence: float = Field(ge=0.0, le=1.0)
    normalized_score: float = Field(ge=0.0, le=1.0)
    params: dict[str, Any]
    additional_info: AdditionalInfo


class RankedCandidate(CamelModel):
    """A single row of the final analysis table."""

    rank: int
    method: str
    key: str
    confidence: str
    valid_words: str
    valid_word_percentage: str
    decrypted_text: str


class FinalAnalysis(CamelModel):
    """Presentation block summarizing the resolution."""

    title: str
    subtitle: str
    candidates: list[RankedCandidate]


class BreakCipherResponse(CamelModel):
    """Response schema for /break-cipher endpoint."""

    success: bool
    result: BreakResult
    final_analysis: FinalAnalysis


# ============================================================================
# Error Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    error: str
