"""
Cascade pipeline for classical cipher identification.

This module implements the resolution engine that:
1. Validates candidate plaintexts against a word dictionary
2. Runs the Caesar, Rail Fence and Vigenère strategies in a fixed order
3. Stops early on a convincing candidate, otherwise ranks by confidence
4. Normalizes raw strategy scores for presentation
"""

from app.services.pipeline.validator import TextValidator, ValidationReport
from app.services.pipeline.scorer import ScoreNormalizer
from app.services.pipeline.orchestrator import (
    DecryptionCoordinator,
    DecryptionOutcome,
    Thresholds,
)

__all__ = [
    "TextValidator",
    "ValidationReport",
    "ScoreNormalizer",
    "DecryptionCoordinator",
    "DecryptionOutcome",
    "Thresholds",
]
