"""
Cascade coordinator - the brain of the cipher breaker.

This module implements the resolution logic:
1. Try Caesar, Rail Fence and Vigenère in that fixed order
2. Validate each candidate against the word dictionary
3. Return early once a candidate is convincing
4. Otherwise rank every candidate by confidence and return the best
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Protocol

from app.core.exceptions import ExhaustionError, InputError
from app.models.schemas import CipherMethod
from app.services.engines.base import CaesarBreak, RailFenceBreak, VigenereBreak
from app.services.engines.registry import StrategyRegistry
from app.services.pipeline.validator import TextValidator, ValidationReport
from app.services.preprocessing.dictionary import WordDictionary

logger = logging.getLogger(__name__)


# ============================================================================
# Collaborator contracts
# ============================================================================


class CaesarBreaker(Protocol):
    common_words: Any

    def break_caesar(self, ciphertext: str) -> CaesarBreak: ...


class RailFenceBreaker(Protocol):
    common_words: Any

    def break_rail_fence(self, ciphertext: str) -> RailFenceBreak: ...


class VigenereBreaker(Protocol):
    common_words: Any

    async def break_vigenere(self, ciphertext: str) -> VigenereBreak: ...


# ============================================================================
# Results
# ============================================================================


@dataclass(frozen=True)
class ShiftParams:
    shift: int


@dataclass(frozen=True)
class RailParams:
    rails: int


@dataclass(frozen=True)
class KeywordParams:
    key: str


Params = ShiftParams | RailParams | KeywordParams


def params_for(method: CipherMethod, key: int | str) -> Params:
    """Method-specific parameters for a key."""
    if method is CipherMethod.CAESAR:
        return ShiftParams(shift=int(key))
    if method is CipherMethod.RAIL_FENCE:
        return RailParams(rails=int(key))
    return KeywordParams(key=str(key))


@dataclass(frozen=True)
class CandidateResult:
    """The single candidate produced by one strategy."""

    method: CipherMethod
    key: int | str
    decrypted_text: str
    raw_score: float
    confidence: float
    validation: ValidationReport

    @property
    def params(self) -> Params:
        return params_for(self.method, self.key)


@dataclass(frozen=True)
class StrategyAttempt:
    """Outcome of invoking one strategy: a candidate or the reason there is none."""

    method: CipherMethod
    candidate: CandidateResult | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.candidate is not None


@dataclass(frozen=True)
class Thresholds:
    """
    Confidence thresholds.

    Only global_confidence gates the cascade; the per-method values are
    advisory and reported for diagnostics.
    """

    global_confidence: float = 0.9
    caesar: float = 0.7
    rail_fence: float = 0.65
    vigenere: float = 0.5

    def advisory(self, method: CipherMethod) -> float:
        return {
            CipherMethod.CAESAR: self.caesar,
            CipherMethod.RAIL_FENCE: self.rail_fence,
            CipherMethod.VIGENERE: self.vigenere,
        }[method]


@dataclass(frozen=True)
class DecryptionOutcome:
    """Result of a resolution."""

    success: bool
    method: CipherMethod
    decrypted: str
    confidence: float
    key: int | str
    params: Params
    details: ValidationReport
    raw_score: float

    # Every candidate collected, in cascade order
    candidates: tuple[CandidateResult, ...] = ()


# ============================================================================
# Diagnostics
# ============================================================================


class CascadeState(str, Enum):
    IDLE = "idle"
    TRYING_CAESAR = "trying_caesar"
    TRYING_RAIL_FENCE = "trying_rail_fence"
    TRYING_VIGENERE = "trying_vigenere"
    EARLY_SUCCESS = "early_success"
    RANKING = "ranking"
    DONE = "done"


class EventKind(str, Enum):
    STARTED = "started"
    ATTEMPT = "attempt"
    CANDIDATE = "candidate"
    STRATEGY_FAILED = "strategy_failed"
    BELOW_THRESHOLD = "below_threshold"
    EARLY_EXIT = "early_exit"
    RANKED = "ranked"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class CascadeEvent:
    """A structured progress event emitted during resolution."""

    kind: EventKind
    state: CascadeState
    message: str
    method: CipherMethod | None = None
    data: dict[str, Any] = field(default_factory=dict)


CascadeObserver = Callable[[CascadeEvent], None]

_TRYING_STATES: dict[CipherMethod, CascadeState] = {
    CipherMethod.CAESAR: CascadeState.TRYING_CAESAR,
    CipherMethod.RAIL_FENCE: CascadeState.TRYING_RAIL_FENCE,
    CipherMethod.VIGENERE: CascadeState.TRYING_VIGENERE,
}

_LOG_LEVELS: dict[EventKind, int] = {
    EventKind.STRATEGY_FAILED: logging.WARNING,
    EventKind.EXHAUSTED: logging.ERROR,
}


# ============================================================================
# Coordinator
# ============================================================================


class DecryptionCoordinator:
    """
    Drives the Caesar -> Rail Fence -> Vigenère cascade.

    Simpler ciphers are tried first; a candidate whose word confidence
    reaches the global threshold ends the cascade immediately, so the
    expensive Vigenère search only runs when nothing cheaper fits.

    A strategy that raises or returns no text contributes no candidate and
    the cascade moves on. Only when every strategy comes back empty does
    resolve() raise ExhaustionError.
    """

    CASCADE: ClassVar[tuple[CipherMethod, ...]] = (
        CipherMethod.CAESAR,
        CipherMethod.RAIL_FENCE,
        CipherMethod.VIGENERE,
    )

    def __init__(
        self,
        caesar: CaesarBreaker,
        rail_fence: RailFenceBreaker,
        vigenere: VigenereBreaker,
        dictionary: WordDictionary | None = None,
        thresholds: Thresholds | None = None,
        observer: CascadeObserver | None = None,
    ):
        self.caesar = caesar
        self.rail_fence = rail_fence
        self.vigenere = vigenere
        self.thresholds = thresholds or Thresholds()
        self.observer = observer

        if dictionary is None or len(dictionary) == 0:
            dictionary = self._fallback_dictionary()
        self.dictionary = dictionary
        self.validator = TextValidator(dictionary)

    @classmethod
    def from_dictionary(
        cls,
        dictionary: WordDictionary | None,
        thresholds: Thresholds | None = None,
        observer: CascadeObserver | None = None,
        max_rails: int = 10,
        max_key_length: int = 15,
    ) -> "DecryptionCoordinator":
        """Build the coordinator and its three strategies around one dictionary."""
        return cls(
            caesar=StrategyRegistry.create(CipherMethod.CAESAR, dictionary),
            rail_fence=StrategyRegistry.create(
                CipherMethod.RAIL_FENCE, dictionary, max_rails=max_rails
            ),
            vigenere=StrategyRegistry.create(
                CipherMethod.VIGENERE, dictionary, max_key_length=max_key_length
            ),
            dictionary=dictionary,
            thresholds=thresholds,
            observer=observer,
        )

    async def resolve(
        self,
        ciphertext: str,
        observer: CascadeObserver | None = None,
    ) -> DecryptionOutcome:
        """
        Identify the cipher and recover the plaintext.

        Args:
            ciphertext: The encrypted text
            observer: Extra event callback for this call only

        Returns:
            DecryptionOutcome with success=True on early exit, or the
            best-ranked candidate with success=False

        Raises:
            InputError: If ciphertext is not a non-empty string
            ExhaustionError: If no strategy produced a candidate
        """
        if not isinstance(ciphertext, str) or not ciphertext:
            raise InputError(
                "Invalid ciphertext provided",
                {"type": type(ciphertext).__name__},
            )

        # Thresholds are fixed for the whole run
        thresholds = self.thresholds
        candidates: list[CandidateResult] = []

        def emit(
            kind: EventKind,
            state: CascadeState,
            message: str,
            method: CipherMethod | None = None,
            **data: Any,
        ) -> None:
            self._emit(
                CascadeEvent(kind, state, message, method, data),
                observer,
            )

        emit(
            EventKind.STARTED,
            CascadeState.IDLE,
            f"Starting cipher analysis ({len(ciphertext)} characters)",
            length=len(ciphertext),
        )

        for position, method in enumerate(self.CASCADE, start=1):
            state = _TRYING_STATES[method]
            emit(
                EventKind.ATTEMPT,
                state,
                f"Attempt {position}: {method.display_name} decryption",
                method,
                position=position,
            )

            attempt = await self._attempt(method, ciphertext)

            if not attempt.succeeded:
                emit(
                    EventKind.STRATEGY_FAILED,
                    state,
                    f"{method.display_name} decryption failed: {attempt.error}",
                    method,
                    error=attempt.error,
                )
                continue

            candidate = attempt.candidate
            candidates.append(candidate)
            report = candidate.validation

            emit(
                EventKind.CANDIDATE,
                state,
                (
                    f"{method.display_name} analysis complete: key={candidate.key}, "
                    f"raw score={candidate.raw_score:.2f}, "
                    f"confidence={candidate.confidence:.1%} "
                    f"({report.valid_words}/{report.total_words} valid words)"
                ),
                method,
                key=candidate.key,
                raw_score=candidate.raw_score,
                confidence=candidate.confidence,
                advisory_threshold=thresholds.advisory(method),
            )

            if candidate.confidence >= thresholds.global_confidence:
                emit(
                    EventKind.EARLY_EXIT,
                    CascadeState.EARLY_SUCCESS,
                    (
                        f"{method.display_name} decryption successful with "
                        f"{candidate.confidence:.1%} confidence"
                    ),
                    method,
                    confidence=candidate.confidence,
                )
                return self._outcome(candidate, True, candidates)

            emit(
                EventKind.BELOW_THRESHOLD,
                state,
                (
                    f"{method.display_name} confidence {candidate.confidence:.1%} "
                    f"below threshold {thresholds.global_confidence:.1%}"
                ),
                method,
                confidence=candidate.confidence,
                threshold=thresholds.global_confidence,
            )

        if not candidates:
            emit(
                EventKind.EXHAUSTED,
                CascadeState.DONE,
                "No valid decryption results found",
            )
            raise ExhaustionError([m.value for m in self.CASCADE])

        # sorted() is stable, so ties keep cascade order
        ranked = sorted(candidates, key=lambda c: c.confidence, reverse=True)
        best = ranked[0]

        emit(
            EventKind.RANKED,
            CascadeState.RANKING,
            (
                f"No method reached the confidence threshold; best is "
                f"{best.method.display_name} (key={best.key}) at {best.confidence:.1%}"
            ),
            best.method,
            ranking=[c.method.value for c in ranked],
        )

        return self._outcome(best, False, candidates)

    async def _attempt(self, method: CipherMethod, ciphertext: str) -> StrategyAttempt:
        """Run one strategy, turning any failure into an empty attempt."""
        runners = {
            CipherMethod.CAESAR: self._try_caesar,
            CipherMethod.RAIL_FENCE: self._try_rail_fence,
            CipherMethod.VIGENERE: self._try_vigenere,
        }

        try:
            candidate = await runners[method](ciphertext)
        except Exception as e:
            logger.debug("%s strategy raised", method.value, exc_info=True)
            return StrategyAttempt(method, error=str(e) or type(e).__name__)

        if candidate is None:
            return StrategyAttempt(method, error="no usable text")

        return StrategyAttempt(method, candidate=candidate)

    async def _try_caesar(self, ciphertext: str) -> CandidateResult | None:
        result = self.caesar.break_caesar(ciphertext)
        if result is None or not result.text:
            return None

        return self._candidate(
            CipherMethod.CAESAR,
            int(result.shift),
            result.text,
            result.score,
            self.validator.validate(result.text),
        )

    async def _try_rail_fence(self, ciphertext: str) -> CandidateResult | None:
        result = self.rail_fence.break_rail_fence(ciphertext)
        if result is None or not result.text:
            return None

        return self._candidate(
            CipherMethod.RAIL_FENCE,
            int(result.rails),
            result.text,
            result.score,
            self.validator.validate(result.text),
        )

    async def _try_vigenere(self, ciphertext: str) -> CandidateResult | None:
        result = await self.vigenere.break_vigenere(ciphertext)
        if result is None or not result.decrypted:
            return None

        validation = result.validation
        if validation is not None and _is_finite(validation.percentage):
            report = self._report_from_percentage(
                result.decrypted,
                validation.percentage,
                validation.invalid_words,
            )
        else:
            report = self.validator.validate(result.decrypted)

        return self._candidate(
            CipherMethod.VIGENERE,
            str(result.key),
            result.decrypted,
            result.score,
            report,
        )

    @staticmethod
    def _report_from_percentage(
        text: str,
        percentage: float,
        invalid_words: tuple[str, ...] | list[str] | None,
    ) -> ValidationReport:
        """Trust a strategy's own validation instead of re-validating."""
        total = len(text.split())
        if total == 0:
            return ValidationReport.empty()

        fraction = min(1.0, max(0.0, percentage / 100))

        return ValidationReport(
            confidence=fraction,
            valid_words=int(fraction * total + 0.5),
            total_words=total,
            invalid_words=tuple(invalid_words or ()),
        )

    @staticmethod
    def _candidate(
        method: CipherMethod,
        key: int | str,
        text: str,
        raw_score: float,
        report: ValidationReport,
    ) -> CandidateResult:
        return CandidateResult(
            method=method,
            key=key,
            decrypted_text=text,
            raw_score=raw_score,
            confidence=min(1.0, max(0.0, report.confidence)),
            validation=report,
        )

    @staticmethod
    def _outcome(
        candidate: CandidateResult,
        success: bool,
        candidates: list[CandidateResult],
    ) -> DecryptionOutcome:
        return DecryptionOutcome(
            success=success,
            method=candidate.method,
            decrypted=candidate.decrypted_text,
            confidence=candidate.confidence,
            key=candidate.key,
            params=candidate.params,
            details=candidate.validation,
            raw_score=candidate.raw_score,
            candidates=tuple(candidates),
        )

    def _fallback_dictionary(self) -> WordDictionary:
        """Union of the word lists the strategies carry."""
        logger.warning("No dictionary loaded; falling back to strategy word lists")
        return WordDictionary.from_words(
            *(
                getattr(strategy, "common_words", None) or ()
                for strategy in (self.caesar, self.rail_fence, self.vigenere)
            )
        )

    def _emit(self, event: CascadeEvent, observer: CascadeObserver | None) -> None:
        logger.log(_LOG_LEVELS.get(event.kind, logging.INFO), event.message)

        for callback in (self.observer, observer):
            if callback is None:
                continue
            try:
                callback(event)
            except Exception:
                logger.exception("Cascade observer failed on %s event", event.kind.value)


def _is_finite(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
