from typing import Any


class CryptanalysisError(Exception):
    """Base exception for all cryptanalysis errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CryptanalysisError):
    """Raised when input validation fails."""

    pass


class InputError(ValidationError):
    """Raised when the ciphertext is missing, not a string, or empty."""

    pass


class CiphertextTooLongError(ValidationError):
    """Raised when ciphertext exceeds maximum length."""

    def __init__(self, length: int, max_length: int):
        super().__init__(
            f"Ciphertext length {length} exceeds maximum {max_length}",
            {"length": length, "max_length": max_length},
        )


class StrategyError(CryptanalysisError):
    """Raised by a cipher strategy that cannot produce a usable candidate."""

    def __init__(self, method: str, reason: str):
        super().__init__(
            f"{method} strategy failed: {reason}",
            {"method": method, "reason": reason},
        )


class ExhaustionError(CryptanalysisError):
    """Raised when no strategy produced any candidate."""

    def __init__(self, attempted: list[str]):
        super().__init__(
            "No valid decryption results found",
            {"attempted": attempted},
        )
