"""Polyalphabetic cipher strategies."""

from app.services.engines.polyalphabetic.vigenere import VigenereStrategy

__all__ = [
    "VigenereStrategy",
]
