"""Monoalphabetic cipher strategies."""

from app.services.engines.monoalphabetic.caesar import CaesarStrategy

__all__ = [
    "CaesarStrategy",
]
