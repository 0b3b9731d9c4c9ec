"""Transposition cipher strategies."""

from app.services.engines.transposition.rail_fence import RailFenceStrategy

__all__ = [
    "RailFenceStrategy",
]
