from typing import Any, Type

from app.models.schemas import CipherMethod
from app.services.engines.base import CipherStrategy
from app.services.preprocessing.dictionary import WordDictionary


class StrategyRegistry:
    """
    Registry for cipher strategies.

    Maps each cipher method to its strategy class so the coordinator can
    build the fixed cascade from a shared dictionary.
    """

    _strategies: dict[CipherMethod, Type[CipherStrategy]] = {}

    @classmethod
    def register(cls, strategy_class: Type[CipherStrategy]) -> Type[CipherStrategy]:
        """
        Register a strategy class.

        Can be used as a decorator:
            @StrategyRegistry.register
            class CaesarStrategy(CipherStrategy):
                ...
        """
        cls._strategies[strategy_class.method] = strategy_class
        return strategy_class

    @classmethod
    def create(
        cls,
        method: CipherMethod,
        dictionary: WordDictionary | None = None,
        **options: Any,
    ) -> CipherStrategy:
        """
        Instantiate the strategy for a method.

        Raises:
            KeyError: If no strategy is registered for the method
        """
        return cls._strategies[method](dictionary, **options)

    @classmethod
    def list_registered(cls) -> list[CipherMethod]:
        return list(cls._strategies.keys())

    @classmethod
    def is_registered(cls, method: CipherMethod) -> bool:
        return method in cls._strategies


# Import strategies to trigger registration
def _load_strategies() -> None:
    """Load all strategy modules to trigger registration."""
    from app.services.engines.monoalphabetic import caesar  # noqa: F401
    from app.services.engines.transposition import rail_fence  # noqa: F401
    from app.services.engines.polyalphabetic import vigenere  # noqa: F401


# Load strategies when module is imported
_load_strategies()
