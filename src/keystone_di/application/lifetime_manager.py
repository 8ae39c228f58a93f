import logging
from typing import Any, Callable, Dict

from keystone_di.domain import Binding, ILifetimeManager, Lifetime

logger = logging.getLogger(__name__)


class LifetimeManager(ILifetimeManager):
    """Manages cached instances for singleton bindings and instance recipes.

    Attributes:
        _cache: Resolved instances keyed by identifier.
    """

    def __init__(self) -> None:
        """Initialize the lifetime manager with an empty cache."""
        self._cache: Dict[str, Any] = {}

    def get_or_create(self, binding: Binding, factory: Callable[[], Any]) -> Any:
        """Get the cached instance or create a new one based on lifetime.

        Args:
            binding: The binding being resolved.
            factory: Function to create a new instance if needed.

        Returns:
            Instance according to lifetime rules:
            - Singleton: Returns the cached instance or creates and caches a new one
            - Transient: Always creates a new instance

        Example:
            >>> binding = Binding(
            ...     identifier="mailer",
            ...     recipe=FactoryRecipe(factory=lambda c: Mailer()),
            ...     single=True,
            ... )
            >>> mailer = manager.get_or_create(binding, lambda: Mailer())
        """
        identifier = binding.identifier
        if identifier in self._cache:
            return self._cache[identifier]

        instance = factory()
        if binding.lifetime == Lifetime.SINGLETON:
            logger.debug("Caching singleton %s", identifier)
            self._cache[identifier] = instance
        return instance

    def store(self, identifier: str, instance: Any) -> None:
        self._cache[identifier] = instance

    def is_cached(self, identifier: str) -> bool:
        return identifier in self._cache

    def get_cached(self, identifier: str) -> Any:
        return self._cache[identifier]

    def evict(self, identifier: str) -> None:
        self._cache.pop(identifier, None)

    def clear_cache(self) -> None:
        """Clear all cached instances.

        Useful for testing or resetting container state.
        """
        self._cache.clear()
