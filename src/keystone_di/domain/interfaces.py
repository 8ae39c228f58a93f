from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from keystone_di.domain.models import Binding, TypeDescriptor

IdentifierLike = Union[str, type]


class IContainer(ABC):
    """Abstract interface for the binding registry."""

    @abstractmethod
    def has(self, identifier: IdentifierLike) -> bool:
        """Check whether a binding exists for the identifier."""

    @abstractmethod
    def get(self, identifier: IdentifierLike) -> Any:
        """Resolve and return the object bound to the identifier.

        Args:
            identifier: The identifier, or a class standing for its type name.
        """

    @abstractmethod
    def set(self, identifier: IdentifierLike, recipe: Any) -> "IContainer":
        """Bind a recipe to the identifier, replacing any prior binding.

        Args:
            identifier: The identifier to bind.
            recipe: An object instance, a factory callable, a class or a type name.
        """

    @abstractmethod
    def single(self, identifier: IdentifierLike, recipe: Any) -> "IContainer":
        """Bind a recipe whose first resolution is cached and reused."""

    @abstractmethod
    def set_new(self, identifier: IdentifierLike, recipe: Any) -> "IContainer":
        """Bind a singleton recipe and resolve it immediately."""

    @abstractmethod
    def remove(self, identifier: IdentifierLike) -> "IContainer":
        """Remove a binding together with its cached instance."""

    @abstractmethod
    def set_max_recursion(self, max_recursion: int) -> "IContainer":
        """Set the recursion ceiling used by the resolvers."""

    @abstractmethod
    def set_from_config(self, config: Iterable[Mapping[str, Any]]) -> "IContainer":
        """Load a batch of declarative binding descriptions."""

    @abstractmethod
    def identifiers(self) -> List[str]:
        """Return the bound identifiers in registration order."""

    @abstractmethod
    def clear(self) -> None:
        """Clear all bindings and cached instances from the container."""

    @abstractmethod
    def get_bindings_copy(self) -> Dict[str, Binding]:
        """Get a copy of the current bindings."""


class IResolver(ABC):
    """Abstract interface for a resolver variant."""

    @abstractmethod
    def resolve(self) -> Any:
        """Produce the object this resolver stands for.

        Raises:
            ContainerError: If the object cannot be produced.
        """


class ITypeRegistry(ABC):
    """Abstract interface for the type-introspection facility."""

    @abstractmethod
    def register(self, cls: type, name: Optional[str] = None) -> str:
        """Make a class known by its canonical name and an optional alias.

        Returns:
            The canonical type name of the class.
        """

    @abstractmethod
    def register_descriptor(self, descriptor: TypeDescriptor) -> None:
        """Register a hand-written type descriptor."""

    @abstractmethod
    def is_constructible(self, name: str) -> bool:
        """Check whether the name refers to a known, constructible type."""

    @abstractmethod
    def describe(self, name: str) -> TypeDescriptor:
        """Return the descriptor for a type name.

        Raises:
            NotFoundError: If the name is unknown.
        """


class ILifetimeManager(ABC):
    """Abstract interface for managing cached instances."""

    @abstractmethod
    def get_or_create(self, binding: Binding, factory: Callable[[], Any]) -> Any:
        """Get the cached instance or create a new one based on lifetime.

        Args:
            binding: The binding being resolved.
            factory: A callable creating a new instance if needed.
        """

    @abstractmethod
    def store(self, identifier: str, instance: Any) -> None:
        """Cache an instance for the identifier."""

    @abstractmethod
    def is_cached(self, identifier: str) -> bool:
        """Check whether an instance is cached for the identifier."""

    @abstractmethod
    def get_cached(self, identifier: str) -> Any:
        """Return the cached instance for the identifier."""

    @abstractmethod
    def evict(self, identifier: str) -> None:
        """Drop the cached instance for the identifier, if any."""

    @abstractmethod
    def clear_cache(self) -> None:
        """Clear every cached instance."""
