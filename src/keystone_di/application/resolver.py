import logging
from typing import Any, Callable, Dict, List, Tuple

from keystone_di.application.recursion_guard import RecursionGuard
from keystone_di.domain import (
    ContainerError,
    IContainer,
    IResolver,
    ITypeRegistry,
    TypeDescriptor,
    UnexpectedValueError,
)

logger = logging.getLogger(__name__)

_NON_OBJECT_TYPES = frozenset(
    {type(None), bool, int, float, complex, str, bytes, bytearray, list, tuple, dict, set, frozenset}
)


def is_object_like(value: Any) -> bool:
    """Check whether a value may be served by the container.

    None, scalars, strings and plain containers are rejected; instances of
    their subclasses are accepted.
    """
    return type(value) not in _NON_OBJECT_TYPES


def ensure_object(identifier: str, value: Any) -> Any:
    """Return the value unchanged, or raise if it is not object-like.

    Raises:
        UnexpectedValueError: If the value is not object-like.
    """
    if not is_object_like(value):
        raise UnexpectedValueError(identifier, type(value).__name__)
    return value


class InstanceResolver(IResolver):
    """Returns an already constructed value as-is."""

    def __init__(self, value: Any) -> None:
        self._value = value

    def resolve(self) -> Any:
        return self._value


class CallableResolver(IResolver):
    """Invokes a factory, passing it the owning container.

    Attributes:
        _container: The container handed to the factory.
        _identifier: The identifier the factory is bound to.
        _factory: The factory callable.
        _pass_container: Whether the factory takes the container argument.
        _guard: The recursion guard of the container.
        _max_recursion: The recursion ceiling.
    """

    def __init__(
        self,
        container: IContainer,
        identifier: str,
        factory: Callable[..., Any],
        guard: RecursionGuard,
        max_recursion: int,
        pass_container: bool = True,
    ) -> None:
        self._container = container
        self._identifier = identifier
        self._factory = factory
        self._guard = guard
        self._max_recursion = max_recursion
        self._pass_container = pass_container

    def resolve(self) -> Any:
        """Invoke the factory and validate its result.

        Returns:
            The object produced by the factory.

        Raises:
            RecursionLimitError: If the identifier exceeds the recursion ceiling.
            UnexpectedValueError: If the factory returns a non object-like value.
        """
        self._guard.increment(self._identifier, self._max_recursion)
        logger.debug("Invoking factory for %s", self._identifier)
        instance = self._factory(self._container) if self._pass_container else self._factory()
        ensure_object(self._identifier, instance)
        self._guard.reset(self._identifier)
        return instance


class ReflectionResolver(IResolver):
    """Constructs a type, resolving its constructor parameters from the container.

    Parameters with a default value keep it. Parameters declaring an
    injectable class are resolved through ``container.get`` with the class'
    type name, which may recurse back into this resolver.
    """

    def __init__(
        self,
        container: IContainer,
        type_registry: ITypeRegistry,
        type_name: str,
        guard: RecursionGuard,
        max_recursion: int,
    ) -> None:
        self._container = container
        self._type_registry = type_registry
        self._type_name = type_name
        self._guard = guard
        self._max_recursion = max_recursion

    def resolve(self) -> Any:
        """Construct the type with all constructor dependencies injected.

        Returns:
            The constructed instance.

        Raises:
            RecursionLimitError: If the type exceeds the recursion ceiling.
            ContainerError: If a parameter cannot be satisfied.
            UnexpectedValueError: If construction yields a non object-like value.

        Example:
            >>> class UserService:
            ...     def __init__(self, repository: UserRepository, page_size: int = 20):
            ...         self.repository = repository
            >>>
            >>> ReflectionResolver(container, registry, type_name(UserService), guard, 10).resolve()
        """
        self._guard.increment(self._type_name, self._max_recursion)
        descriptor = self._type_registry.describe(self._type_name)
        if not descriptor.constructible:
            raise ContainerError(f'Class "{self._type_name}" is not instantiable!')

        args, kwargs = self._resolve_parameters(descriptor)
        logger.debug("Constructing %s with %d argument(s)", self._type_name, len(args) + len(kwargs))
        instance = descriptor.factory(*args, **kwargs)
        ensure_object(self._type_name, instance)
        self._guard.reset(self._type_name)
        return instance

    def _resolve_parameters(self, descriptor: TypeDescriptor) -> Tuple[List[Any], Dict[str, Any]]:
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for parameter in descriptor.parameters:
            if parameter.has_default:
                value = parameter.default
            elif parameter.type_error is not None:
                raise ContainerError(
                    f'Type-hint error "{parameter.type_error}" for "{descriptor.name}" class constructor!'
                )
            elif parameter.declared_type is None:
                raise ContainerError(
                    f'Unable to create constructor argument "{parameter.position}" for "{descriptor.name}" class!'
                )
            else:
                value = self._container.get(parameter.declared_type)

            if parameter.keyword_only:
                kwargs[parameter.name] = value
            else:
                args.append(value)
        return args, kwargs
