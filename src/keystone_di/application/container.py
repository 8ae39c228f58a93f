import copy
import inspect
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from keystone_di.application.config_loader import ConfigLoader
from keystone_di.application.lifetime_manager import LifetimeManager
from keystone_di.application.recursion_guard import RecursionGuard
from keystone_di.application.resolver import (
    CallableResolver,
    InstanceResolver,
    ReflectionResolver,
    ensure_object,
    is_object_like,
)
from keystone_di.application.type_registry import TypeRegistry, type_name
from keystone_di.domain import (
    Binding,
    ContainerError,
    FactoryRecipe,
    IContainer,
    IdentifierLike,
    ILifetimeManager,
    InstanceRecipe,
    InvalidArgumentError,
    IResolver,
    ITypeRegistry,
    NotFoundError,
    Recipe,
    RecipeKind,
    TypeNameRecipe,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECURSION = 10


def _accepts_container(factory: Any) -> bool:
    try:
        signature = inspect.signature(factory)
    except (TypeError, ValueError):
        return True
    return any(
        param.kind
        in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        )
        for param in signature.parameters.values()
    )


class Container(IContainer):
    """Dependency resolution registry.

    Binds identifiers to recipes and resolves them on request. A recipe is
    either a pre-built object, a factory receiving the container, or a class
    (or class name) constructed by injecting its constructor parameters.
    Singleton bindings are cached after their first resolution.

    Attributes:
        _bindings: Bindings keyed by identifier, in registration order.
        _type_registry: Type-introspection facility used for auto-wiring.
        _lifetime_manager: Cache of resolved singletons and bound instances.
        _guard: Recursion guard bounding self-referential chains.
        _max_recursion: The recursion ceiling.

    Example:
        >>> container = Container([
        ...     {"identifier": "settings", "recipe": Settings(debug=True)},
        ...     {"identifier": "db", "recipe": lambda c: Database(c.get("settings")), "single": True},
        ... ])
        >>> container.get("db") is container.get("db")
        True
    """

    def __init__(
        self,
        config: Optional[Iterable[Mapping[str, Any]]] = None,
        max_recursion: int = DEFAULT_MAX_RECURSION,
        type_registry: Optional[ITypeRegistry] = None,
    ) -> None:
        """Initialize the container.

        Args:
            config: Optional batch of binding descriptions to load.
            max_recursion: The recursion ceiling, at least 1.
            type_registry: Type registry to share; a new one is created if omitted.

        Raises:
            InvalidArgumentError: If ``max_recursion`` is invalid.
            ConfigurationError: If a binding description is malformed.
        """
        self._bindings: Dict[str, Binding] = {}
        self._type_registry: ITypeRegistry = type_registry if type_registry is not None else TypeRegistry()
        self._lifetime_manager: ILifetimeManager = LifetimeManager()
        self._guard = RecursionGuard()
        self._max_recursion = DEFAULT_MAX_RECURSION
        self.set_max_recursion(max_recursion)

        if config is not None:
            self.set_from_config(config)

    @property
    def max_recursion(self) -> int:
        return self._max_recursion

    @property
    def type_registry(self) -> ITypeRegistry:
        return self._type_registry

    def _identifier_of(self, identifier: IdentifierLike) -> str:
        if inspect.isclass(identifier):
            return self._type_registry.register(identifier)
        if isinstance(identifier, str):
            return identifier
        raise ContainerError(f'Identifier must be a string or a class, got "{type(identifier).__name__}"!')

    def _key_of(self, identifier: IdentifierLike) -> str:
        # Lookups leave the type registry untouched
        if inspect.isclass(identifier):
            return type_name(identifier)
        return self._identifier_of(identifier)

    def _make_recipe(self, identifier: str, recipe: Any) -> Recipe:
        """Classify a raw recipe once, at bind time.

        Raises:
            ContainerError: If the recipe is neither an object, a callable,
                nor a constructible class or class name.
        """
        if inspect.isclass(recipe) or isinstance(recipe, str):
            name = self._type_registry.register(recipe) if inspect.isclass(recipe) else recipe
            if not self._type_registry.is_constructible(name):
                raise ContainerError(f'Unable to bind "{identifier}": "{name}" is not an instantiable class!')
            return TypeNameRecipe(type_name=name)

        if callable(recipe):
            return FactoryRecipe(factory=recipe, pass_container=_accepts_container(recipe))

        if is_object_like(recipe):
            return InstanceRecipe(value=recipe)

        raise ContainerError(f'Unable to bind "{identifier}": invalid recipe of type "{type(recipe).__name__}"!')

    def _register(self, identifier: IdentifierLike, recipe: Any, single: bool = False, eager: bool = False) -> str:
        key = self._identifier_of(identifier)
        binding = Binding(identifier=key, recipe=self._make_recipe(key, recipe), single=single, eager=eager)

        self._bind(binding)
        return key

    def _bind(self, binding: Binding) -> None:
        key = binding.identifier
        # Replacing clears the prior binding and its cached instance
        self._unbind(key)
        self._bindings[key] = binding
        if binding.recipe.kind == RecipeKind.INSTANCE:
            self._lifetime_manager.store(key, binding.recipe.value)

        logger.debug("Bound %s to %s recipe (single=%s)", key, binding.recipe.kind, binding.single)

    def _unbind(self, identifier: str) -> None:
        self._bindings.pop(identifier, None)
        self._lifetime_manager.evict(identifier)

    def _create_resolver(self, binding: Binding) -> IResolver:
        recipe = binding.recipe
        if recipe.kind == RecipeKind.INSTANCE:
            return InstanceResolver(recipe.value)
        if recipe.kind == RecipeKind.FACTORY:
            return CallableResolver(
                self,
                binding.identifier,
                recipe.factory,
                self._guard,
                self._max_recursion,
                pass_container=recipe.pass_container,
            )
        return self._create_reflection_resolver(recipe.type_name)

    def _create_reflection_resolver(self, type_name: str) -> IResolver:
        return ReflectionResolver(self, self._type_registry, type_name, self._guard, self._max_recursion)

    def has(self, identifier: IdentifierLike) -> bool:
        """Check whether a binding exists for the identifier.

        Types that are merely constructible are not reported; only bindings are.
        """
        return self._key_of(identifier) in self._bindings

    def get(self, identifier: IdentifierLike) -> Any:
        """Resolve and return the object bound to the identifier.

        Unbound identifiers naming a constructible class are auto-wired.

        Args:
            identifier: The identifier, or a class standing for its type name.

        Returns:
            The resolved object. Singleton bindings return the identical
            object on every call.

        Raises:
            NotFoundError: If nothing is bound and the identifier is not a constructible class.
            RecursionLimitError: If a resolution chain exceeds the recursion ceiling.
            UnexpectedValueError: If a recipe produces a non object-like value.
            ContainerError: If a constructor parameter cannot be satisfied.

        Example:
            >>> container.set("clock", lambda c: SystemClock())
            >>> clock = container.get("clock")
        """
        key = self._identifier_of(identifier)
        if self._lifetime_manager.is_cached(key):
            return self._lifetime_manager.get_cached(key)

        with self._guard.outermost():
            binding = self._bindings.get(key)
            if binding is None:
                if not self._type_registry.is_constructible(key):
                    raise NotFoundError(key)
                logger.debug("Auto-wiring unbound type %s", key)
                return ensure_object(key, self._create_reflection_resolver(key).resolve())

            return self._lifetime_manager.get_or_create(
                binding,
                lambda: ensure_object(key, self._create_resolver(binding).resolve()),
            )

    def set(self, identifier: IdentifierLike, recipe: Any) -> "Container":
        """Bind a recipe to the identifier, replacing any prior binding.

        Args:
            identifier: The identifier to bind.
            recipe: An object instance, a factory taking the container (or
                nothing), a class, or the name of a constructible class.

        Returns:
            The container, for chaining.

        Raises:
            ContainerError: If the recipe is not usable.
        """
        self._register(identifier, recipe)
        return self

    def single(self, identifier: IdentifierLike, recipe: Any) -> "Container":
        """Bind a recipe whose first resolution is cached and reused.

        Example:
            >>> container.single("db", lambda c: Database())
            >>> container.get("db") is container.get("db")
            True
        """
        self._register(identifier, recipe, single=True)
        return self

    def set_new(self, identifier: IdentifierLike, recipe: Any) -> "Container":
        """Bind a singleton recipe and resolve it immediately."""
        key = self._register(identifier, recipe, single=True, eager=True)
        logger.debug("Eager loading %s", key)
        self.get(key)
        return self

    def remove(self, identifier: IdentifierLike) -> "Container":
        """Remove a binding with its cached instance. Unknown identifiers are ignored."""
        key = self._key_of(identifier)
        if key in self._bindings:
            logger.debug("Removed binding %s", key)
        self._unbind(key)
        return self

    def set_max_recursion(self, max_recursion: int) -> "Container":
        """Set the recursion ceiling.

        Raises:
            InvalidArgumentError: If the value is not an integer of at least 1.
        """
        if isinstance(max_recursion, bool) or not isinstance(max_recursion, int) or max_recursion < 1:
            raise InvalidArgumentError(f"Maximum recursion must be an integer of at least 1, got {max_recursion!r}!")
        self._max_recursion = max_recursion
        return self

    def set_from_config(self, config: Iterable[Mapping[str, Any]]) -> "Container":
        """Load a batch of declarative binding descriptions.

        See ``ConfigLoader`` for the record format.

        Raises:
            ConfigurationError: If a description is malformed; nothing is registered then.
        """
        ConfigLoader(self).load(list(config))
        return self

    def merge(self, *sources: Union["Container", Sequence[Mapping[str, Any]]]) -> "Container":
        """Fold other containers and configuration batches into this one.

        Sources are applied in order, so a later binding replaces an earlier
        one with the same identifier. Every source is checked before anything
        is bound, and eager bindings are resolved once all of them are applied.

        Args:
            *sources: Containers, or lists or tuples of binding descriptions.

        Returns:
            The container, for chaining.

        Raises:
            InvalidArgumentError: If a source is neither a container nor a batch.
            ConfigurationError: If a binding description is malformed.

        Example:
            >>> container.merge(defaults, [{"identifier": "clock", "recipe": FrozenClock()}])
        """
        loader = ConfigLoader(self)
        batches = []
        for index, source in enumerate(sources):
            if isinstance(source, Container):
                batches.append((source, list(source.get_bindings_copy().values())))
            elif isinstance(source, (list, tuple)):
                batches.append((None, loader.validate(source)))
            else:
                raise InvalidArgumentError(
                    f'Argument {index} supplied to merge is not a container or a list of bindings, '
                    f'got "{type(source).__name__}"!'
                )

        eager: List[IdentifierLike] = []
        for source, items in batches:
            if source is None:
                eager.extend(config.identifier for config in loader.register(items))
                continue
            for binding in items:
                self._adopt(source, binding)
                if binding.eager:
                    eager.append(binding.identifier)

        for identifier in eager:
            logger.debug("Eager loading %s", identifier)
            self.get(identifier)
        return self

    def _adopt(self, source: "Container", binding: Binding) -> None:
        recipe = binding.recipe
        if (
            recipe.kind == RecipeKind.TYPE_NAME
            and source.type_registry is not self._type_registry
            and not self._type_registry.is_constructible(recipe.type_name)
        ):
            descriptor = source.type_registry.describe(recipe.type_name)
            if inspect.isclass(descriptor.factory):
                self._type_registry.register(descriptor.factory, recipe.type_name)
            else:
                self._type_registry.register_descriptor(descriptor)
        self._bind(binding)

    def copy(self) -> "Container":
        """Create an independent container with the same bindings.

        Bound instances are shallow-copied, so later changes to the originals
        do not show through. Cached singletons are not carried over; the copy
        resolves its own. The type registry is shared.

        Returns:
            The new container.
        """
        clone = Container(max_recursion=self._max_recursion, type_registry=self._type_registry)
        bindings = {}
        for identifier, binding in self._bindings.items():
            if binding.recipe.kind == RecipeKind.INSTANCE:
                value = copy.copy(binding.recipe.value)
                binding = binding.model_copy(update={"recipe": InstanceRecipe(value=value)})
            bindings[identifier] = binding
        clone.set_bindings(bindings)
        return clone

    def __copy__(self) -> "Container":
        return self.copy()

    def identifiers(self) -> List[str]:
        return list(self._bindings)

    def get_bindings_copy(self) -> Dict[str, Binding]:
        """Get a copy of the bindings, for use by derived containers.

        Returns:
            Copy of the current bindings.
        """
        return self._bindings.copy()

    def set_bindings(self, bindings: Dict[str, Binding]) -> None:
        """Replace every binding, dropping cached singletons.

        Args:
            bindings: Bindings to adopt.
        """
        self._bindings = dict(bindings)
        self._lifetime_manager.clear_cache()
        for identifier, binding in self._bindings.items():
            if binding.recipe.kind == RecipeKind.INSTANCE:
                self._lifetime_manager.store(identifier, binding.recipe.value)

    def clear(self) -> None:
        """Clear all bindings, cached instances and recursion counters.

        Useful for testing or resetting the container state.
        """
        self._bindings.clear()
        self._lifetime_manager.clear_cache()
        self._guard.clear()
