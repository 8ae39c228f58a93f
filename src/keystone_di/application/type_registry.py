"""Application layer - Type introspection."""

import inspect
import logging
import types
from typing import Any, Dict, List, Optional, Union, get_args, get_origin, get_type_hints

from pydantic import ImportString, TypeAdapter, ValidationError

from keystone_di.domain import ITypeRegistry, NotFoundError, ParameterDescriptor, TypeDescriptor

logger = logging.getLogger(__name__)

_IMPORT_STRING = TypeAdapter(ImportString)
_UNION_TYPES = tuple(t for t in (Union, getattr(types, "UnionType", None)) if t is not None)
_NON_INJECTABLE_MODULES = frozenset({"builtins", "typing", "typing_extensions"})


def type_name(cls: type) -> str:
    """Return the canonical name of a class, ``<module>.<qualname>``."""
    return f"{cls.__module__}.{cls.__qualname__}"


def is_injectable(annotation: Any) -> bool:
    """Check whether an annotation names a class the container may inject."""
    return inspect.isclass(annotation) and annotation.__module__ not in _NON_INJECTABLE_MODULES


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) in _UNION_TYPES:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def _resolve_annotation(function: Any, name: str, annotation: Any) -> Any:
    holder = types.SimpleNamespace(__annotations__={name: annotation})
    return get_type_hints(holder, globalns=getattr(function, "__globals__", None))[name]


class TypeRegistry(ITypeRegistry):
    """Describes constructible types by name.

    Classes become known either by explicit registration or, for names that
    look like dotted import paths (``package.module.Class`` or
    ``package.module:Class``), by importing them on first lookup. Descriptors
    are built from constructor signatures and type hints, then cached.

    Attributes:
        _types: Known classes keyed by canonical name and alias.
        _descriptors: Cached descriptors keyed by name.
    """

    def __init__(self) -> None:
        self._types: Dict[str, type] = {}
        self._descriptors: Dict[str, TypeDescriptor] = {}

    def register(self, cls: type, name: Optional[str] = None) -> str:
        """Make a class known by its canonical name and an optional alias.

        Args:
            cls: The class to register.
            name: Optional alias the class is also known by.

        Returns:
            The canonical name of the class.
        """
        canonical = type_name(cls)
        for key in (canonical, name):
            if key is None:
                continue
            if self._types.get(key) is not cls:
                self._types[key] = cls
                self._descriptors.pop(key, None)
        return canonical

    def register_descriptor(self, descriptor: TypeDescriptor) -> None:
        """Register a hand-written descriptor, taking precedence over introspection.

        Example:
            >>> registry.register_descriptor(TypeDescriptor(
            ...     name="Mailer",
            ...     factory=lambda transport: Mailer(transport),
            ...     parameters=[ParameterDescriptor(name="transport", position=0, declared_type="Transport")],
            ... ))
        """
        self._descriptors[descriptor.name] = descriptor

    def is_constructible(self, name: str) -> bool:
        try:
            return self.describe(name).constructible
        except NotFoundError:
            return False

    def describe(self, name: str) -> TypeDescriptor:
        """Return the descriptor for a type name.

        Args:
            name: A registered name, alias or dotted import path.

        Raises:
            NotFoundError: If no class is known by that name.
        """
        descriptor = self._descriptors.get(name)
        if descriptor is None:
            cls = self._lookup(name)
            if cls is None:
                raise NotFoundError(name)
            descriptor = self._build_descriptor(name, cls)
            self._descriptors[name] = descriptor
        return descriptor

    def _lookup(self, name: str) -> Optional[type]:
        cls = self._types.get(name)
        if cls is not None:
            return cls
        if "." not in name and ":" not in name:
            return None
        try:
            candidate = _IMPORT_STRING.validate_python(name)
        except ValidationError:
            return None
        if not inspect.isclass(candidate):
            return None
        logger.debug("Imported type %s", name)
        self._types[name] = candidate
        return candidate

    def _build_descriptor(self, name: str, cls: type) -> TypeDescriptor:
        constructible = is_injectable(cls) and not inspect.isabstract(cls) and not getattr(cls, "_is_protocol", False)
        if not constructible:
            return TypeDescriptor(name=name, factory=cls, constructible=False)
        return TypeDescriptor(name=name, factory=cls, parameters=self._describe_parameters(cls))

    def _describe_parameters(self, cls: type) -> List[ParameterDescriptor]:
        init = cls.__init__
        try:
            signature = inspect.signature(init)
        except (TypeError, ValueError):
            return []

        try:
            hints = get_type_hints(init)
        except Exception:
            # Broken forward references are reported per parameter below
            hints = {}

        parameters = []
        # Skip 'self'
        for position, (param_name, param) in enumerate(list(signature.parameters.items())[1:]):
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            has_default = param.default is not inspect.Parameter.empty
            declared_type = None
            type_error = None
            annotation = hints.get(param_name, param.annotation)

            # Also covers forward references nested in Optional or Union
            if param_name not in hints and annotation is not inspect.Parameter.empty:
                try:
                    annotation = _resolve_annotation(init, param_name, annotation)
                except Exception as e:
                    type_error = f"{type(e).__name__}: {e}"
                    annotation = inspect.Parameter.empty

            annotation = _unwrap_optional(annotation)
            if annotation is not inspect.Parameter.empty and is_injectable(annotation):
                declared_type = self.register(annotation)

            parameters.append(
                ParameterDescriptor(
                    name=param_name,
                    position=position,
                    keyword_only=param.kind is inspect.Parameter.KEYWORD_ONLY,
                    declared_type=declared_type,
                    has_default=has_default,
                    default=param.default if has_default else None,
                    type_error=type_error,
                )
            )
        return parameters
