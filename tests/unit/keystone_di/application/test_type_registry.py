"""Unit tests for TypeRegistry."""

import argparse
from abc import ABC, abstractmethod
from typing import Optional, Protocol

import pytest

from keystone_di.application.type_registry import TypeRegistry, is_injectable, type_name
from keystone_di.domain import ITypeRegistry, NotFoundError, ParameterDescriptor, TypeDescriptor


class Dependency:
    pass


class Consumer:
    def __init__(self, dep: Dependency, count: int = 3, *args, label: str = "x", **kwargs):
        self.dep = dep


class OptionalConsumer:
    def __init__(self, dep: Optional[Dependency]):
        self.dep = dep


class ForwardConsumer:
    def __init__(self, dep: "Dependency"):
        self.dep = dep


class BrokenConsumer:
    def __init__(self, dep: "MissingType", other: Dependency):
        self.dep = dep


class OptionalBrokenConsumer:
    def __init__(self, dep: Optional["MissingOptionalType"], other: Dependency):
        self.dep = dep


class Untyped:
    def __init__(self, value):
        self.value = value


class AbstractService(ABC):
    @abstractmethod
    def run(self):
        """Run the service."""


class ServiceProtocol(Protocol):
    def run(self) -> None: ...


class TestTypeName:
    """Test cases for the type_name helper."""

    def test_type_name_is_module_and_qualname(self):
        """Test that canonical names combine module and qualified name."""
        assert type_name(Dependency) == f"{Dependency.__module__}.Dependency"

    def test_type_name_of_local_class(self):
        """Test that local classes keep their qualified name."""

        class Local:
            pass

        assert type_name(Local).endswith("test_type_name_of_local_class.<locals>.Local")


class TestIsInjectable:
    """Test cases for the is_injectable helper."""

    def test_user_class_is_injectable(self):
        """Test that user classes are injectable."""
        assert is_injectable(Dependency)

    @pytest.mark.parametrize("annotation", [int, str, list, dict, Optional[int], "Dependency"])
    def test_builtins_and_non_classes_are_not_injectable(self, annotation):
        """Test that builtin types and non-class annotations are rejected."""
        assert not is_injectable(annotation)


class TestRegistration:
    """Test cases for registering types."""

    def test_registry_implements_interface(self):
        """Test that TypeRegistry implements ITypeRegistry."""
        assert isinstance(TypeRegistry(), ITypeRegistry)

    def test_register_returns_canonical_name(self):
        """Test that register returns the canonical name."""
        registry = TypeRegistry()
        assert registry.register(Dependency) == type_name(Dependency)

    def test_registered_local_class_is_constructible(self):
        """Test that registration makes non-importable classes known."""
        registry = TypeRegistry()

        class Local:
            pass

        name = registry.register(Local)
        assert registry.is_constructible(name)
        assert registry.describe(name).factory is Local

    def test_register_with_alias(self):
        """Test that a class can be known by an alias."""
        registry = TypeRegistry()

        class Local:
            pass

        registry.register(Local, "Local")
        assert registry.describe("Local").factory is Local

    def test_reregistering_alias_replaces_descriptor(self):
        """Test that an alias pointing to a new class drops the cached descriptor."""
        registry = TypeRegistry()

        class First:
            pass

        class Second:
            pass

        registry.register(First, "service")
        assert registry.describe("service").factory is First
        registry.register(Second, "service")
        assert registry.describe("service").factory is Second

    def test_register_descriptor_takes_precedence(self):
        """Test that hand-written descriptors are used as-is."""
        registry = TypeRegistry()
        descriptor = TypeDescriptor(
            name="mailer",
            factory=lambda transport: ("mailer", transport),
            parameters=[ParameterDescriptor(name="transport", position=0, declared_type="transport")],
        )
        registry.register_descriptor(descriptor)
        assert registry.describe("mailer") is descriptor
        assert registry.is_constructible("mailer")


class TestLookup:
    """Test cases for looking up types by name."""

    def test_unknown_name_raises_not_found(self):
        """Test that describing an unknown name raises NotFoundError."""
        registry = TypeRegistry()
        with pytest.raises(NotFoundError):
            registry.describe("UnknownClass")
        assert registry.is_constructible("UnknownClass") is False

    def test_unknown_dotted_path(self):
        """Test that unimportable dotted paths are unknown."""
        registry = TypeRegistry()
        assert registry.is_constructible("no_such_package.Service") is False

    @pytest.mark.parametrize("name", ["argparse.Namespace", "argparse:Namespace"])
    def test_dotted_path_is_imported(self, name):
        """Test that dotted import paths resolve to classes."""
        registry = TypeRegistry()
        descriptor = registry.describe(name)
        assert descriptor.factory is argparse.Namespace
        assert descriptor.parameters == []

    def test_dotted_path_to_module_is_not_a_type(self):
        """Test that a path naming a module is not constructible."""
        registry = TypeRegistry()
        assert registry.is_constructible("os.path") is False

    def test_descriptors_are_cached(self):
        """Test that describe returns the same descriptor twice."""
        registry = TypeRegistry()
        name = registry.register(Consumer)
        assert registry.describe(name) is registry.describe(name)


class TestConstructibility:
    """Test cases for non-constructible types."""

    def test_abstract_class_is_not_constructible(self):
        """Test that abstract classes are known but not constructible."""
        registry = TypeRegistry()
        name = registry.register(AbstractService)
        assert registry.describe(name).constructible is False
        assert registry.is_constructible(name) is False

    def test_protocol_is_not_constructible(self):
        """Test that protocols are not constructible."""
        registry = TypeRegistry()
        name = registry.register(ServiceProtocol)
        assert registry.is_constructible(name) is False

    def test_builtin_type_is_not_constructible(self):
        """Test that builtin types are not constructible."""
        registry = TypeRegistry()
        assert registry.is_constructible("builtins.dict") is False


class TestParameterDescription:
    """Test cases for constructor parameter introspection."""

    def test_class_without_constructor(self):
        """Test that classes without __init__ have no parameters."""
        registry = TypeRegistry()
        assert registry.describe(registry.register(Dependency)).parameters == []

    def test_parameters_in_declaration_order(self):
        """Test names, positions, defaults and declared types."""
        registry = TypeRegistry()
        parameters = registry.describe(registry.register(Consumer)).parameters

        assert [p.name for p in parameters] == ["dep", "count", "label"]

        dep, count, label = parameters
        assert dep.position == 0
        assert dep.declared_type == type_name(Dependency)
        assert dep.has_default is False

        assert count.position == 1
        assert count.declared_type is None
        assert count.has_default is True
        assert count.default == 3

        assert label.keyword_only is True
        assert label.default == "x"

    def test_declared_types_are_registered(self):
        """Test that parameter classes become constructible by name."""
        registry = TypeRegistry()

        class LocalDependency:
            pass

        class LocalConsumer:
            def __init__(self, dep: LocalDependency):
                self.dep = dep

        registry.describe(registry.register(LocalConsumer))
        assert registry.is_constructible(type_name(LocalDependency))

    def test_optional_annotation_is_unwrapped(self):
        """Test that Optional[X] declares X."""
        registry = TypeRegistry()
        (dep,) = registry.describe(registry.register(OptionalConsumer)).parameters
        assert dep.declared_type == type_name(Dependency)

    def test_forward_reference_is_resolved(self):
        """Test that string annotations are evaluated in the defining module."""
        registry = TypeRegistry()
        (dep,) = registry.describe(registry.register(ForwardConsumer)).parameters
        assert dep.declared_type == type_name(Dependency)
        assert dep.type_error is None

    def test_broken_forward_reference_is_reported(self):
        """Test that unresolvable annotations are recorded per parameter."""
        registry = TypeRegistry()
        dep, other = registry.describe(registry.register(BrokenConsumer)).parameters

        assert dep.declared_type is None
        assert "MissingType" in dep.type_error
        assert other.declared_type == type_name(Dependency)
        assert other.type_error is None

    def test_broken_forward_reference_inside_optional_is_reported(self):
        """Test that references nested in Optional are evaluated per parameter."""
        registry = TypeRegistry()
        dep, other = registry.describe(registry.register(OptionalBrokenConsumer)).parameters

        assert dep.declared_type is None
        assert "MissingOptionalType" in dep.type_error
        assert other.declared_type == type_name(Dependency)
        assert other.type_error is None

    def test_untyped_parameter(self):
        """Test that parameters without annotation declare no type."""
        registry = TypeRegistry()
        (value,) = registry.describe(registry.register(Untyped)).parameters
        assert value.declared_type is None
        assert value.type_error is None
        assert value.has_default is False
