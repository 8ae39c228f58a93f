"""
keystone-di: Dependency resolution registry with factory bindings and constructor auto-wiring.

Public API exports for the keystone-di package.
"""

# Application exports
from keystone_di.application.container import DEFAULT_MAX_RECURSION, Container
from keystone_di.application.type_registry import TypeRegistry, type_name

# Domain exports
from keystone_di.domain.enums import Lifetime
from keystone_di.domain.exceptions import (
    ConfigurationError,
    ContainerError,
    InvalidArgumentError,
    NotFoundError,
    RecursionLimitError,
    UnexpectedValueError,
)
from keystone_di.domain.models import ParameterDescriptor, TypeDescriptor

__version__ = "0.1.0"

__all__ = [
    # Container
    "Container",
    "DEFAULT_MAX_RECURSION",
    # Type introspection
    "TypeRegistry",
    "TypeDescriptor",
    "ParameterDescriptor",
    "type_name",
    # Enums
    "Lifetime",
    # Exceptions
    "ContainerError",
    "NotFoundError",
    "InvalidArgumentError",
    "UnexpectedValueError",
    "RecursionLimitError",
    "ConfigurationError",
]
