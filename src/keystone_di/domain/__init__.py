"""
Domain layer - Core models and contracts.

This layer contains the bindings, recipes, type descriptors and the error
taxonomy of the container. It has no dependencies on other layers.
"""

from .enums import Lifetime, RecipeKind
from .exceptions import (
    ConfigurationError,
    ContainerError,
    InvalidArgumentError,
    NotFoundError,
    RecursionLimitError,
    UnexpectedValueError,
)
from .interfaces import IContainer, IdentifierLike, ILifetimeManager, IResolver, ITypeRegistry
from .models import (
    Binding,
    BindingConfig,
    FactoryRecipe,
    InstanceRecipe,
    ParameterDescriptor,
    Recipe,
    TypeDescriptor,
    TypeNameRecipe,
)

__all__ = [
    # Enums
    "Lifetime",
    "RecipeKind",
    # Exceptions
    "ContainerError",
    "NotFoundError",
    "InvalidArgumentError",
    "UnexpectedValueError",
    "RecursionLimitError",
    "ConfigurationError",
    # Interfaces
    "IContainer",
    "IResolver",
    "ITypeRegistry",
    "ILifetimeManager",
    "IdentifierLike",
    # Models
    "Binding",
    "BindingConfig",
    "FactoryRecipe",
    "InstanceRecipe",
    "ParameterDescriptor",
    "Recipe",
    "TypeDescriptor",
    "TypeNameRecipe",
]
