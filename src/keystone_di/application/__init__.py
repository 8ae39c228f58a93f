"""
Application layer - Registry and resolution.

This layer contains the container, its resolver variants and the
collaborators they orchestrate. It depends only on the Domain layer.
"""

from .config_loader import ConfigLoader
from .container import DEFAULT_MAX_RECURSION, Container
from .lifetime_manager import LifetimeManager
from .recursion_guard import RecursionGuard
from .resolver import CallableResolver, InstanceResolver, ReflectionResolver, ensure_object, is_object_like
from .type_registry import TypeRegistry, type_name

__all__ = [
    "Container",
    "DEFAULT_MAX_RECURSION",
    "ConfigLoader",
    "LifetimeManager",
    "RecursionGuard",
    "InstanceResolver",
    "CallableResolver",
    "ReflectionResolver",
    "TypeRegistry",
    "ensure_object",
    "is_object_like",
    "type_name",
]
