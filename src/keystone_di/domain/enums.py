from enum import Enum


class Lifetime(str, Enum):
    """Defines the lifetime of a resolved binding.

    Attributes:
        SINGLETON: Resolved once, then served from the cache.
        TRANSIENT: Resolved again on every request.
    """

    TRANSIENT = "transient"
    SINGLETON = "singleton"

    def __str__(self) -> str:
        return self.value


class RecipeKind(str, Enum):
    """Discriminator for the recipe variants a binding can hold."""

    INSTANCE = "instance"
    FACTORY = "factory"
    TYPE_NAME = "type_name"

    def __str__(self) -> str:
        return self.value
