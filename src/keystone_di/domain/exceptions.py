from typing import Optional


class ContainerError(Exception):
    """Base exception for container errors.

    Raised directly for malformed recipes, unsatisfiable constructor
    parameters and type introspection failures.
    """


class NotFoundError(ContainerError, LookupError):
    """Raised when an identifier has no binding and is not a constructible type."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f'Identifier "{identifier}" is not defined!')


class InvalidArgumentError(ContainerError, ValueError):
    """Raised when an invalid argument is supplied to the container."""


class UnexpectedValueError(ContainerError):
    """Raised when a resolver produces a value that is not object-like.

    Attributes:
        identifier: The identifier being resolved.
        value_kind: Runtime type name of the offending value.
    """

    def __init__(self, identifier: str, value_kind: str) -> None:
        self.identifier = identifier
        self.value_kind = value_kind
        super().__init__(f'Resolver for "{identifier}" returns non object of type "{value_kind}"!')


class RecursionLimitError(ContainerError):
    """Raised when a resolution chain exceeds the recursion ceiling.

    Attributes:
        identifier: The identifier or type name whose counter overflowed.
        max_recursion: The configured ceiling.
    """

    def __init__(self, identifier: str, max_recursion: int) -> None:
        self.identifier = identifier
        self.max_recursion = max_recursion
        super().__init__(f'Class "{identifier}" exceeds maximum recursion count of {max_recursion} times!')


class ConfigurationError(ContainerError):
    """Raised for malformed binding configuration records.

    This occurs when:
    - A record is not a mapping.
    - A required key (``identifier`` or ``recipe``) is missing.
    - A key holds a value of the wrong type.

    Attributes:
        key: The missing or invalid key, if known.
        index: Position of the record within its batch, if known.
    """

    def __init__(self, message: str, key: Optional[str] = None, index: Optional[int] = None) -> None:
        self.key = key
        self.index = index
        super().__init__(message)
