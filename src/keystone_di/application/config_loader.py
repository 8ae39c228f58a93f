"""Application layer - Declarative binding configuration."""

import logging
from typing import Any, Iterable, List, Mapping

from pydantic import ValidationError

from keystone_di.domain import BindingConfig, ConfigurationError, IContainer

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Validates binding descriptions and applies them to a container.

    Each description is a mapping with the keys:

    - **identifier**: The identifier to bind, or a class standing for its
      type name (required).
    - **recipe**: An instance, a factory, a class or a type name (required).
    - **single**: Whether the binding is a singleton (optional, default False).
    - **new**: Whether the binding is a singleton resolved once the whole
      batch is registered (optional, default False).

    Attributes:
        _container: The container receiving the bindings.
    """

    def __init__(self, container: IContainer) -> None:
        self._container = container

    def validate(self, records: Iterable[Mapping[str, Any]]) -> List[BindingConfig]:
        """Validate every record of a batch.

        Args:
            records: The binding descriptions.

        Returns:
            The validated descriptions, in order.

        Raises:
            ConfigurationError: On the first malformed record.
        """
        configs = []
        for index, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise ConfigurationError(
                    f"Binding configuration at index {index} is not a mapping!",
                    index=index,
                )
            try:
                configs.append(BindingConfig.model_validate(dict(record)))
            except ValidationError as e:
                raise self._to_configuration_error(e, record, index) from e
        return configs

    def load(self, records: Iterable[Mapping[str, Any]]) -> None:
        """Validate a batch, register it, then resolve its eager bindings.

        Eager (``new``) bindings are resolved only after every record is
        registered, so they may depend on identifiers declared later in the
        batch. Nothing is registered when any record is malformed.

        Example:
            >>> loader.load([
            ...     {"identifier": "mailer", "recipe": lambda c: Mailer(c.get("transport")), "new": True},
            ...     {"identifier": "transport", "recipe": SmtpTransport, "single": True},
            ... ])
        """
        self.resolve_eager(self.register(self.validate(records)))

    def register(self, configs: Iterable[BindingConfig]) -> List[BindingConfig]:
        """Bind validated descriptions in order.

        Returns:
            The eager descriptions, still to be resolved.
        """
        eager = []
        for config in configs:
            if config.single or config.new:
                self._container.single(config.identifier, config.recipe)
            else:
                self._container.set(config.identifier, config.recipe)
            if config.new:
                eager.append(config)
        return eager

    def resolve_eager(self, configs: Iterable[BindingConfig]) -> None:
        for config in configs:
            logger.debug("Eager loading %s", config.identifier)
            self._container.get(config.identifier)

    @staticmethod
    def _to_configuration_error(
        error: ValidationError, record: Mapping[str, Any], index: int
    ) -> ConfigurationError:
        detail = error.errors()[0]
        key = str(detail["loc"][0]) if detail["loc"] else None
        if detail["type"] == "missing" or (key == "recipe" and record.get("recipe") is None):
            message = f'Binding configuration at index {index} has no "{key}" key!'
        else:
            message = f'Binding configuration at index {index} has an invalid "{key}" key: {detail["msg"]}'
        return ConfigurationError(message, key=key, index=index)
