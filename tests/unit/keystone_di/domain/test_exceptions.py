"""Unit tests for domain exceptions."""

import pytest

from keystone_di.domain.exceptions import (
    ConfigurationError,
    ContainerError,
    InvalidArgumentError,
    NotFoundError,
    RecursionLimitError,
    UnexpectedValueError,
)


class TestContainerError:
    """Test cases for the base ContainerError class."""

    def test_container_error_is_exception(self):
        """Test that ContainerError inherits from Exception."""
        assert issubclass(ContainerError, Exception)

    def test_container_error_can_be_raised(self):
        """Test that ContainerError can be raised with a message."""
        with pytest.raises(ContainerError, match="Test error"):
            raise ContainerError("Test error")

    @pytest.mark.parametrize(
        "error_class",
        [NotFoundError, InvalidArgumentError, UnexpectedValueError, RecursionLimitError, ConfigurationError],
    )
    def test_all_errors_derive_from_container_error(self, error_class):
        """Test that every error in the taxonomy is a ContainerError."""
        assert issubclass(error_class, ContainerError)


class TestNotFoundError:
    """Test cases for NotFoundError."""

    def test_not_found_error_message(self):
        """Test that the message names the identifier."""
        error = NotFoundError("mailer")
        assert error.identifier == "mailer"
        assert str(error) == 'Identifier "mailer" is not defined!'

    def test_not_found_error_is_lookup_error(self):
        """Test that NotFoundError can be caught as LookupError."""
        with pytest.raises(LookupError):
            raise NotFoundError("mailer")


class TestInvalidArgumentError:
    """Test cases for InvalidArgumentError."""

    def test_invalid_argument_error_is_value_error(self):
        """Test that InvalidArgumentError can be caught as ValueError."""
        with pytest.raises(ValueError, match="bad"):
            raise InvalidArgumentError("bad")


class TestUnexpectedValueError:
    """Test cases for UnexpectedValueError."""

    def test_unexpected_value_error_attributes(self):
        """Test that identifier and value kind are kept."""
        error = UnexpectedValueError("clock", "NoneType")
        assert error.identifier == "clock"
        assert error.value_kind == "NoneType"

    def test_unexpected_value_error_message(self):
        """Test the message format."""
        error = UnexpectedValueError("clock", "int")
        assert str(error) == 'Resolver for "clock" returns non object of type "int"!'


class TestRecursionLimitError:
    """Test cases for RecursionLimitError."""

    def test_recursion_limit_error_attributes(self):
        """Test that identifier and ceiling are kept."""
        error = RecursionLimitError("app.Node", 3)
        assert error.identifier == "app.Node"
        assert error.max_recursion == 3

    def test_recursion_limit_error_message(self):
        """Test that the message names the type and the ceiling."""
        error = RecursionLimitError("app.Node", 3)
        assert "app.Node" in str(error)
        assert "exceeds maximum recursion count of 3" in str(error)


class TestConfigurationError:
    """Test cases for ConfigurationError."""

    def test_configuration_error_defaults(self):
        """Test that key and index default to None."""
        error = ConfigurationError("broken")
        assert error.key is None
        assert error.index is None
        assert str(error) == "broken"

    def test_configuration_error_with_key_and_index(self):
        """Test that key and index are kept."""
        error = ConfigurationError("missing", key="identifier", index=2)
        assert error.key == "identifier"
        assert error.index == 2
