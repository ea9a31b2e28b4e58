"""Tests for the eventapi exception hierarchy and package surface."""

import pytest

import eventapi
from eventapi import (
    EventApiError,
    EventDispatcher,
    EventValidationError,
    InvalidHandlerError,
)


class TestExceptionHierarchy:
    """Test exception class hierarchy and inheritance."""

    def test_base_error_is_exception(self):
        """EventApiError inherits from Exception."""
        assert issubclass(EventApiError, Exception)

    def test_event_validation_error_inheritance(self):
        """EventValidationError inherits from EventApiError and ValueError."""
        assert issubclass(EventValidationError, EventApiError)
        assert issubclass(EventValidationError, ValueError)

    def test_invalid_handler_error_inheritance(self):
        """InvalidHandlerError inherits from EventApiError and TypeError."""
        assert issubclass(InvalidHandlerError, EventApiError)
        assert issubclass(InvalidHandlerError, TypeError)

    def test_catch_all_with_base(self):
        """Framework errors can be caught through the base class."""
        with pytest.raises(EventApiError):
            raise InvalidHandlerError("bad handler")


class TestPackageSurface:
    def test_default_dispatcher(self):
        """The package ships a ready-made dispatcher instance."""
        assert isinstance(eventapi.default_dispatcher, EventDispatcher)

    def test_all_exports_resolve(self):
        """Every name in __all__ is importable."""
        for name in eventapi.__all__:
            assert hasattr(eventapi, name)
