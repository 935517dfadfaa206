"""Tests for preen._errors."""

from __future__ import annotations

from preen._errors import (
    ConfigError,
    DataLoadError,
    PreenError,
    TemplateError,
    TransportError,
)


class TestErrorHierarchy:
    """All preen errors inherit from PreenError."""

    def test_preen_error_is_exception(self) -> None:
        assert issubclass(PreenError, Exception)

    def test_config_error_inherits(self) -> None:
        assert issubclass(ConfigError, PreenError)

    def test_data_load_error_inherits(self) -> None:
        assert issubclass(DataLoadError, PreenError)

    def test_template_error_inherits(self) -> None:
        assert issubclass(TemplateError, PreenError)

    def test_transport_error_inherits(self) -> None:
        assert issubclass(TransportError, PreenError)

    def test_catch_all_preen_errors(self) -> None:
        """All specific errors are catchable via PreenError."""
        for error_cls in (ConfigError, DataLoadError, TemplateError, TransportError):
            try:
                raise error_cls("test")
            except PreenError:
                pass  # caught by the base class
