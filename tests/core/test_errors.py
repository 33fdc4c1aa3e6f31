"""
Tests for core/errors.py - error hierarchy.
"""
import pytest

from core.errors import (
    BibleConfigError,
    BibleError,
    BibleStorageError,
    BibleValidationError,
    BlobNotFoundError,
    ErrorContext,
    ErrorSeverity,
    MalformedDocumentError,
    StorageUnavailableError,
)


class TestHierarchy:

    @pytest.mark.parametrize("error_class", [
        BibleConfigError,
        BibleStorageError,
        StorageUnavailableError,
        BlobNotFoundError,
        MalformedDocumentError,
    ])
    def test_all_derive_from_base(self, error_class):
        assert issubclass(error_class, BibleError)

    def test_storage_subclasses(self):
        assert issubclass(StorageUnavailableError, BibleStorageError)
        assert issubclass(BlobNotFoundError, BibleStorageError)

    def test_severities(self):
        assert BibleConfigError("x").severity == ErrorSeverity.CRITICAL
        assert BibleValidationError("p", "x").severity == ErrorSeverity.WARNING
        assert BlobNotFoundError("x").severity == ErrorSeverity.INFO


class TestBibleError:

    def test_to_dict(self):
        cause = ValueError("boom")
        error = StorageUnavailableError("Store offline", key="kjv.xml", backend="s3", cause=cause)
        data = error.to_dict()
        assert data["error_code"] == "STORAGE_UNAVAILABLE"
        assert data["message"] == "Store offline"
        assert data["recoverable"] is True
        assert data["cause"] == "boom"
        assert error.key == "kjv.xml"
        assert error.backend == "s3"

    def test_validation_error_carries_parameter(self):
        error = BibleValidationError("chapter", "Chapter number must be greater than 0.", actual_value=0)
        assert error.to_dict()["parameter"] == "chapter"
        assert error.actual_value == 0
        assert error.recoverable is True

    def test_str_includes_code_and_cause(self):
        error = MalformedDocumentError("Not XML", document_key="bad.xml", line=3, cause=ValueError("eof"))
        assert str(error) == "[MALFORMED_DOCUMENT] Not XML [caused by: eof]"
        assert error.line == 3

    def test_context_from_span_without_tracing(self):
        context = ErrorContext.from_current_span("fetch", "storage", document_key="kjv.xml")
        assert context.trace_id is None
        assert context.to_dict()["document_key"] == "kjv.xml"
