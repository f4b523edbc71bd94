"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from ctrctl.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="add_container", data={"number": "A1"})
        assert result.ok is True
        assert result.op == "add_container"
        assert result.data == {"number": "A1"}
        assert result.warnings == []
        assert result.error is None

    def test_error_construction(self) -> None:
        error = ServiceError(code="NOT_FOUND", message="Not found")
        result = ServiceResult(ok=False, op="edit_container", error=error)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_failure_helper(self) -> None:
        result = ServiceResult.failure("edit_container", "NOT_FOUND", "gone", detail={"k": 1})
        assert result.ok is False
        assert result.error == ServiceError(code="NOT_FOUND", message="gone", detail={"k": 1})

    def test_json_serialization(self) -> None:
        result = ServiceResult(ok=True, op="test", data={"key": "value"})
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["key"] == "value"
        assert "meta" not in parsed

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_default_detail(self) -> None:
        assert ServiceError(code="E", message="bad").detail == {}
