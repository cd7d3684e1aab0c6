"""Tests for the ServiceResult contract."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from periodctl.services.result import ErrorCode, ServiceError, ServiceResult, failure


class TestServiceResult:
    def test_defaults(self) -> None:
        result = ServiceResult(ok=True, op="detect")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="detect")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_json_dump_uses_code_strings(self) -> None:
        result = failure("detect", ErrorCode.CONFLICT, "overlap")
        dumped = result.model_dump(mode="json")
        assert dumped["error"] == {"code": "CONFLICT", "message": "overlap", "detail": {}}


class TestFailure:
    def test_carries_detail_data_and_warnings(self) -> None:
        result = failure(
            "verify_periods",
            ErrorCode.INTEGRITY_VIOLATION,
            "1 gaps",
            detail={"gaps": 1},
            data={"is_valid": False},
            warnings=["careful"],
        )
        assert not result.ok
        assert result.op == "verify_periods"
        assert result.error == ServiceError(
            code="INTEGRITY_VIOLATION", message="1 gaps", detail={"gaps": 1}
        )
        assert result.data == {"is_valid": False}
        assert result.warnings == ["careful"]

    def test_error_codes_are_plain_strings(self) -> None:
        assert ErrorCode.NO_ANCHOR == "NO_ANCHOR"
        assert str(ErrorCode.EXACT_MATCH) == "EXACT_MATCH"
