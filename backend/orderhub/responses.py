# Overview: Uniform response envelope returned by every use case, plus the error-code taxonomy.

"""
Response Envelope

Every externally visible operation returns exactly one BaseResponse:

    {"message": str, "errorCode": int, "data": T | None}

errorCode 0 is success. Non-zero codes follow the taxonomy in ErrorCode and
map onto an external status through status_for(), which is total: any code
it does not recognise is reported as an internal error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorCode(IntEnum):
    OK = 0
    VALIDATION_FAILED = 400
    UNAUTHENTICATED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL = 500


_STATUS_BY_CODE = {
    ErrorCode.OK: 200,
    ErrorCode.VALIDATION_FAILED: 400,
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
}


def status_for(error_code: int) -> int:
    """External status for an envelope error code. Unknown codes are 500."""
    return _STATUS_BY_CODE.get(error_code, 500)


def _serialize(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    return value


@dataclass
class BaseResponse(Generic[T]):
    message: str = "Operation successful"
    error_code: int = ErrorCode.OK
    data: T | None = None

    @classmethod
    def success(cls, data: T | None = None, message: str = "Operation successful") -> "BaseResponse[T]":
        return cls(message=message, error_code=ErrorCode.OK, data=data)

    @classmethod
    def error(cls, message: str, error_code: int = ErrorCode.INTERNAL) -> "BaseResponse[T]":
        return cls(message=message, error_code=int(error_code), data=None)

    @property
    def ok(self) -> bool:
        return self.error_code == ErrorCode.OK

    @property
    def status_code(self) -> int:
        return status_for(self.error_code)

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "errorCode": int(self.error_code),
            "data": _serialize(self.data),
        }
