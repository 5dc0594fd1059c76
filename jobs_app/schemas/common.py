"""공통 스키마 - 응답 envelope"""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ResponseCode(str, Enum):
    """응답 코드"""

    OK = "OK"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ApiResponse(BaseModel, Generic[T]):
    """공통 API 응답 envelope"""

    code: ResponseCode = Field(..., description="응답 코드")
    data: T | None = Field(default=None, description="응답 데이터")


class NotFoundErrorData(BaseModel):
    """리소스 미발견 에러 데이터"""

    resource: str | None = Field(default=None, description="리소스 타입")
    id: int | None = Field(default=None, description="리소스 ID")
