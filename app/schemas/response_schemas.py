from pydantic import BaseModel, Field
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ErrorBody(BaseModel):
    message: str
    code: str
    details: List[Dict[str, Any]] = Field(default_factory=list)


class APIResponse(BaseModel, Generic[T]):
    ok: bool = True
    payload: T


class ErrorResponse(BaseModel):
    ok: bool = False
    err: ErrorBody


def error_content(message: str, code: str, details: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return ErrorResponse(err=ErrorBody(message=message, code=code, details=details or [])).model_dump()
