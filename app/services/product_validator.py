from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from app.schemas.product_schemas import ProductPayload


@dataclass(frozen=True)
class Violation:
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ValidationResult:
    payload: Optional[ProductPayload] = None
    violations: List[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations


class ProductValidator:
    """Structural checks on a product body. Category existence is left to the store."""

    def validate(self, body: Any) -> ValidationResult:
        if not isinstance(body, dict):
            return ValidationResult(violations=[Violation("body", "Request body must be a JSON object")])
        try:
            payload = ProductPayload.model_validate(body)
        except ValidationError as e:
            return ValidationResult(violations=[
                Violation(".".join(str(part) for part in error["loc"]) or "body", error["msg"])
                for error in e.errors()
            ])
        return ValidationResult(payload=payload)
