"""Input validation helpers.

Validation never raises into the caller: it returns ``Ok`` with the parsed
model or ``Fail`` with a ``ValidationFailure`` whose message joins every
violated rule, in declaration order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from bluechip.core.errors import ValidationFailure

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class Ok(Generic[M]):
    value: M

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Fail:
    error: ValidationFailure

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[M], Fail]


def _describe(err: Mapping[str, Any]) -> str:
    field = ".".join(str(part) for part in err.get("loc", ())) or "payload"
    kind = err.get("type")
    if kind == "missing":
        return f'"{field}" is required'
    if kind == "string_type":
        return f'"{field}" must be a string'
    if kind in ("model_type", "dict_type"):
        return "payload must be an object"
    if kind in ("string_empty", "email_invalid", "email_domain", "string_too_long"):
        return err["msg"]
    return f'"{field}" {err.get("msg", "is invalid")}'


def format_errors(exc: ValidationError) -> str:
    """Join pydantic errors into one comma-separated message."""
    return ", ".join(_describe(err) for err in exc.errors())


def validate_model(
    model: Type[M], payload: Any, *, context: Optional[Mapping[str, Any]] = None
) -> Result:
    try:
        return Ok(model.model_validate(payload, context=dict(context or {})))
    except ValidationError as exc:
        return Fail(ValidationFailure(format_errors(exc)))


__all__ = ["Fail", "Ok", "Result", "format_errors", "validate_model"]
