"""Reusable decorators for controllers.

``staged`` runs a view behind an ordered list of stages. Each stage receives
the current ``RequestContext`` and returns either ``Continue`` (optionally with
an updated context) or ``Halt`` carrying the response to send instead. The
first ``Halt`` wins; the view only runs once every stage has continued.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Mapping, Optional, TypeVar, Union

from flask import request
from flask.typing import ResponseReturnValue

F = TypeVar("F", bound=Callable)


@dataclass(frozen=True)
class RequestContext:
    identity: Optional[Any]
    form: Mapping[str, Any] = field(default_factory=dict)
    submission: Optional[Any] = None


@dataclass(frozen=True)
class Continue:
    ctx: RequestContext


@dataclass(frozen=True)
class Halt:
    response: ResponseReturnValue


StageResult = Union[Continue, Halt]
Stage = Callable[[RequestContext], StageResult]


def build_context() -> RequestContext:
    from bluechip.core.auth.session_services import session_manager

    return RequestContext(
        identity=session_manager.current_identity(),
        form=request.form.to_dict() if request.form else {},
    )


def run_stages(ctx: RequestContext, *stages: Stage) -> StageResult:
    for stage in stages:
        result = stage(ctx)
        if isinstance(result, Halt):
            return result
        ctx = result.ctx
    return Continue(ctx)


def staged(*stages: Stage):
    """Run ``stages`` in order before the view; the view receives the final context."""

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):  # type: ignore[misc]
            result = run_stages(build_context(), *stages)
            if isinstance(result, Halt):
                return result.response
            return fn(result.ctx, *args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = [
    "Continue",
    "Halt",
    "RequestContext",
    "Stage",
    "StageResult",
    "build_context",
    "run_stages",
    "staged",
]
