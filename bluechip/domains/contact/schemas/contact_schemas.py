"""Contact form schema and rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Mapping, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from bluechip.core.utils.validation import Result, validate_model


MIN_DOMAIN_SEGMENTS_FLOOR = 2


@dataclass(frozen=True)
class ContactRules:
    """Tunable contact form rules.

    ``min_domain_segments`` cannot go below 2: email syntax checking already
    rejects dotless domains such as ``a@com``.
    """

    allowed_tlds: FrozenSet[str] = frozenset({"com", "net", "edu"})
    min_domain_segments: int = 2
    message_max_length: int = 100

    def __post_init__(self) -> None:
        if self.min_domain_segments < MIN_DOMAIN_SEGMENTS_FLOOR:
            raise ValueError(
                f"min_domain_segments must be at least {MIN_DOMAIN_SEGMENTS_FLOOR}, "
                f"got {self.min_domain_segments}"
            )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ContactRules":
        tlds: Iterable[str] = config.get("CONTACT_EMAIL_TLDS") or cls.allowed_tlds
        return cls(
            allowed_tlds=frozenset(t.lower().lstrip(".") for t in tlds),
            min_domain_segments=int(config.get("CONTACT_EMAIL_MIN_DOMAIN_SEGMENTS", 2)),
            message_max_length=int(config.get("CONTACT_MESSAGE_MAX_LENGTH", 100)),
        )


DEFAULT_RULES = ContactRules()


def _rules(info: ValidationInfo) -> ContactRules:
    context = info.context or {}
    return context.get("rules") or DEFAULT_RULES


def _not_empty(field: str, value: str) -> str:
    if not value:
        raise PydanticCustomError("string_empty", f'"{field}" is not allowed to be empty')
    return value


class ContactSubmission(BaseModel):
    """A visitor's message. Field values are kept exactly as submitted."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    message: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _not_empty("name", v)

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v: str, info: ValidationInfo) -> str:
        _not_empty("email", v)
        rules = _rules(info)
        try:
            domain = validate_email(v, check_deliverability=False).ascii_domain
        except EmailNotValidError:
            raise PydanticCustomError("email_invalid", '"email" must be a valid email')
        segments = domain.lower().split(".")
        if len(segments) < rules.min_domain_segments or segments[-1] not in rules.allowed_tlds:
            allowed = ", ".join(sorted(rules.allowed_tlds))
            raise PydanticCustomError(
                "email_domain",
                f'"email" must be a valid email ending in one of: {allowed}',
            )
        return v

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str, info: ValidationInfo) -> str:
        _not_empty("message", v)
        limit = _rules(info).message_max_length
        if len(v) > limit:
            raise PydanticCustomError(
                "string_too_long",
                f'"message" length must be less than or equal to {limit} characters long',
            )
        return v


def validate_contact(payload: Any, rules: Optional[ContactRules] = None) -> Result:
    """Check a raw form payload; returns ``Ok(ContactSubmission)`` or ``Fail``."""
    return validate_model(ContactSubmission, payload, context={"rules": rules or DEFAULT_RULES})


__all__ = ["ContactRules", "ContactSubmission", "DEFAULT_RULES", "validate_contact"]
