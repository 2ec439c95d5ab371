"""Contact submission handling."""

from __future__ import annotations

import logging

from flask import current_app

from bluechip.core.utils.decorators import Continue, Halt, RequestContext, StageResult
from bluechip.core.errors import render_failure
from bluechip.domains.contact.schemas.contact_schemas import ContactSubmission, validate_contact

logger = logging.getLogger(__name__)

SENT_MESSAGE = "Your message has been sent to BlueChip Apps Team!"


def validated_contact(ctx: RequestContext) -> StageResult:
    """Stage: validate the posted form before the handler does anything."""
    result = validate_contact(ctx.form, current_app.extensions["contact_rules"])
    if not result.ok:
        logger.info("Rejected contact submission: %s", result.error.message)
        return Halt(render_failure(result.error))
    return Continue(RequestContext(identity=ctx.identity, form=ctx.form, submission=result.value))


def forward_submission(submission: ContactSubmission) -> None:
    """Append the submission to the contact spreadsheet."""
    client = current_app.extensions["sheets_client"]
    client.append_row(submission.name, submission.email, submission.message)
    logger.info("Forwarded contact submission to spreadsheet")


__all__ = ["SENT_MESSAGE", "forward_submission", "validated_contact"]
