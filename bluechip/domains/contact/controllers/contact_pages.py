"""Contact form pages."""

from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, url_for

from bluechip.core.auth.constants import FLASH_SUCCESS
from bluechip.core.auth.csrf import csrf_protected
from bluechip.core.auth.guards import require_authenticated
from bluechip.core.utils.decorators import staged
from bluechip.domains.contact.services.contact_service import (
    SENT_MESSAGE,
    forward_submission,
    validated_contact,
)
from bluechip.extensions import limiter

contact_pages_bp = Blueprint("contact_pages", __name__)


@contact_pages_bp.get("/contact")
@staged(require_authenticated)
def contact_form(ctx):
    return render_template("main/contact.html")


@contact_pages_bp.post("/contact")
@limiter.limit("10/minute")
@staged(csrf_protected, validated_contact)
def submit_contact(ctx):
    forward_submission(ctx.submission)
    flash(SENT_MESSAGE, FLASH_SUCCESS)
    return redirect(url_for("main_pages.home"))
