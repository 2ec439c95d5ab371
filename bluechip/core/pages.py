"""Public HTML pages."""

from __future__ import annotations

from flask import Blueprint, render_template

from bluechip.core.errors import RouteNotFound

main_pages_bp = Blueprint("main_pages", __name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
# Methods "/" has no page for; GET and HEAD belong to home.
ROOT_UNMATCHED_METHODS = ["POST", "PUT", "PATCH", "DELETE"]


@main_pages_bp.get("/")
def home():
    return render_template("home.html")


@main_pages_bp.get("/services")
def services():
    return render_template("main/services.html")


@main_pages_bp.get("/apps")
def apps():
    return render_template("main/apps.html")


@main_pages_bp.route("/", defaults={"path": ""}, methods=ROOT_UNMATCHED_METHODS)
@main_pages_bp.route("/<path:path>", methods=ALL_METHODS)
def not_found(path: str):
    raise RouteNotFound()
