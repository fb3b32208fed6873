from __future__ import annotations

from typing import Any

from flask import current_app, request, session

from ..models import local_today
from ..session import Viewer


def current_viewer() -> Viewer:
    return Viewer.from_session(session)


def today():
    return local_today(current_app.config["TIMEZONE"])


def form_data() -> dict[str, Any]:
    """Submitted fields from either a JSON body or an HTML form post."""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return request.form.to_dict()
