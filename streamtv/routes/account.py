from flask import Blueprint, jsonify, redirect, request, session, url_for

from . import current_viewer, form_data, today
from .. import session as viewer_session
from ..auth import authenticate
from ..db import get_db
from ..queue import list_queue
from ..registration import register
from ..validation import LOGIN_FORM, REGISTER_FORM, describe, validate
from ..watch import list_watched, watch_episode, watched_header

bp = Blueprint("account", __name__)


@bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method != "POST":
        return jsonify({"pageTitle": "Login", "form": describe(LOGIN_FORM), "results": ""})
    data = validate(LOGIN_FORM, form_data())
    username = authenticate(get_db(), data["uname"], data["password"])
    viewer_session.login(session, username)
    return redirect(url_for("public.home"))


@bp.route("/register", methods=["GET", "POST"])
def register_page():
    if request.method != "POST":
        return jsonify({"pageTitle": "Register", "form": describe(REGISTER_FORM), "results": ""})
    fields = form_data()
    register(get_db(), fields, today())
    viewer_session.login(session, str(fields.get("uname", "")).strip())
    return redirect(url_for("public.home"))


@bp.get("/logout")
def logout():
    viewer_session.logout(session)
    return redirect(url_for("public.home"))


@bp.route("/queue", methods=["GET", "POST"])
def queue_page():
    return jsonify({"pageTitle": "Queue", "currentQueue": list_queue(get_db(), current_viewer())})


@bp.route("/watched/<showID>", methods=["GET", "POST"])
def watched_page(showID: str):
    conn = get_db()
    viewer = current_viewer()
    header = watched_header(conn, viewer, showID)
    return jsonify({
        "pageTitle": "Watched",
        "custInfo": [header] if header else [],
        "watchedList": list_watched(conn, viewer, showID),
    })


@bp.route("/watch_episode/<showID>/<episodeID>", methods=["GET", "POST"])
def watch_episode_page(showID: str, episodeID: str):
    result = watch_episode(get_db(), current_viewer(), showID, episodeID, today())
    return jsonify({
        "pageTitle": "Watched",
        "episodeInfo": [result.episode],
        "canWatch": result.can_watch,
        "outcome": result.outcome.value,
        "datewatched": result.datewatched,
    })
