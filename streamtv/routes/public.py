from flask import Blueprint, jsonify, request

from . import current_viewer, form_data, today
from ..catalog import get_actor, get_episode, get_show_title, list_episodes
from ..db import get_db
from ..errors import NotFound, ValidationError
from ..queue import view_show_and_auto_queue
from ..search import search
from ..validation import SEARCH_FORM, describe, validate
from ..watch import is_queued

bp = Blueprint("public", __name__)


@bp.get("/")
def home():
    viewer = current_viewer()
    return jsonify({"pageTitle": "Home", "user": viewer.user if viewer.authenticated else ""})


@bp.get("/showinfo/<showID>")
def show_info(showID: str):
    """Show details; a logged-in viewer's first visit also queues the show."""
    detail = view_show_and_auto_queue(get_db(), current_viewer(), showID, today())
    if detail["show"] is None:
        raise NotFound(f"Show {showID} not found")
    return jsonify({
        "pageTitle": detail["show"]["title"],
        "showResults": [detail["show"]],
        "mainResults": detail["main_cast"],
        "guestResults": detail["guest_cast"],
        "addQueue": detail["queued_now"],
    })


@bp.get("/actorinfo/<actID>")
def actor_info(actID: str):
    detail = get_actor(get_db(), actID)
    if detail["actor"] is None:
        raise NotFound(f"Actor {actID} not found")
    return jsonify({
        "pageTitle": detail["actor"]["fname"],
        "mainResults": detail["main_roles"],
        "guestResults": detail["guest_roles"],
    })


@bp.get("/show_episodes/<showID>")
def show_episodes(showID: str):
    conn = get_db()
    title = get_show_title(conn, showID)
    if title is None:
        raise NotFound(f"Show {showID} not found")
    return jsonify({"pageTitle": title, "episodeResults": list_episodes(conn, showID)})


@bp.get("/episodeinfo/<showID>/<episodeID>")
def episode_info(showID: str, episodeID: str):
    conn = get_db()
    detail = get_episode(conn, showID, episodeID)
    if detail["episode"] is None:
        raise NotFound(f"Episode {episodeID} of show {showID} not found")
    return jsonify({
        "pageTitle": detail["episode"]["sTitle"],
        "episodeResults": [detail["episode"]],
        "mainResults": detail["main_cast"],
        "guestResults": detail["guest_cast"],
        "inQueue": is_queued(conn, current_viewer(), showID, episodeID),
    })


@bp.route("/search", methods=["GET", "POST"])
def search_page():
    page = {
        "pageTitle": "Search",
        "form": describe(SEARCH_FORM),
        "showResults": [],
        "actorResults": [],
    }
    if request.method != "POST":
        return jsonify(page)
    try:
        data = validate(SEARCH_FORM, form_data())
    except ValidationError as exc:
        # a blank search just redisplays the empty page
        return jsonify({**page, "errors": exc.errors})
    results = search(get_db(), data["search"])
    page.update(showResults=results["shows"], actorResults=results["actors"])
    return jsonify(page)
