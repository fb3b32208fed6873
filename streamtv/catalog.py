from __future__ import annotations

import sqlite3
from typing import Any

from .db import dicts, query


def get_show(conn: sqlite3.Connection, show_id: str) -> dict[str, Any]:
    """Show metadata with its main cast and its recurring (guest) cast."""
    show_rows = query(
        conn,
        """
        SELECT title, premiere_year, network, creator, category, showID
        FROM shows
        WHERE showID = ?
        """,
        (show_id,),
    )
    main_rows = query(
        conn,
        """
        SELECT actor.actID, fname, lname, role
        FROM main_cast
        JOIN actor ON actor.actID = main_cast.actID
        WHERE main_cast.showID = ?
        """,
        (show_id,),
    )
    # one row per guest actor, counting their recurring-cast rows on this show
    guest_rows = query(
        conn,
        """
        SELECT actor.actID, fname, lname, role, COUNT(recurring_cast.actID) AS appearances
        FROM recurring_cast
        JOIN actor ON actor.actID = recurring_cast.actID
        WHERE recurring_cast.showID = ?
        GROUP BY recurring_cast.actID
        """,
        (show_id,),
    )
    return {
        "show": dict(show_rows[0]) if show_rows else None,
        "main_cast": dicts(main_rows),
        "guest_cast": dicts(guest_rows),
    }


def get_actor(conn: sqlite3.Connection, act_id: str) -> dict[str, Any]:
    """Every show an actor appears in, as main cast and as guest cast."""
    actor_rows = query(
        conn,
        "SELECT actID, fname, lname FROM actor WHERE actID = ?",
        (act_id,),
    )
    main_rows = query(
        conn,
        """
        SELECT shows.showID, title, fname, lname, role
        FROM main_cast
        JOIN shows ON shows.showID = main_cast.showID
        JOIN actor ON actor.actID = main_cast.actID
        WHERE main_cast.actID = ?
        """,
        (act_id,),
    )
    # Grouped by role, not by show: two shows sharing a role name collapse
    # into one row. Kept as-is for page compatibility.
    guest_rows = query(
        conn,
        """
        SELECT shows.showID, title, fname, lname, role
        FROM recurring_cast
        JOIN shows ON shows.showID = recurring_cast.showID
        JOIN actor ON actor.actID = recurring_cast.actID
        WHERE recurring_cast.actID = ?
        GROUP BY role
        """,
        (act_id,),
    )
    return {
        "actor": dict(actor_rows[0]) if actor_rows else None,
        "main_roles": dicts(main_rows),
        "guest_roles": dicts(guest_rows),
    }


def get_show_title(conn: sqlite3.Connection, show_id: str) -> str | None:
    rows = query(conn, "SELECT title FROM shows WHERE showID = ?", (show_id,))
    return rows[0]["title"] if rows else None


def list_episodes(conn: sqlite3.Connection, show_id: str) -> list[dict[str, Any]]:
    rows = query(
        conn,
        """
        SELECT shows.title AS sTitle, episode.title AS eTitle, airdate,
               shows.showID AS sID, episode.episodeID AS eID,
               substr(episode.episodeID, 1, 1) AS season
        FROM episode
        JOIN shows ON shows.showID = episode.showID
        WHERE shows.showID = ?
        """,
        (show_id,),
    )
    return dicts(rows)


def get_episode_titles(conn: sqlite3.Connection, show_id: str, episode_id: str) -> dict[str, Any] | None:
    rows = query(
        conn,
        """
        SELECT episode.title AS eTitle, shows.title AS sTitle
        FROM episode
        JOIN shows ON shows.showID = episode.showID
        WHERE shows.showID = ? AND episode.episodeID = ?
        """,
        (show_id, episode_id),
    )
    return dict(rows[0]) if rows else None


def get_episode(conn: sqlite3.Connection, show_id: str, episode_id: str) -> dict[str, Any]:
    """Episode metadata, the show's main cast, and that episode's guest cast."""
    episode_rows = query(
        conn,
        """
        SELECT shows.title AS sTitle, episode.title AS eTitle, airdate,
               shows.showID AS sID, episode.episodeID AS eID
        FROM episode
        JOIN shows ON shows.showID = episode.showID
        WHERE shows.showID = ? AND episode.episodeID = ?
        """,
        (show_id, episode_id),
    )
    main_rows = query(
        conn,
        """
        SELECT fname, lname, role, main_cast.actID
        FROM episode
        JOIN main_cast ON main_cast.showID = episode.showID
        JOIN actor ON actor.actID = main_cast.actID
        WHERE episode.showID = ? AND episode.episodeID = ?
        """,
        (show_id, episode_id),
    )
    guest_rows = query(
        conn,
        """
        SELECT fname, lname, role, recurring_cast.actID
        FROM recurring_cast
        JOIN actor ON actor.actID = recurring_cast.actID
        WHERE recurring_cast.showID = ? AND recurring_cast.episodeID = ?
        GROUP BY recurring_cast.actID
        """,
        (show_id, episode_id),
    )
    return {
        "episode": dict(episode_rows[0]) if episode_rows else None,
        "main_cast": dicts(main_rows),
        "guest_cast": dicts(guest_rows),
    }
