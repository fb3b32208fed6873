"""
Episode watch tracking.

A customer has at most one watched row per episode. Watching again on a
later day moves that row's date forward; watching again on the same day
is refused, so at most one watch per episode is counted per calendar day.
"""
from __future__ import annotations

import enum
import logging
import sqlite3
from dataclasses import dataclass
from datetime import date
from typing import Any

from .auth import customer_id_for
from .catalog import get_episode_titles
from .db import dicts, execute, query
from .errors import LoginRequired, NotFound
from .models import date_stamp, local_today
from .session import Viewer

logger = logging.getLogger("streamtv.watch")


class WatchOutcome(enum.Enum):
    RECORDED = "recorded"
    ALREADY_WATCHED_TODAY = "already_watched_today"


@dataclass
class WatchResult:
    outcome: WatchOutcome
    episode: dict[str, Any] | None
    datewatched: str

    @property
    def can_watch(self) -> bool:
        return self.outcome is WatchOutcome.RECORDED


def is_queued(conn: sqlite3.Connection, viewer: Viewer, show_id: str, episode_id: str) -> bool:
    """True when the episode exists and its show is in the viewer's queue."""
    if not viewer.authenticated:
        return False
    rows = query(
        conn,
        """
        SELECT shows.showID AS showID, episode.episodeID AS episodeID
        FROM customer
        JOIN cust_queue ON cust_queue.custID = customer.custID
        JOIN shows ON shows.showID = cust_queue.showID
        JOIN episode ON episode.showID = shows.showID
        WHERE username = ? AND shows.showID = ? AND episode.episodeID = ?
        """,
        (viewer.user, show_id, episode_id),
    )
    return bool(rows)


def _stored_date(conn: sqlite3.Connection, cust_id: str, show_id: str, episode_id: str) -> str | None:
    rows = query(
        conn,
        """
        SELECT datewatched
        FROM watched
        WHERE custID = ? AND showID = ? AND episodeID = ?
        """,
        (cust_id, show_id, episode_id),
    )
    return rows[0]["datewatched"] if rows else None


def watch_episode(
    conn: sqlite3.Connection,
    viewer: Viewer,
    show_id: str,
    episode_id: str,
    today: date | None = None,
) -> WatchResult:
    if not viewer.authenticated:
        raise LoginRequired()
    cust_id = customer_id_for(conn, viewer.user)
    if cust_id is None:
        raise LoginRequired()

    episode = get_episode_titles(conn, show_id, episode_id)
    if episode is None:
        raise NotFound(f"Episode {episode_id} of show {show_id} not found")
    stamp = date_stamp(today or local_today())
    stored = _stored_date(conn, cust_id, show_id, episode_id)

    if stored is None:
        try:
            execute(
                conn,
                """
                INSERT INTO watched (custID, showID, episodeID, datewatched)
                VALUES (?, ?, ?, ?)
                """,
                (cust_id, show_id, episode_id, stamp),
            )
        except sqlite3.IntegrityError:
            # a concurrent request recorded today's watch first
            logger.debug(f"Watch of {show_id}/{episode_id} by {cust_id} recorded concurrently")
            return WatchResult(WatchOutcome.ALREADY_WATCHED_TODAY, episode, stamp)
        outcome = WatchOutcome.RECORDED
    elif stored == stamp:
        outcome = WatchOutcome.ALREADY_WATCHED_TODAY
    else:
        execute(
            conn,
            """
            UPDATE watched
            SET datewatched = ?
            WHERE custID = ? AND showID = ? AND episodeID = ?
            """,
            (stamp, cust_id, show_id, episode_id),
        )
        outcome = WatchOutcome.RECORDED

    logger.info(f"Watch of {show_id}/{episode_id} by {cust_id} on {stamp}: {outcome.value}")
    return WatchResult(outcome, episode, stamp)


def list_watched(conn: sqlite3.Connection, viewer: Viewer, show_id: str) -> list[dict[str, Any]]:
    if not viewer.authenticated:
        return []
    rows = query(
        conn,
        """
        SELECT watched.showID, watched.episodeID, episode.title, datewatched
        FROM watched
        JOIN customer ON customer.custID = watched.custID
        JOIN episode ON episode.showID = watched.showID
                    AND episode.episodeID = watched.episodeID
        WHERE username = ? AND watched.showID = ?
        """,
        (viewer.user, show_id),
    )
    return dicts(rows)


def watched_header(conn: sqlite3.Connection, viewer: Viewer, show_id: str) -> dict[str, Any] | None:
    """Customer name and show title shown above the watched list."""
    if not viewer.authenticated:
        return None
    rows = query(
        conn,
        """
        SELECT fname, lname, shows.title
        FROM customer, shows
        WHERE username = ? AND shows.showID = ?
        """,
        (viewer.user, show_id),
    )
    return dict(rows[0]) if rows else None
