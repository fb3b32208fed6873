"""
Customer show queue.

There is no explicit "add to queue" action: opening a show's info page
while logged in is what queues it. Each (customer, show) pair is queued at
most once; the table's primary key backs up the existence check when two
requests race.
"""
from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import Any

from .auth import customer_id_for
from .catalog import get_show
from .db import dicts, execute, query
from .models import date_stamp, local_today
from .session import Viewer

logger = logging.getLogger("streamtv.queue")


def is_show_queued(conn: sqlite3.Connection, cust_id: str, show_id: str) -> bool:
    rows = query(
        conn,
        "SELECT datequeued FROM cust_queue WHERE custID = ? AND showID = ?",
        (cust_id, show_id),
    )
    return bool(rows)


def enqueue_show(conn: sqlite3.Connection, cust_id: str, show_id: str, today: date | None = None) -> bool:
    """Queue a show for a customer; returns False if it was already queued."""
    if is_show_queued(conn, cust_id, show_id):
        return False
    try:
        execute(
            conn,
            "INSERT INTO cust_queue (custID, showID, datequeued) VALUES (?, ?, ?)",
            (cust_id, show_id, date_stamp(today or local_today())),
        )
    except sqlite3.IntegrityError:
        logger.debug(f"Show {show_id} queued concurrently for {cust_id}")
        return False
    logger.info(f"Queued show {show_id} for {cust_id}")
    return True


def view_show_and_auto_queue(
    conn: sqlite3.Connection,
    viewer: Viewer,
    show_id: str,
    today: date | None = None,
) -> dict[str, Any]:
    """
    Look up a show and, for a logged-in viewer, queue it on first view.

    The result is the catalog's show detail plus ``queued_now``, which is
    True only on the view that created the queue entry.
    """
    detail = get_show(conn, show_id)
    detail["queued_now"] = False
    if not viewer.authenticated or detail["show"] is None:
        return detail

    cust_id = customer_id_for(conn, viewer.user)
    if cust_id is None:
        logger.warning(f"Session user '{viewer.user}' has no customer row")
        return detail

    detail["queued_now"] = enqueue_show(conn, cust_id, show_id, today)
    return detail


def list_queue(conn: sqlite3.Connection, viewer: Viewer) -> list[dict[str, Any]]:
    if not viewer.authenticated:
        return []
    rows = query(
        conn,
        """
        SELECT fname, lname, email, datequeued, title, shows.showID
        FROM customer
        JOIN cust_queue ON cust_queue.custID = customer.custID
        JOIN shows ON shows.showID = cust_queue.showID
        WHERE username = ?
        """,
        (viewer.user,),
    )
    return dicts(rows)
