from __future__ import annotations

import logging
import sqlite3

from werkzeug.security import check_password_hash

from .db import query
from .errors import AuthFailure

logger = logging.getLogger("streamtv.auth")


def authenticate(conn: sqlite3.Connection, username: str, password: str) -> str:
    """
    Verify a username/password pair and return the username.

    A lookup that matches no customer or more than one customer is rejected
    the same way as a wrong password. Establishing the session is left to
    the caller.
    """
    rows = query(
        conn,
        "SELECT password FROM customer WHERE username = ?",
        (username,),
    )
    if len(rows) != 1:
        logger.warning(f"Login rejected for '{username}': {len(rows)} matching customers")
        raise AuthFailure()

    stored_hash = rows[0]["password"]
    try:
        verified = check_password_hash(stored_hash, password)
    except ValueError:
        # unrecognised hash format
        verified = False
    if not verified:
        logger.warning(f"Login rejected for '{username}': bad password")
        raise AuthFailure()

    logger.info(f"Customer '{username}' logged in")
    return username


def customer_id_for(conn: sqlite3.Connection, username: str | None) -> str | None:
    if not username:
        return None
    rows = query(conn, "SELECT custID FROM customer WHERE username = ?", (username,))
    if not rows:
        return None
    return rows[0]["custID"]
