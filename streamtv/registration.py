"""
Customer registration.

Customer ids look like ``cust007``: the prefix plus a sequence number padded
to three digits. Numbers past 999 simply grow (``cust1000``). Allocation
reads the highest number in use and adds one, inside a write transaction so
two registrations cannot read the same maximum.
"""
from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import Any, Mapping

from werkzeug.security import generate_password_hash

from .db import execute, query, transaction
from .errors import DuplicateUsername
from .models import date_stamp, local_today
from .validation import REGISTER_FORM, validate

logger = logging.getLogger("streamtv.registration")

CUSTOMER_ID_PREFIX = "cust"
CUSTOMER_ID_WIDTH = 3


def format_customer_id(number: int) -> str:
    return f"{CUSTOMER_ID_PREFIX}{number:0{CUSTOMER_ID_WIDTH}d}"


def parse_customer_id(cust_id: str | None) -> int | None:
    if not cust_id or not cust_id.startswith(CUSTOMER_ID_PREFIX):
        return None
    suffix = cust_id[len(CUSTOMER_ID_PREFIX):]
    if not suffix.isdigit():
        return None
    return int(suffix)


def next_customer_number(conn: sqlite3.Connection) -> int:
    """Highest numeric custID suffix in use plus one (1 for an empty table)."""
    rows = query(
        conn,
        """
        SELECT MAX(CAST(substr(custID, ?) AS INTEGER)) AS max_num
        FROM customer
        WHERE custID LIKE ?
        """,
        (len(CUSTOMER_ID_PREFIX) + 1, f"{CUSTOMER_ID_PREFIX}%"),
    )
    current = rows[0]["max_num"] if rows else None
    return int(current or 0) + 1


def _username_taken(conn: sqlite3.Connection, username: str) -> bool:
    rows = query(conn, "SELECT 1 FROM customer WHERE username = ? LIMIT 1", (username,))
    return bool(rows)


def register(conn: sqlite3.Connection, fields: Mapping[str, Any], today: date | None = None) -> str:
    """
    Validate the registration form and insert a new customer.

    Returns the new custID. Raises ValidationError for bad fields and
    DuplicateUsername when the username is already in use.
    """
    data = validate(REGISTER_FORM, fields)
    username = data["uname"]

    if _username_taken(conn, username):
        logger.warning(f"Registration rejected: username '{username}' already exists")
        raise DuplicateUsername()

    hashed = generate_password_hash(data["password"])
    membersince = date_stamp(today or local_today())

    try:
        with transaction(conn, immediate=True):
            cust_id = format_customer_id(next_customer_number(conn))
            execute(
                conn,
                """
                INSERT INTO customer
                    (custID, fname, lname, email, creditcard, membersince, password, username)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    cust_id,
                    data["fname"],
                    data["lname"],
                    data["email"],
                    data["cc"],
                    membersince,
                    hashed,
                    username,
                ),
            )
    except sqlite3.IntegrityError:
        # lost a race with a concurrent registration of the same username
        logger.warning(f"Registration rejected: username '{username}' inserted concurrently")
        raise DuplicateUsername()

    logger.info(f"Registered customer {cust_id} ('{username}')")
    return cust_id
