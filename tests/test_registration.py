from datetime import date

import pytest
from werkzeug.security import check_password_hash

from streamtv import registration
from streamtv.errors import DuplicateUsername, ValidationError
from streamtv.registration import (
    format_customer_id,
    next_customer_number,
    parse_customer_id,
    register,
)

from .conftest import add_customer


def _fields(username, password="hunter22", **extra):
    fields = {
        "uname": username,
        "password": password,
        "password_confirm": password,
        "fname": "Alice",
        "lname": "Liddell",
        "email": f"{username}@example.com",
        "cc": "4111 1111 1111 1111",
    }
    fields.update(extra)
    return fields


def _customer_count(conn):
    return conn.execute("SELECT COUNT(*) FROM customer").fetchone()[0]


def test_customer_id_formatting():
    assert format_customer_id(1) == "cust001"
    assert format_customer_id(42) == "cust042"
    assert format_customer_id(999) == "cust999"
    assert format_customer_id(1000) == "cust1000"
    assert parse_customer_id("cust007") == 7
    assert parse_customer_id("cust1000") == 1000
    assert parse_customer_id("guest01") is None
    assert parse_customer_id("custabc") is None


def test_first_customer_gets_cust001(conn):
    assert next_customer_number(conn) == 1
    assert register(conn, _fields("alice1")) == "cust001"


def test_sequential_ids_after_existing_rows(conn):
    add_customer(conn, "cust000", "seeded")
    assert register(conn, _fields("alice1")) == "cust001"
    assert register(conn, _fields("bob22")) == "cust002"


def test_ids_strictly_increase(conn):
    add_customer(conn, "cust017", "seeded")
    previous = 17
    for name in ("carol", "dave1", "erin7", "frank"):
        number = parse_customer_id(register(conn, _fields(name)))
        assert number > previous
        previous = number


def test_ids_past_999_keep_every_digit(conn):
    add_customer(conn, "cust999", "seeded")
    assert register(conn, _fields("alice1")) == "cust1000"
    assert register(conn, _fields("bob22")) == "cust1001"


def test_registration_stores_hashed_password_and_short_date(conn):
    register(conn, _fields("alice1", password="pa55word"), today=date(2024, 3, 5))
    row = conn.execute(
        "SELECT password, membersince, creditcard FROM customer WHERE username = ?",
        ("alice1",),
    ).fetchone()
    assert row["password"] != "pa55word"
    assert check_password_hash(row["password"], "pa55word")
    assert row["membersince"] == "24-03-05"
    assert row["creditcard"] == "4111 1111 1111 1111"


def test_duplicate_username_rejected_without_insert(conn):
    register(conn, _fields("alice1"))
    with pytest.raises(DuplicateUsername):
        register(conn, _fields("alice1", email="other@example.com"))
    assert _customer_count(conn) == 1


def test_duplicate_username_caught_by_constraint_when_check_races(conn, monkeypatch):
    register(conn, _fields("alice1"))
    # simulate a concurrent request passing the existence check first
    monkeypatch.setattr(registration, "_username_taken", lambda conn, username: False)
    with pytest.raises(DuplicateUsername):
        register(conn, _fields("alice1"))
    assert _customer_count(conn) == 1


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"uname": "abcd"}, "uname"),
        ({"password": "abc", "password_confirm": "abc"}, "password"),
        ({"password_confirm": "different"}, "password_confirm"),
        ({"fname": "A"}, "fname"),
        ({"lname": ""}, "lname"),
        ({"email": "not-an-email"}, "email"),
        ({"cc": "  "}, "cc"),
    ],
)
def test_invalid_fields_block_registration(conn, overrides, field):
    with pytest.raises(ValidationError) as excinfo:
        register(conn, _fields("alice1", **overrides))
    assert field in excinfo.value.errors
    assert _customer_count(conn) == 0


def test_registration_date_defaults_to_local_today(conn, monkeypatch):
    monkeypatch.setattr(registration, "local_today", lambda: date(2031, 12, 31))
    cust_id = register(conn, _fields("carol1"))
    row = conn.execute("SELECT membersince FROM customer WHERE custID = ?", (cust_id,)).fetchone()
    assert row["membersince"] == "31-12-31"
