from datetime import date

from streamtv import queue as queue_module
from streamtv.queue import is_show_queued, list_queue, view_show_and_auto_queue
from streamtv.session import ANONYMOUS, Viewer

from .conftest import add_customer

ALICE = Viewer(is_user=True, user="alice1")


def _queue_rows(conn, cust_id="cust001"):
    return [dict(r) for r in conn.execute(
        "SELECT custID, showID, datequeued FROM cust_queue WHERE custID = ?", (cust_id,)
    )]


def test_first_view_queues_show_once(conn):
    add_customer(conn, "cust001", "alice1")

    first = view_show_and_auto_queue(conn, ALICE, "S01", today=date(2024, 1, 1))
    assert first["queued_now"] is True
    assert first["show"]["title"] == "Band of Brothers"
    assert _queue_rows(conn) == [{"custID": "cust001", "showID": "S01", "datequeued": "24-01-01"}]

    second = view_show_and_auto_queue(conn, ALICE, "S01", today=date(2024, 1, 2))
    assert second["queued_now"] is False
    assert _queue_rows(conn) == [{"custID": "cust001", "showID": "S01", "datequeued": "24-01-01"}]


def test_anonymous_view_does_not_queue(conn):
    detail = view_show_and_auto_queue(conn, ANONYMOUS, "S01")
    assert detail["show"]["showID"] == "S01"
    assert detail["queued_now"] is False
    assert conn.execute("SELECT COUNT(*) FROM cust_queue").fetchone()[0] == 0


def test_missing_show_is_not_queued(conn):
    add_customer(conn, "cust001", "alice1")
    detail = view_show_and_auto_queue(conn, ALICE, "S99")
    assert detail["show"] is None
    assert _queue_rows(conn) == []


def test_racing_first_views_leave_one_row(conn, monkeypatch):
    add_customer(conn, "cust001", "alice1")
    view_show_and_auto_queue(conn, ALICE, "S01")
    # the second request's existence check ran before the first insert landed
    monkeypatch.setattr(queue_module, "is_show_queued", lambda conn, cust_id, show_id: False)
    detail = view_show_and_auto_queue(conn, ALICE, "S01")
    assert detail["queued_now"] is False
    assert len(_queue_rows(conn)) == 1


def test_list_queue(conn):
    add_customer(conn, "cust001", "alice1")
    add_customer(conn, "cust002", "bob22")
    view_show_and_auto_queue(conn, ALICE, "S01", today=date(2024, 1, 1))
    view_show_and_auto_queue(conn, ALICE, "S02", today=date(2024, 1, 3))
    view_show_and_auto_queue(conn, Viewer(True, "bob22"), "S02")

    rows = list_queue(conn, ALICE)
    assert sorted((r["showID"], r["title"], r["datequeued"]) for r in rows) == [
        ("S01", "Band of Brothers", "24-01-01"),
        ("S02", "Ozark", "24-01-03"),
    ]
    assert all(r["email"] == "alice1@example.com" for r in rows)
    assert is_show_queued(conn, "cust001", "S02")
    assert not is_show_queued(conn, "cust002", "S01")


def test_list_queue_anonymous_is_empty(conn):
    assert list_queue(conn, ANONYMOUS) == []


def test_queue_date_defaults_to_local_today(conn, monkeypatch):
    add_customer(conn, "cust001", "alice1")
    monkeypatch.setattr(queue_module, "local_today", lambda: date(2030, 6, 15))
    view_show_and_auto_queue(conn, ALICE, "S02")
    assert _queue_rows(conn) == [{"custID": "cust001", "showID": "S02", "datequeued": "30-06-15"}]
