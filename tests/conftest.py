import sqlite3

import pytest
from werkzeug.security import generate_password_hash

from streamtv import create_app
from streamtv.db import connect
from streamtv.models import init_db, seed_catalog


def add_customer(conn: sqlite3.Connection, cust_id: str, username: str, password: str = "secret1",
                 membersince: str = "20-01-01") -> None:
    conn.execute(
        """
        INSERT INTO customer (custID, fname, lname, email, creditcard, membersince, password, username)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (cust_id, "Test", "Viewer", f"{username}@example.com", "4111111111111111",
         membersince, generate_password_hash(password), username),
    )


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "streamtv_test.db")


@pytest.fixture
def conn(db_path):
    conn = connect(db_path)
    init_db(conn)
    seed_catalog(conn)
    yield conn
    conn.close()


@pytest.fixture
def app(db_path, tmp_path, monkeypatch):
    config_file = tmp_path / "streamtv_test.yaml"
    config_file.write_text(
        "app:\n"
        "  secret_key: test-secret\n"
        "database:\n"
        f"  path: {db_path}\n"
        "  enable_wal: false\n"
        "logging:\n"
        "  level: DEBUG\n"
        "  file: ''\n"
    )
    monkeypatch.setenv("STREAMTV_CONFIG", str(config_file))
    monkeypatch.delenv("DATABASE_PATH", raising=False)
    monkeypatch.delenv("SECRET_KEY", raising=False)

    app = create_app()
    app.config["TESTING"] = True

    seed = connect(db_path)
    seed_catalog(seed)
    seed.close()
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_conn(app):
    """A side connection onto the app's database for setup and assertions."""
    conn = connect(app.config["DATABASE_PATH"])
    yield conn
    conn.close()
