from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify

from .config import load_config, setup_logging
from .db import close_db, connect
from .errors import StoreError, StreamTVError
from .models import init_db, set_default_timezone


def create_app(config_path: str | None = None, overrides: dict[str, Any] | None = None) -> Flask:
    config = load_config(config_path)
    logger = setup_logging(config)

    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=config["app"]["secret_key"],
        DEBUG=bool(config["app"].get("debug", False)),
        TIMEZONE=config["app"].get("timezone", "America/New_York"),
        DATABASE_PATH=config["database"]["path"],
        DATABASE_ENABLE_WAL=bool(config["database"].get("enable_wal", False)),
    )
    if overrides:
        app.config.update(overrides)
    set_default_timezone(app.config["TIMEZONE"])

    app.teardown_appcontext(close_db)

    conn = connect(app.config["DATABASE_PATH"], enable_wal=app.config["DATABASE_ENABLE_WAL"])
    try:
        init_db(conn)
    finally:
        conn.close()

    from .routes.account import bp as account_bp
    from .routes.public import bp as public_bp

    app.register_blueprint(public_bp)
    app.register_blueprint(account_bp)

    @app.errorhandler(StreamTVError)
    def handle_streamtv_error(exc: StreamTVError):
        if isinstance(exc, StoreError):
            logger.error(f"Database failure while handling request: {exc}", exc_info=exc)
            body = {"ok": False, "error": "server-error"}
        else:
            body = exc.to_dict()
        return jsonify(body), exc.status_code

    logging.getLogger("streamtv").info(f"streamTV app created (database: {app.config['DATABASE_PATH']})")
    return app
