"""Flask application and command line entry point for :mod:`daily_readings`."""

from __future__ import annotations

import argparse
import dataclasses
import datetime as _dt
import json
import logging
import sys
from typing import Any, Iterable

from flask import Flask, jsonify, request  # type: ignore[import-not-found]

from .cache import DailyReadingsCache
from .config import Settings
from .errors import FetchError, ValidationError
from .scrape import PageFetcher, make_fetcher
from .sqlite_storage import SqliteStorage
from .storage import MemStorage, Storage

FETCH_FAILED_MESSAGE = (
    "Failed to fetch readings. Please check your internet connection and try again."
)


def make_storage(settings: Settings) -> Storage:
    """Return the SQLite store when a database path is configured, else memory."""

    if settings.db_path:
        return SqliteStorage(settings.db_path)
    return MemStorage()


def parse_progress_request(body: Any) -> tuple[str, bool]:
    """Validate a progress update body and return ``(reading_id, completed)``.

    The body must be a JSON object with a non-empty string ``readingId`` and a
    boolean ``completed``; anything else raises :class:`ValidationError`.
    """

    if not isinstance(body, dict):
        raise ValidationError("request body must be a JSON object")
    reading_id = body.get("readingId")
    completed = body.get("completed")
    if not isinstance(reading_id, str) or not reading_id.strip():
        raise ValidationError("readingId must be a non-empty string")
    if not isinstance(completed, bool):
        raise ValidationError("completed must be a boolean")
    return reading_id, completed


def create_app(
    *,
    settings: Settings | None = None,
    store: Storage | None = None,
    fetch_page: PageFetcher | None = None,
) -> Flask:
    """Return a configured :class:`~flask.Flask` application.

    The store and cache are created once here and live as long as the app.
    """

    settings = settings or Settings.from_env()
    store = store if store is not None else make_storage(settings)
    cache = DailyReadingsCache(store, fetch_page or make_fetcher(settings), settings)

    app = Flask(__name__)
    app.config["READINGS_CACHE"] = cache

    @app.get("/healthz")
    def healthz():
        today = cache.today()
        return jsonify({"ok": True, "date": today, "cached": cache.is_cached(today)}), 200

    @app.get("/api/readings/today")
    def readings_today():
        try:
            bundle = cache.get_bundle()
        except FetchError as exc:
            app.logger.error("Error fetching readings: %s", exc)
            return jsonify({"message": FETCH_FAILED_MESSAGE}), 500
        except Exception as exc:  # backend specific
            app.logger.error("Error loading readings: %s", exc)
            return jsonify({"message": FETCH_FAILED_MESSAGE}), 500
        return jsonify(bundle.to_dict()), 200

    @app.get("/api/readings/<date>")
    def readings_for_date(date: str):
        try:
            day = _dt.date.fromisoformat(date).isoformat()
        except ValueError:
            return jsonify({"message": "Invalid date; expected YYYY-MM-DD"}), 400
        if day == cache.today():
            return readings_today()
        try:
            bundle = store.get_daily_readings_with_progress(day)
        except Exception as exc:  # backend specific
            app.logger.error("Error loading readings for %s: %s", day, exc)
            return jsonify({"message": "Failed to load readings"}), 500
        return jsonify(bundle.to_dict()), 200

    @app.post("/api/readings/today/progress")
    def update_progress():
        try:
            reading_id, completed = parse_progress_request(request.get_json(silent=True))
        except ValidationError as exc:
            app.logger.warning("rejected progress update: %s", exc)
            return jsonify({"message": "Invalid request body"}), 400

        try:
            progress = store.update_progress(reading_id, cache.today(), completed)
        except Exception as exc:  # backend specific
            app.logger.error("Error updating progress: %s", exc)
            return jsonify({"message": "Failed to update reading progress"}), 500
        return jsonify(progress.to_dict()), 200

    return app


def main(argv: Iterable[str] | None = None) -> int:
    """Command line interface: serve the API or print a day's readings."""

    parser = argparse.ArgumentParser(prog="daily-readings")
    parser.add_argument("--serve", action="store_true", help="run the web server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5057)
    parser.add_argument("--date", help="ISO date to print (stored readings only)")
    parser.add_argument("--db", help="SQLite database path (overrides READINGS_DB_PATH)")
    parser.add_argument("--complete", metavar="ID", help="mark a reading completed today")
    parser.add_argument("--uncomplete", metavar="ID", help="mark a reading not completed today")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    settings = Settings.from_env()
    if args.db:
        settings = dataclasses.replace(settings, db_path=args.db)

    if args.serve:
        app = create_app(settings=settings)
        app.run(host=args.host, port=args.port)
        return 0

    store = make_storage(settings)
    cache = DailyReadingsCache(store, make_fetcher(settings), settings)

    if args.complete or args.uncomplete:
        reading_id = args.complete or args.uncomplete
        progress = store.update_progress(reading_id, cache.today(), bool(args.complete))
        print(json.dumps(progress.to_dict(), indent=2))
        return 0

    try:
        if args.date and args.date != cache.today():
            bundle = store.get_daily_readings_with_progress(args.date)
        else:
            bundle = cache.get_bundle()
    except FetchError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(bundle.to_dict(), indent=2, ensure_ascii=False))
    return 0


__all__ = ["FETCH_FAILED_MESSAGE", "make_storage", "parse_progress_request", "create_app", "main"]


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
