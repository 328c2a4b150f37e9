"""CLI entry point for the keyword monitor."""

import argparse
import logging
import sys

from brand_monitor.config import ConfigurationError, load_config, validate_config
from brand_monitor.models import SessionLocal, User, init_db
from brand_monitor.pipeline import run_keyword_monitor
from brand_monitor.storage.keyword_jobs import KeywordJobStore
from brand_monitor.utils.logging_config import setup_logging

logger = logging.getLogger("brand_monitor")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Brand Monitor - scheduled Reddit keyword monitoring",
    )
    parser.add_argument(
        "--config", default="config.yaml",
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "--user", type=int, metavar="USER_ID",
        help="Run every active search of one user now (manual run, no rescheduling)",
    )
    parser.add_argument(
        "--init-db", action="store_true",
        help="Create database tables and exit",
    )
    parser.add_argument(
        "--add-keyword", nargs=2, metavar=("USER_ID", "KEYWORD"),
        help="Register a keyword search for a user and exit",
    )
    parser.add_argument(
        "--frequency", type=int, default=24,
        help="Search frequency in hours for --add-keyword (default: 24)",
    )
    parser.add_argument(
        "--stats", action="store_true",
        help="Print keyword search bookkeeping and exit",
    )
    parser.add_argument(
        "--serve", action="store_true",
        help="Serve the HTTP trigger API (with the in-process scheduler)",
    )
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def print_stats(db):
    """Print keyword search statistics."""
    rows = KeywordJobStore(db).stats()
    print("\n=== Brand Monitor Keyword Searches ===")
    if not rows:
        print("No keyword searches registered.")
    for row in rows:
        status = "active" if row["is_active"] else "inactive"
        print(f"#{row['id']} user {row['user_id']} '{row['keyword']}' ({status}, every {row['frequency_hours']}h)")
        print(f"  Mentions found: {row['total_mentions_found']}")
        print(f"  Last searched: {row['last_searched_at'] or 'never'}")
        print(f"  Next search: {row['next_search_at']}")
        if row["last_error"]:
            print(f"  Last error: {row['last_error']}")
    print()


def add_keyword(db, user_id: int, keyword: str, frequency: int) -> None:
    if db.get(User, user_id) is None:
        raise ValueError(f"User {user_id} does not exist")
    job = KeywordJobStore(db).create(user_id, keyword, search_frequency_hours=frequency)
    print(f"Registered keyword search #{job.id}: '{job.keyword}' every {frequency}h")


def main(argv=None):
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.log_dir, config.log_level)

    for w in validate_config(config):
        logger.warning("Config: %s", w)

    if args.init_db:
        init_db()
        print("Database tables created.")
        return

    if args.stats:
        db = SessionLocal()
        try:
            print_stats(db)
        finally:
            db.close()
        return

    if args.add_keyword:
        user_id, keyword = args.add_keyword
        db = SessionLocal()
        try:
            add_keyword(db, int(user_id), keyword, args.frequency)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        finally:
            db.close()
        return

    if args.serve:
        import uvicorn
        from brand_monitor.web.app import create_app
        uvicorn.run(create_app(config), host=args.host, port=args.port)
        return

    try:
        summary = run_keyword_monitor(config, user_id=args.user)
    except ConfigurationError as e:
        logger.error("Keyword monitor not run: %s", e)
        sys.exit(1)

    print(
        f"Processed {summary.processed} keyword searches, "
        f"{summary.total_mentions_found} new mentions ({summary.mode} run)"
    )


if __name__ == "__main__":
    main()
